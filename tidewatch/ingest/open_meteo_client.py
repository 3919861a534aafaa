"""Open-Meteo weather and marine clients whose forecasts receive tide data."""

import json
import logging
from urllib.parse import urlencode

from tidewatch.config.defaults import DEFAULT_SPOTS
from tidewatch.config.schema import ForecastConfig, SpotConfig
from tidewatch.ingest.errors import DecodeError, FetchError, HttpError
from tidewatch.ingest.http_fetcher import ResilientFetcher
from tidewatch.models.forecast import (
    CurrentWeather,
    DailyForecast,
    HourlyForecast,
    WaveData,
    WaveReport,
    WeatherReport,
)

logger = logging.getLogger(__name__)

CURRENT_VARS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,precipitation,"
    "weather_code,wind_speed_10m,wind_direction_10m"
)
HOURLY_VARS = "temperature_2m,precipitation,wind_speed_10m,wind_direction_10m,weather_code"
DAILY_VARS = (
    "temperature_2m_max,temperature_2m_min,precipitation_sum,wind_speed_10m_max,weather_code"
)
WAVE_VARS = "wave_height,wave_direction,wave_period"


class OpenMeteoClient:
    def __init__(
        self,
        config: ForecastConfig,
        fetcher: ResilientFetcher,
        fallback_spots: list[SpotConfig] | None = None,
    ):
        self.config = config
        self.fetcher = fetcher
        self.fallback_spots = fallback_spots if fallback_spots is not None else DEFAULT_SPOTS

    async def _get_json(self, url: str) -> dict:
        result = await self.fetcher.fetch(url)
        if result.status_code != 200:
            raise HttpError(result.status_code)
        try:
            data = json.loads(result.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"response is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise DecodeError("expected JSON object")
        return data

    async def get_weather(self, lat: float, lon: float) -> WeatherReport:
        params = urlencode(
            {
                "latitude": lat,
                "longitude": lon,
                "current": CURRENT_VARS,
                "hourly": HOURLY_VARS,
                "daily": DAILY_VARS,
                "forecast_days": self.config.forecast_days,
                "timezone": "auto",
            }
        )
        data = await self._get_json(f"{self.config.weather_base_url}/forecast?{params}")
        try:
            return parse_weather(data)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"weather response missing field: {e}") from e

    async def get_waves(self, lat: float, lon: float) -> WaveReport:
        """Current wave conditions, falling back to the nearest known coastal spot."""
        try:
            return WaveReport(current=await self._get_wave_data(lat, lon))
        except FetchError as e:
            logger.warning("No wave data at %.3f,%.3f (%s), trying fallback spots", lat, lon, e)

        for spot in self.fallback_spots:
            try:
                data = await self._get_wave_data(spot.latitude, spot.longitude)
            except FetchError:
                continue
            return WaveReport(
                current=data,
                source_note=f"Using wave data from {spot.name} (nearest available location)",
            )

        return WaveReport(current=None, source_note="No wave data available for this location")

    async def _get_wave_data(self, lat: float, lon: float) -> WaveData:
        params = urlencode(
            {"latitude": lat, "longitude": lon, "current": WAVE_VARS, "timezone": "auto"}
        )
        data = await self._get_json(f"{self.config.marine_base_url}/marine?{params}")
        try:
            c = data["current"]
            return WaveData(
                time=c["time"],
                wave_height=float(c["wave_height"]),
                wave_direction=int(c["wave_direction"]),
                wave_period=float(c["wave_period"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"marine response missing field: {e}") from e


def parse_weather(data: dict) -> WeatherReport:
    c = data["current"]
    current = CurrentWeather(
        time=c["time"],
        temperature=float(c["temperature_2m"]),
        relative_humidity=int(c["relative_humidity_2m"]),
        apparent_temperature=float(c["apparent_temperature"]),
        precipitation=float(c["precipitation"]),
        weather_code=int(c["weather_code"]),
        wind_speed=float(c["wind_speed_10m"]),
        wind_direction=int(c["wind_direction_10m"]),
    )

    h = data["hourly"]
    hourly = [
        HourlyForecast(
            time=t,
            temperature=float(temp),
            precipitation=float(precip),
            wind_speed=float(ws),
            wind_direction=int(wd),
            weather_code=int(code),
        )
        for t, temp, precip, ws, wd, code in zip(
            h["time"], h["temperature_2m"], h["precipitation"],
            h["wind_speed_10m"], h["wind_direction_10m"], h["weather_code"],
        )
    ]

    d = data["daily"]
    daily = [
        DailyForecast(
            date=day,
            max_temp=float(tmax),
            min_temp=float(tmin),
            precipitation=float(precip),
            max_wind_speed=float(ws),
            weather_code=int(code),
        )
        for day, tmax, tmin, precip, ws, code in zip(
            d["time"], d["temperature_2m_max"], d["temperature_2m_min"],
            d["precipitation_sum"], d["wind_speed_10m_max"], d["weather_code"],
        )
    ]
    return WeatherReport(current=current, hourly=hourly, daily=daily)
