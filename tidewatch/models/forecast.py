"""Open-Meteo weather and wave models, with optional tide fields."""

from dataclasses import dataclass, field

_WEATHER_DESCRIPTIONS: dict[int, str] = {
    0: "Clear sky",
    1: "Partly cloudy",
    2: "Partly cloudy",
    3: "Partly cloudy",
    45: "Foggy",
    48: "Foggy",
    51: "Drizzle",
    53: "Drizzle",
    55: "Drizzle",
    61: "Rain",
    63: "Rain",
    65: "Rain",
    71: "Snow",
    73: "Snow",
    75: "Snow",
    77: "Snow grains",
    80: "Rain showers",
    81: "Rain showers",
    82: "Rain showers",
    85: "Snow showers",
    86: "Snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with hail",
    99: "Thunderstorm with hail",
}


def weather_description(code: int) -> str:
    """Human-readable text for a WMO weather code."""
    return _WEATHER_DESCRIPTIONS.get(code, "Unknown")


@dataclass(frozen=True)
class CurrentWeather:
    time: str
    temperature: float
    relative_humidity: int
    apparent_temperature: float
    precipitation: float
    weather_code: int
    wind_speed: float
    wind_direction: int


@dataclass
class HourlyForecast:
    time: str  # YYYY-MM-DDTHH:MM local
    temperature: float
    precipitation: float
    wind_speed: float
    wind_direction: int
    weather_code: int
    tide_height: float | None = None


@dataclass
class DailyForecast:
    date: str  # YYYY-MM-DD
    max_temp: float
    min_temp: float
    precipitation: float
    max_wind_speed: float
    weather_code: int
    high_tide_height: float | None = None
    high_tide_time: str | None = None
    low_tide_height: float | None = None
    low_tide_time: str | None = None


@dataclass(frozen=True)
class WaveData:
    time: str
    wave_height: float
    wave_direction: int
    wave_period: float

    @property
    def fishing_condition(self) -> str:
        """Good / Fair / Poor / Too Calm / Too Rough from height and period."""
        if 0.5 <= self.wave_height <= 2.5 and 5.0 <= self.wave_period <= 12.0:
            return "Good"
        if self.wave_height < 0.5:
            return "Too Calm"
        if self.wave_height > 2.5:
            return "Too Rough"
        if self.wave_period < 5.0:
            return "Poor"
        return "Fair"


@dataclass
class WeatherReport:
    current: CurrentWeather
    hourly: list[HourlyForecast] = field(default_factory=list)
    daily: list[DailyForecast] = field(default_factory=list)


@dataclass(frozen=True)
class WaveReport:
    current: WaveData | None
    source_note: str | None = None  # set when data came from a fallback spot
