"""Location refresh: weather, waves and tides fetched concurrently, then merged."""

import asyncio
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime

from tidewatch.ingest.errors import FetchError
from tidewatch.ingest.open_meteo_client import OpenMeteoClient
from tidewatch.ingest.tide_cache import TideCache
from tidewatch.models.common import utc_now
from tidewatch.models.forecast import WaveReport, WeatherReport
from tidewatch.models.reporting import RefreshResult
from tidewatch.models.tide import TideBundle
from tidewatch.pipeline.merge import merge_tide_into_forecasts
from tidewatch.reporting.widget import build_widget_payload
from tidewatch.storage import snapshot_repo

logger = logging.getLogger(__name__)


def user_message(exc: BaseException) -> str:
    """Short human-readable cause for a terminal failure."""
    if isinstance(exc, FetchError):
        return exc.user_message
    return "unexpected error"


class LocationRefresh:
    """Consumer-facing refresh for one location.

    A failed tide fetch leaves the last good tide data in place (from this
    process, else the persisted snapshot) and reports the cause in
    ``tide_error`` rather than blanking the result.
    """

    def __init__(
        self,
        weather: OpenMeteoClient,
        tides: TideCache,
        conn: sqlite3.Connection | None = None,
        clock: Callable[[], datetime] = utc_now,
        local_clock: Callable[[], datetime] = datetime.now,
    ):
        self.weather = weather
        self.tides = tides
        self.conn = conn
        self._clock = clock
        self._local_clock = local_clock
        self._last_tides: dict[str, TideBundle] = {}

    def location_key(self, lat: float, lon: float) -> str:
        d = self.tides.config.coordinate_decimals
        return f"{round(lat, d):.{d}f},{round(lon, d):.{d}f}"

    async def refresh(self, lat: float, lon: float) -> RefreshResult:
        weather, waves, tides = await asyncio.gather(
            self.weather.get_weather(lat, lon),
            self.weather.get_waves(lat, lon),
            self.tides.get_tides(lat, lon),
            return_exceptions=True,
        )
        result = RefreshResult(latitude=lat, longitude=lon)
        key = self.location_key(lat, lon)

        if isinstance(weather, WeatherReport):
            result.weather = weather
        else:
            logger.error("Weather fetch failed for %s: %s", key, weather)
            result.weather_error = user_message(weather)

        if isinstance(waves, WaveReport):
            result.waves = waves
        else:
            logger.error("Wave fetch failed for %s: %s", key, waves)

        if isinstance(tides, TideBundle):
            result.tides = tides
            self._remember(key, tides)
        else:
            logger.error("Tide fetch failed for %s: %s", key, tides)
            result.tide_error = user_message(tides)
            result.tides = self._previous(key)
            result.tides_stale = result.tides is not None

        if result.weather is not None and result.tides is not None:
            merge_tide_into_forecasts(
                result.weather.hourly,
                result.weather.daily,
                result.tides.heights,
                result.tides.extremes,
            )

        if result.tides is not None and self.conn is not None:
            snapshot_repo.save_widget_payload(
                self.conn, build_widget_payload(result.tides, self._local_clock())
            )
        return result

    def _remember(self, key: str, bundle: TideBundle) -> None:
        self._last_tides[key] = bundle
        if self.conn is not None:
            snapshot_repo.save_tide_snapshot(self.conn, key, bundle, self._clock())

    def _previous(self, key: str) -> TideBundle | None:
        if key in self._last_tides:
            return self._last_tides[key]
        if self.conn is not None:
            stored = snapshot_repo.get_tide_snapshot(self.conn, key)
            if stored is not None:
                bundle, fetched_at = stored
                logger.info("Showing stored tides for %s from %s", key, fetched_at)
                return bundle
        return None
