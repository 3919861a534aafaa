"""Short-TTL tide cache that coalesces concurrent fetches for the same key."""

import asyncio
import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from tidewatch.config.schema import CacheConfig
from tidewatch.ingest.normalizer import normalize
from tidewatch.ingest.tide_client import WorldTidesClient
from tidewatch.models.common import local_today, utc_now
from tidewatch.models.tide import CacheEntry, TideBundle

logger = logging.getLogger(__name__)


class TideCache:
    """Owns the cache and in-flight maps for tide lookups.

    Keys are coordinates rounded to ``coordinate_decimals`` plus the local
    calendar day. Stale entries are ignored at read time, never evicted.
    At most one fetch per key runs at a time; concurrent callers await it.
    """

    def __init__(
        self,
        client: WorldTidesClient,
        config: CacheConfig,
        clock: Callable[[], datetime] = utc_now,
        today: Callable[[], date] = local_today,
    ):
        self.client = client
        self.config = config
        self.ttl = timedelta(minutes=config.ttl_minutes)
        self._clock = clock
        self._today = today
        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task[TideBundle]] = {}
        self._lock = asyncio.Lock()

    def cache_key(self, lat: float, lon: float, day: date) -> str:
        d = self.config.coordinate_decimals
        return f"{round(lat, d):.{d}f},{round(lon, d):.{d}f}@{day.isoformat()}"

    async def get_tides(self, lat: float, lon: float) -> TideBundle:
        """Return tides for today at (lat, lon), fetching at most once per key."""
        day = self._today()
        key = self.cache_key(lat, lon, day)

        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_fresh(self._clock(), self.ttl):
                logger.debug("Tide cache hit for %s", key)
                return entry.bundle

            task = self._in_flight.get(key)
            if task is None:
                task = asyncio.create_task(self._load(key, lat, lon, day))
                self._in_flight[key] = task
            else:
                logger.debug("Joining in-flight tide fetch for %s", key)

        # Shielded so one caller being cancelled does not abort the shared fetch.
        return await asyncio.shield(task)

    async def _load(self, key: str, lat: float, lon: float, day: date) -> TideBundle:
        try:
            raw = await self.client.fetch_raw(lat, lon, day)
            heights, extremes = normalize(raw)
            bundle = TideBundle(
                heights=tuple(heights), extremes=tuple(extremes), attribution=raw.copyright
            )
            async with self._lock:
                self._entries[key] = CacheEntry(bundle=bundle, fetched_at=self._clock())
            logger.info(
                "Cached tides for %s: %d samples, %d days", key, len(heights), len(extremes)
            )
            return bundle
        finally:
            async with self._lock:
                self._in_flight.pop(key, None)

    def peek(self, lat: float, lon: float, day: date | None = None) -> CacheEntry | None:
        """Entry for the key regardless of freshness."""
        return self._entries.get(self.cache_key(lat, lon, day or self._today()))

    def in_flight_count(self) -> int:
        return len(self._in_flight)

    def clear(self) -> None:
        self._entries.clear()
