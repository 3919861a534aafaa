"""WorldTides client: combined request first, chunked fallback with partial results."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from datetime import date, timedelta

from tidewatch.config.schema import FetchConfig, ProviderConfig
from tidewatch.ingest.errors import DecodeError, FetchError, HttpError, NotAvailable
from tidewatch.ingest.http_fetcher import ResilientFetcher
from tidewatch.ingest.request_builder import build_tide_url, redact_url
from tidewatch.ingest.secret_resolver import SecretResolver
from tidewatch.models.tide import RawTidePayload

logger = logging.getLogger(__name__)


def plan_windows(start: date, total_days: int, max_days: int) -> list[tuple[date, int]]:
    """Split [start, start + total_days) into ascending windows of at most max_days."""
    windows = []
    offset = 0
    while offset < total_days:
        span = min(max_days, total_days - offset)
        windows.append((start + timedelta(days=offset), span))
        offset += span
    return windows


def decode_payload(body: bytes) -> RawTidePayload:
    """Parse a provider response body, tolerating missing arrays."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"expected JSON object, got {type(data).__name__}")
    if data.get("error"):
        raise DecodeError(f"provider error: {data['error']}")

    heights = data.get("heights") or []
    extremes = data.get("extremes") or []
    if not isinstance(heights, list) or not isinstance(extremes, list):
        raise DecodeError("heights/extremes must be arrays")

    copyright_ = data.get("copyright")
    return RawTidePayload(
        heights=heights,
        extremes=extremes,
        copyright=copyright_ if isinstance(copyright_, str) and copyright_ else None,
    )


class WorldTidesClient:
    def __init__(
        self,
        fetcher: ResilientFetcher,
        resolver: SecretResolver,
        provider: ProviderConfig,
        fetch_config: FetchConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.fetcher = fetcher
        self.resolver = resolver
        self.provider = provider
        self.config = fetch_config
        self._sleep = sleep

    def _url(
        self, lat: float, lon: float, start: date, days: int,
        heights: bool, extremes: bool, api_key: str,
    ) -> str:
        return build_tide_url(
            self.provider.base_url, lat, lon, start, days,
            include_heights=heights, include_extremes=extremes,
            api_key=api_key, datum=self.provider.datum,
        )

    async def _get_payload(self, url: str) -> RawTidePayload:
        """One request; raises HttpError/DecodeError/TransportError."""
        logger.debug("GET %s", redact_url(url))
        result = await self.fetcher.fetch(url)
        if result.status_code != 200:
            raise HttpError(result.status_code)
        return decode_payload(result.body)

    async def fetch_raw(self, lat: float, lon: float, start_date: date) -> RawTidePayload:
        """Fetch heights and extremes for the configured window starting at start_date.

        Tries one combined call; on any failure falls back to extremes-only
        sub-windows plus one short heights-only request. Chunks that fail
        contribute nothing. Raises NotAvailable only when no request produced any data.
        """
        api_key = self.resolver.resolve_api_key()

        combined_url = self._url(
            lat, lon, start_date, self.config.extremes_days, True, True, api_key
        )
        try:
            payload = await self._get_payload(combined_url)
            if not payload.is_empty:
                logger.info(
                    "Combined tide request ok for %.3f,%.3f: %d heights, %d extremes",
                    lat, lon, len(payload.heights), len(payload.extremes),
                )
                return payload
            logger.warning("Combined tide request returned no data, falling back to chunks")
        except FetchError as e:
            logger.warning("Combined tide request failed (%s), falling back to chunks", e)

        return await self._fetch_chunked(lat, lon, start_date, api_key)

    async def _fetch_chunked(
        self, lat: float, lon: float, start_date: date, api_key: str
    ) -> RawTidePayload:
        extremes: list[dict] = []
        heights: list[dict] = []
        copyright_: str | None = None
        succeeded = 0

        windows = plan_windows(
            start_date, self.config.extremes_days, self.config.max_days_per_call
        )
        pause = self.config.chunk_pause_ms / 1000.0
        for i, (window_start, span) in enumerate(windows):
            if i > 0:
                await self._sleep(pause)
            url = self._url(lat, lon, window_start, span, False, True, api_key)
            try:
                chunk = await self._get_payload(url)
            except FetchError as e:
                logger.warning(
                    "Extremes chunk %s +%dd failed: %s", window_start.isoformat(), span, e
                )
                continue
            succeeded += 1
            extremes.extend(chunk.extremes)
            copyright_ = copyright_ or chunk.copyright

        await self._sleep(pause)
        heights_days = min(self.config.heights_days, self.config.max_days_per_call)
        url = self._url(lat, lon, start_date, heights_days, True, False, api_key)
        try:
            chunk = await self._get_payload(url)
            succeeded += 1
            heights.extend(chunk.heights)
            copyright_ = copyright_ or chunk.copyright
        except FetchError as e:
            logger.warning("Heights request failed: %s", e)

        if not heights and not extremes:
            raise NotAvailable(
                f"no tide data from {len(windows) + 1} requests for {lat:.3f},{lon:.3f}"
            )

        logger.info(
            "Chunked tide fetch for %.3f,%.3f: %d/%d requests ok, %d heights, %d extremes",
            lat, lon, succeeded, len(windows) + 1, len(heights), len(extremes),
        )
        return RawTidePayload(heights=heights, extremes=extremes, copyright=copyright_)
