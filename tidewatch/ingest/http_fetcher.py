"""Async HTTP GET with bounded retries on transient transport failures."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

from tidewatch.config.schema import FetchConfig
from tidewatch.ingest.errors import TransportError
from tidewatch.ingest.request_builder import redact_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "tidewatch/0.1.0"

# Timeouts, DNS/refused connects (ConnectError) and dropped connections.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


@dataclass(frozen=True)
class FetchResult:
    body: bytes
    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ResilientFetcher:
    """GETs a URL, retrying transport failures with exponential backoff.

    HTTP error statuses are returned to the caller as-is and never retried.
    """

    def __init__(
        self,
        config: FetchConfig,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self._sleep = sleep
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.total_timeout_s, connect=config.connect_timeout_s),
            headers={
                "User-Agent": DEFAULT_USER_AGENT,
                "Cache-Control": "no-cache",
                "Accept": "application/json",
            },
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given 1-based failed attempt."""
        return self.config.backoff_base_s * (2 ** (attempt - 1))

    async def fetch(self, url: str) -> FetchResult:
        attempts = self.config.max_attempts
        for attempt in range(1, attempts + 1):
            try:
                resp = await self.client.get(url)
                return FetchResult(body=resp.content, status_code=resp.status_code)
            except TRANSIENT_ERRORS as e:
                if attempt >= attempts:
                    logger.warning(
                        "GET %s failed after %d attempts: %s", redact_url(url), attempts, e
                    )
                    raise TransportError(f"request failed after {attempts} attempts: {e}") from e
                delay = self.backoff_delay(attempt)
                logger.warning(
                    "GET %s transport error, retrying in %.2fs (attempt %d/%d): %s",
                    redact_url(url), delay, attempt, attempts, e,
                )
                await self._sleep(delay)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransportError(f"request failed: {e}") from e

        raise AssertionError("unreachable")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "ResilientFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
