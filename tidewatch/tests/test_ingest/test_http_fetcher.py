"""Tests for the retrying async fetcher with mocked httpx."""

import httpx
import pytest
import respx

from tidewatch.config.schema import FetchConfig
from tidewatch.ingest.errors import TransportError
from tidewatch.ingest.http_fetcher import ResilientFetcher

BASE = "https://tides.test/api/v3"
URL = f"{BASE}?heights&key=abc"


@pytest.fixture
def fetcher(recording_sleep) -> ResilientFetcher:
    return ResilientFetcher(FetchConfig(max_attempts=3, backoff_base_s=0.75), sleep=recording_sleep)


class TestFetch:
    @pytest.mark.asyncio
    @respx.mock
    async def test_success(self, fetcher: ResilientFetcher):
        respx.get(BASE).mock(return_value=httpx.Response(200, json={"status": 200}))
        result = await fetcher.fetch(URL)
        await fetcher.aclose()
        assert result.status_code == 200
        assert result.ok
        assert b'"status"' in result.body

    @pytest.mark.asyncio
    @respx.mock
    async def test_headers(self, fetcher: ResilientFetcher):
        route = respx.get(BASE).mock(return_value=httpx.Response(200, json={}))
        await fetcher.fetch(URL)
        await fetcher.aclose()
        request = route.calls[0].request
        assert "tidewatch" in request.headers["user-agent"]
        assert request.headers["cache-control"] == "no-cache"

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_not_retried(self, fetcher: ResilientFetcher, recording_sleep):
        route = respx.get(BASE).mock(return_value=httpx.Response(503))
        result = await fetcher.fetch(URL)
        await fetcher.aclose()
        assert result.status_code == 503
        assert not result.ok
        assert route.call_count == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    @respx.mock
    async def test_retry_on_connect_error(self, fetcher: ResilientFetcher, recording_sleep):
        route = respx.get(BASE).mock(
            side_effect=[
                httpx.ConnectError("connection refused"),
                httpx.Response(200, json={}),
            ]
        )
        result = await fetcher.fetch(URL)
        await fetcher.aclose()
        assert result.status_code == 200
        assert route.call_count == 2
        assert recording_sleep.delays == [0.75]

    @pytest.mark.asyncio
    @respx.mock
    async def test_retry_on_timeout_and_dropped_connection(
        self, fetcher: ResilientFetcher, recording_sleep
    ):
        route = respx.get(BASE).mock(
            side_effect=[
                httpx.ReadTimeout("timed out"),
                httpx.RemoteProtocolError("peer closed connection"),
                httpx.Response(200, json={}),
            ]
        )
        result = await fetcher.fetch(URL)
        await fetcher.aclose()
        assert result.status_code == 200
        assert route.call_count == 3
        assert recording_sleep.delays == [0.75, 1.5]

    @pytest.mark.asyncio
    @respx.mock
    async def test_exhausted_retries(self, fetcher: ResilientFetcher, recording_sleep):
        route = respx.get(BASE).mock(side_effect=httpx.ConnectTimeout("timed out"))
        with pytest.raises(TransportError) as exc:
            await fetcher.fetch(URL)
        await fetcher.aclose()
        assert route.call_count == 3
        # no sleep after the final attempt
        assert recording_sleep.delays == [0.75, 1.5]
        assert isinstance(exc.value.__cause__, httpx.ConnectTimeout)
        assert exc.value.user_message == "network unavailable"

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_transient_fails_immediately(
        self, fetcher: ResilientFetcher, recording_sleep
    ):
        route = respx.get(BASE).mock(side_effect=httpx.UnsupportedProtocol("bad scheme"))
        with pytest.raises(TransportError):
            await fetcher.fetch(URL)
        await fetcher.aclose()
        assert route.call_count == 1
        assert recording_sleep.delays == []


class TestBackoff:
    def test_exponential(self):
        f = ResilientFetcher(FetchConfig(backoff_base_s=0.75))
        assert [f.backoff_delay(n) for n in (1, 2, 3)] == [0.75, 1.5, 3.0]

    @pytest.mark.asyncio
    async def test_context_manager_closes_owned_client(self):
        async with ResilientFetcher(FetchConfig()) as f:
            client = f.client
        assert client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self):
        client = httpx.AsyncClient()
        async with ResilientFetcher(FetchConfig(), client=client):
            pass
        assert not client.is_closed
        await client.aclose()
