"""Tests for provider URL construction."""

from datetime import date

import httpx
import pytest

from tidewatch.ingest.request_builder import build_tide_url, redact_url

BASE = "https://tides.test/api/v3"


def _params(url: str) -> httpx.QueryParams:
    return httpx.URL(url).params


class TestBuildTideUrl:
    def test_combined(self):
        url = build_tide_url(BASE, -33.89, 151.28, date(2025, 4, 6), 7, True, True, "k")
        params = _params(url)
        assert url.startswith(BASE + "?")
        assert "heights" in params
        assert "extremes" in params
        assert "localtime" in params
        assert params["date"] == "2025-04-06"
        assert params["days"] == "7"
        assert params["datum"] == "CD"
        assert params["key"] == "k"
        assert float(params["lat"]) == pytest.approx(-33.89)
        assert float(params["lon"]) == pytest.approx(151.28)

    def test_extremes_only(self):
        params = _params(
            build_tide_url(BASE, 0.0, 0.0, date(2025, 4, 9), 3, False, True, "k")
        )
        assert "extremes" in params
        assert "heights" not in params
        assert params["days"] == "3"

    def test_heights_only(self):
        params = _params(
            build_tide_url(BASE, 0.0, 0.0, date(2025, 4, 6), 2, True, False, "k")
        )
        assert "heights" in params
        assert "extremes" not in params

    def test_custom_datum(self):
        params = _params(
            build_tide_url(BASE, 0.0, 0.0, date(2025, 4, 6), 1, True, False, "k", datum="MSL")
        )
        assert params["datum"] == "MSL"

    def test_neither_requested(self):
        with pytest.raises(ValueError):
            build_tide_url(BASE, 0.0, 0.0, date(2025, 4, 6), 1, False, False, "k")

    def test_zero_days(self):
        with pytest.raises(ValueError):
            build_tide_url(BASE, 0.0, 0.0, date(2025, 4, 6), 0, True, True, "k")


class TestRedact:
    def test_key_masked(self):
        url = build_tide_url(BASE, 1.0, 2.0, date(2025, 4, 6), 1, True, True, "supersecret")
        redacted = redact_url(url)
        assert "supersecret" not in redacted
        assert "key=***" in redacted

    def test_no_key_unchanged(self):
        assert redact_url(BASE + "?heights") == BASE + "?heights"
