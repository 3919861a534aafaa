"""Tests for tide and forecast model helpers."""

from datetime import UTC, datetime, timedelta

import pytest

from tidewatch.models.forecast import WaveData, weather_description
from tidewatch.models.tide import (
    CacheEntry,
    DailyTideExtremes,
    RawTidePayload,
    TideBundle,
    TideExtreme,
    TideKind,
)

NOW = datetime(2025, 4, 6, 2, 0, tzinfo=UTC)


class TestCacheEntry:
    def test_fresh_inside_ttl(self):
        entry = CacheEntry(TideBundle((), ()), fetched_at=NOW)
        assert entry.is_fresh(NOW + timedelta(minutes=9), timedelta(minutes=10))

    def test_stale_at_ttl(self):
        entry = CacheEntry(TideBundle((), ()), fetched_at=NOW)
        assert not entry.is_fresh(NOW + timedelta(minutes=10), timedelta(minutes=10))


class TestExtremes:
    def test_labels(self):
        e = TideExtreme("2025-04-06T19:35", 1.705, TideKind.HIGH)
        assert e.day == "2025-04-06"
        assert e.time_label == "19:35"

    def test_highest_and_lowest(self):
        day = DailyTideExtremes(
            day="2025-04-06",
            highs=(
                TideExtreme("2025-04-06T07:25", 1.512, TideKind.HIGH),
                TideExtreme("2025-04-06T19:35", 1.705, TideKind.HIGH),
            ),
            lows=(TideExtreme("2025-04-06T13:30", 0.288, TideKind.LOW),),
        )
        assert day.highest_high.time_label == "19:35"
        assert day.lowest_low.height_m == 0.288

    def test_empty_day(self):
        day = DailyTideExtremes(day="2025-04-06")
        assert day.highest_high is None
        assert day.lowest_low is None

    def test_raw_payload_empty(self):
        assert RawTidePayload().is_empty
        assert not RawTidePayload(extremes=[{"date": "x"}]).is_empty


class TestWaves:
    @pytest.mark.parametrize(
        "height,period,expected",
        [
            (1.2, 9.0, "Good"),
            (0.3, 9.0, "Too Calm"),
            (3.1, 9.0, "Too Rough"),
            (1.2, 4.0, "Poor"),
            (1.2, 14.0, "Fair"),
        ],
    )
    def test_fishing_condition(self, height, period, expected):
        assert WaveData("2025-04-06T12:00", height, 120, period).fishing_condition == expected


def test_weather_description():
    assert weather_description(0) == "Clear sky"
    assert weather_description(95) == "Thunderstorm"
    assert weather_description(12345) == "Unknown"
