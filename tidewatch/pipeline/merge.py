"""Align normalized tide data with hourly and daily weather forecasts."""

from collections.abc import Iterable

from tidewatch.ingest.normalizer import normalize_timestamp
from tidewatch.models.forecast import DailyForecast, HourlyForecast
from tidewatch.models.tide import DailyTideExtremes, TideSample


def merge_tide_into_forecasts(
    hourly: list[HourlyForecast],
    daily: list[DailyForecast],
    samples: Iterable[TideSample],
    daily_extremes: Iterable[DailyTideExtremes],
) -> None:
    """Attach tide heights and daily extremes to forecasts in place.

    Fields are assigned, not accumulated, so re-running with the same inputs
    gives the same result. Entries without matching tide data get None.
    """
    heights_by_time: dict[str, float] = {}
    for sample in samples:
        heights_by_time[sample.timestamp] = sample.height_m  # last write wins

    for entry in hourly:
        entry.tide_height = heights_by_time.get(normalize_timestamp(entry.time))

    extremes_by_day = {d.day: d for d in daily_extremes}
    for entry in daily:
        day = extremes_by_day.get(entry.date[:10])
        high = day.highest_high if day else None
        low = day.lowest_low if day else None
        entry.high_tide_height = high.height_m if high else None
        entry.high_tide_time = high.time_label if high else None
        entry.low_tide_height = low.height_m if low else None
        entry.low_tide_time = low.time_label if low else None
