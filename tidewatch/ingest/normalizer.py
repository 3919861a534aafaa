"""Map raw provider payloads onto tide samples and per-day extremes."""

import logging
import re
from collections import defaultdict

from tidewatch.models.tide import (
    DailyTideExtremes,
    RawTidePayload,
    TideExtreme,
    TideKind,
    TideSample,
)

logger = logging.getLogger(__name__)

MAX_EXTREMES_PER_KIND = 2

_OFFSET_RE = re.compile(r"(Z|[+-]\d{2}(:?\d{2})?)$")


def normalize_timestamp(raw: str) -> str:
    """Strip any UTC offset after the time of day and truncate to minutes.

    '2025-04-06T12:30+10:00' -> '2025-04-06T12:30'
    """
    value = raw.strip()
    date_part, sep, time_part = value.partition("T")
    if sep:
        time_part = _OFFSET_RE.sub("", time_part)
        value = f"{date_part}T{time_part}"
    return value[:16]


def normalize_heights(raw_heights: list[dict]) -> list[TideSample]:
    """Samples in provider order; malformed entries are skipped."""
    samples: list[TideSample] = []
    for entry in raw_heights:
        try:
            samples.append(
                TideSample(
                    timestamp=normalize_timestamp(str(entry["date"])),
                    height_m=float(entry["height"]),
                )
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping malformed height entry: %r", entry)
    return samples


def group_extremes(raw_extremes: list[dict]) -> list[DailyTideExtremes]:
    """Group extremes by local day, keeping the two highest highs and two lowest lows."""
    highs: dict[str, list[TideExtreme]] = defaultdict(list)
    lows: dict[str, list[TideExtreme]] = defaultdict(list)

    for entry in raw_extremes:
        try:
            extreme = TideExtreme(
                timestamp=normalize_timestamp(str(entry["date"])),
                height_m=float(entry["height"]),
                kind=TideKind(entry["type"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Skipping malformed extreme entry: %r", entry)
            continue
        bucket = highs if extreme.kind is TideKind.HIGH else lows
        bucket[extreme.day].append(extreme)

    days = sorted(set(highs) | set(lows))
    result = []
    for day in days:
        day_highs = sorted(highs.get(day, []), key=lambda e: e.height_m, reverse=True)
        day_lows = sorted(lows.get(day, []), key=lambda e: e.height_m)
        result.append(
            DailyTideExtremes(
                day=day,
                highs=tuple(day_highs[:MAX_EXTREMES_PER_KIND]),
                lows=tuple(day_lows[:MAX_EXTREMES_PER_KIND]),
            )
        )
    return result


def normalize(raw: RawTidePayload) -> tuple[list[TideSample], list[DailyTideExtremes]]:
    return normalize_heights(raw.heights), group_extremes(raw.extremes)
