"""Tide data models: normalized samples, extremes and cache entries."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum


class TideKind(StrEnum):
    HIGH = "High"
    LOW = "Low"


@dataclass(frozen=True)
class TideSample:
    timestamp: str  # YYYY-MM-DDTHH:MM, local, no offset
    height_m: float


@dataclass(frozen=True)
class TideExtreme:
    timestamp: str
    height_m: float
    kind: TideKind

    @property
    def day(self) -> str:
        return self.timestamp[:10]

    @property
    def time_label(self) -> str:
        return self.timestamp[11:16]


@dataclass(frozen=True)
class DailyTideExtremes:
    """Up to two highs (tallest first) and two lows (lowest first) for one day."""

    day: str  # YYYY-MM-DD
    highs: tuple[TideExtreme, ...] = ()
    lows: tuple[TideExtreme, ...] = ()

    @property
    def highest_high(self) -> TideExtreme | None:
        return max(self.highs, key=lambda e: e.height_m, default=None)

    @property
    def lowest_low(self) -> TideExtreme | None:
        return min(self.lows, key=lambda e: e.height_m, default=None)


@dataclass(frozen=True)
class RawTidePayload:
    """Decoded provider response before normalization."""

    heights: list[dict] = field(default_factory=list)
    extremes: list[dict] = field(default_factory=list)
    copyright: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.heights and not self.extremes


@dataclass(frozen=True)
class TideBundle:
    heights: tuple[TideSample, ...]
    extremes: tuple[DailyTideExtremes, ...]
    attribution: str | None = None


@dataclass(frozen=True)
class CacheEntry:
    bundle: TideBundle
    fetched_at: datetime

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return now - self.fetched_at < ttl
