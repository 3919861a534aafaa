"""Widget payload and plain-text tide report."""

from datetime import datetime, timedelta

from tidewatch.models.tide import TideBundle, TideExtreme, TideKind

WIDGET_WINDOW = timedelta(hours=24)
_TS_FORMAT = "%Y-%m-%dT%H:%M"


def _parse(ts: str) -> datetime | None:
    try:
        return datetime.strptime(ts, _TS_FORMAT)
    except ValueError:
        return None


def _all_extremes(bundle: TideBundle) -> list[TideExtreme]:
    extremes = [e for day in bundle.extremes for e in (*day.highs, *day.lows)]
    return sorted(extremes, key=lambda e: e.timestamp)


def next_high_tide(bundle: TideBundle, now: datetime) -> TideExtreme | None:
    """First high tide at or after ``now`` (local naive time)."""
    for extreme in _all_extremes(bundle):
        when = _parse(extreme.timestamp)
        if extreme.kind is TideKind.HIGH and when is not None and when >= now:
            return extreme
    return None


def build_widget_payload(bundle: TideBundle, now: datetime) -> dict:
    """Next high tide plus the coming 24 hours of samples and extremes."""
    end = now + WIDGET_WINDOW

    def in_window(ts: str) -> bool:
        when = _parse(ts)
        return when is not None and now <= when <= end

    samples = [s for s in bundle.heights if in_window(s.timestamp)]
    extremes = [e for e in _all_extremes(bundle) if in_window(e.timestamp)]
    nxt = next_high_tide(bundle, now)

    return {
        "next_high_tide_time": nxt.time_label if nxt else "--:--",
        "next_high_tide_height": nxt.height_m if nxt else None,
        "tide_24h_times": [s.timestamp for s in samples],
        "tide_24h_heights": [s.height_m for s in samples],
        "tide_24h_extreme_times": [e.timestamp for e in extremes],
        "tide_24h_extreme_is_high": [1 if e.kind is TideKind.HIGH else 0 for e in extremes],
        "tide_24h_extreme_heights": [e.height_m for e in extremes],
        "attribution": bundle.attribution,
    }
