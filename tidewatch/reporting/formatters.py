"""Output formatters for refresh results."""

import json
from dataclasses import asdict

from tidewatch.models.forecast import weather_description
from tidewatch.models.reporting import RefreshResult


def format_refresh_text(r: RefreshResult, max_days: int = 7) -> str:
    """Plain text report for the terminal."""
    lines = [f"=== Conditions at {r.latitude:.4f}, {r.longitude:.4f} ==="]

    if r.weather is not None:
        c = r.weather.current
        lines.append(
            f"Now: {c.temperature:.1f}C (feels {c.apparent_temperature:.1f}C), "
            f"{weather_description(c.weather_code)}, wind {c.wind_speed:.0f} km/h"
        )
    elif r.weather_error:
        lines.append(f"Weather: {r.weather_error}")

    if r.waves is not None and r.waves.current is not None:
        w = r.waves.current
        lines.append(
            f"Waves: {w.wave_height:.1f}m @ {w.wave_period:.1f}s from {w.wave_direction}deg "
            f"({w.fishing_condition})"
        )
    if r.waves is not None and r.waves.source_note:
        lines.append(f"  {r.waves.source_note}")

    if r.tide_error:
        suffix = " (showing last known tides)" if r.tides_stale else ""
        lines.append(f"Tides: {r.tide_error}{suffix}")

    if r.tides is not None:
        for day in r.tides.extremes[:max_days]:
            highs = ", ".join(f"{e.time_label} {e.height_m:.2f}m" for e in day.highs) or "-"
            lows = ", ".join(f"{e.time_label} {e.height_m:.2f}m" for e in day.lows) or "-"
            lines.append(f"{day.day}  High: {highs}  Low: {lows}")
        if r.attribution:
            lines.append(r.attribution)

    return "\n".join(lines)


def format_refresh_json(r: RefreshResult) -> str:
    """JSON report for programmatic consumption."""
    return json.dumps(asdict(r), indent=2)
