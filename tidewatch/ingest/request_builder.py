"""WorldTides v3 query construction."""

import re
from datetime import date
from urllib.parse import urlencode

_KEY_PARAM_RE = re.compile(r"([?&]key=)[^&]*")


def build_tide_url(
    base_url: str,
    lat: float,
    lon: float,
    start_date: date,
    days: int,
    include_heights: bool,
    include_extremes: bool,
    api_key: str,
    datum: str = "CD",
) -> str:
    """Build a provider query for heights and/or extremes over a date window.

    The provider treats ``heights``, ``extremes`` and ``localtime`` as bare
    flags; metric units are its default.
    """
    if not (include_heights or include_extremes):
        raise ValueError("at least one of heights/extremes must be requested")
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}")

    flags = []
    if include_heights:
        flags.append("heights")
    if include_extremes:
        flags.append("extremes")

    params = urlencode(
        {
            "date": start_date.isoformat(),
            "days": days,
            "lat": f"{lat:.6f}",
            "lon": f"{lon:.6f}",
            "datum": datum,
            "key": api_key,
        }
    )
    return f"{base_url}?{'&'.join(flags)}&localtime&{params}"


def redact_url(url: str) -> str:
    """Mask the API key for logging."""
    return _KEY_PARAM_RE.sub(r"\1***", url)
