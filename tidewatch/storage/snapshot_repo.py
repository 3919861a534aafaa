"""Repository for last-good tide snapshots and the widget payload."""

import json
import sqlite3
from dataclasses import asdict
from datetime import datetime

from tidewatch.models.tide import (
    DailyTideExtremes,
    TideBundle,
    TideExtreme,
    TideKind,
    TideSample,
)


def bundle_to_json(bundle: TideBundle) -> str:
    return json.dumps(asdict(bundle))


def bundle_from_json(raw: str) -> TideBundle:
    data = json.loads(raw)

    def _extreme(e: dict) -> TideExtreme:
        return TideExtreme(
            timestamp=e["timestamp"], height_m=float(e["height_m"]), kind=TideKind(e["kind"])
        )

    return TideBundle(
        heights=tuple(
            TideSample(timestamp=h["timestamp"], height_m=float(h["height_m"]))
            for h in data.get("heights", [])
        ),
        extremes=tuple(
            DailyTideExtremes(
                day=d["day"],
                highs=tuple(_extreme(e) for e in d.get("highs", [])),
                lows=tuple(_extreme(e) for e in d.get("lows", [])),
            )
            for d in data.get("extremes", [])
        ),
        attribution=data.get("attribution"),
    )


# --- Tide snapshots ---

def save_tide_snapshot(
    conn: sqlite3.Connection, location_key: str, bundle: TideBundle, fetched_at: datetime
) -> None:
    """Upsert the latest successful bundle for a location."""
    conn.execute(
        "INSERT INTO tide_snapshots (location_key, bundle_json, fetched_at) VALUES (?, ?, ?) "
        "ON CONFLICT(location_key) DO UPDATE SET "
        "bundle_json = excluded.bundle_json, fetched_at = excluded.fetched_at",
        (location_key, bundle_to_json(bundle), fetched_at.isoformat()),
    )
    conn.commit()


def get_tide_snapshot(
    conn: sqlite3.Connection, location_key: str
) -> tuple[TideBundle, str] | None:
    """Return (bundle, fetched_at_iso) or None if nothing was stored."""
    row = conn.execute(
        "SELECT bundle_json, fetched_at FROM tide_snapshots WHERE location_key = ?",
        (location_key,),
    ).fetchone()
    if row is None:
        return None
    return bundle_from_json(row["bundle_json"]), row["fetched_at"]


# --- Widget state ---

def save_widget_payload(conn: sqlite3.Connection, payload: dict) -> None:
    conn.execute(
        "INSERT INTO widget_state (key, value, updated_at) VALUES ('payload', ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (json.dumps(payload),),
    )
    conn.commit()


def get_widget_payload(conn: sqlite3.Connection) -> dict | None:
    row = conn.execute(
        "SELECT value FROM widget_state WHERE key = 'payload'"
    ).fetchone()
    if row is None:
        return None
    return json.loads(row[0])
