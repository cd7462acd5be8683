"""Helpers for building session fixtures."""

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path


def iso(minutes_ago: float = 0, now: datetime | None = None) -> str:
    """ISO-8601 timestamp ``minutes_ago`` before now, in the session format."""
    now = now or datetime.now(timezone.utc)
    dt = now - timedelta(minutes=minutes_ago)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def write_session(path: Path, records: list) -> Path:
    """Write records as JSON lines. Strings are written verbatim."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            line = record if isinstance(record, str) else json.dumps(record)
            f.write(line + "\n")
    return path
