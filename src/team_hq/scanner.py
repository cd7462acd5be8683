"""Scan agent session files for undelivered inter-agent messages."""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .classifier import classify
from .roster import Roster
from .sessions.base import SyncCandidate, parse_timestamp
from .sessions.catalog import iter_session_files
from .sessions.parser import parse_session_file
from .state import SyncState

logger = logging.getLogger(__name__)


def find_recent_files(agents_dir: Path, cutoff: datetime) -> list[tuple[str, Path]]:
    """Return session files modified at or after ``cutoff``.

    Files are selected by modification time only; a stale file is skipped
    even if it holds recently timestamped turns.
    """
    recent = []
    cutoff_ts = cutoff.timestamp()
    for agent_id, session_file in iter_session_files(agents_dir):
        try:
            mtime = session_file.stat().st_mtime
        except OSError as e:
            logger.warning("Cannot stat %s: %s", session_file, e)
            continue
        if mtime >= cutoff_ts:
            recent.append((agent_id, session_file))
    return recent


def scan(
    agents_dir: Path,
    hours: float,
    state: SyncState,
    roster: Roster,
    now: datetime | None = None,
) -> list[SyncCandidate]:
    """Collect undelivered candidates from the last ``hours``, oldest first."""
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(hours=hours)

    pending: list[tuple[datetime, SyncCandidate]] = []
    seen: set[str] = set()
    for agent_id, session_file in find_recent_files(agents_dir, cutoff):
        try:
            turns = parse_session_file(session_file, agent_id)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable session %s: %s", session_file, e)
            continue

        for turn in turns:
            candidate = classify(turn, roster)
            if candidate is None:
                continue
            ts = parse_timestamp(candidate.timestamp)
            if ts is None or ts < cutoff:
                continue
            if candidate.fingerprint in state or candidate.fingerprint in seen:
                continue
            seen.add(candidate.fingerprint)
            pending.append((ts, candidate))

    pending.sort(key=lambda item: item[0])
    logger.debug("Found %d pending messages since %s", len(pending), cutoff)
    return [candidate for _, candidate in pending]
