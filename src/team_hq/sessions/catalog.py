"""Read-only dashboard views over the OpenClaw agents directory."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..config import MAX_SESSIONS_LISTED, ONLINE_WINDOW_SECONDS
from ..errors import SessionNotFoundError
from .base import SessionSummary, Turn, parse_timestamp
from .parser import CONVERSATION_ROLES, iter_records, parse_session_file

logger = logging.getLogger(__name__)


@dataclass
class AgentStatus:
    """Presence of an agent derived from session file activity."""

    status: str  # "online" or "away"
    last_activity: datetime | None


def iter_session_files(agents_dir: Path) -> list[tuple[str, Path]]:
    """Return (agent_id, session_file) pairs for every session on disk."""
    if not agents_dir.is_dir():
        return []

    found = []
    for agent_dir in sorted(agents_dir.iterdir()):
        sessions_dir = agent_dir / "sessions"
        if not sessions_dir.is_dir():
            continue
        for session_file in sorted(sessions_dir.glob("*.jsonl")):
            found.append((agent_dir.name, session_file))
    return found


def _summarize(agent_id: str, session_file: Path) -> SessionSummary:
    stat = session_file.stat()
    message_count = 0
    last_timestamp = None
    for data in iter_records(session_file):
        if data.get("role") not in CONVERSATION_ROLES:
            continue
        message_count += 1
        ts = parse_timestamp(data.get("timestamp"))
        if ts is not None:
            last_timestamp = ts

    return SessionSummary(
        id=session_file.stem,
        agent_id=agent_id,
        file=session_file.name,
        message_count=message_count,
        last_activity=last_timestamp
        or datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        size=stat.st_size,
    )


def list_sessions(
    agents_dir: Path,
    agent_filter: str | None = None,
    limit: int = MAX_SESSIONS_LISTED,
) -> list[SessionSummary]:
    """List sessions across all agents, most recently active first."""
    sessions = []
    for agent_id, session_file in iter_session_files(agents_dir):
        if agent_filter and agent_id != agent_filter:
            continue
        try:
            sessions.append(_summarize(agent_id, session_file))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping unreadable session %s: %s", session_file, e)

    sessions.sort(key=lambda s: s.last_activity, reverse=True)
    return sessions[:limit]


def load_session(agents_dir: Path, agent_id: str, session_id: str) -> list[Turn]:
    """Load every user and assistant turn of one session."""
    for part in (agent_id, session_id):
        if not part or "/" in part or "\\" in part or part in (".", ".."):
            raise SessionNotFoundError(f"Session not found: {agent_id}/{session_id}")

    session_file = agents_dir / agent_id / "sessions" / f"{session_id}.jsonl"
    if not session_file.is_file():
        raise SessionNotFoundError(f"Session not found: {agent_id}/{session_id}")
    return parse_session_file(session_file, agent_id)


def agent_status(
    agents_dir: Path, agent_id: str, now: datetime | None = None
) -> AgentStatus:
    """Report whether an agent has touched a session file recently.

    Agents without a local sessions directory (deployed mode) are reported
    online as of ``now``.
    """
    now = now or datetime.now(timezone.utc)
    sessions_dir = agents_dir / agent_id / "sessions"
    if not sessions_dir.is_dir():
        return AgentStatus(status="online", last_activity=now)

    most_recent = 0.0
    for session_file in sessions_dir.glob("*.jsonl"):
        try:
            most_recent = max(most_recent, session_file.stat().st_mtime)
        except OSError:
            continue

    if not most_recent:
        return AgentStatus(status="away", last_activity=None)

    last_activity = datetime.fromtimestamp(most_recent, tz=timezone.utc)
    online = (now - last_activity).total_seconds() < ONLINE_WINDOW_SECONDS
    return AgentStatus(status="online" if online else "away", last_activity=last_activity)
