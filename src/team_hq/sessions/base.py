"""Data types shared by the session pipeline."""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass
class Turn:
    """One role-attributed entry extracted from a session file."""

    role: str  # "user" or "assistant"
    text: str
    timestamp: str | None  # Raw ISO-8601 string as written in the file
    agent_id: str
    source_file: Path
    model: str | None = None


@dataclass
class SyncCandidate:
    """A turn accepted for delivery to the chat log."""

    sender: str
    recipient: str
    text: str  # Truncated to MAX_TEXT_LENGTH
    timestamp: str
    fingerprint: str
    agent_id: str = ""

    def payload(self) -> dict[str, str]:
        """Return the JSON body posted to the chat-log endpoint."""
        return {"from": self.sender, "to": self.recipient, "text": self.text}


@dataclass
class SessionSummary:
    """Dashboard metadata for one session file."""

    id: str
    agent_id: str
    file: str
    message_count: int
    last_activity: datetime
    size: int


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for missing or
    unparseable values.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
