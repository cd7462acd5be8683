"""Session file parsing and dashboard views."""

from .base import SessionSummary, SyncCandidate, Turn, parse_timestamp
from .catalog import agent_status, list_sessions, load_session
from .parser import extract_text, parse_session_file

__all__ = [
    "SessionSummary",
    "SyncCandidate",
    "Turn",
    "agent_status",
    "extract_text",
    "list_sessions",
    "load_session",
    "parse_session_file",
    "parse_timestamp",
]
