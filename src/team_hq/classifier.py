"""Decide which session turns are inter-agent conversation."""

from .config import CONTROL_MARKERS, MAX_TEXT_LENGTH, MIN_TEXT_LENGTH
from .fingerprint import fingerprint
from .roster import Roster
from .sessions.base import SyncCandidate, Turn


def is_inter_agent(text: str, roster: Roster) -> bool:
    """Check whether text looks like conversation between tracked agents."""
    if not text or len(text) < MIN_TEXT_LENGTH:
        return False
    if text.startswith(CONTROL_MARKERS):
        return False
    return bool(roster.mentioned(text))


def classify(turn: Turn, roster: Roster) -> SyncCandidate | None:
    """Map a turn to a sync candidate, or None if it should not be synced.

    Assistant turns are spoken by the agent owning the session; user turns
    are attributed to the roster's primary participant.
    """
    if not turn.timestamp:
        return None
    if not is_inter_agent(turn.text, roster):
        return None

    owner = roster.handle_for(turn.agent_id)
    if turn.role == "assistant":
        sender = owner
        recipient = roster.recipient_for(sender, turn.text)
    else:
        sender = roster.primary
        recipient = roster.recipient_for(sender, turn.text, session_owner=owner)

    return SyncCandidate(
        sender=sender,
        recipient=recipient,
        text=turn.text[:MAX_TEXT_LENGTH],
        timestamp=turn.timestamp,
        fingerprint=fingerprint(turn.text, turn.timestamp),
        agent_id=turn.agent_id,
    )
