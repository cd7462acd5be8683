"""Parser for OpenClaw line-delimited session files."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import orjson

from .base import Turn

CONVERSATION_ROLES = ("user", "assistant")


def extract_text(content: Any) -> str:
    """Extract plain text from a record's content field.

    Strings are returned as-is. Lists of typed blocks contribute the text of
    their ``text`` blocks joined by newlines. Anything else yields "".
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text", "")
                if isinstance(text, str):
                    parts.append(text)
        return "\n".join(parts)
    return ""


def iter_records(session_file: Path) -> Iterator[dict]:
    """Yield each well-formed JSON object in a session file.

    Malformed lines are skipped. I/O errors propagate to the caller.
    """
    with open(session_file, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError:
                continue
            if isinstance(data, dict):
                yield data


def parse_session_file(session_file: Path, agent_id: str) -> list[Turn]:
    """Parse a session file into user and assistant turns, in file order."""
    turns = []
    for data in iter_records(session_file):
        role = data.get("role")
        if role not in CONVERSATION_ROLES:
            continue

        timestamp = data.get("timestamp")
        model = data.get("model")
        turns.append(
            Turn(
                role=role,
                text=extract_text(data.get("content")),
                timestamp=timestamp if isinstance(timestamp, str) else None,
                agent_id=agent_id,
                source_file=session_file,
                model=model if isinstance(model, str) else None,
            )
        )
    return turns
