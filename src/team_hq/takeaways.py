"""JSON-backed store of team takeaways (action items, insights, decisions)."""

import random
import string
import time
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import orjson

from .config import TAKEAWAYS_FILE
from .errors import TakeawayNotFoundError, TakeawayStoreError

TAKEAWAY_TYPES = ("action", "insight", "decision")
TAKEAWAY_STATUSES = ("pending", "in-progress", "done", "blocked")

_BASE36 = string.digits + string.ascii_lowercase


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_BASE36[r])
    return "".join(reversed(digits))


def new_takeaway_id() -> str:
    """Time-ordered id: base-36 milliseconds plus a random suffix."""
    suffix = "".join(random.choices(_BASE36, k=5))
    return _base36(int(time.time() * 1000)) + suffix


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


FIELD_DEFAULTS = {
    "agent": "unknown",
    "type": "action",
    "text": "",
    "assignee": None,
    "status": "pending",
    "confidence": None,
}


@dataclass
class Takeaway:
    id: str
    agent: str
    type: str
    text: str
    assignee: str | None
    status: str
    confidence: float | None
    createdAt: str
    updatedAt: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Takeaway":
        """Build a takeaway, filling missing fields with creation defaults."""
        if not isinstance(data, dict) or not data.get("id"):
            raise TakeawayStoreError(f"Invalid takeaway entry: {data!r}")
        names = {f.name for f in fields(cls)}
        values = {**FIELD_DEFAULTS, **{k: v for k, v in data.items() if k in names}}
        values["id"] = str(values["id"])
        values.setdefault("createdAt", "")
        values.setdefault("updatedAt", values["createdAt"])
        return cls(**values)


EDITABLE_FIELDS = ("agent", "type", "text", "assignee", "status", "confidence")


class TakeawayStore:
    """Newest-first list of takeaways persisted as ``{"takeaways": [...]}``."""

    def __init__(self, path: Path = TAKEAWAYS_FILE) -> None:
        self.path = path

    def load(self) -> list[Takeaway]:
        if not self.path.exists():
            self._write([])
            return []
        try:
            data = orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise TakeawayStoreError(f"Cannot read takeaways {self.path}: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("takeaways", []), list):
            raise TakeawayStoreError(f"Malformed takeaways file {self.path}")
        return [Takeaway.from_dict(t) for t in data.get("takeaways", [])]

    def _write(self, takeaways: list[Takeaway]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"takeaways": [asdict(t) for t in takeaways]}
        self.path.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))

    def select(
        self, status: str | None = None, agent: str | None = None
    ) -> list[Takeaway]:
        """Return takeaways, optionally filtered by status and agent."""
        takeaways = self.load()
        if status:
            takeaways = [t for t in takeaways if t.status == status]
        if agent:
            takeaways = [t for t in takeaways if t.agent == agent]
        return takeaways

    def get(self, takeaway_id: str) -> Takeaway:
        for takeaway in self.load():
            if takeaway.id == takeaway_id:
                return takeaway
        raise TakeawayNotFoundError(f"Takeaway not found: {takeaway_id}")

    def add(
        self,
        text: str = "",
        agent: str | None = None,
        type: str | None = None,
        assignee: str | None = None,
        status: str | None = None,
        confidence: float | None = None,
    ) -> Takeaway:
        """Create a takeaway and put it at the top of the list."""
        now = _now_iso()
        takeaway = Takeaway(
            id=new_takeaway_id(),
            agent=agent or "unknown",
            type=type or "action",
            text=text,
            assignee=assignee,
            status=status or "pending",
            confidence=confidence,
            createdAt=now,
            updatedAt=now,
        )
        takeaways = self.load()
        takeaways.insert(0, takeaway)
        self._write(takeaways)
        return takeaway

    def update(self, takeaway_id: str, **changes: Any) -> Takeaway:
        """Apply field changes; ``id`` and ``createdAt`` are never modified."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        takeaways = self.load()
        for takeaway in takeaways:
            if takeaway.id == takeaway_id:
                for name, value in changes.items():
                    setattr(takeaway, name, value)
                takeaway.updatedAt = _now_iso()
                self._write(takeaways)
                return takeaway
        raise TakeawayNotFoundError(f"Takeaway not found: {takeaway_id}")

    def remove(self, takeaway_id: str) -> bool:
        """Delete a takeaway. Returns False if it did not exist."""
        takeaways = self.load()
        kept = [t for t in takeaways if t.id != takeaway_id]
        self._write(kept)
        return len(kept) != len(takeaways)
