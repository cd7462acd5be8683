"""Persisted sync state: delivered fingerprints and last sync time."""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import orjson

from .config import MAX_SYNCED_FINGERPRINTS, STATE_FILE
from .errors import StateError

logger = logging.getLogger(__name__)


@dataclass
class SyncState:
    """Bounded, insertion-ordered set of delivered fingerprints."""

    last_sync: int = 0  # Epoch milliseconds
    fingerprints: list[str] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set, init=False, repr=False)

    def __post_init__(self) -> None:
        unique = []
        for fp in self.fingerprints:
            if fp not in self._seen:
                self._seen.add(fp)
                unique.append(fp)
        self.fingerprints = unique

    def __contains__(self, fp: object) -> bool:
        return fp in self._seen

    def __len__(self) -> int:
        return len(self.fingerprints)

    def add(self, fp: str) -> bool:
        """Record a delivered fingerprint. Returns False if already present."""
        if fp in self._seen:
            return False
        self._seen.add(fp)
        self.fingerprints.append(fp)
        return True

    def trim(self, limit: int = MAX_SYNCED_FINGERPRINTS) -> None:
        """Keep only the ``limit`` most recently added fingerprints."""
        if len(self.fingerprints) <= limit:
            return
        self.fingerprints = self.fingerprints[-limit:] if limit > 0 else []
        self._seen = set(self.fingerprints)

    def to_dict(self) -> dict[str, Any]:
        return {"lastSync": self.last_sync, "syncedFingerprints": self.fingerprints}

    @classmethod
    def from_dict(cls, data: Any) -> "SyncState":
        if not isinstance(data, dict):
            raise StateError("Sync state must be a JSON object")

        # Older state files stored the list under "syncedMessages"
        fingerprints = data.get("syncedFingerprints", data.get("syncedMessages", []))
        last_sync = data.get("lastSync", 0)
        if not isinstance(fingerprints, list) or not all(
            isinstance(fp, str) for fp in fingerprints
        ):
            raise StateError("syncedFingerprints must be a list of strings")
        if not isinstance(last_sync, (int, float)) or isinstance(last_sync, bool):
            raise StateError("lastSync must be a number")
        return cls(last_sync=int(last_sync), fingerprints=list(fingerprints))


class SyncStateStore:
    """Loads and atomically writes the sync state file."""

    def __init__(
        self, path: Path = STATE_FILE, max_entries: int = MAX_SYNCED_FINGERPRINTS
    ) -> None:
        self.path = path
        self.max_entries = max_entries

    def load(self) -> SyncState:
        """Load state, or return an empty state if the file does not exist."""
        if not self.path.exists():
            return SyncState()
        try:
            data = orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise StateError(f"Cannot read sync state {self.path}: {e}") from e
        return SyncState.from_dict(data)

    def save(self, state: SyncState) -> None:
        """Trim the state to its bound and replace the file atomically."""
        state.trim(self.max_entries)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(orjson.dumps(state.to_dict(), option=orjson.OPT_INDENT_2))
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateError(f"Cannot write sync state {self.path}: {e}") from e
        logger.debug("Saved %d fingerprints to %s", len(state), self.path)
