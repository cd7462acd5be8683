"""Top-level sync run: scan sessions, then deliver what is new."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .client import ChatlogClient
from .config import AGENTS_DIR, DEFAULT_WINDOW_HOURS
from .delivery import DeliveryReport, ResultCallback, deliver
from .roster import Roster, load_roster
from .scanner import scan
from .sessions.base import SyncCandidate
from .state import SyncStateStore

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    candidates: list[SyncCandidate]
    report: DeliveryReport


def run_sync(
    client: ChatlogClient,
    store: SyncStateStore | None = None,
    roster: Roster | None = None,
    agents_dir: Path = AGENTS_DIR,
    hours: float = DEFAULT_WINDOW_HOURS,
    dry_run: bool = False,
    on_result: ResultCallback | None = None,
    now: datetime | None = None,
    **deliver_options,
) -> SyncResult:
    """Sync inter-agent messages from the last ``hours`` to the chat log.

    When nothing is pending the state file is left untouched.
    """
    store = store or SyncStateStore()
    roster = roster or load_roster()
    state = store.load()

    candidates = scan(agents_dir, hours, state, roster, now=now)
    logger.info("Found %d new messages to sync", len(candidates))

    if not candidates:
        return SyncResult(candidates=[], report=DeliveryReport(pending=0, dry_run=dry_run))

    report = deliver(
        candidates,
        client,
        store,
        state,
        dry_run=dry_run,
        on_result=on_result,
        **deliver_options,
    )
    return SyncResult(candidates=candidates, report=report)
