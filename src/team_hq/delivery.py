"""Sequential delivery of sync candidates to the chat log."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from .client import ChatlogClient
from .config import SEND_DELAY
from .errors import DeliveryError
from .sessions.base import SyncCandidate
from .state import SyncState, SyncStateStore

logger = logging.getLogger(__name__)

ResultCallback = Callable[[SyncCandidate, DeliveryError | None], None]


@dataclass
class DeliveryFailure:
    candidate: SyncCandidate
    error: str


@dataclass
class DeliveryReport:
    """Outcome of one delivery pass."""

    pending: int
    dry_run: bool = False
    attempted: int = 0
    succeeded: int = 0
    failures: list[DeliveryFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


def deliver(
    candidates: list[SyncCandidate],
    client: ChatlogClient,
    store: SyncStateStore,
    state: SyncState,
    dry_run: bool = False,
    delay: float = SEND_DELAY,
    on_result: ResultCallback | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> DeliveryReport:
    """Post each candidate in order, recording successes as they happen.

    A failed candidate is reported and left out of the state so the next
    run retries it. The state is persisted after every success and once
    more at the end with ``lastSync`` stamped. In dry-run mode nothing is
    sent and nothing is written.
    """
    report = DeliveryReport(pending=len(candidates), dry_run=dry_run)
    if dry_run:
        return report

    for i, candidate in enumerate(candidates):
        report.attempted += 1
        try:
            client.post(candidate.sender, candidate.recipient, candidate.text)
        except DeliveryError as e:
            logger.warning(
                "Failed to deliver %s -> %s (%s): %s",
                candidate.sender,
                candidate.recipient,
                candidate.fingerprint,
                e,
            )
            report.failures.append(DeliveryFailure(candidate=candidate, error=str(e)))
            if on_result:
                on_result(candidate, e)
            continue

        state.add(candidate.fingerprint)
        store.save(state)
        report.succeeded += 1
        if on_result:
            on_result(candidate, None)

        if delay and i < len(candidates) - 1:
            sleep(delay)

    state.last_sync = int(clock() * 1000)
    store.save(state)
    return report
