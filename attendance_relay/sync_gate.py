import logging
from typing import List

from attendance_relay.event_log import EventLog, ScanEvent

logger = logging.getLogger(__name__)


class SyncGate:
    # At-least-once: a lost poll response is not redelivered.
    def __init__(self, event_log: EventLog) -> None:
        self.event_log = event_log

    def pending(self) -> int:
        return self.event_log.unsynced_count()

    def drain_unsynced(self) -> List[ScanEvent]:
        drained = self.event_log.mark_synced()
        if drained:
            logger.info("sync_gate.drained count=%d", len(drained))
        else:
            logger.debug("sync_gate.empty")
        return drained
