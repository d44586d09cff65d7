import logging
from dataclasses import dataclass
from typing import List

from attendance_relay.clock import Clock, utc_now
from attendance_relay.errors import InvalidIdmError
from attendance_relay.event_log import EventLog, ScanEvent
from attendance_relay.identity_lookup import IdentityLookup
from attendance_relay.mode_controller import Mode, ModeController

logger = logging.getLogger(__name__)


class IngestionService:
    def __init__(
        self,
        identity: IdentityLookup,
        modes: ModeController,
        event_log: EventLog,
        clock: Clock = utc_now,
    ) -> None:
        self.identity = identity
        self.modes = modes
        self.event_log = event_log
        self._clock = clock

    def ingest(self, idm: object) -> ScanEvent:
        # Presence is the only check on the card id.
        if not idm or not isinstance(idm, str):
            raise InvalidIdmError()
        identity = self.identity.resolve(idm)
        mode = self.modes.get_mode()
        event = self.event_log.append(idm, identity, mode, self._clock())
        logger.info(
            "ingestion.accepted [%s] %s IDm: %s employee_id=%s",
            event.timestamp,
            event.mode,
            idm,
            event.employee_id,
        )
        return event


@dataclass
class StatusSnapshot:
    mode: Mode
    events: List[ScanEvent]


class StatusView:
    def __init__(self, modes: ModeController, event_log: EventLog) -> None:
        self.modes = modes
        self.event_log = event_log

    def snapshot(self) -> StatusSnapshot:
        return StatusSnapshot(mode=self.modes.get_mode(), events=self.event_log.list_all())
