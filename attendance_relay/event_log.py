import json
import logging
import os
import re
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from attendance_relay.clock import Clock, day_key, format_timestamp, utc_now
from attendance_relay.errors import PersistenceError
from attendance_relay.identity_lookup import EmployeeIdentity
from attendance_relay.mode_controller import Mode

logger = logging.getLogger(__name__)

_ARTIFACT_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.json$")


# Frozen: the synced flip swaps in a copy made with dataclasses.replace.
@dataclass(frozen=True)
class ScanEvent:
    idm: str
    employee_id: str
    name: str
    mode: str
    timestamp: str
    synced: bool = False

    def to_payload(self) -> Dict[str, object]:
        return {
            "idm": self.idm,
            "employeeId": self.employee_id,
            "name": self.name,
            "mode": self.mode,
            "timestamp": self.timestamp,
            "isSyncedWithGas": self.synced,
        }

    @classmethod
    def from_payload(cls, payload: object) -> Optional["ScanEvent"]:
        if not isinstance(payload, dict):
            return None
        idm = payload.get("idm")
        mode = payload.get("mode")
        timestamp = payload.get("timestamp")
        if not isinstance(idm, str) or not isinstance(mode, str) or not isinstance(timestamp, str):
            return None
        employee_id = payload.get("employeeId")
        name = payload.get("name")
        return cls(
            idm=idm,
            employee_id=employee_id if isinstance(employee_id, str) else "unknown",
            name=name if isinstance(name, str) else "unknown",
            mode=mode,
            timestamp=timestamp,
            synced=payload.get("isSyncedWithGas") is True,
        )


class EventLog:
    # Each mutation rewrites the whole resident log to <logs_dir>/<UTC date>.json.
    # A failed write raises PersistenceError and memory is rolled back.
    def __init__(
        self,
        logs_dir: str,
        clock: Clock = utc_now,
        display_tz=timezone.utc,
        fsync_writes: bool = True,
    ) -> None:
        self.logs_dir = logs_dir
        self.display_tz = display_tz
        self.fsync_writes = fsync_writes
        self._clock = clock
        self._lock = threading.Lock()
        self._events: List[ScanEvent] = []
        self._day_key: Optional[str] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    @property
    def day_key(self) -> Optional[str]:
        with self._lock:
            return self._day_key

    def artifact_path(self, key: str) -> str:
        return os.path.join(self.logs_dir, f"{key}.json")

    def append(
        self,
        idm: str,
        identity: EmployeeIdentity,
        mode: Mode,
        captured_at: datetime,
    ) -> ScanEvent:
        event = ScanEvent(
            idm=idm,
            employee_id=identity.employee_id,
            name=identity.name,
            mode=mode.value,
            timestamp=format_timestamp(captured_at, self.display_tz),
        )
        key = day_key(captured_at)
        with self._lock:
            self._events.append(event)
            try:
                self._persist_locked(key)
            except PersistenceError:
                self._events.pop()
                raise
            count = len(self._events)
        logger.debug("event_log.append idm=%s mode=%s count=%d key=%s", idm, mode.value, count, key)
        return event

    def list_all(self) -> List[ScanEvent]:
        with self._lock:
            return list(self._events)

    def unsynced_count(self) -> int:
        with self._lock:
            return sum(1 for event in self._events if not event.synced)

    def mark_synced(self) -> List[ScanEvent]:
        # No unsynced events means no write at all.
        with self._lock:
            if all(event.synced for event in self._events):
                return []
            previous = self._events
            flipped: List[ScanEvent] = []
            updated: List[ScanEvent] = []
            for event in previous:
                if not event.synced:
                    event = replace(event, synced=True)
                    flipped.append(event)
                updated.append(event)
            self._events = updated
            try:
                self._persist_locked(day_key(self._clock()))
            except PersistenceError:
                self._events = previous
                raise
            return flipped

    def load_most_recent(self) -> Optional[str]:
        # Newest artifact only; older days are never merged in.
        key = self._latest_key()
        with self._lock:
            self._events = []
            self._day_key = None
        if key is None:
            logger.info("event_log.load_skipped logs_dir=%s reason=no_artifacts", self.logs_dir)
            return None

        path = self.artifact_path(key)
        try:
            with open(path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning("event_log.load_failed path=%s error=%s", path, exc)
            return None
        if not isinstance(payload, list):
            logger.warning("event_log.load_failed path=%s error=not_a_list", path)
            return None

        loaded: List[ScanEvent] = []
        for item in payload:
            event = ScanEvent.from_payload(item)
            if event is None:
                logger.warning("event_log.load_skipped_entry path=%s entry=%r", path, item)
                continue
            loaded.append(event)
        with self._lock:
            self._events = loaded
            self._day_key = key
        logger.info("event_log.loaded path=%s events=%d", path, len(loaded))
        return key

    def _latest_key(self) -> Optional[str]:
        try:
            names = os.listdir(self.logs_dir)
        except OSError:
            return None
        keys = sorted(name[:-5] for name in names if _ARTIFACT_RE.match(name))
        return keys[-1] if keys else None

    def _persist_locked(self, key: str) -> None:
        path = self.artifact_path(key)
        tmp_path = f"{path}.tmp"
        payload = [event.to_payload() for event in self._events]
        try:
            os.makedirs(self.logs_dir, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
                if self.fsync_writes:
                    handle.flush()
                    os.fsync(handle.fileno())
            os.replace(tmp_path, path)
            if self.fsync_writes:
                self._fsync_dir()
        except (OSError, TypeError, ValueError) as exc:
            logger.exception("event_log.persist_failed path=%s", path)
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                pass
            raise PersistenceError(path, exc) from exc
        self._day_key = key

    def _fsync_dir(self) -> None:
        # The rename is only durable once the directory entry is flushed.
        dfd = os.open(self.logs_dir, os.O_DIRECTORY)
        try:
            os.fsync(dfd)
        finally:
            os.close(dfd)
