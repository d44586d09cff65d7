import json
from datetime import datetime, timedelta, timezone

import pytest

from attendance_relay.clock import resolve_tz
from attendance_relay.event_log import EventLog
from attendance_relay.identity_lookup import IdentityLookup
from attendance_relay.ingestion import IngestionService, StatusView
from attendance_relay.mode_controller import ModeController
from attendance_relay.sync_gate import SyncGate


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


EMPLOYEES = {
    "0123456789ABCDEF": {"employeeId": "E001", "name": "佐藤"},
    "FEDCBA9876543210": {"employeeId": "E002", "name": "Suzuki"},
}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 10, 19, 1, 2, 3, tzinfo=timezone.utc))


@pytest.fixture
def logs_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture
def employees_path(tmp_path):
    path = tmp_path / "employees.json"
    path.write_text(json.dumps(EMPLOYEES, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def identity(employees_path) -> IdentityLookup:
    return IdentityLookup(str(employees_path))


@pytest.fixture
def event_log(logs_dir, clock) -> EventLog:
    return EventLog(
        logs_dir=str(logs_dir),
        clock=clock,
        display_tz=resolve_tz("Asia/Tokyo"),
        fsync_writes=False,
    )


@pytest.fixture
def modes() -> ModeController:
    return ModeController()


@pytest.fixture
def sync_gate(event_log) -> SyncGate:
    return SyncGate(event_log)


@pytest.fixture
def ingestion(identity, modes, event_log, clock) -> IngestionService:
    return IngestionService(identity, modes, event_log, clock=clock)


@pytest.fixture
def status(modes, event_log) -> StatusView:
    return StatusView(modes, event_log)
