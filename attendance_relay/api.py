from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from attendance_relay.event_log import EventLog
from attendance_relay.ingestion import IngestionService, StatusView
from attendance_relay.mode_controller import ModeController
from attendance_relay.sync_gate import SyncGate

NO_UNSYNCED_MESSAGE = "No unsynced logs to sync."


def build_router(
    ingestion: IngestionService,
    modes: ModeController,
    sync_gate: SyncGate,
    status: StatusView,
    event_log: EventLog,
) -> APIRouter:
    router = APIRouter()

    class IdmRequest(BaseModel):
        idm: Optional[str] = None

    class ModeRequest(BaseModel):
        mode: Optional[str] = None

    @router.get("/health")
    def health() -> dict:
        return {
            "status": "ok",
            "mode": modes.get_mode().value,
            "dayKey": event_log.day_key,
            "events": len(event_log),
            "unsynced": sync_gate.pending(),
        }

    @router.get("/api/status")
    def get_status() -> dict:
        snapshot = status.snapshot()
        return {
            "mode": snapshot.mode.value,
            "logs": [event.to_payload() for event in snapshot.events],
        }

    @router.get("/api/gas-polling")
    def gas_polling() -> dict:
        drained = sync_gate.drain_unsynced()
        if not drained:
            return {"success": True, "message": NO_UNSYNCED_MESSAGE}
        return {
            "success": True,
            "syncedLogs": [event.to_payload() for event in drained],
        }

    # A non-string or empty idm (e.g. 123 or "") is answered with the 400
    # "Invalid IDm received." payload, same as a missing one.
    @router.post("/api/idm")
    def receive_idm(payload: Optional[IdmRequest] = None) -> dict:
        ingestion.ingest(payload.idm if payload is not None else None)
        return {"success": True, "message": "IDm received and logged."}

    @router.post("/api/mode")
    def change_mode(payload: Optional[ModeRequest] = None) -> dict:
        mode = modes.set_mode(payload.mode if payload is not None else None)
        return {"success": True, "newMode": mode.value}

    return router
