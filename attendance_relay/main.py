import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from attendance_relay.api import build_router
from attendance_relay.clock import Clock, resolve_tz, utc_now
from attendance_relay.config import Settings, settings as default_settings
from attendance_relay.errors import InvalidIdmError, InvalidModeError, PersistenceError, ValidationError
from attendance_relay.event_log import EventLog
from attendance_relay.identity_lookup import IdentityLookup
from attendance_relay.ingestion import IngestionService, StatusView
from attendance_relay.mode_controller import ModeController
from attendance_relay.sync_gate import SyncGate

logger = logging.getLogger(__name__)

_VALIDATION_MESSAGES = {
    "/api/idm": InvalidIdmError.message,
    "/api/mode": InvalidModeError.message,
}


def create_app(settings: Optional[Settings] = None, clock: Clock = utc_now) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title="Attendance Relay")

    identity = IdentityLookup(settings.employees_path)
    modes = ModeController.from_label(settings.default_mode)
    event_log = EventLog(
        logs_dir=settings.logs_dir,
        clock=clock,
        display_tz=resolve_tz(settings.display_tz),
        fsync_writes=settings.fsync_writes,
    )
    event_log.load_most_recent()
    sync_gate = SyncGate(event_log)
    ingestion = IngestionService(identity, modes, event_log, clock=clock)
    status = StatusView(modes, event_log)

    @app.exception_handler(ValidationError)
    async def _validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, _exc: RequestValidationError) -> JSONResponse:
        message = _VALIDATION_MESSAGES.get(request.url.path, ValidationError.message)
        return JSONResponse(status_code=400, content={"success": False, "message": message})

    @app.exception_handler(PersistenceError)
    async def _persistence_error(_request: Request, _exc: PersistenceError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to persist log."},
        )

    app.include_router(build_router(ingestion, modes, sync_gate, status, event_log))

    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.info("static.disabled path=%s", settings.static_dir)

    logger.info(
        "app.ready mode=%s events=%d identities=%d logs_dir=%s",
        modes.get_mode().value,
        len(event_log),
        len(identity),
        settings.logs_dir,
    )
    return app


app = create_app()
