import logging
import threading
from enum import Enum

from attendance_relay.errors import InvalidModeError

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    CHECK_IN = "出勤"
    CHECK_OUT = "退勤"

    @classmethod
    def parse(cls, raw: object) -> "Mode":
        if isinstance(raw, str):
            for mode in cls:
                if mode.value == raw:
                    return mode
        raise InvalidModeError()


class ModeController:
    def __init__(self, default: Mode = Mode.CHECK_IN) -> None:
        self._lock = threading.Lock()
        self._mode = default

    @classmethod
    def from_label(cls, label: str) -> "ModeController":
        try:
            mode = Mode.parse(label)
        except InvalidModeError:
            logger.warning("mode.invalid_default label=%s fallback=%s", label, Mode.CHECK_IN.value)
            mode = Mode.CHECK_IN
        return cls(default=mode)

    def get_mode(self) -> Mode:
        with self._lock:
            return self._mode

    def set_mode(self, requested: object) -> Mode:
        # Labels must match exactly; no trimming or case folding.
        mode = Mode.parse(requested)
        with self._lock:
            self._mode = mode
        logger.info("mode.changed mode=%s", mode.value)
        return mode
