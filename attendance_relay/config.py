import os

from dotenv import load_dotenv

load_dotenv(".env", override=False)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self) -> None:
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = _get_int("PORT", 3001)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self.keep_alive_seconds = _get_float("KEEP_ALIVE_SECONDS", 120.0)
        self.logs_dir = os.getenv("LOGS_DIR", "logs")
        self.employees_path = os.getenv("EMPLOYEES_PATH", "data/employees.json")
        self.static_dir = os.getenv("STATIC_DIR", "public")
        self.default_mode = os.getenv("DEFAULT_MODE", "出勤").strip()
        self.display_tz = os.getenv("DISPLAY_TZ", "Asia/Tokyo").strip() or "Asia/Tokyo"
        self.fsync_writes = _get_bool("FSYNC_WRITES", True)


settings = Settings()
