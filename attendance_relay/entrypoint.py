import uvicorn

from attendance_relay.config import settings


def main() -> None:
    uvicorn.run(
        "attendance_relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=int(settings.keep_alive_seconds),
    )


if __name__ == "__main__":
    main()
