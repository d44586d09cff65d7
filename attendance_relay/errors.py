class ValidationError(Exception):
    message = "Invalid request."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class InvalidIdmError(ValidationError):
    message = "Invalid IDm received."


class InvalidModeError(ValidationError):
    message = "Invalid mode."


class PersistenceError(Exception):
    def __init__(self, path: str, cause: Exception) -> None:
        super().__init__(f"failed to persist {path}: {cause}")
        self.path = path
        self.cause = cause
