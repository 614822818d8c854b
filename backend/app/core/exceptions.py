class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when a timetable cannot be produced for the submitted inputs.

    ``kind`` names the scheduling outcome (e.g. ``cyclic_prerequisite``) and is
    echoed to clients as ``details["error"]``.
    """
    def __init__(self, message: str, kind: str | None = None, details: dict = None):
        self.kind = kind
        payload = dict(details or {})
        if kind is not None:
            payload["error"] = kind
        super().__init__(message, status_code=400, details=payload)
