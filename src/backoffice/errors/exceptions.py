"""Custom exception classes for the back-office service."""


class BackofficeError(Exception):
    """Base exception for the back-office service."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(BackofficeError):
    """Request validation failure."""

    def __init__(self, message: str, details=None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(BackofficeError):
    """Resource not found."""

    def __init__(self, resource: str, resource_id):
        super().__init__(
            "NOT_FOUND",
            f"{resource} '{resource_id}' not found",
            status_code=404,
        )


class ConflictError(BackofficeError):
    """Resource state conflict."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


class AlertStateError(ConflictError):
    """An alert transition was requested from a state that does not allow it."""

    def __init__(self, alert_id: int, state: str, action: str):
        super().__init__(f"Alert {alert_id} is {state}; cannot {action}")
        self.code = "ALERT_STATE"


class ApiRequestError(BackofficeError):
    """The dashboard API could not be reached or answered with an error."""

    def __init__(self, method: str, path: str, message: str, status: int | None = None):
        super().__init__(
            "UPSTREAM_ERROR",
            f"{method} {path} failed: {message}",
            details={"upstream_status": status} if status is not None else None,
            status_code=502,
        )
        self.upstream_status = status
