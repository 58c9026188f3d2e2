# exceptions.py


class ReportTrackerError(Exception):
    """Base exception for business rule violations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReportTrackerError):
    """Raised when input data is invalid."""

    status_code = 400


class AuthenticationError(ReportTrackerError):
    """Raised for missing, invalid, expired or wrong-kind credentials."""

    status_code = 401


class NotFoundError(ReportTrackerError):
    status_code = 404


class ConflictError(ReportTrackerError):
    """Raised when a write would break a uniqueness rule."""

    status_code = 409
