from typing import Optional


class AppError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Malformed or missing request fields. Raised before any external call."""

    status_code = 400


class UpstreamError(AppError):
    """The payment provider or the database rejected the call."""

    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message, status_code)
        self.code = code


class ConfigurationError(AppError):
    """A required secret or credential is missing."""

    status_code = 500
