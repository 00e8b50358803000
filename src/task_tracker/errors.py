"""
Task tracker error types.

API layers raise these; the client shell decides whether a failure is
alerted to the user or only logged.
"""

from typing import Any, Optional


class TaskTrackerError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class BackendError(TaskTrackerError):
    """Non-2xx response from the hosted backend."""

    def __init__(self, message: str, status: int, details: Optional[dict[str, Any]] = None):
        super().__init__("http_error", message, {"status": status, **(details or {})})
        self.status = status


class AuthError(TaskTrackerError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class NotAuthenticatedError(AuthError):
    def __init__(self, message: str = "Not signed in."):
        super().__init__(message, code="not_authenticated")


class DataError(TaskTrackerError):
    def __init__(self, message: str, code: str = "data_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class UploadError(TaskTrackerError):
    def __init__(self, message: str, code: str = "upload_error"):
        super().__init__(code, message)


class ConfigError(TaskTrackerError):
    def __init__(self, message: str):
        super().__init__("config_error", message)
