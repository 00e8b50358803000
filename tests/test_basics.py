"""Basic unit tests for the task-tracker package."""

import logging

from task_tracker import (
    AsyncTaskTracker,
    TaskTracker,
    TaskTrackerError,
    BackendError,
    AuthError,
    NotAuthenticatedError,
    DataError,
    UploadError,
    ConfigError,
    AuthEvent,
    MediaKind,
    __version__,
)
from task_tracker.logging_setup import _ThirdPartyFilter


def test_version():
    assert __version__ == "0.1.0"


def test_public_exports():
    assert TaskTracker is not None
    assert AsyncTaskTracker is not None


def test_error_hierarchy():
    for cls in (BackendError, AuthError, DataError, UploadError, ConfigError):
        assert issubclass(cls, TaskTrackerError)
    assert issubclass(NotAuthenticatedError, AuthError)


def test_error_attributes():
    err = TaskTrackerError(code="test_code", message="something broke")
    assert err.code == "test_code"
    assert err.message == "something broke"
    assert str(err) == "something broke"
    assert err.details is None

    backend = BackendError("Invalid login credentials", status=400)
    assert backend.code == "http_error"
    assert backend.status == 400
    assert backend.details == {"status": 400}

    data = DataError("bad row", details={"id": 3})
    assert data.code == "data_error"
    assert data.details == {"id": 3}

    assert NotAuthenticatedError().code == "not_authenticated"


def test_event_constants():
    assert AuthEvent.SIGNED_IN == "SIGNED_IN"
    assert AuthEvent.TOKEN_REFRESHED == "TOKEN_REFRESHED"
    assert MediaKind.ALL == ("image", "video")


def test_log_filter_quiets_third_party_below_warning():
    f = _ThirdPartyFilter()

    def record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert f.filter(record("task_tracker.client", logging.DEBUG))
    assert not f.filter(record("httpx", logging.INFO))
    assert f.filter(record("httpx", logging.WARNING))
