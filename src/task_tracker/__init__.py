"""
task-tracker — personal task tracker on a hosted backend.

Sign in, then create, edit, delete and attach media to your own tasks.
Auth, rows and files live in a Supabase-compatible backend-as-a-service.
"""

from task_tracker.client import TaskTracker, AsyncTaskTracker
from task_tracker.auth import Auth
from task_tracker.tasks import TasksAPI
from task_tracker.storage import StorageAPI
from task_tracker.store import Store
from task_tracker.state import AppState, AuthStatus, reduce
from task_tracker.errors import (
    TaskTrackerError,
    BackendError,
    AuthError,
    NotAuthenticatedError,
    DataError,
    UploadError,
    ConfigError,
)
from task_tracker.models.events import AuthEvent, MediaKind
from task_tracker.models.session import Session, User
from task_tracker.models.task import Task

__version__ = "0.1.0"
__all__ = [
    "TaskTracker",
    "AsyncTaskTracker",
    "Auth",
    "TasksAPI",
    "StorageAPI",
    "Store",
    "AppState",
    "AuthStatus",
    "reduce",
    "TaskTrackerError",
    "BackendError",
    "AuthError",
    "NotAuthenticatedError",
    "DataError",
    "UploadError",
    "ConfigError",
    "AuthEvent",
    "MediaKind",
    "Session",
    "User",
    "Task",
]
