"""
AsyncTaskTracker / TaskTracker — main clients.

The client performs the backend calls and turns each outcome into actions on
its `Store`. Failures never escape a user-level operation: auth and upload
failures go to the `alert` callback, data failures are logged, and local
state is left as it was.
"""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httpx

from task_tracker.auth import Auth
from task_tracker.config import Settings, get_settings
from task_tracker.errors import AuthError, DataError, NotAuthenticatedError, UploadError
from task_tracker.models.events import AuthEvent, MediaKind
from task_tracker.models.session import Session
from task_tracker.models.task import Task
from task_tracker.state import (
    AppState,
    DraftCleared,
    DraftEdited,
    EditCancelled,
    EditDraftChanged,
    EditStarted,
    MediaStaged,
    SessionChanged,
    TaskAdded,
    TaskDeleted,
    TasksLoaded,
    TaskUpdated,
    edit_changes,
    new_task_row,
)
from task_tracker.storage import StorageAPI, build_object_path
from task_tracker.store import Store
from task_tracker.tasks import TasksAPI
from task_tracker.transport.http import HttpClient

logger = logging.getLogger(__name__)

Alert = Callable[[str], None]

SIGN_UP_PENDING_MESSAGE = "Check your email for verification link!"


def _log_alert(message: str) -> None:
    logger.warning("%s", message)


class AsyncTaskTracker:
    """Async task tracker client (primary)."""

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        *,
        settings: Optional[Settings] = None,
        session_store=None,
        alert: Optional[Alert] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        url = supabase_url or self.settings.require_credential("supabase_url", "Supabase URL")
        key = anon_key or self.settings.require_credential("supabase_anon_key", "Supabase anon key")

        self.http = HttpClient(base_url=url, api_key=key, timeout=self.settings.http_timeout, transport=transport)
        self.auth = Auth(self.http, session_store=session_store,
                         refresh_margin_seconds=self.settings.refresh_margin_seconds)
        self.tasks = TasksAPI(self.http, table=self.settings.tasks_table)
        self.storage = StorageAPI(self.http, bucket=self.settings.uploads_bucket)
        self.store = Store()

        self._alert = alert or _log_alert
        self._unsubscribe_auth = self.auth.on_auth_state_change(self._on_auth_state_change)

    @property
    def state(self) -> AppState:
        return self.store.state

    async def __aenter__(self) -> "AsyncTaskTracker":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def start(self) -> Optional[Session]:
        """Restore any stored session. Tasks are loaded when a session is found."""
        return await self.auth.initialize()

    async def close(self) -> None:
        await self.auth.stop_auto_refresh()
        self._unsubscribe_auth()
        await self.http.close()

    async def _on_auth_state_change(self, event: str, session: Optional[Session]) -> None:
        previous_user = self.state.user_id
        self.store.dispatch(SessionChanged(event=event, session=session))
        if session is None:
            return
        if event != AuthEvent.TOKEN_REFRESHED or session.user_id != previous_user:
            await self.fetch_tasks()

    def _require_user(self) -> str:
        user_id = self.state.user_id
        if user_id is None:
            raise NotAuthenticatedError()
        return user_id

    # --- session ---

    async def sign_up(self, email: str, password: str) -> bool:
        try:
            session = await self.auth.sign_up(email, password)
        except AuthError as e:
            self._alert(e.message)
            return False
        if session is None:
            self._alert(SIGN_UP_PENDING_MESSAGE)
        return True

    async def sign_in(self, email: str, password: str) -> bool:
        try:
            await self.auth.sign_in(email, password)
        except AuthError as e:
            self._alert(e.message)
            return False
        return True

    async def sign_out(self) -> None:
        await self.auth.sign_out()

    # --- tasks ---

    async def fetch_tasks(self) -> list[Task]:
        """Reload the current user's tasks. On failure the local list stays as it was."""
        user_id = self._require_user()
        try:
            tasks = await self.tasks.list(user_id)
        except DataError as e:
            logger.error("Error fetching tasks: %s", e.message)
            return list(self.state.tasks)
        self.store.dispatch(TasksLoaded(user_id=user_id, tasks=tasks))
        return tasks

    def set_draft(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
    ) -> None:
        self.store.dispatch(DraftEdited(
            title=title, description=description, image_url=image_url, video_url=video_url,
        ))

    async def add_task(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        video_url: Optional[str] = None,
    ) -> Optional[Task]:
        """Submit the pending draft. Arguments left as None keep what the draft already holds."""
        self._require_user()
        self.set_draft(title, description, image_url, video_url)
        row = new_task_row(self.state)
        if row is None:
            logger.debug("Add rejected: title and description are required")
            return None

        task: Optional[Task] = None
        try:
            task = await self.tasks.create(row)
        except DataError as e:
            logger.error("Error adding task: %s", e.message)
        else:
            self.store.dispatch(TaskAdded(task=task))
        finally:
            self.store.dispatch(DraftCleared())
        return task

    def start_editing(self, task_id: int) -> None:
        self.store.dispatch(EditStarted(task_id=task_id))

    def edit_draft(self, title: Optional[str] = None, description: Optional[str] = None) -> None:
        self.store.dispatch(EditDraftChanged(title=title, description=description))

    def cancel_editing(self) -> None:
        self.store.dispatch(EditCancelled())

    async def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> bool:
        """Save the edit draft of `task_id`. Stays in edit mode unless the save succeeds."""
        self._require_user()
        if self.state.get_task(task_id) is None:
            logger.debug("Update rejected: no task %s", task_id)
            return False
        editing = self.state.editing
        if editing is None or editing.task_id != task_id:
            self.start_editing(task_id)
        if title is not None or description is not None:
            self.edit_draft(title, description)

        changes = edit_changes(self.state, task_id)
        if changes is None:
            logger.debug("Update of task %s rejected: title and description are required", task_id)
            return False
        try:
            await self.tasks.update(task_id, **changes)
        except DataError as e:
            logger.error("Error updating task: %s", e.message)
            return False
        self.store.dispatch(TaskUpdated(task_id=task_id, **changes))
        return True

    async def delete_task(self, task_id: int) -> bool:
        self._require_user()
        try:
            await self.tasks.delete(task_id)
        except DataError as e:
            logger.error("Error deleting task: %s", e.message)
            return False
        self.store.dispatch(TaskDeleted(task_id=task_id))
        return True

    # --- media ---

    async def upload_media(self, file: Union[str, Path], kind: str) -> Optional[str]:
        """Upload a local file and stage its public URL on the pending draft."""
        if kind not in MediaKind.ALL:
            raise ValueError(f"kind must be one of {MediaKind.ALL}, got {kind!r}")
        user_id = self._require_user()
        path = Path(file)
        object_path = build_object_path(user_id, path.name)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"

        try:
            data = _read_media(path)
            await self.storage.upload(object_path, data, content_type)
        except UploadError as e:
            self._alert(f"Upload failed: {e.message}")
            return None

        url = self.storage.get_public_url(object_path)
        self.store.dispatch(MediaStaged(kind=kind, url=url))
        return url


def _read_media(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise UploadError(f"{path}: {e.strerror or e}") from e


class TaskTracker:
    """Sync wrapper around AsyncTaskTracker. Runs the event loop internally."""

    def __init__(self, *args: Any, **kwargs: Any):
        self._loop = asyncio.new_event_loop()
        self._async = AsyncTaskTracker(*args, **kwargs)

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def state(self) -> AppState:
        return self._async.state

    @property
    def auth(self) -> Auth:
        return self._async.auth

    @property
    def store(self) -> Store:
        return self._async.store

    def __enter__(self) -> "TaskTracker":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def start(self) -> Optional[Session]:
        return self._run(self._async.start())

    def close(self) -> None:
        try:
            self._run(self._async.close())
        finally:
            self._loop.close()

    def sign_up(self, email: str, password: str) -> bool:
        return self._run(self._async.sign_up(email, password))

    def sign_in(self, email: str, password: str) -> bool:
        return self._run(self._async.sign_in(email, password))

    def sign_out(self) -> None:
        self._run(self._async.sign_out())

    def fetch_tasks(self) -> list[Task]:
        return self._run(self._async.fetch_tasks())

    def add_task(self, *args: Any, **kwargs: Any) -> Optional[Task]:
        return self._run(self._async.add_task(*args, **kwargs))

    def set_draft(self, **kwargs: Any) -> None:
        self._async.set_draft(**kwargs)

    def start_editing(self, task_id: int) -> None:
        self._async.start_editing(task_id)

    def edit_draft(self, title: Optional[str] = None, description: Optional[str] = None) -> None:
        self._async.edit_draft(title, description)

    def cancel_editing(self) -> None:
        self._async.cancel_editing()

    def update_task(self, task_id: int, title: Optional[str] = None, description: Optional[str] = None) -> bool:
        return self._run(self._async.update_task(task_id, title, description))

    def delete_task(self, task_id: int) -> bool:
        return self._run(self._async.delete_task(task_id))

    def upload_media(self, file: Union[str, Path], kind: str) -> Optional[str]:
        return self._run(self._async.upload_media(file, kind))
