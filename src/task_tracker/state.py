"""
Application state and the pure transition function.

Nothing here performs I/O. `AsyncTaskTracker` turns backend outcomes into
actions; `reduce` folds each action into a new `AppState`.

Cross-user isolation lives in the reducer: a session change to a different
user (or to nobody) starts from an empty state, and task rows for any user
other than the current one are dropped.
"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator

from task_tracker.models.events import MediaKind
from task_tracker.models.session import Session
from task_tracker.models.task import EditDraft, Task, TaskDraft


class AuthStatus:
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class AppState(BaseModel):
    session: Optional[Session] = None
    tasks: tuple[Task, ...] = ()
    draft: TaskDraft = TaskDraft()
    editing: Optional[EditDraft] = None

    model_config = {"frozen": True}

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None

    @property
    def status(self) -> str:
        return AuthStatus.AUTHENTICATED if self.session else AuthStatus.UNAUTHENTICATED

    def get_task(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


# --- actions ---

class Action(BaseModel):
    model_config = {"frozen": True}


class SessionChanged(Action):
    """Session set or cleared, locally or by an auth push event."""
    event: str
    session: Optional[Session] = None


class TasksLoaded(Action):
    user_id: str
    tasks: tuple[Task, ...]


class TaskAdded(Action):
    task: Task


class TaskUpdated(Action):
    task_id: int
    title: str
    description: str


class TaskDeleted(Action):
    task_id: int


class DraftEdited(Action):
    """Set fields of the pending new task. None leaves a field as is."""
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None


class DraftCleared(Action):
    pass


class MediaStaged(Action):
    kind: str
    url: str

    @field_validator("kind")
    @classmethod
    def _known_kind(cls, v: str) -> str:
        if v not in MediaKind.ALL:
            raise ValueError(f"kind must be one of {MediaKind.ALL}, got {v!r}")
        return v


class EditStarted(Action):
    task_id: int


class EditDraftChanged(Action):
    title: Optional[str] = None
    description: Optional[str] = None


class EditCancelled(Action):
    pass


# --- validation ---

def is_blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def new_task_row(state: AppState) -> Optional[dict[str, Any]]:
    """Insert payload for the pending draft, or None if it must not be submitted."""
    if state.user_id is None:
        return None
    draft = state.draft
    if is_blank(draft.title) or is_blank(draft.description):
        return None
    return {
        "title": draft.title,
        "description": draft.description,
        "user_id": state.user_id,
        "image_url": draft.image_url or None,
        "video_url": draft.video_url or None,
    }


def edit_changes(state: AppState, task_id: int) -> Optional[dict[str, str]]:
    """Update payload for the edit draft of `task_id`, or None if it must not be saved."""
    editing = state.editing
    if editing is None or editing.task_id != task_id:
        return None
    if is_blank(editing.title) or is_blank(editing.description):
        return None
    return {"title": editing.title, "description": editing.description}


def _only_set(**fields: Optional[str]) -> dict[str, str]:
    return {k: v for k, v in fields.items() if v is not None}


# --- reducer ---

def reduce(state: AppState, action: Action) -> AppState:
    if isinstance(action, SessionChanged):
        new_user = action.session.user_id if action.session else None
        if new_user != state.user_id:
            return AppState(session=action.session)
        return state.model_copy(update={"session": action.session})

    if isinstance(action, TasksLoaded):
        if action.user_id != state.user_id:
            return state
        return state.model_copy(update={"tasks": action.tasks})

    if isinstance(action, TaskAdded):
        if action.task.user_id != state.user_id:
            return state
        return state.model_copy(update={"tasks": state.tasks + (action.task,)})

    if isinstance(action, TaskUpdated):
        tasks = tuple(
            t.model_copy(update={"title": action.title, "description": action.description})
            if t.id == action.task_id else t
            for t in state.tasks
        )
        editing = state.editing
        if editing is not None and editing.task_id == action.task_id:
            editing = None
        return state.model_copy(update={"tasks": tasks, "editing": editing})

    if isinstance(action, TaskDeleted):
        tasks = tuple(t for t in state.tasks if t.id != action.task_id)
        editing = state.editing
        if editing is not None and editing.task_id == action.task_id:
            editing = None
        return state.model_copy(update={"tasks": tasks, "editing": editing})

    if isinstance(action, DraftEdited):
        changes = _only_set(
            title=action.title, description=action.description,
            image_url=action.image_url, video_url=action.video_url,
        )
        return state.model_copy(update={"draft": state.draft.model_copy(update=changes)})

    if isinstance(action, DraftCleared):
        return state.model_copy(update={"draft": TaskDraft()})

    if isinstance(action, MediaStaged):
        field = "image_url" if action.kind == MediaKind.IMAGE else "video_url"
        return state.model_copy(update={"draft": state.draft.model_copy(update={field: action.url})})

    if isinstance(action, EditStarted):
        task = state.get_task(action.task_id)
        if task is None:
            return state
        editing = EditDraft(task_id=task.id, title=task.title, description=task.description)
        return state.model_copy(update={"editing": editing})

    if isinstance(action, EditDraftChanged):
        if state.editing is None:
            return state
        changes = _only_set(title=action.title, description=action.description)
        return state.model_copy(update={"editing": state.editing.model_copy(update=changes)})

    if isinstance(action, EditCancelled):
        return state.model_copy(update={"editing": None})

    raise TypeError(f"Unknown action: {action!r}")
