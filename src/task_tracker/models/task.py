"""
Task models — rows of the `tasks` table and the local drafts that feed them.
"""

from typing import Optional

from pydantic import BaseModel


class Task(BaseModel):
    """A row of the tasks table. `id` is assigned by the server."""
    id: int
    title: str
    description: str
    user_id: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[str] = None


class TaskDraft(BaseModel):
    """Pending new task (the add form). Empty strings mean unset."""
    title: str = ""
    description: str = ""
    image_url: str = ""
    video_url: str = ""

    model_config = {"frozen": True}


class EditDraft(BaseModel):
    """Unsaved edit of one existing task."""
    task_id: int
    title: str = ""
    description: str = ""

    model_config = {"frozen": True}
