"""
Tasks table REST API.

Rows are filtered by `user_id` on the server; ordering is by id ascending,
which is creation order.
"""

from typing import Any

from pydantic import ValidationError

from task_tracker.errors import BackendError, DataError
from task_tracker.models.task import Task
from task_tracker.transport.http import HttpClient

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class TasksAPI:
    def __init__(self, http: HttpClient, table: str = "tasks"):
        self._http = http
        self._path = f"/rest/v1/{table}"

    async def list(self, user_id: str) -> list[Task]:
        """All tasks owned by `user_id`, oldest first."""
        try:
            rows = await self._http.get(self._path, params={
                "select": "*",
                "user_id": f"eq.{user_id}",
                "order": "id.asc",
            })
            return [Task.model_validate(row) for row in rows or []]
        except BackendError as e:
            raise DataError(e.message, details=e.details) from e
        except ValidationError as e:
            raise DataError(f"Malformed task row: {e}") from e

    async def create(self, row: dict[str, Any]) -> Task:
        """Insert one row and return it as stored, with its server-assigned id."""
        try:
            rows = await self._http.post(self._path, [row], params={"select": "*"}, headers=RETURN_REPRESENTATION)
        except BackendError as e:
            raise DataError(e.message, details=e.details) from e
        if not rows:
            raise DataError("Insert returned no row")
        try:
            return Task.model_validate(rows[0])
        except ValidationError as e:
            raise DataError(f"Malformed task row: {e}") from e

    async def update(self, task_id: int, title: str, description: str) -> None:
        try:
            await self._http.patch(
                self._path, {"title": title, "description": description}, params={"id": f"eq.{task_id}"},
            )
        except BackendError as e:
            raise DataError(e.message, details=e.details) from e

    async def delete(self, task_id: int) -> None:
        try:
            await self._http.delete(self._path, params={"id": f"eq.{task_id}"})
        except BackendError as e:
            raise DataError(e.message, details=e.details) from e
