"""CLI: tasktracker list|add|edit|delete"""

import json
from typing import Optional

import click
from rich.console import Console

from task_tracker.cli.render import render_tasks
from task_tracker.models.events import MediaKind

console = Console()


def _get_client():
    from task_tracker.cli.main import _get_client
    return _get_client()


def _require_session(client):
    from task_tracker.cli.main import _require_session
    return _require_session(client)


def _run(coro):
    from task_tracker.cli.main import _run
    return _run(coro)


@click.command("list")
@click.option("--json-output", "--json", is_flag=True)
def list_cmd(json_output: bool):
    """List your tasks."""

    async def _list():
        async with _get_client() as client:
            await _require_session(client)
            if json_output:
                click.echo(json.dumps([t.model_dump() for t in client.state.tasks], indent=2))
                return
            render_tasks(console, client.state)

    _run(_list())


@click.command("add")
@click.argument("title")
@click.argument("description")
@click.option("--image", "image", type=click.Path(dir_okay=False), default=None, help="Image file to attach.")
@click.option("--video", "video", type=click.Path(dir_okay=False), default=None, help="Video file to attach.")
def add_cmd(title: str, description: str, image: Optional[str], video: Optional[str]):
    """Add a task."""

    async def _add():
        async with _get_client() as client:
            await _require_session(client)
            for kind, path in ((MediaKind.IMAGE, image), (MediaKind.VIDEO, video)):
                if path is None:
                    continue
                with console.status(f"Uploading {kind}..."):
                    if await client.upload_media(path, kind) is None:
                        raise SystemExit(1)
            with console.status("Adding task..."):
                task = await client.add_task(title, description)
            if task is None:
                console.print("[red]Task not added.[/red]")
                raise SystemExit(1)
            console.print(f"[green]Task {task.id} added.[/green]")

    _run(_add())


@click.command("edit")
@click.argument("task_id", type=int)
@click.option("--title", default=None)
@click.option("--description", default=None)
def edit_cmd(task_id: int, title: Optional[str], description: Optional[str]):
    """Change a task's title and/or description."""

    async def _edit():
        async with _get_client() as client:
            await _require_session(client)
            if client.state.get_task(task_id) is None:
                console.print(f"[red]No task {task_id}.[/red]")
                raise SystemExit(1)
            with console.status("Saving..."):
                ok = await client.update_task(task_id, title, description)
            if not ok:
                console.print(f"[red]Task {task_id} not updated.[/red]")
                raise SystemExit(1)
            console.print(f"[green]Task {task_id} updated.[/green]")

    _run(_edit())


@click.command("delete")
@click.argument("task_id", type=int)
def delete_cmd(task_id: int):
    """Delete a task."""

    async def _delete():
        async with _get_client() as client:
            await _require_session(client)
            with console.status("Deleting..."):
                ok = await client.delete_task(task_id)
            if not ok:
                console.print(f"[red]Task {task_id} not deleted.[/red]")
                raise SystemExit(1)
            console.print(f"[green]Task {task_id} deleted.[/green]")

    _run(_delete())
