"""CLI: tasktracker app — interactive session with the welcome and task screens."""

import click
from rich.console import Console

from task_tracker.cli.render import render_draft, render_tasks, render_welcome
from task_tracker.client import AsyncTaskTracker
from task_tracker.models.events import MediaKind

console = Console()

TASK_COMMANDS = "add | edit ID | delete ID | image PATH | video PATH | refresh | signout | quit"


def _get_client():
    from task_tracker.cli.main import _get_client
    return _get_client()


def _run(coro):
    from task_tracker.cli.main import _run
    return _run(coro)


def _parse_id(arg: str):
    try:
        return int(arg)
    except ValueError:
        console.print(f"[red]Not a task id: {arg!r}[/red]")
        return None


async def _auth_screen(client: AsyncTaskTracker) -> bool:
    """Returns False when the user quits."""
    render_welcome(console)
    choice = click.prompt("Sign [in], sign [up] or [quit]", type=click.Choice(["in", "up", "quit"]), default="in")
    if choice == "quit":
        return False
    email = click.prompt("Email")
    password = click.prompt("Password", hide_input=True)
    if choice == "in":
        with console.status("Signing in..."):
            await client.sign_in(email, password)
    else:
        with console.status("Signing up..."):
            await client.sign_up(email, password)
    return True


async def _edit(client: AsyncTaskTracker, task_id: int) -> None:
    client.start_editing(task_id)
    editing = client.state.editing
    if editing is None or editing.task_id != task_id:
        console.print(f"[red]No task {task_id}.[/red]")
        return
    title = click.prompt("Title", default=editing.title)
    description = click.prompt("Description", default=editing.description)
    client.edit_draft(title, description)
    render_tasks(console, client.state)
    if not click.confirm("Save?", default=True):
        client.cancel_editing()
        return
    if not await client.update_task(task_id):
        console.print("[red]Not saved. Title and description are required; try again or cancel.[/red]")
        if not click.confirm("Keep editing?", default=False):
            client.cancel_editing()


async def _tasks_screen(client: AsyncTaskTracker) -> bool:
    """Returns False when the user quits."""
    client.auth.start_auto_refresh()
    render_tasks(console, client.state)
    render_draft(console, client.state)
    line = click.prompt(f"[{TASK_COMMANDS}]", prompt_suffix="\n> ")
    cmd, _, arg = line.strip().partition(" ")
    arg = arg.strip()

    if cmd in ("quit", "exit"):
        return False
    # The prompt blocks the loop, so the background refresh may have missed its slot.
    await client.auth.ensure_fresh_session()
    if cmd == "add":
        title = click.prompt("Title", default="", show_default=False)
        description = click.prompt("Description", default="", show_default=False)
        with console.status("Adding task..."):
            task = await client.add_task(title, description)
        if task is None:
            console.print("[yellow]Task not added.[/yellow]")
    elif cmd == "edit":
        task_id = _parse_id(arg)
        if task_id is not None:
            await _edit(client, task_id)
    elif cmd == "delete":
        task_id = _parse_id(arg)
        if task_id is not None:
            with console.status("Deleting..."):
                await client.delete_task(task_id)
    elif cmd in MediaKind.ALL:
        if not arg:
            console.print(f"[red]Usage: {cmd} PATH[/red]")
        else:
            with console.status(f"Uploading {cmd}..."):
                await client.upload_media(arg, cmd)
    elif cmd == "refresh":
        await client.fetch_tasks()
    elif cmd == "signout":
        await client.sign_out()
    else:
        console.print(f"[red]Unknown command: {cmd!r}[/red]")
    return True


@click.command("app")
def app_cmd():
    """Interactive task tracker."""

    async def _app():
        async with _get_client() as client:
            await client.start()
            try:
                while True:
                    if client.state.session is None:
                        keep_going = await _auth_screen(client)
                    else:
                        keep_going = await _tasks_screen(client)
                    if not keep_going:
                        break
            except (KeyboardInterrupt, EOFError, click.Abort):
                pass

    _run(_app())
