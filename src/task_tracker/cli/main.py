"""
Task Tracker CLI — `tasktracker` command.

Commands:
  tasktracker auth signup|signin|signout|status
  tasktracker list                     Show your tasks
  tasktracker add TITLE DESCRIPTION    Add a task (--image / --video attach media)
  tasktracker edit ID                  Change a task's title or description
  tasktracker delete ID                Delete a task
  tasktracker app                      Interactive session
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install task-tracker[cli]")

from task_tracker import __version__
from task_tracker.client import AsyncTaskTracker
from task_tracker.config import get_settings
from task_tracker.errors import ConfigError
from task_tracker.logging_setup import setup_logging
from task_tracker.persistence import FileSessionStore

console = Console()


def _alert(message: str) -> None:
    console.print(message, style="bold red", markup=False)


def _get_client() -> AsyncTaskTracker:
    settings = get_settings()
    try:
        return AsyncTaskTracker(
            settings=settings,
            session_store=FileSessionStore(settings.session_file),
            alert=_alert,
        )
    except ConfigError as e:
        console.print(e.message, style="red", markup=False)
        raise SystemExit(1)


async def _require_session(client: AsyncTaskTracker) -> None:
    """Restore the saved session (which loads tasks) or exit."""
    if await client.start() is None:
        console.print("[red]Not signed in. Run `tasktracker auth signin` first.[/red]")
        raise SystemExit(1)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging on stderr.")
def main(verbose: bool):
    """Task Tracker CLI — your tasks, kept on your hosted backend."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


# Register subcommands from separate modules
from task_tracker.cli.auth import auth
from task_tracker.cli.tasks import list_cmd, add_cmd, edit_cmd, delete_cmd
from task_tracker.cli.app import app_cmd

main.add_command(auth)
main.add_command(list_cmd)
main.add_command(add_cmd)
main.add_command(edit_cmd)
main.add_command(delete_cmd)
main.add_command(app_cmd)


if __name__ == "__main__":
    main()
