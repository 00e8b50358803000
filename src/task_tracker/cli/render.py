"""Console views of AppState: the welcome screen and the task list."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from task_tracker.state import AppState

APP_TITLE = "My Task Tracker"


def render_welcome(console: Console) -> None:
    console.print("[bold blue]WELCOME![/bold blue]")
    console.print("[dim]Sign in or sign up to see your tasks.[/dim]")


def _media(image_url: Optional[str], video_url: Optional[str]) -> str:
    parts = []
    if image_url:
        parts.append(f"image: {image_url}")
    if video_url:
        parts.append(f"video: {video_url}")
    return "\n".join(parts)


def task_table(state: AppState) -> Table:
    table = Table(title=APP_TITLE, show_lines=True)
    table.add_column("ID", style="bold", justify="right")
    table.add_column("Title")
    table.add_column("Description")
    table.add_column("Media", overflow="fold")
    editing = state.editing
    for task in state.tasks:
        if editing is not None and editing.task_id == task.id:
            table.add_row(
                str(task.id),
                f"[yellow]{escape(editing.title)}[/yellow]",
                f"[yellow]{escape(editing.description)}[/yellow]",
                "[yellow](editing)[/yellow]",
            )
        else:
            table.add_row(
                str(task.id),
                escape(task.title),
                escape(task.description),
                escape(_media(task.image_url, task.video_url)),
            )
    return table


def render_tasks(console: Console, state: AppState) -> None:
    if not state.tasks:
        console.print(f"[bold blue]{APP_TITLE}[/bold blue]")
        console.print("[dim]No tasks yet...[/dim]")
        return
    console.print(task_table(state))


def render_draft(console: Console, state: AppState) -> None:
    """Media staged for the next task, if any."""
    staged = _media(state.draft.image_url, state.draft.video_url)
    if staged:
        console.print(f"[dim]Staged for next task:\n{escape(staged)}[/dim]")
