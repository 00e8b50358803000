"""CLI: tasktracker auth signup|signin|signout|status"""

import click
from rich.console import Console

from task_tracker.config import get_settings
from task_tracker.persistence import FileSessionStore

console = Console()


def _get_client():
    from task_tracker.cli.main import _get_client
    return _get_client()


def _run(coro):
    from task_tracker.cli.main import _run
    return _run(coro)


@click.group()
def auth():
    """Authentication commands."""


@auth.command("signup")
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
def auth_signup(email: str, password: str):
    """Create an account (email verification may be required)."""

    async def _signup():
        async with _get_client() as client:
            with console.status("Signing up..."):
                ok = await client.sign_up(email, password)
            if not ok:
                raise SystemExit(1)
            if client.state.session is not None:
                console.print(f"[green]Signed up and signed in as {email}.[/green]")

    _run(_signup())


@auth.command("signin")
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
def auth_signin(email: str, password: str):
    """Sign in with email and password."""

    async def _signin():
        async with _get_client() as client:
            with console.status("Signing in..."):
                ok = await client.sign_in(email, password)
            if not ok:
                raise SystemExit(1)
            console.print(f"[green]Signed in as {email}[/green] ({len(client.state.tasks)} tasks)")

    _run(_signin())


@auth.command("signout")
def auth_signout():
    """Sign out and forget the saved session."""

    async def _signout():
        async with _get_client() as client:
            await client.start()
            await client.sign_out()
        console.print("[green]Signed out.[/green]")

    _run(_signout())


@auth.command("status")
def auth_status():
    """Show the saved session."""
    session = FileSessionStore(get_settings().session_file).load()
    if session is None:
        console.print("[yellow]Not signed in. Run `tasktracker auth signin`.[/yellow]")
    elif session.is_expired():
        console.print(f"[yellow]Session for {session.user.email or session.user_id} has expired "
                      f"(it is refreshed on next use).[/yellow]")
    else:
        console.print(f"[green]Signed in[/green] as {session.user.email or 'unknown'} (ID: {session.user_id})")
