"""Account commands for futuresim CLI.

Handles registration, login, logout and showing the current user.
"""

import click
from rich.panel import Panel

from futuresim.cli.common import (
    clear_local_session,
    console,
    fail,
    get_account_service,
    get_settings,
    load_local_token,
    require_user,
    save_local_session,
)
from futuresim.config import get_config_path, write_template_config
from futuresim.errors import AuthError


@click.command()
@click.argument("username")
@click.password_option(help="Password for the new account.")
def register(username: str, password: str) -> None:
    """Create a new trading account.

    The account starts with the configured virtual balance
    (1,000,000 by default), no holdings and no trades.

    \b
    Examples:
      futuresim register alice
    """
    if not get_config_path().exists():
        write_template_config()

    settings = get_settings()
    service = get_account_service(settings)

    try:
        account = service.register(username, password)
    except AuthError as e:
        fail(e.message, title="Registration Failed")

    console.print(Panel(
        f"[green]Account created for [bold]{username.strip()}[/bold].[/green]\n\n"
        f"Starting balance: {account.balance:,.2f}\n\n"
        f"Run [cyan]futuresim login {username.strip()}[/cyan] to start trading.",
        title="[bold green]Registered[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("username")
@click.option("--password", prompt=True, hide_input=True, help="Account password.")
def login(username: str, password: str) -> None:
    """Log in and start a session.

    Logging in ends any earlier session for the same user.

    \b
    Examples:
      futuresim login alice
    """
    settings = get_settings()
    service = get_account_service(settings)

    try:
        token = service.login(username, password)
    except AuthError as e:
        fail(e.message, title="Login Failed")

    save_local_session(username.strip(), token)
    console.print(f"[green]Logged in as [bold]{username.strip()}[/bold].[/green]")


@click.command()
def logout() -> None:
    """End the current session."""
    settings = get_settings()
    service = get_account_service(settings)

    service.logout(load_local_token())
    clear_local_session()
    console.print("[dim]Logged out.[/dim]")


@click.command()
def whoami() -> None:
    """Show the logged-in user."""
    settings = get_settings()
    username = require_user(settings)
    console.print(f"Logged in as [bold cyan]{username}[/bold cyan]")
