"""Helpers shared by the futuresim CLI commands."""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel

from futuresim.config import ConfigError, Settings, get_config_dir, load_settings

console = Console()


def get_settings() -> Settings:
    """Load settings, turning config problems into a CLI error."""
    try:
        return load_settings()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


def get_store(settings: Settings):
    """Get the ledger store instance."""
    from futuresim.db.store import LedgerStore

    return LedgerStore(settings.data_dir())


def get_account_service(settings: Settings):
    """Get the account service with its persisted session registry."""
    from futuresim.auth.accounts import AccountService
    from futuresim.auth.sessions import SessionRegistry

    sessions = SessionRegistry(settings.data_dir() / "sessions.json")
    return AccountService(
        get_store(settings),
        sessions=sessions,
        starting_balance=settings.ledger.starting_balance,
    )


def get_price_feed(settings: Settings):
    """Get the price feed, continuing the walk from the last saved prices."""
    from futuresim.market.feed import PriceFeed

    return PriceFeed(state_path=settings.data_dir() / "prices.json")


# ==================== Local session ====================

def _session_path() -> Path:
    return get_config_dir() / "session.json"


def save_local_session(username: str, token: str) -> None:
    """Remember the logged-in user for later commands."""
    path = _session_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "username": username,
        "token": token,
        "timestamp": datetime.now().isoformat(),
    }))


def load_local_token() -> Optional[str]:
    """Get the token saved by the last login, if any."""
    path = _session_path()
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text()).get("token")
    except (json.JSONDecodeError, AttributeError):
        return None


def clear_local_session() -> None:
    """Forget the saved session."""
    path = _session_path()
    if path.exists():
        path.unlink()


# ==================== Output ====================

def show_error(message: str, title: str = "Error") -> None:
    """Print an error panel."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def fail(message: str, title: str = "Error") -> None:
    """Print an error panel and exit with status 1."""
    show_error(message, title=title)
    raise SystemExit(1)


def require_user(settings: Settings) -> str:
    """Resolve the saved session to a username, or exit if not logged in."""
    from futuresim.errors import SessionExpired

    service = get_account_service(settings)
    try:
        return service.resolve(load_local_token())
    except SessionExpired as e:
        fail(
            f"{e.message}\n\nRun [cyan]futuresim login USERNAME[/cyan] to start a session.",
            title="Not Logged In",
        )


def signed(value, color: bool = True) -> str:
    """Format a currency amount with sign and optional green/red markup."""
    sign = "+" if value >= 0 else ""
    text = f"{sign}{value:,.2f}"
    if not color:
        return text
    style = "green" if value >= 0 else "red"
    return f"[{style}]{text}[/{style}]"
