"""Market data commands for futuresim CLI."""

import click
from rich.table import Table

from futuresim.cli.common import console, fail, get_price_feed, get_settings
from futuresim.errors import InvalidSymbol
from futuresim.ledger.engine import normalize_symbol
from futuresim.market.feed import MARKETS


@click.command()
@click.argument("symbols", nargs=-1)
def quote(symbols: tuple[str, ...]) -> None:
    """Get the next simulated quote for one or more symbols.

    With no symbols, quotes the configured default symbol.

    \b
    Examples:
      futuresim quote HOG GOLD
    """
    settings = get_settings()
    try:
        wanted = [normalize_symbol(s) for s in symbols or (settings.market.default_symbol,)]
    except InvalidSymbol as e:
        fail(e.message, title="Invalid Symbol")

    feed = get_price_feed(settings)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Symbol", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Change %", justify="right")

    for symbol in wanted:
        q = feed.tick(symbol)
        color = "green" if q.change >= 0 else "red"
        sign = "+" if q.change >= 0 else ""
        table.add_row(
            q.symbol,
            f"{q.price:,.2f}",
            f"[{color}]{sign}{q.change:,.2f}[/{color}]",
            f"[{color}]{sign}{q.change_percent:.2f}%[/{color}]",
        )

    console.print(table)


@click.command()
def markets() -> None:
    """List the simulated markets."""
    table = Table(title="Markets", show_header=True, header_style="bold")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Unit")
    table.add_column("Start", justify="right")
    table.add_column("Floor", justify="right")

    for market in MARKETS.values():
        table.add_row(
            market.symbol,
            market.name,
            market.unit,
            f"{market.start_price:,.2f}",
            f"{market.min_price:,.2f}",
        )

    console.print(table)
