"""Portfolio commands for futuresim CLI.

Shows balance, holdings and trade history for the logged-in account.
"""

from typing import Optional

import click
from rich.table import Table

from futuresim.cli.common import (
    console,
    fail,
    get_price_feed,
    get_settings,
    get_store,
    require_user,
    signed,
)
from futuresim.errors import LedgerError
from futuresim.market.feed import get_market


@click.command()
def summary() -> None:
    """View balance and open holdings.

    Unrealized P&L is valued at each symbol's last quoted price.

    \b
    Examples:
      futuresim summary
    """
    from futuresim.ledger.engine import TradeEngine

    settings = get_settings()
    username = require_user(settings)

    try:
        account = TradeEngine(get_store(settings)).get_summary(username)
    except LedgerError as e:
        fail(e.message)

    feed = get_price_feed(settings)
    realized = sum((r.realized_pnl for r in account.history), start=0)

    console.print(f"[bold cyan]Account: {username}[/bold cyan]\n")
    console.print(f"Cash Balance:  [yellow]{account.balance:,.2f}[/yellow]")
    console.print(f"Trades:        {len(account.history)}")
    console.print(f"Realized P&L:  {signed(realized)}\n")

    if not account.holdings:
        console.print("[dim]No open holdings.[/dim]")
        return

    table = Table(title="Holdings", show_header=True, header_style="bold")
    table.add_column("Symbol", style="bold")
    table.add_column("Name")
    table.add_column("Position", justify="right")
    table.add_column("Avg Cost", justify="right")
    table.add_column("Last", justify="right")
    table.add_column("Unrealized P&L", justify="right")

    for symbol in sorted(account.holdings):
        holding = account.holdings[symbol]
        market = get_market(symbol)
        last = feed.last_price(symbol)
        unrealized = (last - float(holding.average_cost)) * float(holding.position)
        table.add_row(
            symbol,
            market.name,
            str(holding.position),
            f"{holding.average_cost:,.2f}",
            f"{last:,.2f}",
            signed(unrealized),
        )

    console.print(table)


@click.command()
@click.option("-s", "--symbol", default=None, help="Only show trades in this symbol.")
@click.option("-n", "--limit", type=int, default=20, show_default=True, help="Number of trades to show.")
def history(symbol: Optional[str], limit: int) -> None:
    """View trade history, newest first.

    \b
    Examples:
      futuresim history
      futuresim history -s HOG -n 5
    """
    from futuresim.ledger.history import HistoryQuery

    settings = get_settings()
    username = require_user(settings)

    try:
        records = HistoryQuery(get_store(settings)).query_history(username, symbol)
    except LedgerError as e:
        fail(e.message)

    if not records:
        console.print("[dim]No trades yet.[/dim]")
        return

    table = Table(title="Trade History", show_header=True, header_style="bold")
    table.add_column("Time")
    table.add_column("Symbol", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("Qty", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Balance After", justify="right")
    table.add_column("Position After", justify="right")
    table.add_column("Realized P&L", justify="right")

    for record in records[:limit]:
        side_color = "green" if record.side == "buy" else "red"
        table.add_row(
            record.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            record.symbol,
            f"[{side_color}]{record.side.upper()}[/{side_color}]",
            str(record.quantity),
            f"{record.price:,.2f}",
            f"{record.balance_after:,.2f}",
            str(record.position_after),
            signed(record.realized_pnl) if record.side == "sell" else "-",
        )

    console.print(table)
    if len(records) > limit:
        console.print(f"[dim]Showing {limit} of {len(records)} trades.[/dim]")
