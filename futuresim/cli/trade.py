"""Trading commands for futuresim CLI.

Handles buy and sell orders for the logged-in account.
"""

from typing import Optional

import click
from rich.panel import Panel

from futuresim.cli.common import (
    console,
    fail,
    get_price_feed,
    get_settings,
    get_store,
    require_user,
    signed,
)
from futuresim.errors import BusinessRuleError, InputError, InvalidSymbol, LedgerError


def _error_title(error: LedgerError) -> str:
    if isinstance(error, InputError):
        return "Invalid Order"
    if isinstance(error, BusinessRuleError):
        return "Order Rejected"
    return "Error"


def _execute(side: str, symbol: str, qty: str, price: Optional[str]) -> None:
    """Run one trade for the logged-in user and print the result."""
    from futuresim.ledger.engine import TradeEngine, normalize_symbol

    settings = get_settings()
    username = require_user(settings)

    try:
        symbol = normalize_symbol(symbol)
    except InvalidSymbol as e:
        fail(e.message, title=_error_title(e))

    if price is None:
        quote = get_price_feed(settings).tick(symbol)
        price = str(quote.price)
        console.print(f"[dim]Market price for {quote.symbol}: {quote.price:,.2f}[/dim]")

    engine = TradeEngine(get_store(settings))
    try:
        record = engine.execute_trade(username, side, symbol, qty, price)
    except LedgerError as e:
        fail(e.message, title=_error_title(e))

    side_color = "green" if record.side == "buy" else "red"
    lines = [
        f"[{side_color}]{record.side.upper()}[/{side_color}] "
        f"[bold]{record.symbol}[/bold] x {record.quantity} @ {record.price:,.2f}",
        "",
        f"Value:          {record.quantity * record.price:,.2f}",
        f"Balance after:  {record.balance_after:,.2f}",
        f"Position after: {record.position_after}",
    ]
    if record.side == "sell":
        lines.append(f"Realized P&L:   {signed(record.realized_pnl)}")
    lines.append(f"\n[dim]Trade ID: {record.id}[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title="[bold green]Trade Executed[/bold green]",
        border_style="green",
    ))


@click.command()
@click.argument("symbol")
@click.argument("qty")
@click.option(
    "-p", "--price",
    default=None,
    help="Execution price. If not specified, trades at the current market quote.",
)
def buy(symbol: str, qty: str, price: Optional[str]) -> None:
    """Buy QTY units of SYMBOL.

    \b
    Examples:
      futuresim buy HOG 10             # Buy at market
      futuresim buy GOLD 5 -p 480.50   # Buy at a given price
    """
    _execute("buy", symbol, qty, price)


@click.command()
@click.argument("symbol")
@click.argument("qty")
@click.option(
    "-p", "--price",
    default=None,
    help="Execution price. If not specified, trades at the current market quote.",
)
def sell(symbol: str, qty: str, price: Optional[str]) -> None:
    """Sell QTY units of SYMBOL from an open holding.

    \b
    Examples:
      futuresim sell HOG 10
      futuresim sell GOLD 5 -p 492
    """
    _execute("sell", symbol, qty, price)
