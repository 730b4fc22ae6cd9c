"""Holding accounting: the effect of a single trade on a single holding.

These functions are pure. They never touch the cash balance or the store;
the trade engine checks solvency and applies the cash leg itself.

Average cost and realized P&L are rounded to the smallest currency unit as
soon as they are computed, so a long run of partial buys can drift from the
exact weighted mean by up to a cent per step.
"""

from decimal import Decimal
from typing import NamedTuple

from futuresim.errors import InsufficientPosition
from futuresim.models import ZERO, Holding, round_money


class HoldingChange(NamedTuple):
    """Result of applying one trade to a holding."""

    holding: Holding
    realized_pnl: Decimal


def apply_buy(holding: Holding, quantity: Decimal, price: Decimal) -> HoldingChange:
    """Add a buy to a holding.

    Args:
        holding: Current holding (zero holding if none is open).
        quantity: Positive quantity bought.
        price: Positive execution price.

    Returns:
        HoldingChange with the enlarged position and its new average cost.
    """
    new_position = holding.position + quantity
    total_cost = holding.average_cost * holding.position + price * quantity
    new_average = round_money(total_cost / new_position)

    return HoldingChange(
        holding=Holding(position=new_position, average_cost=new_average),
        realized_pnl=ZERO,
    )


def apply_sell(
    holding: Holding,
    quantity: Decimal,
    price: Decimal,
    symbol: str = "",
) -> HoldingChange:
    """Remove a sell from a holding and realize its P&L.

    Args:
        holding: Current holding.
        quantity: Positive quantity sold.
        price: Positive execution price.
        symbol: Symbol name, used only in the error message.

    Returns:
        HoldingChange with the reduced position and the realized P&L.

    Raises:
        InsufficientPosition: If the holding is smaller than the quantity.
    """
    if holding.position < quantity:
        raise InsufficientPosition(symbol, quantity, holding.position)

    realized_pnl = round_money((price - holding.average_cost) * quantity)
    new_position = holding.position - quantity

    # A closed position carries no cost basis into the next entry
    new_average = ZERO if new_position == 0 else holding.average_cost

    return HoldingChange(
        holding=Holding(position=new_position, average_cost=new_average),
        realized_pnl=realized_pnl,
    )


def apply_trade(
    holding: Holding,
    side: str,
    quantity: Decimal,
    price: Decimal,
    symbol: str = "",
) -> HoldingChange:
    """Dispatch to apply_buy or apply_sell by side ('buy' or 'sell')."""
    if side == "buy":
        return apply_buy(holding, quantity, price)
    if side == "sell":
        return apply_sell(holding, quantity, price, symbol=symbol)
    raise ValueError(f"Unknown side: {side!r}")
