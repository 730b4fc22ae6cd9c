"""Account and holding data models."""

from typing import Optional

from pydantic import Field

from futuresim.models.base import ZERO, Amount, LedgerModel
from futuresim.models.trade import TradeRecord


class Holding(LedgerModel):
    """Represents a user's open position in one symbol."""

    position: Amount = Field(default=ZERO, ge=0, description="Quantity currently held")
    average_cost: Amount = Field(default=ZERO, ge=0, description="Weighted-average acquisition price")

    @property
    def is_flat(self) -> bool:
        return self.position == 0


class Account(LedgerModel):
    """Represents one user's balance, holdings and trade history."""

    balance: Amount = Field(..., description="Cash balance")
    holdings: dict[str, Holding] = Field(default_factory=dict, description="Open holdings by symbol")
    history: list[TradeRecord] = Field(default_factory=list, description="Trades, newest first")
    password_hash: Optional[str] = Field(default=None, description="Salted credential hash")

    def holding(self, symbol: str) -> Holding:
        """Get the holding for a symbol, or a zero holding if none is open."""
        return self.holdings.get(symbol, Holding())


class AccountSummary(LedgerModel):
    """Read-only view of an account for display."""

    username: str = Field(..., description="Account owner")
    balance: Amount = Field(..., description="Cash balance")
    holdings: dict[str, Holding] = Field(default_factory=dict, description="Open holdings by symbol")
    history: list[TradeRecord] = Field(default_factory=list, description="Trades, newest first")
