"""Trade record data model."""

from datetime import datetime
from typing import Literal

from pydantic import Field

from futuresim.models.base import ZERO, Amount, LedgerModel


class TradeRecord(LedgerModel):
    """Represents one executed trade and the account state right after it."""

    id: str = Field(..., min_length=1, description="Unique trade identifier")
    timestamp: datetime = Field(..., description="Trade execution timestamp")
    side: Literal["buy", "sell"] = Field(..., description="Trade side")
    symbol: str = Field(..., min_length=1, description="Trading symbol")
    quantity: Amount = Field(..., gt=0, description="Quantity traded")
    price: Amount = Field(..., gt=0, description="Execution price")
    balance_after: Amount = Field(..., description="Cash balance after the trade")
    position_after: Amount = Field(..., ge=0, description="Position in symbol after the trade")
    realized_pnl: Amount = Field(default=ZERO, description="Realized P&L (0 for buys)")
