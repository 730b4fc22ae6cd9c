"""Data models for futuresim."""

from futuresim.models.account import Account, AccountSummary, Holding
from futuresim.models.base import CENT, ZERO, round_money
from futuresim.models.trade import TradeRecord

__all__ = [
    "Account",
    "AccountSummary",
    "CENT",
    "Holding",
    "TradeRecord",
    "ZERO",
    "round_money",
]
