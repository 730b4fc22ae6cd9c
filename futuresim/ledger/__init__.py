"""Ledger accounting for futuresim."""

from futuresim.ledger.accounting import HoldingChange, apply_buy, apply_sell, apply_trade
from futuresim.ledger.engine import TradeEngine, normalize_side, normalize_symbol, parse_amount
from futuresim.ledger.history import HistoryQuery

__all__ = [
    "HistoryQuery",
    "HoldingChange",
    "TradeEngine",
    "apply_buy",
    "apply_sell",
    "apply_trade",
    "normalize_side",
    "normalize_symbol",
    "parse_amount",
]
