"""Synthetic price feed for the simulated markets.

Prices follow a bounded random walk: each tick moves the price by a
uniform step in [-volatility, +volatility] and never lets it fall below
the market's floor price.
"""

import json
import logging
import random
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Market(BaseModel):
    """Static description of one tradable symbol."""

    symbol: str = Field(..., min_length=1, description="Trading symbol")
    name: str = Field(..., description="Display name")
    unit: str = Field(default="", description="Price unit")
    start_price: float = Field(default=100.0, gt=0, description="Opening price of the walk")
    min_price: float = Field(default=10.0, gt=0, description="Price floor")
    volatility: float = Field(default=5.0, ge=0, description="Largest single-tick move")

    model_config = {"frozen": True}


class Quote(BaseModel):
    """Represents one tick of the synthetic feed."""

    symbol: str = Field(..., description="Trading symbol")
    price: float = Field(..., gt=0, description="Current price")
    previous: float = Field(..., gt=0, description="Price at the previous tick")
    change: float = Field(..., description="Change since the previous tick")
    change_percent: float = Field(..., description="Percentage change since the previous tick")

    model_config = {"frozen": True}


MARKETS: dict[str, Market] = {
    market.symbol: market
    for market in [
        Market(symbol="HOG", name="Lean Hog Futures", unit="CNY/t",
               start_price=15000.0, min_price=8000.0, volatility=60.0),
        Market(symbol="GOLD", name="Gold Futures", unit="CNY/g",
               start_price=480.0, min_price=300.0, volatility=2.5),
        Market(symbol="MOUTAI", name="Baijiu Leader (Moutai)", unit="CNY/lot",
               start_price=1700.0, min_price=900.0, volatility=12.0),
        Market(symbol="CRUDE", name="Crude Oil Futures", unit="CNY/bbl",
               start_price=550.0, min_price=200.0, volatility=4.0),
        Market(symbol="SOY", name="Soybean Meal Futures", unit="CNY/t",
               start_price=3200.0, min_price=2000.0, volatility=15.0),
    ]
}


def get_market(symbol: str) -> Market:
    """Get market metadata, with generic defaults for unlisted symbols."""
    symbol = symbol.strip().upper()
    return MARKETS.get(symbol) or Market(symbol=symbol, name=symbol)


class PriceFeed:
    """Random-walk price source for any number of symbols."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        state_path: Optional[Path] = None,
    ):
        """Initialize the price feed.

        Args:
            rng: Random generator (a fresh one by default).
            state_path: Optional JSON file holding the last price per symbol,
                so the walk continues across CLI invocations.
        """
        self._rng = rng or random.Random()
        self.state_path = state_path
        self._prices: dict[str, float] = {}
        self._load_state()

    def _load_state(self) -> None:
        if self.state_path is None or not self.state_path.exists():
            return
        try:
            data = json.loads(self.state_path.read_text())
            self._prices = {
                str(symbol): float(price)
                for symbol, price in data.items()
                if float(price) > 0
            }
        except (json.JSONDecodeError, AttributeError, TypeError, ValueError):
            logger.warning("Ignoring unreadable price state %s", self.state_path)
            self._prices = {}

    def _save_state(self) -> None:
        if self.state_path is None:
            return
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps(self._prices, indent=2))

    def last_price(self, symbol: str) -> float:
        """Get the current price without advancing the walk."""
        market = get_market(symbol)
        return self._prices.get(market.symbol, market.start_price)

    def tick(self, symbol: str) -> Quote:
        """Advance the walk for a symbol by one step.

        Args:
            symbol: Trading symbol.

        Returns:
            Quote with the new price and its change.
        """
        market = get_market(symbol)
        previous = self.last_price(market.symbol)

        delta = (self._rng.random() - 0.5) * market.volatility * 2
        current = max(market.min_price, previous + delta)
        self._prices[market.symbol] = current
        self._save_state()

        change = current - previous
        change_percent = (change / previous * 100) if previous > 0 else 0.0

        return Quote(
            symbol=market.symbol,
            price=round(current, 2),
            previous=round(previous, 2),
            change=round(change, 2),
            change_percent=round(change_percent, 2),
        )
