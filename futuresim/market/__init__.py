"""Simulated market data for futuresim."""

from futuresim.market.feed import MARKETS, Market, PriceFeed, Quote, get_market

__all__ = ["MARKETS", "Market", "PriceFeed", "Quote", "get_market"]
