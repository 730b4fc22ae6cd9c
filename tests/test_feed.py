"""Property-based tests for the synthetic price feed.

**Feature: futuresim-ledger**
"""

import random
import tempfile
from pathlib import Path

from hypothesis import given, settings
from hypothesis import strategies as st

from futuresim.market.feed import MARKETS, PriceFeed, get_market


class TestPriceWalk:
    """
    **Feature: futuresim-ledger, Property 6: Price Floor**

    *For any* number of ticks, the price should never drop below the
    market's floor and each step should stay within its volatility.
    """

    @given(seed=st.integers(min_value=0, max_value=2**32 - 1), ticks=st.integers(min_value=1, max_value=200))
    @settings(max_examples=30)
    def test_price_respects_floor_and_step(self, seed: int, ticks: int):
        feed = PriceFeed(rng=random.Random(seed))
        market = get_market("TINY")

        for _ in range(ticks):
            before = feed.last_price("TINY")
            quote = feed.tick("TINY")
            after = feed.last_price("TINY")

            assert after >= market.min_price
            assert abs(after - before) <= market.volatility + 1e-9
            assert quote.price > 0

    def test_same_seed_gives_same_walk(self):
        a = PriceFeed(rng=random.Random(7))
        b = PriceFeed(rng=random.Random(7))

        assert [a.tick("HOG").price for _ in range(5)] == [b.tick("HOG").price for _ in range(5)]

    def test_first_tick_starts_from_market_start_price(self):
        feed = PriceFeed(rng=random.Random(1))

        quote = feed.tick("gold")

        assert quote.symbol == "GOLD"
        assert quote.previous == MARKETS["GOLD"].start_price

    def test_change_percent_matches_change(self):
        feed = PriceFeed(rng=random.Random(3))

        quote = feed.tick("CRUDE")

        expected = round(quote.change / quote.previous * 100, 2)
        assert abs(quote.change_percent - expected) <= 0.01


class TestMarkets:
    def test_known_markets(self):
        assert set(MARKETS) == {"HOG", "GOLD", "MOUTAI", "CRUDE", "SOY"}

    def test_unknown_symbol_uses_defaults(self):
        market = get_market(" abc ")

        assert market.symbol == "ABC"
        assert market.start_price == 100.0
        assert market.min_price == 10.0
        assert market.volatility == 5.0


class TestPriceState:
    def test_walk_continues_from_saved_state(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "prices.json"
            feed = PriceFeed(rng=random.Random(11), state_path=path)
            feed.tick("SOY")
            last = feed.last_price("SOY")

            assert PriceFeed(state_path=path).last_price("SOY") == last

    def test_unreadable_state_is_ignored(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "prices.json"
            path.write_text("not json")

            assert PriceFeed(state_path=path).last_price("HOG") == MARKETS["HOG"].start_price
