"""Read-only queries over an account's trade history."""

from typing import Optional

from futuresim.db.store import LedgerStore
from futuresim.models import TradeRecord


class HistoryQuery:
    """Filtered views of stored trade history."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def query_history(self, username: str, symbol: Optional[str] = None) -> list[TradeRecord]:
        """Get an account's trades, newest first.

        Args:
            username: Account owner.
            symbol: Optional symbol filter; blank means no filter.

        Returns:
            Trades in stored order, optionally restricted to one symbol.

        Raises:
            UnknownAccount: No account for username.
        """
        history = self._store.get_account(username).history
        wanted = (symbol or "").strip().upper()
        if not wanted:
            return list(history)
        return [record for record in history if record.symbol == wanted]
