"""Trade engine: validates and commits buy/sell trades against the ledger."""

import logging
import re
import uuid
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from futuresim.db.store import LedgerStore
from futuresim.errors import (
    InsufficientFunds,
    InsufficientPosition,
    InvalidAmount,
    InvalidSide,
    InvalidSymbol,
    LedgerError,
    StoreError,
    UnknownAccount,
)
from futuresim.ledger.accounting import apply_trade
from futuresim.models import Account, AccountSummary, TradeRecord

logger = logging.getLogger(__name__)

SIDES = ("buy", "sell")

SYMBOL_PATTERN = re.compile(r"[A-Z0-9][A-Z0-9._-]*")


def normalize_side(side: Any) -> str:
    """Normalize a trade side to 'buy' or 'sell'.

    Raises:
        InvalidSide: If side is not buy or sell.
    """
    if not isinstance(side, str) or side.strip().lower() not in SIDES:
        raise InvalidSide(side)
    return side.strip().lower()


def normalize_symbol(symbol: Any) -> str:
    """Normalize a symbol to its stripped, upper-case form.

    Raises:
        InvalidSymbol: If symbol is empty or not an identifier.
    """
    if not isinstance(symbol, str):
        raise InvalidSymbol(symbol)
    normalized = symbol.strip().upper()
    if not SYMBOL_PATTERN.fullmatch(normalized):
        raise InvalidSymbol(symbol)
    return normalized


def parse_amount(field: str, value: Any) -> Decimal:
    """Parse a positive, finite quantity or price.

    Floats go through their shortest string form so 0.1 stays 0.1.

    Raises:
        InvalidAmount: If value is not a positive finite number.
    """
    if isinstance(value, bool):
        raise InvalidAmount(field, value)

    try:
        if isinstance(value, Decimal):
            amount = value
        elif isinstance(value, int):
            amount = Decimal(value)
        elif isinstance(value, float):
            amount = Decimal(str(value))
        elif isinstance(value, str):
            amount = Decimal(value.strip())
        else:
            raise InvalidAmount(field, value)
    except InvalidOperation:
        raise InvalidAmount(field, value) from None

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmount(field, value)
    return amount


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_trade_id() -> str:
    return str(uuid.uuid4())


class TradeEngine:
    """Executes trades for registered accounts.

    Each trade runs inside one store transaction: the account table is
    loaded fresh, the acting account is replaced with its post-trade
    version, and the table is saved before the trade record is returned.
    Any failure raises before the save, leaving the table untouched.
    """

    def __init__(
        self,
        store: LedgerStore,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """Initialize the trade engine.

        Args:
            store: Ledger store holding the accounts.
            clock: Source of trade timestamps (UTC now by default).
            id_factory: Source of trade ids (UUID4 by default).
        """
        self._store = store
        self._clock = clock or _utcnow
        self._id_factory = id_factory or _new_trade_id

    def execute_trade(
        self,
        username: str,
        side: Any,
        symbol: Any,
        quantity: Any,
        price: Any,
    ) -> TradeRecord:
        """Execute a buy or sell for an account.

        Args:
            username: Account owner, already authenticated by the caller.
            side: 'buy' or 'sell'.
            symbol: Trading symbol, normalized to upper case.
            quantity: Positive quantity.
            price: Positive execution price.

        Returns:
            The committed trade record.

        Raises:
            InvalidSide, InvalidSymbol, InvalidAmount: Malformed request.
            UnknownAccount: No account for username.
            InsufficientFunds: Buy costs more than the balance.
            InsufficientPosition: Sell exceeds the open position.
            StoreError: The account table could not be read or written.
        """
        try:
            side = normalize_side(side)
            symbol = normalize_symbol(symbol)
            quantity = parse_amount("quantity", quantity)
            price = parse_amount("price", price)

            with self._store.transaction() as accounts:
                account = accounts.get(username)
                if account is None:
                    raise UnknownAccount(username)

                record, updated = self._apply(account, side, symbol, quantity, price)
                accounts[username] = updated
        except StoreError as e:
            logger.error(
                "Trade for %s not committed, ledger store failed (%s): %s",
                username,
                e.code,
                e.message,
            )
            raise
        except LedgerError as e:
            logger.warning("Rejected trade for %s (%s): %s", username, e.code, e.message)
            raise

        logger.info(
            "%s %s %s x %s @ %s -> balance %s, position %s",
            username,
            side.upper(),
            symbol,
            quantity,
            price,
            record.balance_after,
            record.position_after,
        )
        return record

    def _apply(
        self,
        account: Account,
        side: str,
        symbol: str,
        quantity: Decimal,
        price: Decimal,
    ) -> tuple[TradeRecord, Account]:
        """Compute the trade record and post-trade account without saving."""
        holding = account.holding(symbol)
        value = price * quantity

        if side == "buy":
            if account.balance < value:
                raise InsufficientFunds(value, account.balance)
            new_balance = account.balance - value
        else:
            if holding.position < quantity:
                raise InsufficientPosition(symbol, quantity, holding.position)
            new_balance = account.balance + value

        change = apply_trade(holding, side, quantity, price, symbol=symbol)

        holdings = dict(account.holdings)
        if change.holding.is_flat:
            holdings.pop(symbol, None)
        else:
            holdings[symbol] = change.holding

        record = TradeRecord(
            id=self._id_factory(),
            timestamp=self._clock(),
            side=side,
            symbol=symbol,
            quantity=quantity,
            price=price,
            balance_after=new_balance,
            position_after=change.holding.position,
            realized_pnl=change.realized_pnl,
        )

        updated = account.model_copy(
            update={
                "balance": new_balance,
                "holdings": holdings,
                "history": [record, *account.history],
            }
        )
        return record, updated

    def get_summary(self, username: str) -> AccountSummary:
        """Get balance, holdings and history for an account.

        Raises:
            UnknownAccount: No account for username.
        """
        account = self._store.get_account(username)
        return AccountSummary(
            username=username,
            balance=account.balance,
            holdings=dict(account.holdings),
            history=list(account.history),
        )
