"""Error types raised by the futuresim ledger.

Input errors are caller-correctable, business-rule errors are expected
outcomes of normal trading, and integrity errors mean the account table
itself is missing data or cannot be read or written.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Base class for all futuresim errors."""

    code = "ledger_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ==================== Input errors ====================

class InputError(LedgerError):
    """A trade request was malformed."""

    code = "input_error"


class InvalidSide(InputError):
    code = "invalid_side"

    def __init__(self, side: Any):
        super().__init__(f"Invalid trade side: {side!r}. Must be 'buy' or 'sell'.")
        self.side = side


class InvalidSymbol(InputError):
    code = "invalid_symbol"

    def __init__(self, symbol: Any):
        super().__init__(f"Invalid symbol: {symbol!r}.")
        self.symbol = symbol


class InvalidAmount(InputError):
    code = "invalid_amount"

    def __init__(self, field: str, value: Any):
        super().__init__(f"{field.capitalize()} must be a positive number, got {value!r}.")
        self.field = field
        self.value = value


# ==================== Business-rule errors ====================

class BusinessRuleError(LedgerError):
    """A well-formed trade was refused by the account's current state."""

    code = "business_rule_error"


class InsufficientFunds(BusinessRuleError):
    code = "insufficient_funds"

    def __init__(self, required: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient balance. Required: {required:,.2f}, Available: {available:,.2f}"
        )
        self.required = required
        self.available = available


class InsufficientPosition(BusinessRuleError):
    code = "insufficient_position"

    def __init__(self, symbol: str, requested: Decimal, held: Decimal):
        super().__init__(
            f"Insufficient position in {symbol}. Requested: {requested}, Held: {held}"
        )
        self.symbol = symbol
        self.requested = requested
        self.held = held


# ==================== Integrity errors ====================

class IntegrityError(LedgerError):
    """The account table is missing data or cannot be accessed."""

    code = "integrity_error"


class UnknownAccount(IntegrityError):
    code = "unknown_account"

    def __init__(self, username: str):
        super().__init__(f"Account not found: {username!r}")
        self.username = username


class StoreError(IntegrityError):
    """Reading or writing the account table failed."""

    code = "store_error"


class StoreCorruptedError(StoreError):
    """The account table exists but does not hold valid account data."""

    code = "store_corrupted"


# ==================== Auth errors ====================

class AuthError(LedgerError):
    code = "auth_error"


class InvalidCredentials(AuthError):
    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid username or password."):
        super().__init__(message)


class AccountExists(AuthError):
    code = "account_exists"

    def __init__(self, username: str):
        super().__init__(f"Username already taken: {username!r}")
        self.username = username


class SessionExpired(AuthError):
    code = "session_expired"

    def __init__(self, message: str = "Session is no longer valid, please log in again."):
        super().__init__(message)
