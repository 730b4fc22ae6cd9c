"""Account registration and login."""

import logging
from decimal import Decimal
from typing import Optional

from futuresim.auth.passwords import hash_password, verify_password
from futuresim.auth.sessions import SessionRegistry
from futuresim.db.store import LedgerStore
from futuresim.errors import InvalidCredentials, UnknownAccount
from futuresim.models import Account

logger = logging.getLogger(__name__)

DEFAULT_STARTING_BALANCE = Decimal("1000000")


class AccountService:
    """Creates accounts and turns credentials into session tokens."""

    def __init__(
        self,
        store: LedgerStore,
        sessions: Optional[SessionRegistry] = None,
        starting_balance: Decimal = DEFAULT_STARTING_BALANCE,
    ):
        """Initialize the account service.

        Args:
            store: Ledger store holding the accounts.
            sessions: Session registry (an in-memory one by default).
            starting_balance: Cash credited to every new account.
        """
        self._store = store
        self.sessions = sessions or SessionRegistry()
        self._starting_balance = Decimal(str(starting_balance))

    def register(self, username: str, password: str) -> Account:
        """Create an account with the starting balance.

        Raises:
            InvalidCredentials: If username or password is empty.
            AccountExists: If the username is already taken.
        """
        username = (username or "").strip()
        if not username or not password:
            raise InvalidCredentials("Username and password are both required.")

        account = Account(
            balance=self._starting_balance,
            password_hash=hash_password(password),
        )
        return self._store.create_account(username, account)

    def login(self, username: str, password: str) -> str:
        """Check credentials and start a session.

        Returns:
            Session token.

        Raises:
            InvalidCredentials: If the user is unknown or the password is wrong.
        """
        username = (username or "").strip()
        if not username or not password:
            raise InvalidCredentials("Username and password are both required.")

        try:
            account = self._store.get_account(username)
        except UnknownAccount:
            raise InvalidCredentials() from None

        if not verify_password(password, account.password_hash):
            logger.warning("Failed login for %s", username)
            raise InvalidCredentials()

        logger.info("User %s logged in", username)
        return self.sessions.create(username)

    def logout(self, token: Optional[str]) -> None:
        """End a session."""
        self.sessions.clear(token)

    def resolve(self, token: Optional[str]) -> str:
        """Get the username behind a session token.

        Raises:
            SessionExpired: If the token is unknown or was evicted.
        """
        return self.sessions.resolve(token)
