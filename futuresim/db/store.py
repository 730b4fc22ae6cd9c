"""JSON flat-file ledger store for futuresim."""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError

from futuresim.db.migrations import migrate_table
from futuresim.errors import (
    AccountExists,
    StoreCorruptedError,
    StoreError,
    UnknownAccount,
)
from futuresim.models import Account
from futuresim.models.base import to_json_number

logger = logging.getLogger(__name__)

INDENT = "  "


def _dumps(value: Any, level: int = 0) -> str:
    """Serialize a dumped table to indented JSON.

    Decimals are written as bare number literals with every digit kept;
    ``json.dumps`` would route them through ``float``.
    """
    if isinstance(value, Decimal):
        return to_json_number(value)
    if isinstance(value, datetime):
        return json.dumps(value.isoformat())
    if isinstance(value, dict):
        if not value:
            return "{}"
        pad = INDENT * (level + 1)
        items = [
            f"{pad}{json.dumps(str(key), ensure_ascii=False)}: {_dumps(item, level + 1)}"
            for key, item in value.items()
        ]
        return "{\n" + ",\n".join(items) + "\n" + INDENT * level + "}"
    if isinstance(value, list):
        if not value:
            return "[]"
        pad = INDENT * (level + 1)
        items = [f"{pad}{_dumps(item, level + 1)}" for item in value]
        return "[\n" + ",\n".join(items) + "\n" + INDENT * level + "]"
    return json.dumps(value, ensure_ascii=False)


class LedgerStore:
    """Whole-table store of accounts keyed by username.

    The table is one JSON object on disk. Every read and every
    load-mutate-save cycle holds the same lock, so writers are serialized
    and readers never see a half-applied update. Saves go through a
    temporary file and an atomic rename, so readers in other processes
    see either the old table or the new one.
    """

    FILENAME = "users.json"

    def __init__(self, data_dir: Path):
        """Initialize the ledger store.

        Args:
            data_dir: Directory holding the account table.
        """
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / self.FILENAME
        self._lock = threading.RLock()
        self._ensure_table()

    def _ensure_table(self) -> None:
        """Create the data directory and an empty table on first run."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create data directory {self.data_dir}: {e}") from e

        if not self.path.exists():
            self._write_payload({})

    # ==================== Raw I/O ====================

    def _read_raw(self) -> dict[str, Any]:
        """Read and parse the table, keeping numbers as Decimal."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot read account table {self.path}: {e}") from e

        try:
            raw = json.loads(text, parse_float=Decimal) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise StoreCorruptedError(f"Account table {self.path} is not valid JSON: {e}") from e

        if not isinstance(raw, dict):
            raise StoreCorruptedError(f"Account table {self.path} must be a JSON object")
        return raw

    def _write_payload(self, payload: dict[str, Any]) -> None:
        """Atomically replace the table file with a new payload."""
        text = _dumps(payload)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.data_dir, prefix=f".{self.FILENAME}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StoreError(f"Cannot write account table {self.path}: {e}") from e

    @staticmethod
    def _parse(raw: dict[str, Any]) -> dict[str, Account]:
        accounts = {}
        for username, record in raw.items():
            try:
                accounts[username] = Account.model_validate(record)
            except ValidationError as e:
                raise StoreCorruptedError(f"Invalid record for account {username!r}: {e}") from e
        return accounts

    @staticmethod
    def _serialize(accounts: dict[str, Account]) -> dict[str, Any]:
        return {
            username: account.model_dump(by_alias=True, exclude_none=True)
            for username, account in accounts.items()
        }

    # ==================== Table ====================

    def load_all(self) -> dict[str, Account]:
        """Load every account.

        Older record shapes are upgraded first; if that changed anything,
        the upgraded table is written back before returning.

        Returns:
            Mapping of username to account.

        Raises:
            StoreError: If the table cannot be read or written.
            StoreCorruptedError: If the table does not hold valid accounts.
        """
        with self._lock:
            raw = self._read_raw()
            migrated = migrate_table(raw)
            accounts = self._parse(raw)
            if migrated:
                logger.info("Rewriting %s with upgraded account records", self.path)
                self.save_all(accounts)
            return accounts

    def save_all(self, accounts: dict[str, Account]) -> None:
        """Replace the whole table.

        Args:
            accounts: Mapping of username to account.
        """
        with self._lock:
            self._write_payload(self._serialize(accounts))
            logger.debug("Saved %d accounts to %s", len(accounts), self.path)

    @contextmanager
    def transaction(self) -> Iterator[dict[str, Account]]:
        """Hold the write lock across one load-mutate-save cycle.

        Yields the freshly loaded table; the caller replaces entries in it.
        The table is saved only if the block exits without an exception, so
        a failed trade leaves the stored table untouched.
        """
        with self._lock:
            accounts = self.load_all()
            yield accounts
            self.save_all(accounts)

    # ==================== Accounts ====================

    def get_account(self, username: str) -> Account:
        """Get one account.

        Raises:
            UnknownAccount: If no account exists for the username.
        """
        account = self.load_all().get(username)
        if account is None:
            raise UnknownAccount(username)
        return account

    def create_account(self, username: str, account: Account) -> Account:
        """Add a new account to the table.

        Raises:
            AccountExists: If the username is already taken.
        """
        with self.transaction() as accounts:
            if username in accounts:
                raise AccountExists(username)
            accounts[username] = account
        logger.info("Created account %s", username)
        return account
