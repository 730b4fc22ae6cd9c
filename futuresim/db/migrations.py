"""Upgrade older account records to the current shape.

Each step takes one raw account record (as parsed from JSON) and edits it in
place, returning True if it changed anything. Steps are idempotent, so the
whole chain can run on every load; the store writes the table back only when
some step reported a change.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, Callable

from futuresim.auth.passwords import hash_password

logger = logging.getLogger(__name__)

# Symbol that single-market accounts traded before holdings were per symbol
LEGACY_SYMBOL = "HOG"

RawRecord = dict[str, Any]


def lift_single_position(record: RawRecord) -> bool:
    """Move an account-level position into a per-symbol holdings mapping."""
    if (
        isinstance(record.get("holdings"), dict)
        and "position" not in record
        and "averagePrice" not in record
    ):
        return False

    holdings = record.get("holdings")
    if not isinstance(holdings, dict):
        holdings = {}

    position = record.pop("position", None)
    average = record.pop("averagePrice", None)
    if isinstance(position, (int, Decimal)) and not isinstance(position, bool) and position != 0:
        holdings.setdefault(
            LEGACY_SYMBOL,
            {"position": position, "averageCost": average or 0},
        )

    record["holdings"] = holdings
    return True


def rename_average_price(record: RawRecord) -> bool:
    """Rename averagePrice to averageCost and drop closed holdings."""
    holdings = record.get("holdings") or {}
    changed = False

    for symbol in list(holdings):
        entry = holdings[symbol]
        if not isinstance(entry, dict):
            continue
        if "averagePrice" in entry:
            entry.setdefault("averageCost", entry.pop("averagePrice") or 0)
            changed = True
        if not entry.get("position"):
            del holdings[symbol]
            changed = True

    return changed


def ensure_history_list(record: RawRecord) -> bool:
    """Replace a missing or malformed history with an empty list."""
    if isinstance(record.get("history"), list):
        return False
    record["history"] = []
    return True


def tag_history_entries(record: RawRecord) -> bool:
    """Fill in fields that older history entries did not carry."""
    changed = False

    for entry in record.get("history", []):
        if not isinstance(entry, dict):
            continue
        if not entry.get("symbol"):
            entry["symbol"] = LEGACY_SYMBOL
            changed = True
        if "side" not in entry and "type" in entry:
            entry["side"] = entry.pop("type")
            changed = True
        if "realizedPnl" not in entry:
            entry["realizedPnl"] = 0
            changed = True
        if not entry.get("id"):
            entry["id"] = str(uuid.uuid4())
            changed = True

    return changed


def hash_plaintext_password(record: RawRecord) -> bool:
    """Replace a stored plaintext password with a salted hash."""
    if "password" not in record:
        return False

    password = record.pop("password")
    if password and not record.get("passwordHash"):
        record["passwordHash"] = hash_password(str(password))
    return True


MIGRATION_STEPS: list[Callable[[RawRecord], bool]] = [
    lift_single_position,
    rename_average_price,
    ensure_history_list,
    tag_history_entries,
    hash_plaintext_password,
]


def migrate_record(record: RawRecord) -> bool:
    """Run every migration step on one record.

    Returns:
        True if any step changed the record.
    """
    changed = False
    for step in MIGRATION_STEPS:
        if step(record):
            changed = True
    return changed


def migrate_table(table: dict[str, Any]) -> bool:
    """Run the migration chain over every account in a raw table.

    Args:
        table: Raw username -> record mapping, edited in place.

    Returns:
        True if any record changed.
    """
    changed = False
    for username, record in table.items():
        if not isinstance(record, dict):
            continue
        if migrate_record(record):
            logger.info("Migrated account record for %s", username)
            changed = True
    return changed
