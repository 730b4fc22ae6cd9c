"""Shared pieces for ledger models."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel

# Smallest currency unit
CENT = Decimal("0.01")

ZERO = Decimal("0")


def round_money(value: Decimal) -> Decimal:
    """Round a currency amount to the smallest currency unit."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_json_number(value: Decimal) -> str:
    """Render a Decimal as exact JSON number text, integral values without a point."""
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


# Decimal in memory, exact number text on disk
Amount = Annotated[
    Decimal,
    PlainSerializer(to_json_number, return_type=str, when_used="json"),
]


class LedgerModel(BaseModel):
    """Frozen model that reads and writes camelCase keys."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }
