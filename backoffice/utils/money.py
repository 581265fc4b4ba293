"""Exact decimal helpers for monetary values."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | str | None) -> Decimal:
    """Normalize to a two-place Decimal; floats are rejected to avoid binary rounding."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        raise TypeError("Monetary values must not be floats.")
    try:
        return Decimal(str(value)).quantize(CENT)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid monetary value: {value!r}") from exc


def has_more_than_cents(value: Decimal) -> bool:
    return value != value.quantize(CENT)
