"""Identifier generation helpers."""

from __future__ import annotations

import uuid


def new_entity_id() -> str:
    """Create a UUID4-based entity identifier."""
    return str(uuid.uuid4())


def format_invoice_number(year: int, month: int, sequence: int) -> str:
    """Human-legible invoice number: ``FAC-YYYYMM-NNNN``."""
    return f"FAC-{year:04d}{month:02d}-{sequence:04d}"
