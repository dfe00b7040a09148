"""Shared field types for ledger schemas."""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: Any) -> date:
    """Parse a calendar date given as ``YYYY-MM-DD`` without time or zone."""
    # datetime is a date subclass, check it first
    if isinstance(value, datetime):
        raise ValueError("Expected a calendar date without a time component")
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _ISO_DATE_PATTERN.match(value):
        return date.fromisoformat(value)
    raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")


IsoDate = Annotated[date, BeforeValidator(parse_iso_date)]

# Finite, non-negative meter index or price, within what the database column keeps exactly
Amount = Annotated[Decimal, Field(ge=0, allow_inf_nan=False, max_digits=15, decimal_places=6)]
