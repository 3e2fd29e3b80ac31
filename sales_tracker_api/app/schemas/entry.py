"""
Pydantic models for sales-activity entries.

``EntryFields`` is the body accepted by create and update.  Keys may be
sent in snake_case (``booked_calls``) or camelCase (``bookedCalls``).
Numeric values are coerced leniently: strings are parsed and anything
unreadable becomes zero, so these models never reject a body for its
numbers.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from ..core.coercion import to_float, to_int, to_text

INT_FIELDS = (
    "booked_calls",
    "no_shows",
    "closed_won",
    "closed_lost",
    "pif",
    "splits",
    "reschedules",
)
MONEY_FIELDS = ("cash_collected", "renewals_cash")
TEXT_FIELDS = ("date", "role")

# Columns written by create and overwritten by update, in table order.
MUTABLE_COLUMNS = (
    "date",
    "role",
    "booked_calls",
    "no_shows",
    "closed_won",
    "closed_lost",
    "pif",
    "splits",
    "cash_collected",
    "renewals_cash",
    "reschedules",
)


class EntryFields(BaseModel):
    """Mutable fields of an entry.  Omitted numbers default to zero."""

    date: str = ""
    role: str = ""
    booked_calls: int = 0
    no_shows: int = 0
    closed_won: int = 0
    closed_lost: int = 0
    pif: int = 0
    splits: int = 0
    cash_collected: float = 0.0
    renewals_cash: float = 0.0
    reschedules: int = 0

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @field_validator(*INT_FIELDS, mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> int:
        return to_int(v)

    @field_validator(*MONEY_FIELDS, mode="before")
    @classmethod
    def coerce_money(cls, v: Any) -> float:
        return to_float(v)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return to_text(v)

    def column_values(self) -> Dict[str, Any]:
        """Bind parameters for ``MUTABLE_COLUMNS``."""
        return {column: getattr(self, column) for column in MUTABLE_COLUMNS}


class EntryRead(EntryFields):
    """An entry as stored, including its owner and timestamps."""

    id: int
    user_id: int
    created_at: Optional[str] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def format_created_at(cls, v: Any) -> Optional[str]:
        # PostgreSQL returns datetime objects, SQLite returns strings
        if isinstance(v, datetime):
            return v.isoformat(sep=" ", timespec="seconds")
        return v
