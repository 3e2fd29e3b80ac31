"""
Pydantic model for stored Google Form submissions.

Rows are stored with snake_case columns and projected to camelCase
for the dashboard (``pick_ups`` -> ``pickUps``).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel


class FormSubmissionRead(BaseModel):
    """A row of ``form_submissions``.

    Dump with ``by_alias=True`` to get the camelCase projection.
    """

    id: int
    timestamp: Optional[str] = None
    role: Optional[str] = None
    dials: int = 0
    pick_ups: int = 0
    dqs: int = 0
    appts_pitched: int = 0
    appts_set: int = 0
    hybrid_closer: Optional[str] = None
    calls_scheduled: int = 0
    live_calls: int = 0
    prospect_email: Optional[str] = None
    call_date: Optional[str] = None
    offer_made: Optional[str] = None
    call_outcome: Optional[str] = None
    cash_collected: float = 0.0
    revenue_generated: float = 0.0
    call_notes: Optional[str] = None
    closer_name: Optional[str] = None
    setter_name: Optional[str] = None
    fathom_link: Optional[str] = None
    created_at: Optional[str] = None

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @field_validator("created_at", mode="before")
    @classmethod
    def format_created_at(cls, v: Any) -> Optional[str]:
        if isinstance(v, datetime):
            return v.isoformat(sep=" ", timespec="seconds")
        return v
