"""
Google Form webhook ingestion.

The form tool posts answers keyed by the question text, and that text
drifts as the form is edited: punctuation changes, descriptions get
appended on a second line, older integrations send camelCase keys.
Each stored column therefore lists candidate keys in priority order
and a single resolver, :func:`find_field`, picks the first usable
answer.  A candidate matches a payload key exactly, or as a prefix of
it using only the candidate's first line, so
``"Cash Collected\\nThe amount of cash collected today"`` still
resolves when the form renames or drops the description.

Submissions are never deduplicated; replaying a payload stores a
second row.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import insert, text

from ..core.coercion import to_float, to_int, to_text
from ..core.config import settings
from ..core.db import DatabaseError, form_submissions, get_engine
from ..core.errors import ServerError, ValidationError
from ..schemas.entry import EntryFields
from ..schemas.form import FormSubmissionRead
from .entry_service import EntryService
from .user_service import UserService


logger = logging.getLogger(__name__)

Coercer = Callable[[Any], Any]

# column -> (candidate keys, coercion)
FORM_SUBMISSION_FIELDS: Dict[str, Tuple[Sequence[str], Coercer]] = {
    "timestamp": (("Timestamp", "timestamp"), to_text),
    "role": (("What is your role?", "role"), to_text),
    "dials": (("Dials made?", "dials"), to_int),
    "pick_ups": (("Pick ups?", "pickUps"), to_int),
    "dqs": (("DQ's?", "dqs"), to_int),
    "appts_pitched": (("Appt's Pitched?", "apptsPitched"), to_int),
    "appts_set": (("Appt's Set?", "apptsSet"), to_int),
    "hybrid_closer": (("Hybrid Closer?", "hybridCloser"), to_text),
    "calls_scheduled": (("Calls Scheduled?", "callsScheduled"), to_int),
    "live_calls": (("LIVE Calls?", "liveCalls"), to_int),
    "prospect_email": (("Prospect Email", "prospectEmail"), to_text),
    "call_date": (("Date Call Was Taken", "Date", "callDate", "date"), to_text),
    "offer_made": (("Offer Made", "offerMade"), to_text),
    "call_outcome": (("Call Outcome", "callOutcome"), to_text),
    "cash_collected": (
        (
            "Cash Collected\nThe amount of cash collected today (ex 4000, 2000, 1500)",
            "Cash Collected",
            "cashCollected",
        ),
        to_float,
    ),
    "revenue_generated": (
        (
            "Revenue Generated\nThe total value of the contract (ex: 4000, 4500)",
            "Revenue Generated",
            "revenueGenerated",
        ),
        to_float,
    ),
    "call_notes": (("Call Notes", "callNotes"), to_text),
    "closer_name": (("Closer Name", "closerName"), to_text),
    "setter_name": (("Setter Name", "Setter", "setterName"), to_text),
    "fathom_link": (("Fathom Link", "fathomLink"), to_text),
}

# Used when WEBHOOK_TARGET=entries.  Coercion is done by EntryFields.
ENTRY_FIELDS: Dict[str, Sequence[str]] = {
    "date": ("Date Call Was Taken", "Date", "date", "callDate", "Timestamp"),
    "role": ("What is your role?", "role"),
    "booked_calls": ("Booked Calls", "Calls Booked", "Calls Scheduled?", "bookedCalls", "booked_calls"),
    "no_shows": ("No Shows", "No Shows?", "noShows", "no_shows"),
    "closed_won": ("Closed Won", "Closed Won?", "closedWon", "closed_won"),
    "closed_lost": ("Closed Lost", "Closed Lost?", "closedLost", "closed_lost"),
    "pif": ("PIF", "PIF?", "pif"),
    "splits": ("Splits", "Splits?", "splits"),
    "cash_collected": (
        "Cash Collected\nThe amount of cash collected today (ex 4000, 2000, 1500)",
        "Cash Collected",
        "cashCollected",
        "cash_collected",
    ),
    "renewals_cash": ("Renewals Cash", "renewalsCash", "renewals_cash"),
    "reschedules": ("Reschedules", "Reschedules?", "reschedules"),
}

WEBHOOK_TARGETS = ("form_submissions", "entries")


def _is_present(value: Any) -> bool:
    return value is not None and value != ""


def find_field(payload: Mapping[str, Any], candidates: Sequence[str]) -> Optional[Any]:
    """Return the first usable answer for ``candidates``.

    For each candidate in order, an exact key with a present,
    non-empty value wins; failing that, any payload key starting with
    the candidate's first line does.  Returns ``None`` when nothing
    matches.
    """
    for name in candidates:
        value = payload.get(name)
        if _is_present(value):
            return value
        prefix = name.split("\n")[0]
        for key, value in payload.items():
            if isinstance(key, str) and key.startswith(prefix) and _is_present(value):
                return value
    return None


def map_form_submission(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Resolve and coerce every ``form_submissions`` column from a payload."""
    record = {
        column: coerce(find_field(payload, candidates))
        for column, (candidates, coerce) in FORM_SUBMISSION_FIELDS.items()
    }
    if not record["timestamp"]:
        record["timestamp"] = datetime.now(timezone.utc).isoformat()
    return record


def map_entry(payload: Mapping[str, Any]) -> EntryFields:
    """Resolve entry fields from a payload."""
    values = {column: find_field(payload, candidates) for column, candidates in ENTRY_FIELDS.items()}
    return EntryFields(**{column: value for column, value in values.items() if value is not None})


class FormService:
    """Persist and list Google Form submissions."""

    @classmethod
    async def ingest(cls, payload: Any) -> int:
        """Store one submission and return the new row id.

        Writes to ``form_submissions`` or, when ``settings.webhook_target``
        is ``entries``, to ``entries`` under the default webhook user.
        Raises ``ValidationError`` for non-object payloads and
        ``ServerError`` when the row cannot be saved.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Form payload must be a JSON object")
        target = settings.webhook_target
        if target not in WEBHOOK_TARGETS:
            raise ServerError("Failed to save form submission", details=f"Unknown webhook target {target!r}")

        try:
            if target == "entries":
                owner_id = await UserService.get_or_create_webhook_user()
                row_id = await EntryService.create_entry(owner_id, map_entry(payload))
            else:
                row_id = await cls._insert_submission(map_form_submission(payload))
        except DatabaseError as e:
            logger.exception("Failed to save form submission")
            raise ServerError("Failed to save form submission", details=str(e)) from e

        logger.info("Saved form submission %s into %s", row_id, target)
        return row_id

    @classmethod
    async def _insert_submission(cls, record: Dict[str, Any]) -> int:
        with get_engine().begin() as conn:
            return conn.execute(
                insert(form_submissions).values(**record).returning(form_submissions.c.id)
            ).scalar_one()

    @classmethod
    async def list_submissions(cls) -> List[FormSubmissionRead]:
        """Return every stored submission, newest first."""
        with get_engine().begin() as conn:
            rows = conn.execute(
                text("SELECT * FROM form_submissions ORDER BY created_at DESC, id DESC")
            ).mappings().all()
        return [FormSubmissionRead(**row) for row in rows]
