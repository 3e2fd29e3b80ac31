"""
Google Form webhook and dashboard feeds.

These routes are unauthenticated: the webhook is called
by the form tool, and the two listing routes feed a shared dashboard.
"""

import logging

from fastapi import APIRouter, Request

from sales_tracker_api.app.core.errors import ValidationError
from sales_tracker_api.app.services.entry_service import EntryService
from sales_tracker_api.app.services.form_service import FormService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook/google-form")
async def google_form_webhook(request: Request) -> dict:
    """Store one Google Form submission.

    Accepts any JSON object.  Answers are matched to columns by
    question text with camelCase fallbacks; see ``form_service``.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be JSON") from e
    logger.info("Received Google Form submission with %d fields", len(payload) if isinstance(payload, dict) else 0)
    logger.debug("Google Form payload: %s", payload)
    row_id = await FormService.ingest(payload)
    return {"success": True, "id": row_id, "message": "Form submission saved"}


@router.get("/forms/entries")
async def list_form_entries() -> dict:
    """All form submissions, newest first, with camelCase keys."""
    submissions = await FormService.list_submissions()
    return {"entries": [s.model_dump(by_alias=True) for s in submissions]}


@router.get("/webhook/entries")
async def list_all_entries() -> dict:
    """All entries of every user, newest first."""
    entries = await EntryService.list_all()
    return {"entries": [entry.model_dump() for entry in entries]}
