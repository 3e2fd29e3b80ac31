"""
Entry endpoints.

CRUD over the caller's own sales-activity entries.  All routes require
an active session; an entry that belongs to someone else answers 404,
the same as an entry that does not exist.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from sales_tracker_api.app.core.security import require_auth
from sales_tracker_api.app.schemas.entry import EntryFields
from sales_tracker_api.app.services.entry_service import EntryService


router = APIRouter()


@router.get("/entries")
async def list_entries(user_id: int = Depends(require_auth)) -> dict:
    entries = await EntryService.list_entries(user_id)
    return {"entries": [entry.model_dump() for entry in entries]}


@router.post("/entries")
async def create_entry(
    data: Optional[EntryFields] = None,
    user_id: int = Depends(require_auth),
) -> dict:
    """Create an entry.  Omitted numeric fields are stored as 0."""
    entry_id = await EntryService.create_entry(user_id, data or EntryFields())
    return {"success": True, "id": entry_id}


@router.put("/entries/{entry_id}")
async def update_entry(
    entry_id: int,
    data: Optional[EntryFields] = None,
    user_id: int = Depends(require_auth),
) -> dict:
    """Replace every mutable field of an entry owned by the caller."""
    await EntryService.update_entry(entry_id, user_id, data or EntryFields())
    return {"success": True}


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: int, user_id: int = Depends(require_auth)) -> dict:
    await EntryService.delete_entry(entry_id, user_id)
    return {"success": True}
