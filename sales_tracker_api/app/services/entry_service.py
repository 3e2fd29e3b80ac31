"""
Business logic for sales-activity entries.

Every query is scoped by owner.  Updates and deletes on an entry the
caller does not own fail exactly like updates and deletes on a missing
entry, so the API never reveals which ids exist.
"""

import logging
from typing import List

from sqlalchemy import text

from ..core.coercion import INT_MAX
from ..core.db import get_engine
from ..core.errors import NotFoundError
from ..schemas.entry import MUTABLE_COLUMNS, EntryFields, EntryRead


logger = logging.getLogger(__name__)

_SELECT = "SELECT id, user_id, {columns}, created_at FROM entries".format(
    columns=", ".join(MUTABLE_COLUMNS)
)
_INSERT = "INSERT INTO entries (user_id, {columns}) VALUES (:user_id, {params}) RETURNING id".format(
    columns=", ".join(MUTABLE_COLUMNS),
    params=", ".join(f":{column}" for column in MUTABLE_COLUMNS),
)
_UPDATE = "UPDATE entries SET {assignments} WHERE id = :id AND user_id = :user_id".format(
    assignments=", ".join(f"{column} = :{column}" for column in MUTABLE_COLUMNS)
)


def _check_entry_id(entry_id: int) -> None:
    if not 0 < entry_id <= INT_MAX:
        raise NotFoundError("Entry not found")


class EntryService:
    """CRUD over the ``entries`` table."""

    @classmethod
    async def list_entries(cls, owner_id: int) -> List[EntryRead]:
        """Return the owner's entries, newest date first."""
        with get_engine().begin() as conn:
            rows = conn.execute(
                text(_SELECT + " WHERE user_id = :user_id ORDER BY date DESC, id DESC"),
                {"user_id": owner_id},
            ).mappings().all()
        return [EntryRead(**row) for row in rows]

    @classmethod
    async def list_all(cls) -> List[EntryRead]:
        """Return entries of every owner, most recently created first."""
        with get_engine().begin() as conn:
            rows = conn.execute(text(_SELECT + " ORDER BY created_at DESC, id DESC")).mappings().all()
        return [EntryRead(**row) for row in rows]

    @classmethod
    async def create_entry(cls, owner_id: int, data: EntryFields) -> int:
        """Insert an entry for ``owner_id`` and return its id."""
        with get_engine().begin() as conn:
            entry_id = conn.execute(
                text(_INSERT), {"user_id": owner_id, **data.column_values()}
            ).scalar_one()
        logger.info("User %s created entry %s", owner_id, entry_id)
        return entry_id

    @classmethod
    async def update_entry(cls, entry_id: int, owner_id: int, data: EntryFields) -> None:
        """Overwrite every mutable column of an owned entry.

        Raises ``NotFoundError`` if the entry is missing or owned by
        another user.
        """
        _check_entry_id(entry_id)
        with get_engine().begin() as conn:
            updated = conn.execute(
                text(_UPDATE), {"id": entry_id, "user_id": owner_id, **data.column_values()}
            ).rowcount
        if not updated:
            raise NotFoundError("Entry not found")
        logger.info("User %s updated entry %s", owner_id, entry_id)

    @classmethod
    async def delete_entry(cls, entry_id: int, owner_id: int) -> None:
        """Delete an owned entry.

        Raises ``NotFoundError`` if the entry is missing or owned by
        another user.
        """
        _check_entry_id(entry_id)
        with get_engine().begin() as conn:
            deleted = conn.execute(
                text("DELETE FROM entries WHERE id = :id AND user_id = :user_id"),
                {"id": entry_id, "user_id": owner_id},
            ).rowcount
        if not deleted:
            raise NotFoundError("Entry not found")
        logger.info("User %s deleted entry %s", owner_id, entry_id)
