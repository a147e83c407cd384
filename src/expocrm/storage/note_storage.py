"""
Note Storage

PostgreSQL storage for notes.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.note import Note

logger = logging.getLogger("expocrm.storage.note")

NOTE_COLUMNS = ("contact_id", "event_id", "interaction_id", "content", "note_type", "source_url")


class NoteStorage(BaseStorage):
    """Storage for Note entities"""

    async def create(self, note: Note) -> Note:
        query = """
            INSERT INTO notes (
                id, contact_id, event_id, interaction_id, content, note_type,
                source_url, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            note.id, note.contact_id, note.event_id, note.interaction_id, note.content,
            note.note_type, note.source_url, note.created_at, note.updated_at
        )
        return self._row_to_note(row)

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        row = await self.fetchrow("SELECT * FROM notes WHERE id = $1", note_id)
        return self._row_to_note(row) if row else None

    async def list_by_contact(self, contact_id: UUID, limit: Optional[int] = None) -> List[Note]:
        """A contact's notes, newest first"""
        query = "SELECT * FROM notes WHERE contact_id = $1 ORDER BY created_at DESC LIMIT $2"
        rows = await self.fetch(query, contact_id, limit)
        return [self._row_to_note(row) for row in rows]

    async def list_by_company(self, company_id: UUID, limit: int = 20) -> List[Note]:
        """Notes about any contact of a company"""
        query = """
            SELECT n.* FROM notes n
            JOIN contacts c ON c.id = n.contact_id
            WHERE c.company_id = $1
            ORDER BY n.created_at DESC
            LIMIT $2
        """
        rows = await self.fetch(query, company_id, limit)
        return [self._row_to_note(row) for row in rows]

    async def update(self, note_id: UUID, updates: dict) -> Optional[Note]:
        row = await self.update_columns("notes", note_id, updates, NOTE_COLUMNS)
        return self._row_to_note(row) if row else None

    def _row_to_note(self, row) -> Note:
        """Convert database row to Note"""
        return Note(
            id=row["id"],
            contact_id=row["contact_id"],
            event_id=row["event_id"],
            interaction_id=row["interaction_id"],
            content=row["content"],
            note_type=row["note_type"],
            source_url=row["source_url"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
