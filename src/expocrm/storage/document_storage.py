"""
Document Storage

PostgreSQL storage for contact documents.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.document import Document

logger = logging.getLogger("expocrm.storage.document")


class DocumentStorage(BaseStorage):
    """Storage for Document entities"""

    async def create(self, document: Document) -> Document:
        query = """
            INSERT INTO documents (
                id, contact_id, company_id, event_id, name, file_url, file_type,
                description, summary, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            document.id, document.contact_id, document.company_id, document.event_id,
            document.name, document.file_url, document.file_type, document.description,
            document.summary, document.created_at, document.updated_at
        )
        return self._row_to_document(row)

    async def get_by_id(self, document_id: UUID) -> Optional[Document]:
        row = await self.fetchrow("SELECT * FROM documents WHERE id = $1", document_id)
        return self._row_to_document(row) if row else None

    async def list_by_contact(self, contact_id: UUID, limit: Optional[int] = None) -> List[Document]:
        """A contact's documents, newest first"""
        query = "SELECT * FROM documents WHERE contact_id = $1 ORDER BY created_at DESC LIMIT $2"
        rows = await self.fetch(query, contact_id, limit)
        return [self._row_to_document(row) for row in rows]

    async def set_summary(self, document_id: UUID, summary: str) -> Optional[Document]:
        query = """
            UPDATE documents
            SET summary = $2, summary_generated_at = NOW(), updated_at = NOW()
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, document_id, summary)
        return self._row_to_document(row) if row else None

    def _row_to_document(self, row) -> Document:
        """Convert database row to Document"""
        return Document(
            id=row["id"],
            contact_id=row["contact_id"],
            company_id=row["company_id"],
            event_id=row["event_id"],
            name=row["name"],
            file_url=row["file_url"],
            file_type=row["file_type"],
            description=row["description"],
            summary=row["summary"],
            summary_generated_at=row["summary_generated_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
