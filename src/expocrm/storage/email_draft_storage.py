"""
Email Draft Storage

PostgreSQL storage for generated email drafts.
"""
import logging
from datetime import datetime
from typing import Optional, List, Set
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json
from ..models.contact import Contact
from ..models.email_draft import EmailDraft

logger = logging.getLogger("expocrm.storage.email_draft")

SELECT_WITH_CONTACT = """
    SELECT d.*,
           CASE WHEN c.id IS NULL THEN NULL
                ELSE to_jsonb(c) || jsonb_build_object('company', to_jsonb(co))
           END AS contact
    FROM email_drafts d
    LEFT JOIN contacts c ON c.id = d.contact_id
    LEFT JOIN companies co ON co.id = c.company_id
"""


class EmailDraftStorage(BaseStorage):
    """Storage for EmailDraft entities"""

    async def create(self, draft: EmailDraft) -> EmailDraft:
        query = """
            INSERT INTO email_drafts (
                id, contact_id, event_id, email_type, subject, body, status,
                sent_at, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *, NULL::jsonb AS contact
        """
        row = await self.fetchrow(
            query,
            draft.id, draft.contact_id, draft.event_id, draft.email_type, draft.subject,
            draft.body, draft.status, draft.sent_at, draft.created_at, draft.updated_at
        )
        return self._row_to_draft(row)

    async def get_by_id(self, draft_id: UUID) -> Optional[EmailDraft]:
        row = await self.fetchrow(SELECT_WITH_CONTACT + " WHERE d.id = $1", draft_id)
        return self._row_to_draft(row) if row else None

    async def list_by_event(self, event_id: UUID) -> List[EmailDraft]:
        """Drafts for an event with contact and company, newest first"""
        rows = await self.fetch(
            SELECT_WITH_CONTACT + " WHERE d.event_id = $1 ORDER BY d.created_at DESC",
            event_id
        )
        return [self._row_to_draft(row) for row in rows]

    async def contact_ids_with_sent(self, event_id: Optional[UUID] = None) -> Set[UUID]:
        """Contacts having at least one sent draft (for the event, when given)"""
        query = """
            SELECT DISTINCT contact_id FROM email_drafts
            WHERE status = 'sent' AND contact_id IS NOT NULL
              AND ($1::uuid IS NULL OR event_id = $1)
        """
        rows = await self.fetch(query, event_id)
        return {row["contact_id"] for row in rows}

    async def mark_sent(self, draft_id: UUID, sent_at: datetime) -> None:
        query = "UPDATE email_drafts SET status = 'sent', sent_at = $2, updated_at = NOW() WHERE id = $1"
        await self.execute(query, draft_id, sent_at)

    async def delete(self, draft_id: UUID) -> int:
        """Delete a draft; returns the number of rows deleted (0 or 1)"""
        result = await self.execute("DELETE FROM email_drafts WHERE id = $1", draft_id)
        return self.affected(result)

    def _row_to_draft(self, row) -> EmailDraft:
        """Convert database row to EmailDraft"""
        contact = load_json(row["contact"])
        return EmailDraft(
            id=row["id"],
            contact_id=row["contact_id"],
            event_id=row["event_id"],
            email_type=row["email_type"],
            subject=row["subject"],
            body=row["body"],
            status=row["status"],
            sent_at=row["sent_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            contact=Contact.from_dict(contact) if contact else None
        )
