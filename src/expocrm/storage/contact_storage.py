"""
Contact Storage

PostgreSQL storage for contacts. Reads join the contact's company.
"""
import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.company import Company
from ..models.contact import Contact

logger = logging.getLogger("expocrm.storage.contact")

CONTACT_COLUMNS = (
    "company_id", "first_name", "last_name", "email", "phone", "job_title",
    "linkedin_url", "notes", "avatar_url", "follow_up_status", "follow_up_urgency",
    "last_contacted_at", "is_enriched", "enrichment_confidence", "enrichment_status",
    "enrichment_suggestions", "last_enriched_at",
)

SELECT_WITH_COMPANY = """
    SELECT c.*, to_jsonb(co) AS company
    FROM contacts c
    LEFT JOIN companies co ON co.id = c.company_id
"""


class ContactStorage(BaseStorage):
    """Storage for Contact entities"""

    async def create(self, contact: Contact) -> Contact:
        """Create a new contact"""
        query = """
            INSERT INTO contacts (
                id, company_id, first_name, last_name, email, phone, job_title,
                linkedin_url, notes, avatar_url, follow_up_status, follow_up_urgency,
                last_contacted_at, is_enriched, enrichment_confidence, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16, $17)
            RETURNING id
        """
        contact_id = await self.fetchval(
            query,
            contact.id, contact.company_id, contact.first_name, contact.last_name,
            contact.email, contact.phone, contact.job_title, contact.linkedin_url,
            contact.notes, contact.avatar_url, contact.follow_up_status,
            contact.follow_up_urgency, contact.last_contacted_at, contact.is_enriched,
            contact.enrichment_confidence, contact.created_at, contact.updated_at
        )
        return await self.get_by_id(contact_id)

    async def get_by_id(self, contact_id: UUID) -> Optional[Contact]:
        """Get contact (with company) by ID"""
        row = await self.fetchrow(SELECT_WITH_COMPANY + " WHERE c.id = $1", contact_id)
        return self._row_to_contact(row) if row else None

    async def list_all(self, company_id: Optional[UUID] = None) -> List[Contact]:
        """List contacts newest first, optionally for one company"""
        if company_id:
            rows = await self.fetch(
                SELECT_WITH_COMPANY + " WHERE c.company_id = $1 ORDER BY c.created_at DESC",
                company_id
            )
        else:
            rows = await self.fetch(SELECT_WITH_COMPANY + " ORDER BY c.created_at DESC")
        return [self._row_to_contact(row) for row in rows]

    async def list_by_event(self, event_id: UUID) -> List[Contact]:
        """Contacts with at least one interaction at the event"""
        query = SELECT_WITH_COMPANY + """
            WHERE EXISTS (
                SELECT 1 FROM interactions i
                WHERE i.contact_id = c.id AND i.event_id = $1
            )
            ORDER BY c.created_at DESC
        """
        rows = await self.fetch(query, event_id)
        return [self._row_to_contact(row) for row in rows]

    async def list_by_ids(self, contact_ids: List[UUID]) -> List[Contact]:
        if not contact_ids:
            return []
        rows = await self.fetch(
            SELECT_WITH_COMPANY + " WHERE c.id = ANY($1::uuid[]) ORDER BY c.created_at DESC",
            contact_ids
        )
        return [self._row_to_contact(row) for row in rows]

    async def list_recently_updated(self, limit: int = 5) -> List[Contact]:
        """Most recently updated contacts"""
        rows = await self.fetch(SELECT_WITH_COMPANY + " ORDER BY c.updated_at DESC LIMIT $1", limit)
        return [self._row_to_contact(row) for row in rows]

    async def update(self, contact_id: UUID, updates: dict) -> Optional[Contact]:
        """Update the given columns of a contact"""
        if "enrichment_suggestions" in updates:
            updates = {**updates, "enrichment_suggestions": dump_json(updates["enrichment_suggestions"])}
        row = await self.update_columns("contacts", contact_id, updates, CONTACT_COLUMNS)
        return await self.get_by_id(contact_id) if row else None

    async def set_follow_up(
        self,
        contact_id: UUID,
        status: str,
        urgency: Optional[str] = None,
        contacted_at: Optional[datetime] = None
    ) -> None:
        """Set follow-up status; urgency and last_contacted_at are kept when not given"""
        query = """
            UPDATE contacts
            SET follow_up_status = $2,
                follow_up_urgency = COALESCE($3, follow_up_urgency),
                last_contacted_at = COALESCE($4, last_contacted_at),
                updated_at = NOW()
            WHERE id = $1
        """
        await self.execute(query, contact_id, status, urgency, contacted_at)

    async def delete(self, contact_id: UUID) -> bool:
        """Delete contact"""
        result = await self.execute("DELETE FROM contacts WHERE id = $1", contact_id)
        return self.affected(result) > 0

    def _row_to_contact(self, row) -> Contact:
        """Convert database row to Contact"""
        company = load_json(row["company"])
        return Contact(
            id=row["id"],
            company_id=row["company_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
            job_title=row["job_title"],
            linkedin_url=row["linkedin_url"],
            notes=row["notes"],
            avatar_url=row["avatar_url"],
            follow_up_status=row["follow_up_status"],
            follow_up_urgency=row["follow_up_urgency"],
            last_contacted_at=row["last_contacted_at"],
            is_enriched=row["is_enriched"],
            enrichment_confidence=row["enrichment_confidence"],
            enrichment_status=row["enrichment_status"],
            enrichment_suggestions=load_json(row["enrichment_suggestions"]),
            last_enriched_at=row["last_enriched_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            company=Company.from_dict(company) if company else None
        )
