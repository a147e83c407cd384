"""
Capture Storage

PostgreSQL storage for captures. List reads join the contact and its company.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.capture import Capture
from ..models.contact import Contact

logger = logging.getLogger("expocrm.storage.capture")

SELECT_WITH_CONTACT = """
    SELECT cap.*,
           CASE WHEN c.id IS NULL THEN NULL
                ELSE to_jsonb(c) || jsonb_build_object('company', to_jsonb(co))
           END AS contact
    FROM captures cap
    LEFT JOIN contacts c ON c.id = cap.contact_id
    LEFT JOIN companies co ON co.id = c.company_id
"""


class CaptureStorage(BaseStorage):
    """Storage for Capture entities"""

    async def create(self, capture: Capture) -> Capture:
        """Create a new capture"""
        query = """
            INSERT INTO captures (
                id, event_id, contact_id, capture_type, image_url, raw_data,
                extracted_data, status, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6::jsonb, $7::jsonb, $8, $9, $10)
            RETURNING *, NULL::jsonb AS contact
        """
        row = await self.fetchrow(
            query,
            capture.id, capture.event_id, capture.contact_id, capture.capture_type,
            capture.image_url, dump_json(capture.raw_data or {}),
            dump_json(capture.extracted_data or {}), capture.status,
            capture.created_at, capture.updated_at
        )
        return self._row_to_capture(row)

    async def get_by_id(self, capture_id: UUID) -> Optional[Capture]:
        row = await self.fetchrow(SELECT_WITH_CONTACT + " WHERE cap.id = $1", capture_id)
        return self._row_to_capture(row) if row else None

    async def list_all(self, event_id: Optional[UUID] = None, status: Optional[str] = None) -> List[Capture]:
        """Captures newest first, optionally for one event and/or status"""
        query = SELECT_WITH_CONTACT + """
            WHERE ($1::uuid IS NULL OR cap.event_id = $1)
              AND ($2::text IS NULL OR cap.status = $2)
            ORDER BY cap.created_at DESC
        """
        rows = await self.fetch(query, event_id, status)
        return [self._row_to_capture(row) for row in rows]

    async def list_by_contact(self, contact_id: UUID) -> List[Capture]:
        """A contact's captures, newest first"""
        query = """
            SELECT *, NULL::jsonb AS contact FROM captures
            WHERE contact_id = $1
            ORDER BY created_at DESC
        """
        rows = await self.fetch(query, contact_id)
        return [self._row_to_capture(row) for row in rows]

    async def link_contact(self, capture_id: UUID, contact_id: UUID) -> None:
        query = "UPDATE captures SET contact_id = $2, updated_at = NOW() WHERE id = $1"
        await self.execute(query, capture_id, contact_id)

    async def delete(self, capture_id: UUID) -> bool:
        result = await self.execute("DELETE FROM captures WHERE id = $1", capture_id)
        return self.affected(result) > 0

    def _row_to_capture(self, row) -> Capture:
        """Convert database row to Capture"""
        contact = load_json(row["contact"])
        return Capture(
            id=row["id"],
            event_id=row["event_id"],
            contact_id=row["contact_id"],
            capture_type=row["capture_type"],
            image_url=row["image_url"],
            raw_data=load_json(row["raw_data"], {}),
            extracted_data=load_json(row["extracted_data"], {}),
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            contact=Contact.from_dict(contact) if contact else None
        )
