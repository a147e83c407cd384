"""
Meeting Storage

PostgreSQL storage for meeting briefs. Reads join the contact and company.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.contact import Contact
from ..models.meeting_brief import MeetingBrief

logger = logging.getLogger("expocrm.storage.meeting")

MEETING_COLUMNS = (
    "meeting_date", "meeting_type", "meeting_location", "ai_talking_points",
    "interaction_summary", "pre_meeting_notes", "post_meeting_notes", "prep_data", "status",
)

SELECT_WITH_CONTACT = """
    SELECT m.*,
           CASE WHEN c.id IS NULL THEN NULL
                ELSE to_jsonb(c) || jsonb_build_object('company', to_jsonb(co))
           END AS contact
    FROM meeting_briefs m
    LEFT JOIN contacts c ON c.id = m.contact_id
    LEFT JOIN companies co ON co.id = c.company_id
"""


class MeetingStorage(BaseStorage):
    """Storage for MeetingBrief entities"""

    async def create(self, meeting: MeetingBrief) -> MeetingBrief:
        query = """
            INSERT INTO meeting_briefs (
                id, contact_id, company_id, event_id, meeting_date, meeting_type,
                meeting_location, ai_talking_points, interaction_summary,
                pre_meeting_notes, post_meeting_notes, prep_data, status,
                created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12::jsonb, $13, $14, $15)
            RETURNING id
        """
        meeting_id = await self.fetchval(
            query,
            meeting.id, meeting.contact_id, meeting.company_id, meeting.event_id,
            meeting.meeting_date, meeting.meeting_type, meeting.meeting_location,
            meeting.ai_talking_points, meeting.interaction_summary,
            meeting.pre_meeting_notes, meeting.post_meeting_notes,
            dump_json(meeting.prep_data), meeting.status,
            meeting.created_at, meeting.updated_at
        )
        return await self.get_by_id(meeting_id)

    async def get_by_id(self, meeting_id: UUID) -> Optional[MeetingBrief]:
        row = await self.fetchrow(SELECT_WITH_CONTACT + " WHERE m.id = $1", meeting_id)
        return self._row_to_meeting(row) if row else None

    async def list_by_status(self, status: str) -> List[MeetingBrief]:
        """Meetings with a status, earliest first"""
        rows = await self.fetch(
            SELECT_WITH_CONTACT + " WHERE m.status = $1 ORDER BY m.meeting_date ASC",
            status
        )
        return [self._row_to_meeting(row) for row in rows]

    async def list_by_contact(self, contact_id: UUID, limit: Optional[int] = None) -> List[MeetingBrief]:
        rows = await self.fetch(
            SELECT_WITH_CONTACT + " WHERE m.contact_id = $1 ORDER BY m.meeting_date DESC LIMIT $2",
            contact_id, limit
        )
        return [self._row_to_meeting(row) for row in rows]

    async def list_upcoming(self, limit: int = 5) -> List[MeetingBrief]:
        """Scheduled meetings from now on, earliest first"""
        query = SELECT_WITH_CONTACT + """
            WHERE m.status = 'scheduled' AND m.meeting_date >= NOW()
            ORDER BY m.meeting_date ASC
            LIMIT $1
        """
        rows = await self.fetch(query, limit)
        return [self._row_to_meeting(row) for row in rows]

    async def update(self, meeting_id: UUID, updates: dict) -> Optional[MeetingBrief]:
        if "prep_data" in updates:
            updates = {**updates, "prep_data": dump_json(updates["prep_data"])}
        row = await self.update_columns("meeting_briefs", meeting_id, updates, MEETING_COLUMNS)
        return await self.get_by_id(meeting_id) if row else None

    async def delete(self, meeting_id: UUID) -> bool:
        result = await self.execute("DELETE FROM meeting_briefs WHERE id = $1", meeting_id)
        return self.affected(result) > 0

    def _row_to_meeting(self, row) -> MeetingBrief:
        """Convert database row to MeetingBrief"""
        contact = load_json(row["contact"])
        return MeetingBrief(
            id=row["id"],
            contact_id=row["contact_id"],
            company_id=row["company_id"],
            event_id=row["event_id"],
            meeting_date=row["meeting_date"],
            meeting_type=row["meeting_type"],
            meeting_location=row["meeting_location"],
            ai_talking_points=row["ai_talking_points"],
            interaction_summary=row["interaction_summary"],
            pre_meeting_notes=row["pre_meeting_notes"],
            post_meeting_notes=row["post_meeting_notes"],
            prep_data=load_json(row["prep_data"]),
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            contact=Contact.from_dict(contact) if contact else None
        )
