"""
Reminder Storage

PostgreSQL storage for reminders.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json
from ..models.contact import Contact
from ..models.reminder import Reminder

logger = logging.getLogger("expocrm.storage.reminder")

REMINDER_COLUMNS = ("status", "snoozed_until", "sent_at")


class ReminderStorage(BaseStorage):
    """Storage for Reminder entities"""

    async def create(self, reminder: Reminder) -> Reminder:
        query = """
            INSERT INTO reminders (
                id, contact_id, event_id, meeting_brief_id, reminder_type, reminder_date,
                title, message, priority, status, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12)
            RETURNING *, NULL::jsonb AS contact
        """
        row = await self.fetchrow(
            query,
            reminder.id, reminder.contact_id, reminder.event_id, reminder.meeting_brief_id,
            reminder.reminder_type, reminder.reminder_date, reminder.title, reminder.message,
            reminder.priority, reminder.status, reminder.created_at, reminder.updated_at
        )
        return self._row_to_reminder(row)

    async def list_by_status(self, status: str, limit: int = 50) -> List[Reminder]:
        """Reminders with a status, soonest first, with contact"""
        query = """
            SELECT r.*, to_jsonb(c) AS contact
            FROM reminders r
            LEFT JOIN contacts c ON c.id = r.contact_id
            WHERE r.status = $1
            ORDER BY r.reminder_date ASC
            LIMIT $2
        """
        rows = await self.fetch(query, status, limit)
        return [self._row_to_reminder(row) for row in rows]

    async def list_by_meeting(self, meeting_id: UUID) -> List[Reminder]:
        query = """
            SELECT *, NULL::jsonb AS contact FROM reminders
            WHERE meeting_brief_id = $1
            ORDER BY reminder_date ASC
        """
        rows = await self.fetch(query, meeting_id)
        return [self._row_to_reminder(row) for row in rows]

    async def update(self, reminder_id: UUID, updates: dict) -> Optional[Reminder]:
        row = await self.update_columns("reminders", reminder_id, updates, REMINDER_COLUMNS)
        if not row:
            return None
        return self._row_to_reminder({**dict(row), "contact": None})

    async def delete(self, reminder_id: UUID) -> bool:
        result = await self.execute("DELETE FROM reminders WHERE id = $1", reminder_id)
        return self.affected(result) > 0

    def _row_to_reminder(self, row) -> Reminder:
        """Convert database row to Reminder"""
        contact = load_json(row["contact"])
        return Reminder(
            id=row["id"],
            contact_id=row["contact_id"],
            event_id=row["event_id"],
            meeting_brief_id=row["meeting_brief_id"],
            reminder_type=row["reminder_type"],
            reminder_date=row["reminder_date"],
            title=row["title"],
            message=row["message"],
            priority=row["priority"],
            status=row["status"],
            snoozed_until=row["snoozed_until"],
            sent_at=row["sent_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            contact=Contact.from_dict(contact) if contact else None
        )
