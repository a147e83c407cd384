"""
Reminder Service
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.common import parse_datetime, parse_uuid, utcnow
from ..models.reminder import Reminder, ReminderStatus
from ..storage.reminder_storage import ReminderStorage, REMINDER_COLUMNS
from .exceptions import NotFoundError

logger = logging.getLogger("expocrm.services.reminder")

PRIORITIES = ("low", "medium", "high")
DEFAULT_LIMIT = 50


class ReminderService:
    """Service for reminders"""

    def __init__(self, storage: ReminderStorage):
        self.storage = storage

    async def list_reminders(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Reminder]:
        """Reminders with a status (default pending), soonest first"""
        return await self.storage.list_by_status(
            status or ReminderStatus.PENDING.value,
            limit or DEFAULT_LIMIT,
        )

    async def create_reminder(self, data: dict) -> Reminder:
        """
        Create a pending reminder.

        Raises:
            ValueError: If type, date or title is missing, or the
                priority is unknown
        """
        reminder_date = parse_datetime(data.get("reminder_date"))
        if not data.get("reminder_type") or not reminder_date or not data.get("title"):
            raise ValueError("Type, date, and title are required")

        priority = data.get("priority") or "medium"
        if priority not in PRIORITIES:
            raise ValueError(f"Invalid priority: {priority}")

        reminder = await self.storage.create(Reminder(
            contact_id=parse_uuid(data.get("contact_id")),
            event_id=parse_uuid(data.get("event_id")),
            meeting_brief_id=parse_uuid(data.get("meeting_brief_id")),
            reminder_type=data["reminder_type"],
            reminder_date=reminder_date,
            title=data["title"],
            message=data.get("message"),
            priority=priority,
        ))
        logger.info(f"Created reminder {reminder.id}: {reminder.title}")
        return reminder

    async def update_reminder(self, reminder_id: UUID, updates: dict) -> Reminder:
        """Change status or snooze; moving to sent stamps sent_at"""
        updates = {k: v for k, v in updates.items() if k in REMINDER_COLUMNS}
        status = updates.get("status")
        if status is not None and status not in {s.value for s in ReminderStatus}:
            raise ValueError(f"Invalid status: {status}")

        if "snoozed_until" in updates:
            updates["snoozed_until"] = parse_datetime(updates["snoozed_until"])
        if "sent_at" in updates:
            updates["sent_at"] = parse_datetime(updates["sent_at"])
        if status == ReminderStatus.SENT.value and not updates.get("sent_at"):
            updates["sent_at"] = utcnow()

        reminder = await self.storage.update(reminder_id, updates)
        if not reminder:
            raise NotFoundError("Reminder", reminder_id)
        return reminder

    async def delete_reminder(self, reminder_id: UUID) -> bool:
        return await self.storage.delete(reminder_id)
