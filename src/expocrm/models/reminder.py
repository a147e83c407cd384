"""
Reminder Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str
from .contact import Contact


class ReminderStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    SNOOZED = "snoozed"
    DISMISSED = "dismissed"


@dataclass
class Reminder:
    """Reminder about a contact, event or meeting"""
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    meeting_brief_id: Optional[UUID] = None
    reminder_type: str = ""
    reminder_date: datetime = field(default_factory=utcnow)
    title: str = ""
    message: Optional[str] = None
    priority: str = "medium"
    status: str = ReminderStatus.PENDING.value
    snoozed_until: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    contact: Optional[Contact] = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "event_id": uuid_str(self.event_id),
            "meeting_brief_id": uuid_str(self.meeting_brief_id),
            "reminder_type": self.reminder_type,
            "reminder_date": iso(self.reminder_date),
            "title": self.title,
            "message": self.message,
            "priority": self.priority,
            "status": self.status,
            "snoozed_until": iso(self.snoozed_until),
            "sent_at": iso(self.sent_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "contact": self.contact.to_dict() if self.contact else None,
        }
