"""
Email Draft Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str
from .contact import Contact


class EmailType(str, Enum):
    PRE_EVENT = "pre_event"
    FOLLOW_UP = "follow_up"
    PRE_MEETING = "pre_meeting"


class DraftStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ARCHIVED = "archived"


@dataclass
class EmailDraft:
    """Generated email, optionally tied to an event"""
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    email_type: str = EmailType.FOLLOW_UP.value
    subject: Optional[str] = None
    body: Optional[str] = None
    status: str = DraftStatus.DRAFT.value
    sent_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    contact: Optional[Contact] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "event_id": uuid_str(self.event_id),
            "email_type": self.email_type,
            "subject": self.subject,
            "body": self.body,
            "status": self.status,
            "sent_at": iso(self.sent_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "contact": self.contact.to_dict() if self.contact else None,
        }
