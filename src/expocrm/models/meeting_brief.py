"""
Meeting Brief Model

A scheduled meeting with a contact plus the AI preparation material for it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str
from .contact import Contact


class MeetingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class MeetingBrief:
    """
    Meeting entity.

    prep_data keys: who_is_this, relationship_summary,
    key_talking_points (list), interaction_highlights
    """
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    meeting_date: datetime = field(default_factory=utcnow)
    meeting_type: str = "in_person"
    meeting_location: Optional[str] = None
    ai_talking_points: Optional[str] = None
    interaction_summary: Optional[str] = None
    pre_meeting_notes: Optional[str] = None
    post_meeting_notes: Optional[str] = None
    prep_data: Optional[dict] = None
    status: str = MeetingStatus.SCHEDULED.value
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    contact: Optional[Contact] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "company_id": uuid_str(self.company_id),
            "event_id": uuid_str(self.event_id),
            "meeting_date": iso(self.meeting_date),
            "meeting_type": self.meeting_type,
            "meeting_location": self.meeting_location,
            "ai_talking_points": self.ai_talking_points,
            "interaction_summary": self.interaction_summary,
            "pre_meeting_notes": self.pre_meeting_notes,
            "post_meeting_notes": self.post_meeting_notes,
            "prep_data": self.prep_data,
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "contact": self.contact.to_dict() if self.contact else None,
        }
