"""
Interaction Model

A touchpoint with a contact: card capture, meeting, email, note or shared document.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str


class InteractionType(str, Enum):
    CAPTURE = "capture"
    MEETING = "meeting"
    EMAIL = "email"
    NOTE = "note"
    DOCUMENT_UPLOAD = "document_upload"


@dataclass
class Interaction:
    """Interaction entity (details is free-form JSON)"""
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    interaction_type: str = InteractionType.NOTE.value
    interaction_date: datetime = field(default_factory=utcnow)
    summary: Optional[str] = None
    details: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "event_id": uuid_str(self.event_id),
            "interaction_type": self.interaction_type,
            "interaction_date": iso(self.interaction_date),
            "summary": self.summary,
            "details": self.details,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
