"""
Note Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str


class NoteType(str, Enum):
    TEXT = "text"
    VOICE = "voice"
    PHOTO = "photo"


@dataclass
class Note:
    """
    Free-form note about a contact or event.

    Voice notes keep their audio payload (data URL) in source_url.
    """
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    interaction_id: Optional[UUID] = None
    content: str = ""
    note_type: str = NoteType.TEXT.value
    source_url: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "event_id": uuid_str(self.event_id),
            "interaction_id": uuid_str(self.interaction_id),
            "content": self.content,
            "note_type": self.note_type,
            "source_url": self.source_url,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
