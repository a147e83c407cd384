"""
Document Model

Record of a file shared with (or by) a contact. The file itself lives in
object storage; only its URL and an AI summary are kept here.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str


@dataclass
class Document:
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    name: str = ""
    file_url: Optional[str] = None
    file_type: Optional[str] = "pdf"
    description: Optional[str] = None
    summary: Optional[str] = None
    summary_generated_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "company_id": uuid_str(self.company_id),
            "event_id": uuid_str(self.event_id),
            "name": self.name,
            "file_url": self.file_url,
            "file_type": self.file_type,
            "description": self.description,
            "summary": self.summary,
            "summary_generated_at": iso(self.summary_generated_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
