"""
Capture Model

A business card, badge, QR code or photo captured at an event.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str
from .contact import Contact


class CaptureType(str, Enum):
    CARD_SCAN = "card_scan"
    QR_CODE = "qr_code"
    MANUAL = "manual"
    BADGE_SCAN = "badge_scan"
    PHOTO_UPLOAD = "photo_upload"


class CaptureStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Capture:
    """
    Capture entity.

    raw_data holds what the client sent (OCR text, manual form data);
    extracted_data holds structured contact fields.
    """
    id: UUID = field(default_factory=uuid4)
    event_id: Optional[UUID] = None
    contact_id: Optional[UUID] = None
    capture_type: str = CaptureType.CARD_SCAN.value
    image_url: Optional[str] = None
    raw_data: dict = field(default_factory=dict)
    extracted_data: dict = field(default_factory=dict)
    status: str = CaptureStatus.PENDING.value
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    contact: Optional[Contact] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "event_id": uuid_str(self.event_id),
            "contact_id": uuid_str(self.contact_id),
            "capture_type": self.capture_type,
            "image_url": self.image_url,
            "raw_data": self.raw_data,
            "extracted_data": self.extracted_data,
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "contact": self.contact.to_dict() if self.contact else None,
        }
