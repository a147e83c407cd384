"""
Event Model

Represents an exhibition, conference or meeting where leads are captured.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso


class EventStatus(str, Enum):
    """Lifecycle status, derived from the event dates on read"""
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


@dataclass
class Event:
    """
    Event entity.

    Events own target companies, captures and interactions.
    The stored status is only a hint; API responses use derive_status().
    """
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    event_type: str = "exhibition"                      # exhibition | conference | meeting
    status: str = EventStatus.UPCOMING.value
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def derive_status(self, today: Optional[date] = None) -> str:
        """
        Status for a given day.

        ongoing: start_date <= today <= end_date (end defaults to start, inclusive)
        completed: today after the last day
        upcoming: otherwise (including events without a start date)
        """
        if not self.start_date:
            return EventStatus.UPCOMING.value
        today = today or utcnow().date()
        end = self.end_date or self.start_date
        if self.start_date <= today <= end:
            return EventStatus.ONGOING.value
        if today > end:
            return EventStatus.COMPLETED.value
        return EventStatus.UPCOMING.value

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
            "event_type": self.event_type,
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
