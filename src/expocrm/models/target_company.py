"""
Target Company Model

A company flagged as an outreach target for a specific event.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso
from .company import Company


class TargetPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def rank(cls, value: Optional[str]) -> int:
        """Sort rank: high=0, medium=1, anything else (low, unknown) = 2"""
        if value == cls.HIGH.value:
            return 0
        if value == cls.MEDIUM.value:
            return 1
        return 2


class TargetStatus(str, Enum):
    NOT_CONTACTED = "not_contacted"
    CONTACTED = "contacted"
    FOLLOWED_UP = "followed_up"


@dataclass
class TargetCompany:
    """
    Target entity.

    (event_id, company_id) is unique: a company is targeted at most once per event.
    """
    id: UUID = field(default_factory=uuid4)
    event_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    priority: str = TargetPriority.MEDIUM.value
    booth_location: Optional[str] = None
    talking_points: Optional[str] = None
    notes: Optional[str] = None
    status: str = TargetStatus.NOT_CONTACTED.value
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    company: Optional[Company] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "event_id": str(self.event_id) if self.event_id else None,
            "company_id": str(self.company_id) if self.company_id else None,
            "priority": self.priority,
            "booth_location": self.booth_location,
            "talking_points": self.talking_points,
            "notes": self.notes,
            "status": self.status,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "company": self.company.to_dict() if self.company else None,
        }


def sort_targets(targets: list) -> list:
    """Order targets high -> medium -> low, newest first within a priority"""
    by_date = sorted(targets, key=lambda t: t.created_at, reverse=True)
    return sorted(by_date, key=lambda t: TargetPriority.rank(t.priority))
