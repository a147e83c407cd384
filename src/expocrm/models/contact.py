"""
Contact Model

Represents a person met (or to be met) at an event.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str, parse_uuid, parse_datetime
from .company import Company


class FollowUpStatus(str, Enum):
    """Whether a contact has been engaged after capture"""
    NOT_CONTACTED = "not_contacted"
    NEEDS_FOLLOWUP = "needs_followup"
    FOLLOWED_UP = "followed_up"

    @classmethod
    def normalize(cls, value: Optional[str]) -> Optional["FollowUpStatus"]:
        """
        Map stored or AI-suggested spellings onto the three states.

        'needs_follow_up' and 'contacted' (a conversation happened, no
        follow-up sent yet) both mean needs_followup. Unknown values and
        'ignore' count as not_contacted. None stays None.
        """
        if not value:
            return None
        key = value.strip().lower()
        if key == cls.FOLLOWED_UP.value:
            return cls.FOLLOWED_UP
        if key in (cls.NEEDS_FOLLOWUP.value, "needs_follow_up", "contacted"):
            return cls.NEEDS_FOLLOWUP
        return cls.NOT_CONTACTED


@dataclass
class Contact:
    """
    Contact entity.

    - Optionally belongs to a company (company_id)
    - follow_up_status is an explicit override; when unset the status is
      derived from email drafts and interactions (see FollowUpService)
    """
    id: UUID = field(default_factory=uuid4)
    company_id: Optional[UUID] = None
    first_name: str = ""
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None

    # Follow-up tracking
    follow_up_status: Optional[str] = None
    follow_up_urgency: Optional[str] = None             # low | medium | high
    last_contacted_at: Optional[datetime] = None

    # Enrichment
    is_enriched: bool = False
    enrichment_confidence: Optional[float] = None
    enrichment_status: Optional[str] = None
    enrichment_suggestions: Optional[dict] = None
    last_enriched_at: Optional[datetime] = None

    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # Relations (not persisted)
    company: Optional[Company] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "company_id": uuid_str(self.company_id),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "job_title": self.job_title,
            "linkedin_url": self.linkedin_url,
            "notes": self.notes,
            "avatar_url": self.avatar_url,
            "follow_up_status": self.follow_up_status,
            "follow_up_urgency": self.follow_up_urgency,
            "last_contacted_at": iso(self.last_contacted_at),
            "is_enriched": self.is_enriched,
            "enrichment_confidence": self.enrichment_confidence,
            "enrichment_status": self.enrichment_status,
            "enrichment_suggestions": self.enrichment_suggestions,
            "last_enriched_at": iso(self.last_enriched_at),
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
            "company": self.company.to_dict() if self.company else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Contact":
        """Create from dictionary (joined JSON row)"""
        company = data.get("company")
        return cls(
            id=parse_uuid(data.get("id")) or uuid4(),
            company_id=parse_uuid(data.get("company_id")),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            job_title=data.get("job_title"),
            linkedin_url=data.get("linkedin_url"),
            notes=data.get("notes"),
            avatar_url=data.get("avatar_url"),
            follow_up_status=data.get("follow_up_status"),
            follow_up_urgency=data.get("follow_up_urgency"),
            last_contacted_at=parse_datetime(data.get("last_contacted_at")),
            is_enriched=bool(data.get("is_enriched", False)),
            enrichment_confidence=data.get("enrichment_confidence"),
            enrichment_status=data.get("enrichment_status"),
            enrichment_suggestions=data.get("enrichment_suggestions"),
            last_enriched_at=parse_datetime(data.get("last_enriched_at")),
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
            company=Company.from_dict(company) if isinstance(company, dict) else None,
        )
