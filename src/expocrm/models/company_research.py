"""
Company Research Model

Cached AI research for a company, one row per (company_id, research_type).
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso


@dataclass
class CompanyResearch:
    id: UUID = field(default_factory=uuid4)
    company_id: Optional[UUID] = None
    research_type: str = "overview"
    research_data: dict = field(default_factory=dict)
    sources: list = field(default_factory=list)
    confidence_score: Optional[float] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def is_fresh(self, max_age_hours: int, now: Optional[datetime] = None) -> bool:
        """True while the research is younger than max_age_hours"""
        now = now or utcnow()
        return now - self.updated_at < timedelta(hours=max_age_hours)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "company_id": str(self.company_id) if self.company_id else None,
            "research_type": self.research_type,
            "research_data": self.research_data,
            "sources": self.sources,
            "confidence_score": self.confidence_score,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
