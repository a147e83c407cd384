"""
Company Model

Represents an organization contacts work for, and a possible event target.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, parse_uuid, parse_datetime


@dataclass
class Company:
    """Company entity, optionally enriched by AI research"""
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    domain: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    region: Optional[str] = None
    company_size: Optional[str] = None
    products_services: Optional[str] = None
    is_enriched: bool = False
    enrichment_confidence: Optional[float] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {
            "id": str(self.id),
            "name": self.name,
            "domain": self.domain,
            "website": self.website,
            "industry": self.industry,
            "description": self.description,
            "location": self.location,
            "region": self.region,
            "company_size": self.company_size,
            "products_services": self.products_services,
            "is_enriched": self.is_enriched,
            "enrichment_confidence": self.enrichment_confidence,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Company":
        """Create from dictionary (API payload or joined JSON row)"""
        return cls(
            id=parse_uuid(data.get("id")) or uuid4(),
            name=data.get("name", ""),
            domain=data.get("domain"),
            website=data.get("website"),
            industry=data.get("industry"),
            description=data.get("description"),
            location=data.get("location"),
            region=data.get("region"),
            company_size=data.get("company_size"),
            products_services=data.get("products_services"),
            is_enriched=bool(data.get("is_enriched", False)),
            enrichment_confidence=data.get("enrichment_confidence"),
            created_at=parse_datetime(data.get("created_at")) or utcnow(),
            updated_at=parse_datetime(data.get("updated_at")) or utcnow(),
        )
