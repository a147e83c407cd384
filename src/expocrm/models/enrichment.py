"""
Enrichment Job Model

Log entry in the enrichment queue. Jobs are executed inline by the request
that creates them; the row records what was done and the result.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso, uuid_str


class EnrichmentType(str, Enum):
    COMPANY_INFO = "company_info"
    LINKEDIN = "linkedin"
    FULL = "full"


@dataclass
class EnrichmentJob:
    id: UUID = field(default_factory=uuid4)
    contact_id: Optional[UUID] = None
    company_id: Optional[UUID] = None
    status: str = "pending"                            # pending | processing | completed | failed
    enrichment_type: str = EnrichmentType.FULL.value
    result: Optional[dict] = None
    error: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "contact_id": uuid_str(self.contact_id),
            "company_id": uuid_str(self.company_id),
            "status": self.status,
            "enrichment_type": self.enrichment_type,
            "result": self.result,
            "error": self.error,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }
