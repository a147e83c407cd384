"""
Marketing Asset Model
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from .common import utcnow, iso


@dataclass
class MarketingAsset:
    """Brochure or deck the user hands out at events"""
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    description: Optional[str] = None
    file_url: str = ""
    file_size: Optional[int] = None
    is_active: bool = True
    chunk_count: int = 0                 # chunks stored in the vector collection
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "file_url": self.file_url,
            "file_size": self.file_size,
            "is_active": self.is_active,
            "chunk_count": self.chunk_count,
            "created_at": iso(self.created_at),
        }
