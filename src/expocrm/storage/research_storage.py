"""
Research Storage

PostgreSQL cache of AI company research.
"""
import logging
from typing import Optional
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.company_research import CompanyResearch

logger = logging.getLogger("expocrm.storage.research")


class ResearchStorage(BaseStorage):
    """Storage for CompanyResearch entities"""

    async def get(self, company_id: UUID, research_type: str = "overview") -> Optional[CompanyResearch]:
        row = await self.fetchrow(
            "SELECT * FROM company_research WHERE company_id = $1 AND research_type = $2",
            company_id, research_type
        )
        return self._row_to_research(row) if row else None

    async def upsert(self, research: CompanyResearch) -> CompanyResearch:
        """Insert or replace the research for (company_id, research_type)"""
        query = """
            INSERT INTO company_research (
                id, company_id, research_type, research_data, sources,
                confidence_score, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4::jsonb, $5::jsonb, $6, $7, $8)
            ON CONFLICT (company_id, research_type) DO UPDATE
            SET research_data = EXCLUDED.research_data,
                sources = EXCLUDED.sources,
                confidence_score = EXCLUDED.confidence_score,
                updated_at = EXCLUDED.updated_at
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            research.id, research.company_id, research.research_type,
            dump_json(research.research_data), dump_json(research.sources),
            research.confidence_score, research.created_at, research.updated_at
        )
        return self._row_to_research(row)

    def _row_to_research(self, row) -> CompanyResearch:
        return CompanyResearch(
            id=row["id"],
            company_id=row["company_id"],
            research_type=row["research_type"],
            research_data=load_json(row["research_data"], {}),
            sources=load_json(row["sources"], []),
            confidence_score=row["confidence_score"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
