"""
Company Storage

PostgreSQL storage for companies.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.company import Company

logger = logging.getLogger("expocrm.storage.company")

COMPANY_COLUMNS = (
    "name", "domain", "website", "industry", "description", "location", "region",
    "company_size", "products_services", "is_enriched", "enrichment_confidence",
)


class CompanyStorage(BaseStorage):
    """Storage for Company entities"""

    async def create(self, company: Company) -> Company:
        """Create a new company"""
        query = """
            INSERT INTO companies (
                id, name, domain, website, industry, description, location, region,
                company_size, products_services, is_enriched, enrichment_confidence,
                created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            company.id, company.name, company.domain, company.website, company.industry,
            company.description, company.location, company.region, company.company_size,
            company.products_services, company.is_enriched, company.enrichment_confidence,
            company.created_at, company.updated_at
        )
        return self._row_to_company(row)

    async def get_by_id(self, company_id: UUID) -> Optional[Company]:
        """Get company by ID"""
        row = await self.fetchrow("SELECT * FROM companies WHERE id = $1", company_id)
        return self._row_to_company(row) if row else None

    async def get_by_name(self, name: str, case_insensitive: bool = False) -> Optional[Company]:
        """Get first company with this exact name (optionally ignoring case)"""
        if case_insensitive:
            query = "SELECT * FROM companies WHERE lower(name) = lower($1) ORDER BY created_at LIMIT 1"
        else:
            query = "SELECT * FROM companies WHERE name = $1 ORDER BY created_at LIMIT 1"
        row = await self.fetchrow(query, name)
        return self._row_to_company(row) if row else None

    async def list_all(self, search: Optional[str] = None, limit: Optional[int] = None) -> List[Company]:
        """
        List companies ordered by name.

        search matches name, website or industry case-insensitively.
        """
        if search:
            query = """
                SELECT * FROM companies
                WHERE name ILIKE $1 OR website ILIKE $1 OR industry ILIKE $1
                ORDER BY name
                LIMIT $2
            """
            rows = await self.fetch(query, f"%{search}%", limit)
        else:
            rows = await self.fetch("SELECT * FROM companies ORDER BY name LIMIT $1", limit)
        return [self._row_to_company(row) for row in rows]

    async def list_by_ids(self, company_ids: List[UUID]) -> List[Company]:
        """Get several companies at once"""
        if not company_ids:
            return []
        rows = await self.fetch("SELECT * FROM companies WHERE id = ANY($1::uuid[]) ORDER BY name", company_ids)
        return [self._row_to_company(row) for row in rows]

    async def update(self, company_id: UUID, updates: dict) -> Optional[Company]:
        """Update the given columns of a company"""
        row = await self.update_columns("companies", company_id, updates, COMPANY_COLUMNS)
        return self._row_to_company(row) if row else None

    def _row_to_company(self, row) -> Company:
        """Convert database row to Company"""
        return Company(
            id=row["id"],
            name=row["name"],
            domain=row["domain"],
            website=row["website"],
            industry=row["industry"],
            description=row["description"],
            location=row["location"],
            region=row["region"],
            company_size=row["company_size"],
            products_services=row["products_services"],
            is_enriched=row["is_enriched"],
            enrichment_confidence=row["enrichment_confidence"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
