"""
Company Service

Business logic for companies and their cached AI research.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..config import Config
from ..models.common import utcnow
from ..models.company import Company
from ..models.company_research import CompanyResearch
from ..storage.company_storage import CompanyStorage, COMPANY_COLUMNS
from ..storage.research_storage import ResearchStorage
from .exceptions import NotFoundError
from .research_service import CompanyResearchService

logger = logging.getLogger("expocrm.services.company")

SEARCH_LIMIT = 20
RESEARCH_TYPE = "overview"


class CompanyService:
    """Service for company management"""

    def __init__(
        self,
        storage: CompanyStorage,
        research_storage: ResearchStorage,
        research_service: CompanyResearchService,
    ):
        self.storage = storage
        self.research_storage = research_storage
        self.research_service = research_service

    async def list_companies(self, search: Optional[str] = None) -> List[Company]:
        """Companies ordered by name (at most 20), optionally filtered"""
        return await self.storage.list_all(search=search, limit=SEARCH_LIMIT)

    async def get_company(self, company_id: UUID) -> Company:
        company = await self.storage.get_by_id(company_id)
        if not company:
            raise NotFoundError("Company", company_id)
        return company

    async def create_company(self, data: dict) -> Company:
        """
        Create a company.

        Raises:
            ValueError: If name is missing
        """
        name = (data.get("name") or "").strip()
        if not name:
            raise ValueError("Company name is required")
        company = Company(**{k: v for k, v in data.items() if k in COMPANY_COLUMNS})
        company.name = name
        created = await self.storage.create(company)
        logger.info(f"Created company: {created.name}")
        return created

    async def update_company(self, company_id: UUID, updates: dict) -> Company:
        updated = await self.storage.update(company_id, updates)
        if not updated:
            raise NotFoundError("Company", company_id)
        return updated

    async def find_or_create(self, name: str, case_insensitive: bool = False, **fields) -> Company:
        """
        Company with this name, created when missing.

        Extra fields are only used when a new company is created.
        """
        existing = await self.storage.get_by_name(name, case_insensitive=case_insensitive)
        if existing:
            return existing
        created = await self.storage.create(Company(name=name, **fields))
        logger.info(f"Created company: {created.name}")
        return created

    async def research(self, company_id: UUID, force_refresh: bool = False) -> dict:
        """
        Research a company, served from cache when fresh.

        Returns:
            {"research": dict, "cached": bool} plus "cachedAt" on a cache hit

        Raises:
            NotFoundError: If the company does not exist
            AIServiceError: If research fails
        """
        company = await self.get_company(company_id)

        if not force_refresh:
            cached = await self.research_storage.get(company_id, RESEARCH_TYPE)
            if cached and cached.is_fresh(Config.RESEARCH_CACHE_HOURS):
                logger.info(f"Research cache hit for company {company.name}")
                return {
                    "research": cached.research_data,
                    "cached": True,
                    "cachedAt": cached.updated_at.isoformat(),
                }

        research = await self.research_service.research_company(
            name=company.name,
            website=company.website,
            industry=company.industry,
            description=company.description,
        )

        now = utcnow()
        await self.research_storage.upsert(CompanyResearch(
            company_id=company_id,
            research_type=RESEARCH_TYPE,
            research_data=research,
            sources=research.get("sources", []),
            confidence_score=research.get("confidence"),
            created_at=now,
            updated_at=now,
        ))

        await self.storage.update(company_id, {
            "industry": research.get("industry") or company.industry,
            "description": research.get("overview") or company.description,
            "is_enriched": True,
            "enrichment_confidence": research.get("confidence"),
        })

        return {"research": research, "cached": False}
