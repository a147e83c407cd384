"""
Target Service

Business logic for event target companies: adding, researching and
preparing talking points.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.target_company import TargetCompany, TargetPriority, TargetStatus
from ..storage.interaction_storage import InteractionStorage
from ..storage.note_storage import NoteStorage
from ..storage.target_storage import TargetStorage
from .company_service import CompanyService
from .exceptions import NotFoundError
from .research_service import CompanyResearchService, format_talking_points

logger = logging.getLogger("expocrm.services.target")

MEMORY_LIMIT = 5


def looks_like_url(query: str) -> bool:
    """'acme.com' is a website, 'Acme Corp' is a name"""
    return "." in query and " " not in query


class TargetService:
    """Service for event target companies"""

    def __init__(
        self,
        storage: TargetStorage,
        company_service: CompanyService,
        research_service: CompanyResearchService,
        interaction_storage: InteractionStorage,
        note_storage: NoteStorage,
    ):
        self.storage = storage
        self.company_service = company_service
        self.research_service = research_service
        self.interaction_storage = interaction_storage
        self.note_storage = note_storage

    async def list_targets(self, event_id: UUID) -> List[TargetCompany]:
        """Targets ordered high -> medium -> low, newest first"""
        return await self.storage.list_by_event(event_id)

    async def get_target(self, target_id: UUID) -> TargetCompany:
        target = await self.storage.get_by_id(target_id)
        if not target:
            raise NotFoundError("Target", target_id)
        return target

    async def add_target(
        self,
        event_id: UUID,
        company_id: UUID,
        priority: Optional[str] = None,
        booth_location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> TargetCompany:
        """
        Add a company as an event target.

        Adding the same company twice returns the existing target.

        Raises:
            ValueError: If the priority is unknown
        """
        priority = priority or TargetPriority.MEDIUM.value
        if priority not in {p.value for p in TargetPriority}:
            raise ValueError(f"Invalid priority: {priority}")

        target = TargetCompany(
            event_id=event_id,
            company_id=company_id,
            priority=priority,
            booth_location=booth_location,
            notes=notes,
            status=TargetStatus.NOT_CONTACTED.value,
        )
        created = await self.storage.create(target)
        logger.info(f"Target {created.id} for event {event_id}")
        return created

    async def update_target(self, target_id: UUID, updates: dict) -> TargetCompany:
        if "priority" in updates and updates["priority"] not in {p.value for p in TargetPriority}:
            raise ValueError(f"Invalid priority: {updates['priority']}")
        if "status" in updates and updates["status"] not in {s.value for s in TargetStatus}:
            raise ValueError(f"Invalid status: {updates['status']}")

        updated = await self.storage.update(target_id, updates)
        if not updated:
            raise NotFoundError("Target", target_id)
        return updated

    async def delete_target(self, target_id: UUID, event_id: Optional[UUID] = None) -> bool:
        return await self.storage.delete(target_id, event_id)

    async def research_and_add(self, event_id: UUID, query: str) -> dict:
        """
        Research a company by name or website and add it as a target.

        The researched official name decides which company record is used
        (case-insensitive match, created when missing).

        Returns:
            {"research": dict, "target": TargetCompany}
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("Please enter a company name or website")

        if looks_like_url(query):
            research = await self.research_service.research_company(name=query, website=query)
        else:
            research = await self.research_service.research_company(name=query)

        official_name = research.get("companyName") or query
        company = await self.company_service.find_or_create(
            official_name,
            case_insensitive=True,
            industry=research.get("industry"),
            description=research.get("overview"),
            products_services=research.get("products_services"),
            location=research.get("location"),
            website=research.get("website"),
            is_enriched=True,
            enrichment_confidence=research.get("confidence"),
        )

        insights = research.get("keyInsights") or []
        target = await self.add_target(
            event_id,
            company.id,
            notes="AI Insights: " + "\n- ".join(str(i) for i in insights),
        )
        return {"research": research, "target": target}

    async def generate_talking_points(self, company_id: UUID, extra: Optional[dict] = None) -> List[str]:
        """
        Talking points for a company, informed by the last interactions
        and notes with its contacts.
        """
        company = await self.company_service.get_company(company_id)
        interactions = await self.interaction_storage.list_by_company(company_id, limit=MEMORY_LIMIT)
        notes = await self.note_storage.list_by_company(company_id, limit=MEMORY_LIMIT)

        company_data = {**company.to_dict(), **(extra or {})}
        return await self.research_service.generate_talking_points(
            company_data,
            past_interactions=[
                f"{i.interaction_date.isoformat()}: {i.interaction_type} - {i.summary}" for i in interactions
            ],
            previous_notes=[n.content for n in notes],
        )

    async def save_talking_points(self, target_id: UUID, points: List[str]) -> TargetCompany:
        """Store cleaned points as '- point' lines"""
        return await self.update_target(target_id, {"talking_points": format_talking_points(points)})
