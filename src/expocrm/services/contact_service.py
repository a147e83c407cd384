"""
Contact Service

Business logic for contacts: creation with event side effects, the
activity timeline, manual enrichment and relationship memory.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..config import Config
from ..models.capture import Capture, CaptureStatus, CaptureType
from ..models.common import parse_datetime, parse_uuid, utcnow
from ..models.contact import Contact
from ..models.enrichment import EnrichmentJob, EnrichmentType
from ..models.interaction import Interaction, InteractionType
from ..storage.capture_storage import CaptureStorage
from ..storage.contact_storage import ContactStorage, CONTACT_COLUMNS
from ..storage.document_storage import DocumentStorage
from ..storage.enrichment_storage import EnrichmentStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.meeting_storage import MeetingStorage
from ..storage.note_storage import NoteStorage
from ..storage.target_storage import TargetStorage
from .ai_service import AIService
from .company_service import CompanyService
from .exceptions import AIServiceError, NotFoundError
from .timeline import includes_meetings, includes_notes, merge_timeline

logger = logging.getLogger("expocrm.services.contact")

MANUAL_ENRICHMENT_CONFIDENCE = 0.85

MEMORY_SCHEMA = """{
    "narrative_summary": "string",
    "key_facts": ["string"],
    "last_interaction_context": "string"
}"""

NO_HISTORY_MEMORY = {
    "narrative_summary": "No relationship history recorded yet.",
    "key_facts": [],
    "last_interaction_context": "N/A",
}

FAILED_MEMORY = {
    "narrative_summary": "Unable to generate summary.",
    "key_facts": [],
    "last_interaction_context": "Error analyzing history.",
}


class ContactService:
    """Service for contact management"""

    def __init__(
        self,
        storage: ContactStorage,
        company_service: CompanyService,
        interaction_storage: InteractionStorage,
        capture_storage: CaptureStorage,
        target_storage: TargetStorage,
        note_storage: NoteStorage,
        meeting_storage: MeetingStorage,
        document_storage: DocumentStorage,
        enrichment_storage: EnrichmentStorage,
        ai_service: AIService,
    ):
        self.storage = storage
        self.company_service = company_service
        self.interaction_storage = interaction_storage
        self.capture_storage = capture_storage
        self.target_storage = target_storage
        self.note_storage = note_storage
        self.meeting_storage = meeting_storage
        self.document_storage = document_storage
        self.enrichment_storage = enrichment_storage
        self.ai = ai_service

    # ============================================
    # CRUD
    # ============================================

    async def list_contacts(self, company_id: Optional[UUID] = None) -> List[Contact]:
        """Contacts with their company, newest first"""
        return await self.storage.list_all(company_id=company_id)

    async def get_contact(self, contact_id: UUID) -> Contact:
        contact = await self.storage.get_by_id(contact_id)
        if not contact:
            raise NotFoundError("Contact", contact_id)
        return contact

    async def create_contact(self, data: dict) -> Contact:
        """
        Create a contact.

        - company_name without company_id: the company is found by exact
          name or created
        - event_id: a capture interaction and a completed manual capture
          are recorded, and the event's target for the company (if any)
          becomes contacted

        Raises:
            ValueError: If first_name is missing
        """
        if not (data.get("first_name") or "").strip():
            raise ValueError("First name is required")

        company_id = parse_uuid(data.get("company_id"))
        if data.get("company_name") and not company_id:
            company = await self.company_service.find_or_create(data["company_name"])
            company_id = company.id

        contact = Contact(
            company_id=company_id,
            first_name=data["first_name"].strip(),
            last_name=data.get("last_name"),
            email=data.get("email"),
            phone=data.get("phone"),
            job_title=data.get("job_title"),
            linkedin_url=data.get("linkedin_url"),
            notes=data.get("notes"),
        )
        created = await self.storage.create(contact)
        logger.info(f"Created contact: {created.full_name}")

        event_id = parse_uuid(data.get("event_id"))
        if event_id:
            await self.interaction_storage.create(Interaction(
                contact_id=created.id,
                event_id=event_id,
                interaction_type=InteractionType.CAPTURE.value,
                summary="Manually added during event",
                details={"source": "manual_entry"},
            ))
            await self.capture_storage.create(Capture(
                contact_id=created.id,
                event_id=event_id,
                capture_type=CaptureType.MANUAL.value,
                status=CaptureStatus.COMPLETED.value,
                raw_data={"manual_data": data},
            ))
            if company_id and await self.target_storage.mark_contacted(event_id, company_id):
                logger.info(f"Linked manual contact {created.id} to target company {company_id}")

        return created

    async def update_contact(self, contact_id: UUID, updates: dict) -> Contact:
        updates = {k: v for k, v in updates.items() if k in CONTACT_COLUMNS}
        if "company_id" in updates:
            updates["company_id"] = parse_uuid(updates["company_id"])
        for key in ("last_contacted_at", "last_enriched_at"):
            if key in updates:
                updates[key] = parse_datetime(updates[key])

        updated = await self.storage.update(contact_id, updates)
        if not updated:
            raise NotFoundError("Contact", contact_id)
        return updated

    async def delete_contact(self, contact_id: UUID) -> bool:
        deleted = await self.storage.delete(contact_id)
        if deleted:
            logger.info(f"Deleted contact: {contact_id}")
        return deleted

    # ============================================
    # Timeline
    # ============================================

    async def get_timeline(self, contact_id: UUID, type_filter: Optional[str] = None) -> List[dict]:
        """Interactions, notes and meetings of a contact, newest first"""
        interaction_type = type_filter if type_filter and type_filter != "all" else None
        interactions = await self.interaction_storage.list_by_contact(contact_id, interaction_type)
        notes = await self.note_storage.list_by_contact(contact_id) if includes_notes(type_filter) else []
        meetings = await self.meeting_storage.list_by_contact(contact_id) if includes_meetings(type_filter) else []
        captures = await self.capture_storage.list_by_contact(contact_id)

        return merge_timeline(
            interactions, notes, meetings, captures,
            window_seconds=Config.CAPTURE_MATCH_WINDOW_SECONDS,
        )

    async def add_interaction(self, contact_id: UUID, data: dict) -> Interaction:
        """
        Log an interaction for a contact.

        Raises:
            ValueError: If the interaction type is unknown
        """
        interaction_type = data.get("interaction_type") or InteractionType.NOTE.value
        if interaction_type not in {t.value for t in InteractionType}:
            raise ValueError(f"Invalid interaction type: {interaction_type}")

        interaction = Interaction(
            contact_id=contact_id,
            event_id=parse_uuid(data.get("event_id")),
            interaction_type=interaction_type,
            interaction_date=parse_datetime(data.get("interaction_date")) or utcnow(),
            summary=data.get("summary"),
            details=data.get("details") or {},
        )
        return await self.interaction_storage.create(interaction)

    # ============================================
    # Enrichment and memory
    # ============================================

    async def mark_enriched(self, contact_id: UUID, fields: dict) -> Contact:
        """
        Apply supplied enrichment fields and log a completed full job.
        """
        enrichment = {
            "is_enriched": True,
            "enrichment_confidence": MANUAL_ENRICHMENT_CONFIDENCE,
            **{k: v for k, v in fields.items() if k in CONTACT_COLUMNS},
        }
        enrichment["last_enriched_at"] = utcnow()

        contact = await self.update_contact(contact_id, enrichment)
        await self.enrichment_storage.create(EnrichmentJob(
            contact_id=contact_id,
            status="completed",
            enrichment_type=EnrichmentType.FULL.value,
            result={k: v for k, v in enrichment.items() if k != "last_enriched_at"},
        ))
        return contact

    async def list_enrichment_jobs(self, contact_id: UUID) -> List[EnrichmentJob]:
        return await self.enrichment_storage.list_by_contact(contact_id)

    async def get_relationship_memory(self, contact_id: UUID) -> dict:
        """
        AI summary of the relationship with a contact.

        Returns a fixed answer when there is no history and a fallback
        answer when the model fails.
        """
        interactions = await self.interaction_storage.list_by_contact(contact_id)
        notes = await self.note_storage.list_by_contact(contact_id)
        if not interactions and not notes:
            return dict(NO_HISTORY_MEMORY)

        documents = await self.document_storage.list_by_contact(contact_id)

        lines = ["Interactions:"]
        for i in interactions[:15]:
            lines.append(f"- {i.interaction_date.date().isoformat()}: {i.interaction_type} - {i.summary}")
        lines.append("\nNotes:")
        for n in notes[:5]:
            lines.append(f"- {n.content}")
        if documents:
            lines.append("\nShared Documents:")
            for d in documents:
                lines.append(f"- {d.name}: {d.summary or 'No summary'}")

        prompt = self.ai.prompt("relationship_memory", history="\n".join(lines))
        try:
            memory = await self.ai.extract_structured_data(prompt, MEMORY_SCHEMA)
        except AIServiceError as e:
            logger.error(f"Memory generation error: {e}")
            return dict(FAILED_MEMORY)
        if not isinstance(memory, dict):
            return dict(FAILED_MEMORY)
        return memory
