"""
Meeting Service

Meeting briefs: scheduling with AI talking points, and on-demand meeting
preparation (who the participant is, relationship summary, topics).
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.common import parse_datetime, parse_uuid
from ..models.contact import Contact
from ..models.interaction import Interaction
from ..models.meeting_brief import MeetingBrief, MeetingStatus
from ..storage.contact_storage import ContactStorage
from ..storage.document_storage import DocumentStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.meeting_storage import MeetingStorage, MEETING_COLUMNS
from ..storage.note_storage import NoteStorage
from ..storage.reminder_storage import ReminderStorage
from .ai_service import AIService
from .exceptions import AIServiceError, NotFoundError
from .profile_service import ProfileService
from .research_service import CompanyResearchService

logger = logging.getLogger("expocrm.services.meeting")

HISTORY_LIMIT = 10
SUMMARY_INTERACTIONS = 5

PREP_SCHEMA = """{
    "who_is_this": "string",
    "relationship_summary": "string",
    "key_talking_points": ["string"],
    "interaction_highlights": "string"
}"""

FALLBACK_PREP = {
    "who_is_this": "Unable to generate bio.",
    "relationship_summary": "Unable to summarize relationship.",
    "key_talking_points": ["Discuss current projects", "Explore collaboration opportunities"],
    "interaction_highlights": "No highlights available.",
}


def summarize_interactions(interactions: List[Interaction]) -> str:
    """'Previous interactions (n):' followed by up to five bullet lines"""
    if not interactions:
        return ""
    lines = []
    for interaction in interactions[:SUMMARY_INTERACTIONS]:
        label = interaction.interaction_type.replace("_", " ").title()
        lines.append(f"• {label}: {interaction.summary or 'No summary'}")
    return f"Previous interactions ({len(interactions)}):\n" + "\n".join(lines)


class MeetingService:
    """Service for meeting briefs"""

    def __init__(
        self,
        storage: MeetingStorage,
        contact_storage: ContactStorage,
        interaction_storage: InteractionStorage,
        note_storage: NoteStorage,
        document_storage: DocumentStorage,
        reminder_storage: ReminderStorage,
        research_service: CompanyResearchService,
        profile_service: ProfileService,
        ai_service: AIService,
    ):
        self.storage = storage
        self.contact_storage = contact_storage
        self.interaction_storage = interaction_storage
        self.note_storage = note_storage
        self.document_storage = document_storage
        self.reminder_storage = reminder_storage
        self.research_service = research_service
        self.profile_service = profile_service
        self.ai = ai_service

    async def list_meetings(self, status: Optional[str] = None) -> List[MeetingBrief]:
        """Meetings with a status (default scheduled), soonest first"""
        return await self.storage.list_by_status(status or MeetingStatus.SCHEDULED.value)

    async def get_meeting(self, meeting_id: UUID) -> MeetingBrief:
        meeting = await self.storage.get_by_id(meeting_id)
        if not meeting:
            raise NotFoundError("Meeting", meeting_id)
        return meeting

    async def get_meeting_details(self, meeting_id: UUID) -> dict:
        """Meeting with the contact's interactions and the meeting's reminders"""
        meeting = await self.get_meeting(meeting_id)
        interactions = await self.interaction_storage.list_by_contact(meeting.contact_id) if meeting.contact_id else []
        reminders = await self.reminder_storage.list_by_meeting(meeting_id)
        return {"meeting": meeting, "interactions": interactions, "reminders": reminders}

    async def create_meeting(self, data: dict) -> MeetingBrief:
        """
        Schedule a meeting.

        Talking points and an interaction summary are generated up front;
        AI failures leave them empty. The company defaults to the contact's.

        Raises:
            ValueError: If contact_id or meeting_date is missing
        """
        contact_id = parse_uuid(data.get("contact_id"))
        meeting_date = parse_datetime(data.get("meeting_date"))
        if not contact_id or not meeting_date:
            raise ValueError("Contact ID and meeting date are required")

        contact = await self.contact_storage.get_by_id(contact_id)
        interactions = await self.interaction_storage.list_by_contact(contact_id, limit=HISTORY_LIMIT)

        talking_points = ""
        interaction_summary = ""
        if contact:
            company = contact.company
            try:
                points = await self.research_service.generate_talking_points({
                    "name": company.name if company else "Unknown Company",
                    "industry": company.industry if company else None,
                    "description": company.description if company else None,
                })
                talking_points = "\n• ".join(points)
            except AIServiceError as e:
                logger.error(f"AI generation error: {e}")
            interaction_summary = summarize_interactions(interactions)

        meeting = MeetingBrief(
            contact_id=contact_id,
            company_id=parse_uuid(data.get("company_id")) or (contact.company_id if contact else None),
            event_id=parse_uuid(data.get("event_id")),
            meeting_date=meeting_date,
            meeting_type=data.get("meeting_type") or "in_person",
            meeting_location=data.get("meeting_location"),
            ai_talking_points=talking_points,
            interaction_summary=interaction_summary,
            pre_meeting_notes=data.get("pre_meeting_notes"),
            status=MeetingStatus.SCHEDULED.value,
        )
        created = await self.storage.create(meeting)
        logger.info(f"Scheduled meeting {created.id} with contact {contact_id}")
        return created

    async def update_meeting(self, meeting_id: UUID, updates: dict) -> MeetingBrief:
        updates = {k: v for k, v in updates.items() if k in MEETING_COLUMNS}
        if "meeting_date" in updates:
            updates["meeting_date"] = parse_datetime(updates["meeting_date"])
        if "status" in updates and updates["status"] not in {s.value for s in MeetingStatus}:
            raise ValueError(f"Invalid status: {updates['status']}")

        updated = await self.storage.update(meeting_id, updates)
        if not updated:
            raise NotFoundError("Meeting", meeting_id)
        return updated

    async def delete_meeting(self, meeting_id: UUID) -> bool:
        return await self.storage.delete(meeting_id)

    async def generate_meeting_context(
        self,
        contact: Contact,
        interactions: List[Interaction],
        documents: List[str],
    ) -> dict:
        """AI briefing for a meeting; a fixed briefing on failure"""
        history = "\n".join(
            f"{i.interaction_date.isoformat()}: {i.interaction_type} - {i.summary}"
            for i in interactions[:HISTORY_LIMIT]
        )
        company = contact.company
        prompt = self.ai.prompt(
            "meeting_prep",
            profile_context=await self.profile_service.get_ai_context(),
            contact_name=contact.full_name,
            job_title=contact.job_title or "Unknown",
            company_name=company.name if company else "Unknown",
            industry=(company.industry if company else None) or "Unknown",
            history=history or "No previous interactions.",
            documents=(
                f"The following documents have been shared: {', '.join(documents)}"
                if documents else "No documents shared."
            ),
        )
        try:
            context = await self.ai.extract_structured_data(prompt, PREP_SCHEMA)
        except AIServiceError as e:
            logger.error(f"Prep context generation error: {e}")
            return dict(FALLBACK_PREP)
        if not isinstance(context, dict):
            return dict(FALLBACK_PREP)
        if not isinstance(context.get("key_talking_points"), list):
            context["key_talking_points"] = []
        return context

    async def prepare_meeting(self, meeting_id: UUID) -> dict:
        """
        Generate and store prep data for a meeting.

        Talking points and relationship summary are mirrored into
        ai_talking_points and interaction_summary.
        """
        meeting = await self.get_meeting(meeting_id)
        if not meeting.contact:
            raise ValueError("Meeting has no contact")

        interactions = await self.interaction_storage.list_by_contact(meeting.contact_id, limit=HISTORY_LIMIT)
        notes = await self.note_storage.list_by_contact(meeting.contact_id, limit=HISTORY_LIMIT)
        documents = await self.document_storage.list_by_contact(meeting.contact_id)

        shared = [d.name for d in documents] + [n.content for n in notes if n.content]
        prep_data = await self.generate_meeting_context(meeting.contact, interactions, shared)

        await self.storage.update(meeting_id, {
            "prep_data": prep_data,
            "ai_talking_points": "\n".join(str(p) for p in prep_data.get("key_talking_points", [])),
            "interaction_summary": prep_data.get("relationship_summary"),
        })
        return prep_data
