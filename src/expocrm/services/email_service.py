"""
Email Service

AI email drafting (pre-event, follow-up, pre-meeting), draft improvement
and delivery of drafts over SMTP. Drafts can draw on excerpts of attached
marketing assets.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.common import parse_uuid, utcnow
from ..models.contact import Contact, FollowUpStatus
from ..models.email_draft import DraftStatus, EmailDraft, EmailType
from ..models.event import Event
from ..models.interaction import Interaction, InteractionType
from ..models.note import Note
from ..notifications.email_sender import EmailSender
from ..storage.contact_storage import ContactStorage
from ..storage.email_draft_storage import EmailDraftStorage
from ..storage.event_storage import EventStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.note_storage import NoteStorage
from .ai_service import AIService
from .asset_index import AssetIndex
from .exceptions import AIServiceError, EmailDeliveryError, NotFoundError
from .profile_service import ProfileService

logger = logging.getLogger("expocrm.services.email")

EMAIL_SCHEMA = '{"subject": "string", "body": "string"}'
EMAIL_EXAMPLES = {
    EmailType.PRE_EVENT.value: '{"subject": "Connecting at [Event]", "body": "Dear [Name], ..."}',
    EmailType.FOLLOW_UP.value: '{"subject": "Following up: [Event]", "body": "Dear [Name], It was great meeting you..."}',
    EmailType.PRE_MEETING.value: '{"subject": "Meeting Confirmation: [Context]", "body": "Dear [Name], I wanted to confirm..."}',
}
IMPROVE_EXAMPLE = '{"subject": "Improved Subject", "body": "Improved Body..."}'

CONTEXT_NOTES = 5
CONTEXT_INTERACTIONS = 10


def build_history_context(interactions: List[Interaction], notes: List[Note]) -> str:
    """One-line summary of previous contact for a pre-meeting email"""
    if not interactions and not notes:
        return "First interaction"
    parts = []
    if interactions:
        parts.append(f"{len(interactions)} previous interaction(s)")
    if notes:
        parts.append("Recent notes: " + "; ".join(n.content for n in notes[:2]))
    return ". ".join(parts)


def excerpt_query(
    contact: Contact,
    event: Optional[Event],
    notes: List[Note],
    custom_context: Optional[str],
) -> str:
    """Search text for asset excerpts: who the email is for and what it is about"""
    parts = [
        contact.job_title,
        contact.company.name if contact.company else None,
        contact.company.industry if contact.company else None,
        event.name if event else None,
        custom_context,
    ]
    parts.extend(n.content for n in notes[:2])
    return " ".join(p for p in parts if p) or "products, services and value proposition"


def fallback_email(email_type: str, contact: Contact, event: Optional[Event] = None) -> dict:
    """Template email used when generation fails"""
    company = contact.company.name if contact.company else None
    event_name = event.name if event else None

    if email_type == EmailType.PRE_EVENT.value:
        return {
            "subject": f"Looking forward to connecting at {event_name or 'the event'}",
            "body": (
                f"Hi {contact.first_name},\n\n"
                f"I hope this email finds you well. I'll be attending {event_name or 'the upcoming event'} "
                f"and would love to connect with you there.\n\n"
                f"I'm interested in learning more about {company or 'your company'} and exploring "
                f"potential collaboration opportunities.\n\n"
                f"Would you be available for a quick chat at the event? I'd be happy to meet at your "
                f"booth or grab a coffee during a break.\n\n"
                f"Looking forward to meeting you!\n\n"
                f"Best regards"
            ),
        }
    if email_type == EmailType.FOLLOW_UP.value:
        return {
            "subject": f"Great meeting you at {event_name or 'the event'}",
            "body": (
                f"Hi {contact.first_name},\n\n"
                f"It was great meeting you at {event_name or 'the event'}! I enjoyed our conversation "
                f"about {company or 'your work'}.\n\n"
                f"As discussed, I'd like to follow up on the topics we covered. I believe there are some "
                f"interesting opportunities for us to explore together.\n\n"
                f"Would you be available for a call next week to discuss this further?\n\n"
                f"Looking forward to staying in touch!\n\n"
                f"Best regards"
            ),
        }
    return {
        "subject": "Confirming our upcoming meeting",
        "body": (
            f"Hi {contact.first_name},\n\n"
            f"I wanted to confirm our upcoming meeting and make sure we're aligned on what we'd like "
            f"to discuss.\n\n"
            f"I'm looking forward to learning more about {company or 'your company'} and exploring how "
            f"we might work together.\n\n"
            f"Please let me know if there are any specific topics you'd like to cover, and I'll make "
            f"sure to prepare accordingly.\n\n"
            f"See you soon!\n\n"
            f"Best regards"
        ),
    }


class EmailService:
    """Service for email drafts"""

    def __init__(
        self,
        storage: EmailDraftStorage,
        contact_storage: ContactStorage,
        event_storage: EventStorage,
        note_storage: NoteStorage,
        interaction_storage: InteractionStorage,
        profile_service: ProfileService,
        ai_service: AIService,
        asset_index: Optional[AssetIndex] = None,
    ):
        self.storage = storage
        self.contact_storage = contact_storage
        self.event_storage = event_storage
        self.note_storage = note_storage
        self.interaction_storage = interaction_storage
        self.profile_service = profile_service
        self.ai = ai_service
        self.asset_index = asset_index

    async def _build_prompt(
        self,
        email_type: str,
        contact: Contact,
        event: Optional[Event],
        notes: List[Note],
        custom_context: Optional[str],
    ) -> str:
        values = {
            "profile_context": await self.profile_service.get_ai_context(),
            "contact_name": contact.full_name,
            "company_name": contact.company.name if contact.company else "Unknown",
            "custom_context": f"Additional context: {custom_context}" if custom_context else "",
        }

        if email_type == EmailType.PRE_EVENT.value:
            return self.ai.prompt(
                "email_pre_event",
                job_title=contact.job_title or "Unknown",
                event_name=event.name if event else "upcoming event",
                event_date=event.start_date.isoformat() if event and event.start_date else "TBD",
                **values,
            )
        if email_type == EmailType.FOLLOW_UP.value:
            return self.ai.prompt(
                "email_follow_up",
                event_name=event.name if event else "recent event",
                conversation="\n".join(n.content for n in notes) or "Had a great conversation",
                **values,
            )

        interactions = await self.interaction_storage.list_by_contact(contact.id, limit=CONTEXT_INTERACTIONS)
        return self.ai.prompt(
            "email_pre_meeting",
            history=build_history_context(interactions, notes),
            **values,
        )

    async def _asset_excerpts(
        self,
        contact: Contact,
        event: Optional[Event],
        notes: List[Note],
        custom_context: Optional[str],
        asset_ids: List,
    ) -> str:
        if not self.asset_index or not self.asset_index.enabled:
            return ""
        ids = [parse_uuid(a) for a in asset_ids]
        try:
            return await self.asset_index.excerpts(excerpt_query(contact, event, notes, custom_context), ids)
        except Exception as e:
            logger.error(f"Asset excerpt search failed: {e}")
            return ""

    async def generate_draft(
        self,
        contact_id,
        email_type: str,
        event_id=None,
        custom_context: Optional[str] = None,
        asset_ids: Optional[List] = None,
    ) -> EmailDraft:
        """
        Generate and save an email draft.

        Excerpts of the given marketing assets that match the contact and
        context are added to the prompt. Falls back to a template email
        when the model fails.

        Raises:
            ValueError: If the email type is unknown
            NotFoundError: If the contact does not exist
        """
        if email_type not in {t.value for t in EmailType}:
            raise ValueError("Invalid email type")

        contact_id = parse_uuid(contact_id)
        contact = await self.contact_storage.get_by_id(contact_id)
        if not contact:
            raise NotFoundError("Contact", contact_id)

        event_id = parse_uuid(event_id)
        event = await self.event_storage.get_by_id(event_id) if event_id else None
        notes = await self.note_storage.list_by_contact(contact_id, limit=CONTEXT_NOTES)

        prompt = await self._build_prompt(email_type, contact, event, notes, custom_context)
        if asset_ids:
            prompt += await self._asset_excerpts(contact, event, notes, custom_context, asset_ids)
        try:
            email = await self.ai.extract_structured_data(prompt, EMAIL_SCHEMA, EMAIL_EXAMPLES[email_type])
            if not isinstance(email, dict) or not email.get("subject") or not email.get("body"):
                raise AIServiceError("Incomplete email from model")
        except AIServiceError as e:
            logger.error(f"Email generation error: {e}")
            email = fallback_email(email_type, contact, event)

        draft = await self.storage.create(EmailDraft(
            contact_id=contact_id,
            event_id=event_id,
            email_type=email_type,
            subject=email["subject"],
            body=email["body"],
            status=DraftStatus.DRAFT.value,
        ))
        logger.info(f"Draft {draft.id} ({email_type}) saved for contact {contact_id}")
        return draft

    async def improve(self, text: str, instructions: Optional[str] = None) -> dict:
        """
        Rewrite a draft; the original text comes back unchanged on failure.

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("Original text is required")

        prompt = self.ai.prompt(
            "email_improve",
            profile_context=await self.profile_service.get_ai_context(),
            text=text,
            instructions=f"Improvement Instructions: {instructions}" if instructions else "",
        )
        try:
            result = await self.ai.extract_structured_data(prompt, EMAIL_SCHEMA, IMPROVE_EXAMPLE)
            if isinstance(result, dict) and result.get("body"):
                return {"subject": result.get("subject", ""), "body": result["body"]}
        except AIServiceError as e:
            logger.error(f"Email improvement error: {e}")
        return {"subject": "Failed to improve email", "body": text}

    async def delete_draft(self, draft_id: UUID) -> int:
        """Delete a draft; returns the rows deleted (0 when already gone)"""
        return await self.storage.delete(draft_id)

    async def send_draft(self, draft_id: UUID) -> EmailDraft:
        """
        Send a draft to its contact.

        On success the draft is marked sent, an email interaction is logged
        and the contact becomes followed_up.

        Raises:
            NotFoundError: If the draft does not exist
            ValueError: If it was already sent, SMTP is not configured or
                the contact has no email
            EmailDeliveryError: If the SMTP server fails
        """
        draft = await self.storage.get_by_id(draft_id)
        if not draft:
            raise NotFoundError("Draft", draft_id)
        if draft.status == DraftStatus.SENT.value:
            raise ValueError("Draft was already sent")
        if not draft.contact or not draft.contact.email:
            raise ValueError("Contact has no email address")

        sender = EmailSender.from_settings(await self.profile_service.get_settings())
        if not sender.configured:
            raise ValueError("SMTP not configured")

        result = await sender.send(
            {"email": draft.contact.email, "name": draft.contact.full_name},
            draft.subject or "",
            draft.body or "",
        )
        if not result.success:
            raise EmailDeliveryError(result.error or "Failed to send email")

        sent_at = utcnow()
        await self.storage.mark_sent(draft_id, sent_at)
        await self.interaction_storage.create(Interaction(
            contact_id=draft.contact_id,
            event_id=draft.event_id,
            interaction_type=InteractionType.EMAIL.value,
            interaction_date=sent_at,
            summary=f"Sent email: {draft.subject}",
            details={"draft_id": str(draft.id), "email_type": draft.email_type},
        ))
        await self.contact_storage.set_follow_up(
            draft.contact_id, FollowUpStatus.FOLLOWED_UP.value, contacted_at=sent_at
        )

        draft.status = DraftStatus.SENT.value
        draft.sent_at = sent_at
        logger.info(f"Draft {draft_id} sent to {draft.contact.email}")
        return draft
