"""
Follow-up Service

The follow-ups board: contacts grouped by follow-up state, and the email
interactions that record a follow-up.
"""
import logging
from typing import Optional
from uuid import UUID

from ..models.common import parse_datetime, parse_uuid, utcnow
from ..models.interaction import Interaction, InteractionType
from ..storage.contact_storage import ContactStorage
from ..storage.email_draft_storage import EmailDraftStorage
from ..storage.interaction_storage import InteractionStorage, INTERACTION_COLUMNS
from .exceptions import NotFoundError
from .timeline import categorize_follow_ups

logger = logging.getLogger("expocrm.services.follow_up")


class FollowUpService:
    """Service for follow-up tracking"""

    def __init__(
        self,
        contact_storage: ContactStorage,
        interaction_storage: InteractionStorage,
        email_draft_storage: EmailDraftStorage,
    ):
        self.contact_storage = contact_storage
        self.interaction_storage = interaction_storage
        self.email_draft_storage = email_draft_storage

    async def categorize(self, event_id: Optional[UUID] = None) -> dict:
        """
        Contacts grouped into not_contacted, needs_followup and followed_up.

        With an event, only contacts that interacted at the event are
        considered and only drafts sent for that event count.
        """
        if event_id:
            contacts = await self.contact_storage.list_by_event(event_id)
        else:
            contacts = await self.contact_storage.list_all()

        sent = await self.email_draft_storage.contact_ids_with_sent(event_id)
        interacted = await self.interaction_storage.contact_ids_with_interactions(event_id)
        return categorize_follow_ups(contacts, sent, interacted)

    async def record_follow_up(
        self,
        contact_id: UUID,
        summary: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> Interaction:
        """Log a follow-up email as an interaction"""
        interaction = Interaction(
            contact_id=contact_id,
            interaction_type=InteractionType.EMAIL.value,
            interaction_date=utcnow(),
            summary=summary or "Follow-up email",
            details=details or {},
        )
        created = await self.interaction_storage.create(interaction)
        logger.info(f"Recorded follow-up for contact {contact_id}")
        return created

    async def update_follow_up(self, interaction_id: UUID, updates: dict) -> Interaction:
        updates = {k: v for k, v in updates.items() if k in INTERACTION_COLUMNS}
        for key in ("contact_id", "event_id"):
            if key in updates:
                updates[key] = parse_uuid(updates[key])
        if "interaction_date" in updates:
            updates["interaction_date"] = parse_datetime(updates["interaction_date"])

        updated = await self.interaction_storage.update(interaction_id, updates)
        if not updated:
            raise NotFoundError("Follow-up", interaction_id)
        return updated

    async def delete_follow_up(self, interaction_id: UUID) -> bool:
        return await self.interaction_storage.delete(interaction_id)
