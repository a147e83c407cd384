"""
Event Service

Business logic for events.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.capture import Capture
from ..models.common import parse_date
from ..models.email_draft import EmailDraft
from ..models.event import Event, EventStatus
from ..storage.capture_storage import CaptureStorage
from ..storage.email_draft_storage import EmailDraftStorage
from ..storage.event_storage import EventStorage
from .exceptions import NotFoundError

logger = logging.getLogger("expocrm.services.event")


class EventService:
    """Service for event management"""

    def __init__(
        self,
        storage: EventStorage,
        capture_storage: CaptureStorage,
        email_draft_storage: EmailDraftStorage,
    ):
        self.storage = storage
        self.capture_storage = capture_storage
        self.email_draft_storage = email_draft_storage

    async def list_events(self) -> List[Event]:
        """All events, newest start first, with the status derived from today's date"""
        events = await self.storage.list_all()
        for event in events:
            event.status = event.derive_status()
        return events

    async def get_event(self, event_id: UUID) -> Event:
        event = await self.storage.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        event.status = event.derive_status()
        return event

    async def create_event(
        self,
        name: str,
        description: Optional[str] = None,
        location: Optional[str] = None,
        start_date=None,
        end_date=None,
        event_type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Event:
        """
        Create an event.

        Raises:
            ValueError: If name is missing or the dates are inverted
        """
        if not name or not name.strip():
            raise ValueError("Event name is required")

        start = parse_date(start_date)
        end = parse_date(end_date)
        if start and end and end < start:
            raise ValueError("End date cannot be before start date")

        event = Event(
            name=name.strip(),
            description=description,
            location=location,
            start_date=start,
            end_date=end,
            event_type=event_type or "exhibition",
            status=status or EventStatus.UPCOMING.value,
        )
        created = await self.storage.create(event)
        logger.info(f"Created event: {created.name}")
        return created

    async def update_event(self, event_id: UUID, updates: dict) -> Event:
        """Update an event; date strings are parsed"""
        updates = dict(updates)
        for key in ("start_date", "end_date"):
            if key in updates:
                updates[key] = parse_date(updates[key])
        if "name" in updates and not (updates["name"] or "").strip():
            raise ValueError("Event name cannot be empty")

        updated = await self.storage.update(event_id, updates)
        if not updated:
            raise NotFoundError("Event", event_id)
        updated.status = updated.derive_status()
        logger.info(f"Updated event: {updated.name}")
        return updated

    async def delete_event(self, event_id: UUID) -> bool:
        deleted = await self.storage.delete(event_id)
        if deleted:
            logger.info(f"Deleted event: {event_id}")
        return deleted

    async def get_stats(self, event_id: UUID) -> dict:
        """Target, capture, contact and follow-up counts"""
        return await self.storage.get_stats(event_id)

    async def list_captures(self, event_id: UUID, status: Optional[str] = None) -> List[Capture]:
        return await self.capture_storage.list_all(event_id=event_id, status=status)

    async def list_drafts(self, event_id: UUID) -> List[EmailDraft]:
        return await self.email_draft_storage.list_by_event(event_id)
