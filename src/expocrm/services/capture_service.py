"""
Capture Service

Turns a scanned card or badge (already read by the client) into a lead:
capture record, company, contact, interaction and target status.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.capture import Capture, CaptureStatus, CaptureType
from ..models.common import parse_uuid
from ..models.contact import Contact, FollowUpStatus
from ..models.interaction import Interaction, InteractionType
from ..storage.capture_storage import CaptureStorage
from ..storage.contact_storage import ContactStorage
from ..storage.event_storage import EventStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.target_storage import TargetStorage
from .ai_service import AIService
from .company_service import CompanyService
from .exceptions import NoContactDataError

logger = logging.getLogger("expocrm.services.capture")

NO_DATA_MESSAGE = "Failed to find relevant data in the capture. Please try again with a clearer image."

CARD_SCHEMA = """{
    "first_name": "string",
    "last_name": "string",
    "name": "string (full name)",
    "company": "string",
    "email": "string",
    "phone": "string",
    "job_title": "string",
    "website": "string",
    "address": "string"
}"""


def split_name(extracted: dict) -> tuple:
    """(first, last) from first_name/last_name, falling back to a full 'name'"""
    parts = (extracted.get("name") or "").split()
    first = extracted.get("first_name") or (parts[0] if parts else "Unknown")
    last = extracted.get("last_name") or " ".join(parts[1:])
    return first, last


def has_contact_data(extracted: Optional[dict]) -> bool:
    return bool(extracted) and bool(
        extracted.get("first_name") or extracted.get("name") or extracted.get("email")
    )


class CaptureService:
    """Service for lead captures"""

    def __init__(
        self,
        storage: CaptureStorage,
        contact_storage: ContactStorage,
        event_storage: EventStorage,
        interaction_storage: InteractionStorage,
        target_storage: TargetStorage,
        company_service: CompanyService,
        ai_service: AIService,
    ):
        self.storage = storage
        self.contact_storage = contact_storage
        self.event_storage = event_storage
        self.interaction_storage = interaction_storage
        self.target_storage = target_storage
        self.company_service = company_service
        self.ai = ai_service

    async def analyze_card(self, image: str) -> dict:
        """
        Read contact fields from a card, badge or document photo.

        Raises:
            ValueError: If no image is given
            AIServiceError: On LLM failure
        """
        if not image:
            raise ValueError("Image is required")
        result = await self.ai.analyze_image(image, self.ai.prompt("card_analysis"), CARD_SCHEMA)
        return result if isinstance(result, dict) else {}

    async def create_capture(
        self,
        image: str,
        capture_type: Optional[str] = None,
        event_id=None,
        extracted_data: Optional[dict] = None,
        raw_text: Optional[str] = None,
    ) -> dict:
        """
        Save a capture and create the contact it describes.

        The capture row is written first and kept even when the data turns
        out to be unusable.

        Returns:
            {"capture": Capture, "contact_id": UUID}

        Raises:
            ValueError: If no image is given
            NoContactDataError: If the extracted data has no name or email
        """
        if not image:
            raise ValueError("Image is required")

        capture_type = capture_type or CaptureType.CARD_SCAN.value
        event_id = parse_uuid(event_id)
        extracted = extracted_data or {}

        capture = await self.storage.create(Capture(
            capture_type=capture_type,
            event_id=event_id,
            image_url=image,
            raw_data={"ocr_text": raw_text or ""},
            extracted_data=extracted,
            status=CaptureStatus.COMPLETED.value,
        ))

        if not has_contact_data(extracted):
            raise NoContactDataError(NO_DATA_MESSAGE)

        event_name = "an event"
        if event_id:
            event = await self.event_storage.get_by_id(event_id)
            if event:
                event_name = event.name

        company_id = None
        if extracted.get("company"):
            company = await self.company_service.find_or_create(extracted["company"], case_insensitive=True)
            company_id = company.id

        first_name, last_name = split_name(extracted)
        contact = await self.contact_storage.create(Contact(
            company_id=company_id,
            first_name=first_name,
            last_name=last_name,
            email=extracted.get("email") or None,
            phone=extracted.get("phone") or None,
            job_title=extracted.get("job_title") or extracted.get("title") or None,
            notes=f"{raw_text or ''}\n\n[System Note: Captured at {event_name}]",
            follow_up_status=FollowUpStatus.NEEDS_FOLLOWUP.value,
            follow_up_urgency="medium",
        ))

        await self.storage.link_contact(capture.id, contact.id)
        capture.contact_id = contact.id

        await self.interaction_storage.create(Interaction(
            contact_id=contact.id,
            event_id=event_id,
            interaction_type=InteractionType.CAPTURE.value,
            summary=f"Captured via {capture_type} at {event_name}",
            details={
                "source": capture_type,
                "raw_text": raw_text,
                "event_name": event_name,
                "image_url": image,
            },
        ))

        if event_id and company_id and await self.target_storage.mark_contacted(event_id, company_id):
            logger.info(f"Linked capture {capture.id} to target company {company_id}")

        logger.info(f"Captured lead {contact.full_name} at {event_name}")
        return {"capture": capture, "contact_id": contact.id}

    async def list_captures(self, event_id: Optional[UUID] = None) -> List[Capture]:
        return await self.storage.list_all(event_id=event_id)

    async def delete_capture(self, capture_id: UUID) -> bool:
        return await self.storage.delete(capture_id)
