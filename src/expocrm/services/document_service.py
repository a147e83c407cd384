"""
Document Service

Documents shared with contacts and their AI summaries.
"""
import logging
from typing import List, Optional
from uuid import UUID

from ..models.common import parse_uuid
from ..models.document import Document
from ..models.interaction import Interaction, InteractionType
from ..storage.document_storage import DocumentStorage
from ..storage.interaction_storage import InteractionStorage
from .ai_service import AIService
from .exceptions import AIServiceError, NotFoundError

logger = logging.getLogger("expocrm.services.document")

SUMMARY_INPUT_LIMIT = 5000
SUMMARY_FAILED = "Unable to summarize document."


class DocumentService:
    """Service for contact documents"""

    def __init__(
        self,
        storage: DocumentStorage,
        interaction_storage: InteractionStorage,
        ai_service: AIService,
    ):
        self.storage = storage
        self.interaction_storage = interaction_storage
        self.ai = ai_service

    async def summarize_text(self, text: str) -> str:
        """3-4 meeting-relevant bullet points; a fixed message on LLM failure"""
        prompt = self.ai.prompt("document_summary", text=text[:SUMMARY_INPUT_LIMIT])
        try:
            return await self.ai.complete("You summarize business documents.", prompt)
        except AIServiceError as e:
            logger.error(f"Document summarization error: {e}")
            return SUMMARY_FAILED

    async def add_document(
        self,
        contact_id,
        name: str,
        file_url: Optional[str] = None,
        description: Optional[str] = None,
        text: Optional[str] = None,
        event_id=None,
        file_type: str = "pdf",
    ) -> Document:
        """
        Attach a document to a contact, summarize it and log the upload.

        The summary is built from the given text, falling back to the
        description or the name.

        Raises:
            ValueError: If contact_id or name is missing
        """
        contact_id = parse_uuid(contact_id)
        if not contact_id or not name:
            raise ValueError("Contact ID and document name are required")

        document = await self.storage.create(Document(
            contact_id=contact_id,
            event_id=parse_uuid(event_id),
            name=name,
            file_url=file_url,
            file_type=file_type,
            description=description,
        ))

        summary = await self.summarize_text(text or description or name)
        document = await self.storage.set_summary(document.id, summary) or document

        await self.interaction_storage.create(Interaction(
            contact_id=contact_id,
            event_id=document.event_id,
            interaction_type=InteractionType.DOCUMENT_UPLOAD.value,
            summary=f"Shared Document: {name}",
            details={"document_id": str(document.id), "file_url": file_url},
        ))
        logger.info(f"Document '{name}' attached to contact {contact_id}")
        return document

    async def list_documents(self, contact_id: UUID) -> List[Document]:
        return await self.storage.list_by_contact(contact_id)

    async def summarize_document(self, document_id: UUID, text: Optional[str] = None) -> Document:
        """Regenerate the summary of an existing document"""
        document = await self.storage.get_by_id(document_id)
        if not document:
            raise NotFoundError("Document", document_id)

        summary = await self.summarize_text(text or document.description or document.name)
        return await self.storage.set_summary(document_id, summary)
