"""
Note Service

Notes about contacts, and AI classification of what a note says about
the follow-up state of the contact.
"""
import json
import logging
from typing import Optional
from uuid import UUID

from ..models.common import parse_uuid, utcnow
from ..models.contact import FollowUpStatus
from ..models.note import Note, NoteType
from ..storage.contact_storage import ContactStorage
from ..storage.note_storage import NoteStorage, NOTE_COLUMNS
from .ai_service import AIService, clean_and_parse_json
from .exceptions import AIServiceError, NotFoundError

logger = logging.getLogger("expocrm.services.note")

ANALYSIS_SCHEMA = """{
    "status": "contacted | needs_followup | not_contacted | ignore",
    "urgency": "high | medium | low",
    "reasoning": "brief explanation of the decision",
    "interaction_detected": boolean,
    "follow_up_needed": boolean
}"""

CONTACT_VERDICTS = ("contacted", "needs_followup")


class NoteService:
    """Service for notes"""

    def __init__(self, storage: NoteStorage, contact_storage: ContactStorage, ai_service: AIService):
        self.storage = storage
        self.contact_storage = contact_storage
        self.ai = ai_service

    async def get_note(self, note_id: UUID) -> Note:
        note = await self.storage.get_by_id(note_id)
        if not note:
            raise NotFoundError("Note", note_id)
        return note

    async def create_note(self, data: dict) -> Note:
        """
        Create a note.

        Voice notes keep their audio_data in source_url.

        Raises:
            ValueError: If the note type is unknown
        """
        note_type = data.get("note_type") or NoteType.TEXT.value
        if note_type not in {t.value for t in NoteType}:
            raise ValueError(f"Invalid note type: {note_type}")

        source_url = data.get("source_url")
        if note_type == NoteType.VOICE.value and data.get("audio_data"):
            source_url = data["audio_data"]

        note = Note(
            contact_id=parse_uuid(data.get("contact_id")),
            event_id=parse_uuid(data.get("event_id")),
            interaction_id=parse_uuid(data.get("interaction_id")),
            content=data.get("content") or "",
            note_type=note_type,
            source_url=source_url,
        )
        created = await self.storage.create(note)
        logger.info(f"Created {note_type} note {created.id}")
        return created

    async def update_note(self, note_id: UUID, updates: dict) -> Note:
        updates = {k: v for k, v in updates.items() if k in NOTE_COLUMNS}
        for key in ("contact_id", "event_id", "interaction_id"):
            if key in updates:
                updates[key] = parse_uuid(updates[key])

        updated = await self.storage.update(note_id, updates)
        if not updated:
            raise NotFoundError("Note", note_id)
        return updated

    @staticmethod
    def should_analyze(note: Note, require_text: bool = True) -> bool:
        """Only notes about a contact with content are classified"""
        if not note.contact_id or not note.content:
            return False
        return note.note_type == NoteType.TEXT.value or not require_text

    async def analyze_note(self, content: str, contact_id: Optional[UUID] = None) -> dict:
        """
        Classify a note and update the contact when it shows first contact.

        The contact changes only when it is currently not_contacted and the
        verdict is contacted or needs_followup.

        Returns:
            {"analysis": dict, "updated": bool}

        Raises:
            ValueError: If content is empty
            AIServiceError: On LLM failure
        """
        if not content:
            raise ValueError("Content is required")

        contact = await self.contact_storage.get_by_id(contact_id) if contact_id else None

        system = self.ai.prompt("note_analysis", content=content)
        response = await self.ai.complete(
            system,
            f"Please analyze this and return JSON matching the schema: {ANALYSIS_SCHEMA}",
            temperature=0.3,
        )
        try:
            analysis = clean_and_parse_json(response)
        except json.JSONDecodeError:
            raise AIServiceError("AI returned invalid JSON")
        verdict = (analysis.get("status") or "").lower() if isinstance(analysis, dict) else ""

        updated = bool(
            contact
            and contact.follow_up_status == FollowUpStatus.NOT_CONTACTED.value
            and verdict in CONTACT_VERDICTS
        )
        if updated:
            await self.contact_storage.set_follow_up(
                contact.id,
                FollowUpStatus.normalize(verdict).value,
                urgency=analysis.get("urgency"),
                contacted_at=utcnow(),
            )
            logger.info(f"Contact {contact.id} moved to {verdict} by note analysis")

        return {"analysis": analysis, "updated": updated}

    async def analyze_saved_note(self, note: Note) -> None:
        """Classification run after a note is written; failures are only logged"""
        try:
            await self.analyze_note(note.content, note.contact_id)
        except Exception as e:
            logger.error(f"Background note analysis failed for note {note.id}: {e}")
