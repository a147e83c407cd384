from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from expocrm.models.company import Company
from expocrm.models.contact import Contact
from expocrm.models.email_draft import EmailDraft
from expocrm.models.event import Event
from expocrm.models.note import Note
from expocrm.services.email_service import EmailService, build_history_context, fallback_email
from expocrm.services.exceptions import AIServiceError, NotFoundError
from expocrm.services.note_service import NoteService


def returns_argument(value, *args, **kwargs):
    return value


def fake_ai():
    ai = MagicMock()
    ai.prompt.return_value = "system prompt"
    ai.complete = AsyncMock()
    ai.extract_structured_data = AsyncMock()
    return ai


class TestNoteAnalysis:

    @pytest.fixture
    def service(self):
        return NoteService(AsyncMock(create=AsyncMock(side_effect=returns_argument)), AsyncMock(), fake_ai())

    @pytest.mark.asyncio
    async def test_moves_not_contacted_contact(self, service):
        contact = Contact(first_name="Ana", follow_up_status="not_contacted")
        service.contact_storage.get_by_id.return_value = contact
        service.ai.complete.return_value = '```json\n{"status": "contacted", "urgency": "high"}\n```'

        result = await service.analyze_note("Met Ana at the booth, promised a quote", contact.id)

        assert result["updated"] is True
        args, kwargs = service.contact_storage.set_follow_up.await_args
        assert args == (contact.id, "needs_followup")
        assert kwargs["urgency"] == "high"
        assert kwargs["contacted_at"].tzinfo is not None

    @pytest.mark.asyncio
    async def test_leaves_engaged_contact_alone(self, service):
        contact = Contact(first_name="Ana", follow_up_status="followed_up")
        service.contact_storage.get_by_id.return_value = contact
        service.ai.complete.return_value = '{"status": "needs_followup", "urgency": "low"}'

        result = await service.analyze_note("Sent the deck", contact.id)

        assert result["updated"] is False
        service.contact_storage.set_follow_up.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", ["ignore", "archived", "contacted", None])
    async def test_only_exact_not_contacted_is_moved(self, service, stored):
        contact = Contact(first_name="Ana", follow_up_status=stored)
        service.contact_storage.get_by_id.return_value = contact
        service.ai.complete.return_value = '{"status": "contacted", "urgency": "high"}'

        result = await service.analyze_note("Met Ana at the booth", contact.id)

        assert result["updated"] is False
        service.contact_storage.set_follow_up.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignore_verdict_changes_nothing(self, service):
        service.contact_storage.get_by_id.return_value = Contact(first_name="Ana")
        service.ai.complete.return_value = '{"status": "ignore", "urgency": "low"}'

        result = await service.analyze_note("Buy milk", uuid4())

        assert result == {"analysis": {"status": "ignore", "urgency": "low"}, "updated": False}

    @pytest.mark.asyncio
    async def test_content_required(self, service):
        with pytest.raises(ValueError):
            await service.analyze_note("")

    @pytest.mark.asyncio
    async def test_voice_note_keeps_audio_in_source_url(self, service):
        note = await service.create_note({"note_type": "voice", "audio_data": "data:audio/webm;base64,AAAA"})
        assert note.source_url == "data:audio/webm;base64,AAAA"

    @pytest.mark.asyncio
    async def test_background_analysis_swallows_failures(self, service):
        service.ai.complete.side_effect = AIServiceError("down")
        await service.analyze_saved_note(Note(content="hello", contact_id=uuid4()))

    def test_should_analyze(self):
        assert NoteService.should_analyze(Note(content="x", contact_id=uuid4()))
        assert not NoteService.should_analyze(Note(content="x"))
        assert not NoteService.should_analyze(Note(content="x", contact_id=uuid4(), note_type="voice"))


class TestEmailHelpers:

    def test_history_context(self):
        assert build_history_context([], []) == "First interaction"
        notes = [Note(content="likes robots"), Note(content="budget Q3"), Note(content="ignored")]
        assert build_history_context([], notes) == "Recent notes: likes robots; budget Q3"

    def test_fallback_follow_up_mentions_event_and_company(self):
        contact = Contact(first_name="Ana", company=Company(name="Acme"))
        email = fallback_email("follow_up", contact, Event(name="Hannover Messe"))
        assert email["subject"] == "Great meeting you at Hannover Messe"
        assert email["body"].startswith("Hi Ana,")
        assert "Acme" in email["body"]

    def test_fallback_without_event(self):
        email = fallback_email("pre_event", Contact(first_name="Ana"))
        assert email["subject"] == "Looking forward to connecting at the event"


class TestEmailService:

    @pytest.fixture
    def service(self):
        profile = AsyncMock()
        profile.get_ai_context.return_value = "I am Ana"
        return EmailService(
            storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
            contact_storage=AsyncMock(),
            event_storage=AsyncMock(),
            note_storage=AsyncMock(),
            interaction_storage=AsyncMock(),
            profile_service=profile,
            ai_service=fake_ai(),
        )

    @pytest.mark.asyncio
    async def test_unknown_email_type(self, service):
        with pytest.raises(ValueError, match="Invalid email type"):
            await service.generate_draft(uuid4(), "newsletter")

    @pytest.mark.asyncio
    async def test_missing_contact(self, service):
        service.contact_storage.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await service.generate_draft(uuid4(), "follow_up")

    @pytest.mark.asyncio
    async def test_draft_falls_back_to_template(self, service):
        contact = Contact(first_name="Ana")
        service.contact_storage.get_by_id.return_value = contact
        service.note_storage.list_by_contact.return_value = []
        service.interaction_storage.list_by_contact.return_value = []
        service.ai.extract_structured_data.side_effect = AIServiceError("down")

        draft = await service.generate_draft(contact.id, "pre_meeting")

        assert draft.status == "draft"
        assert draft.subject == "Confirming our upcoming meeting"
        assert draft.contact_id == contact.id

    @pytest.mark.asyncio
    async def test_improve_returns_original_on_failure(self, service):
        service.ai.extract_structured_data.side_effect = AIServiceError("down")
        assert await service.improve("Hello there") == {"subject": "Failed to improve email", "body": "Hello there"}

    @pytest.mark.asyncio
    async def test_send_requires_contact_email(self, service):
        service.storage.get_by_id.return_value = EmailDraft(contact=Contact(first_name="Ana"))
        with pytest.raises(ValueError, match="no email"):
            await service.send_draft(uuid4())

    @pytest.mark.asyncio
    async def test_send_rejects_sent_draft(self, service):
        service.storage.get_by_id.return_value = EmailDraft(status="sent")
        with pytest.raises(ValueError, match="already sent"):
            await service.send_draft(uuid4())
