from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from expocrm.models.contact import Contact
from expocrm.models.interaction import Interaction
from expocrm.models.meeting_brief import MeetingBrief
from expocrm.models.reminder import Reminder
from expocrm.services.exceptions import AIServiceError, NotFoundError
from expocrm.services.meeting_service import FALLBACK_PREP, MeetingService, summarize_interactions
from expocrm.services.reminder_service import ReminderService


def returns_argument(value, *args, **kwargs):
    return value


class TestReminderService:

    @pytest.fixture
    def service(self):
        return ReminderService(AsyncMock(create=AsyncMock(side_effect=returns_argument)))

    @pytest.mark.asyncio
    async def test_list_defaults(self, service):
        await service.list_reminders()
        service.storage.list_by_status.assert_awaited_once_with("pending", 50)

    @pytest.mark.asyncio
    async def test_create_requires_type_date_and_title(self, service):
        with pytest.raises(ValueError, match="Type, date, and title are required"):
            await service.create_reminder({"reminder_type": "follow_up", "title": "Call Ana"})

    @pytest.mark.asyncio
    async def test_create_defaults_to_medium(self, service):
        reminder = await service.create_reminder({
            "reminder_type": "follow_up",
            "reminder_date": "2025-03-12T09:00:00Z",
            "title": "Call Ana",
        })
        assert reminder.priority == "medium"
        assert reminder.reminder_date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_priority(self, service):
        with pytest.raises(ValueError):
            await service.create_reminder({
                "reminder_type": "custom", "reminder_date": "2025-03-12", "title": "x", "priority": "urgent",
            })

    @pytest.mark.asyncio
    async def test_sent_stamps_sent_at(self, service):
        reminder_id = uuid4()
        service.storage.update.return_value = Reminder(id=reminder_id)

        await service.update_reminder(reminder_id, {"status": "sent", "unknown_column": 1})

        updates = service.storage.update.await_args.args[1]
        assert updates["status"] == "sent"
        assert updates["sent_at"] is not None
        assert "unknown_column" not in updates

    @pytest.mark.asyncio
    async def test_update_missing(self, service):
        service.storage.update.return_value = None
        with pytest.raises(NotFoundError):
            await service.update_reminder(uuid4(), {"status": "dismissed"})

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_status(self, service):
        with pytest.raises(ValueError):
            await service.update_reminder(uuid4(), {"status": "done"})


def test_summarize_interactions():
    interactions = [
        Interaction(interaction_type="document_upload", summary="Shared Document: Deck"),
        Interaction(interaction_type="email", summary=None),
    ]
    assert summarize_interactions(interactions) == (
        "Previous interactions (2):\n• Document Upload: Shared Document: Deck\n• Email: No summary"
    )
    assert summarize_interactions([]) == ""


class TestMeetingService:

    @pytest.fixture
    def service(self):
        ai = MagicMock()
        ai.prompt.return_value = "prep"
        ai.extract_structured_data = AsyncMock()
        ai.complete = AsyncMock()
        profile = AsyncMock()
        profile.get_ai_context.return_value = "I am Ana"
        return MeetingService(
            storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
            contact_storage=AsyncMock(),
            interaction_storage=AsyncMock(),
            note_storage=AsyncMock(),
            document_storage=AsyncMock(),
            reminder_storage=AsyncMock(),
            research_service=AsyncMock(),
            profile_service=profile,
            ai_service=ai,
        )

    @pytest.mark.asyncio
    async def test_create_requires_contact_and_date(self, service):
        with pytest.raises(ValueError):
            await service.create_meeting({"contact_id": str(uuid4())})

    @pytest.mark.asyncio
    async def test_create_survives_ai_failure(self, service):
        contact = Contact(first_name="Ana", company_id=uuid4())
        service.contact_storage.get_by_id.return_value = contact
        service.interaction_storage.list_by_contact.return_value = [Interaction(interaction_type="email", summary="Hi")]
        service.research_service.generate_talking_points.side_effect = AIServiceError("down")

        meeting = await service.create_meeting({"contact_id": str(contact.id), "meeting_date": "2025-03-12T10:00:00Z"})

        assert meeting.ai_talking_points == ""
        assert meeting.interaction_summary.startswith("Previous interactions (1):")
        assert meeting.company_id == contact.company_id
        assert meeting.meeting_type == "in_person"
        assert meeting.status == "scheduled"

    @pytest.mark.asyncio
    async def test_prep_requires_contact(self, service):
        service.storage.get_by_id.return_value = MeetingBrief()
        with pytest.raises(ValueError):
            await service.prepare_meeting(uuid4())

    @pytest.mark.asyncio
    async def test_prep_falls_back_when_model_fails(self, service):
        contact = Contact(first_name="Ana")
        meeting = MeetingBrief(contact_id=contact.id, contact=contact)
        service.storage.get_by_id.return_value = meeting
        service.interaction_storage.list_by_contact.return_value = []
        service.note_storage.list_by_contact.return_value = []
        service.document_storage.list_by_contact.return_value = []
        service.ai.extract_structured_data.side_effect = AIServiceError("down")
        service.ai.complete.side_effect = AIServiceError("down")

        prep = await service.prepare_meeting(meeting.id)

        assert prep == FALLBACK_PREP
        saved = service.storage.update.await_args.args[1]
        assert saved["prep_data"] == FALLBACK_PREP
        assert saved["interaction_summary"] == FALLBACK_PREP["relationship_summary"]
