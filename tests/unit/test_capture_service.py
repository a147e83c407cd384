from unittest.mock import AsyncMock, MagicMock

import pytest

from expocrm.models.company import Company
from expocrm.models.event import Event
from expocrm.services.capture_service import CaptureService, has_contact_data, split_name
from expocrm.services.exceptions import NoContactDataError


def returns_argument(value, *args, **kwargs):
    return value


@pytest.fixture
def service():
    ai = MagicMock()
    ai.prompt.return_value = "read the card"
    ai.analyze_image = AsyncMock(return_value={"first_name": "Ana", "company": "Acme"})
    return CaptureService(
        storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
        contact_storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
        event_storage=AsyncMock(),
        interaction_storage=AsyncMock(create=AsyncMock(side_effect=returns_argument)),
        target_storage=AsyncMock(),
        company_service=AsyncMock(),
        ai_service=ai,
    )


class TestHelpers:

    def test_split_name_prefers_explicit_fields(self):
        assert split_name({"first_name": "Ana", "last_name": "Lopez", "name": "X Y"}) == ("Ana", "Lopez")

    def test_split_name_from_full_name(self):
        assert split_name({"name": "Ana Maria Lopez"}) == ("Ana", "Maria Lopez")

    def test_split_name_unknown(self):
        assert split_name({"email": "a@b.c"}) == ("Unknown", "")

    def test_has_contact_data(self):
        assert has_contact_data({"email": "a@b.c"})
        assert has_contact_data({"name": "Ana"})
        assert not has_contact_data({"company": "Acme", "phone": "123"})
        assert not has_contact_data(None)


class TestCreateCapture:

    @pytest.mark.asyncio
    async def test_image_required(self, service):
        with pytest.raises(ValueError):
            await service.create_capture(image="")
        service.storage.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_contact_data_keeps_capture(self, service):
        with pytest.raises(NoContactDataError):
            await service.create_capture(image="data:image/png;base64,AAAA", extracted_data={"phone": "1"})

        service.storage.create.assert_awaited_once()
        service.contact_storage.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_contact_links_capture_and_marks_target(self, service):
        event = Event(name="Hannover Messe")
        company = Company(name="Acme")
        service.event_storage.get_by_id.return_value = event
        service.company_service.find_or_create.return_value = company
        service.target_storage.mark_contacted.return_value = True

        result = await service.create_capture(
            image="data:image/png;base64,AAAA",
            event_id=str(event.id),
            extracted_data={"name": "Ana Lopez", "company": "Acme", "email": "ana@acme.test"},
            raw_text="ANA LOPEZ / ACME",
        )

        contact = service.contact_storage.create.await_args.args[0]
        assert contact.first_name == "Ana" and contact.last_name == "Lopez"
        assert contact.company_id == company.id
        assert contact.follow_up_status == "needs_followup"
        assert contact.follow_up_urgency == "medium"
        assert "[System Note: Captured at Hannover Messe]" in contact.notes
        assert result["contact_id"] == contact.id

        service.company_service.find_or_create.assert_awaited_once_with("Acme", case_insensitive=True)
        service.storage.link_contact.assert_awaited_once_with(result["capture"].id, contact.id)

        interaction = service.interaction_storage.create.await_args.args[0]
        assert interaction.interaction_type == "capture"
        assert interaction.details["image_url"] == "data:image/png;base64,AAAA"
        assert interaction.summary == "Captured via card_scan at Hannover Messe"

        service.target_storage.mark_contacted.assert_awaited_once_with(event.id, company.id)


class TestAnalyzeCard:

    @pytest.mark.asyncio
    async def test_returns_fields(self, service):
        assert await service.analyze_card("AAAA") == {"first_name": "Ana", "company": "Acme"}
        service.ai.prompt.assert_called_once_with("card_analysis")

    @pytest.mark.asyncio
    async def test_non_object_result_is_empty(self, service):
        service.ai.analyze_image.return_value = ["not", "a", "dict"]
        assert await service.analyze_card("AAAA") == {}

    @pytest.mark.asyncio
    async def test_image_required(self, service):
        with pytest.raises(ValueError):
            await service.analyze_card(None)
