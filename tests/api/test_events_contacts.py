from uuid import uuid4

from expocrm.models.contact import Contact
from expocrm.models.event import Event
from expocrm.models.interaction import Interaction
from expocrm.models.target_company import TargetCompany
from expocrm.services.exceptions import AIServiceError, NotFoundError


class TestEvents:

    def test_list(self, client, engine):
        engine.event_service.list_events.return_value = [Event(name="Hannover Messe")]

        response = client.get("/api/events")

        assert response.status_code == 200
        assert response.json()["data"][0]["name"] == "Hannover Messe"

    def test_create(self, client, engine):
        engine.event_service.create_event.return_value = Event(name="CES")

        response = client.post("/api/events", json={"name": "CES", "location": "Las Vegas"})

        assert response.status_code == 200
        assert engine.event_service.create_event.await_args.kwargs["location"] == "Las Vegas"

    def test_create_without_name_is_400(self, client):
        response = client.post("/api/events", json={"location": "Las Vegas"})
        assert response.status_code == 400
        assert "name" in response.json()["error"]

    def test_get_missing_is_404(self, client, engine):
        engine.event_service.get_event.side_effect = NotFoundError("Event")

        response = client.get(f"/api/events/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_malformed_id_is_400(self, client):
        response = client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid event ID"}

    def test_delete(self, client, engine):
        engine.event_service.delete_event.return_value = True
        assert client.delete(f"/api/events/{uuid4()}").json() == {"success": True}

    def test_patch_passes_only_set_fields(self, client, engine):
        event_id = uuid4()
        engine.event_service.update_event.return_value = Event(id=event_id, name="Renamed")

        client.patch(f"/api/events/{event_id}", json={"name": "Renamed"})

        engine.event_service.update_event.assert_awaited_once_with(event_id, {"name": "Renamed"})


class TestTargets:

    def test_talking_points(self, client, engine):
        target = TargetCompany(company_id=uuid4())
        engine.target_service.get_target.return_value = target
        engine.target_service.generate_talking_points.return_value = ["Ask about automation"]
        engine.target_service.save_talking_points.return_value = target

        response = client.post(f"/api/events/{uuid4()}/targets/{target.id}/talking-points", json={})

        assert response.status_code == 200
        assert response.json()["data"]["talking_points"] == ["Ask about automation"]
        engine.target_service.save_talking_points.assert_awaited_once()

    def test_research_failure_is_500(self, client, engine):
        engine.target_service.research_and_add.side_effect = AIServiceError("down")

        response = client.post(f"/api/events/{uuid4()}/targets/research", json={"query": "acme.test"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to research company"}


class TestContacts:

    def test_create_parses_ids(self, client, engine):
        event_id = uuid4()
        engine.contact_service.create_contact.return_value = Contact(first_name="Ana")

        response = client.post("/api/contacts", json={"first_name": "Ana", "event_id": str(event_id)})

        assert response.status_code == 200
        data = engine.contact_service.create_contact.await_args.args[0]
        assert data["event_id"] == event_id

    def test_timeline(self, client, engine):
        contact_id = uuid4()
        engine.contact_service.get_timeline.return_value = [{"type": "note", "date": "2025-03-10"}]

        response = client.get(f"/api/contacts/{contact_id}/timeline?type=note")

        assert response.json()["data"][0]["type"] == "note"
        engine.contact_service.get_timeline.assert_awaited_once_with(contact_id, "note")

    def test_add_interaction(self, client, engine):
        contact_id = uuid4()
        engine.contact_service.add_interaction.return_value = Interaction(contact_id=contact_id, summary="Call")

        response = client.post(f"/api/contacts/{contact_id}/interactions", json={"summary": "Call"})

        assert response.status_code == 200
        assert response.json()["data"]["summary"] == "Call"

    def test_follow_up_board(self, client, engine):
        ana = Contact(first_name="Ana")
        engine.follow_up_service.categorize.return_value = {
            "not_contacted": [ana], "needs_followup": [], "followed_up": [],
        }

        response = client.get("/api/follow-ups")

        assert response.json()["data"]["not_contacted"][0]["first_name"] == "Ana"
        engine.follow_up_service.categorize.assert_awaited_once_with(None)
