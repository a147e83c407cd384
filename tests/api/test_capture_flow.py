from uuid import uuid4

from expocrm.models.capture import Capture
from expocrm.models.email_draft import EmailDraft
from expocrm.models.note import Note
from expocrm.models.reminder import Reminder
from expocrm.services.exceptions import AIServiceError, EmailDeliveryError, NoContactDataError, NotFoundError


class TestCaptures:

    def test_create(self, client, engine):
        contact_id = uuid4()
        engine.capture_service.create_capture.return_value = {"capture": Capture(), "contact_id": contact_id}

        response = client.post("/api/captures", json={
            "image": "data:image/png;base64,AAAA",
            "extracted_data": {"name": "Ana Lopez"},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["contact_id"] == str(contact_id)
        assert body["message"] == "Lead captured and contact linked successfully"

    def test_missing_image_is_400(self, client, engine):
        engine.capture_service.create_capture.side_effect = ValueError("Image is required")
        response = client.post("/api/captures", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Image is required"}

    def test_no_contact_data_is_422(self, client, engine):
        engine.capture_service.create_capture.side_effect = NoContactDataError("Failed to find relevant data")
        response = client.post("/api/captures", json={"image": "AAAA"})
        assert response.status_code == 422

    def test_delete_missing_is_404(self, client, engine):
        engine.capture_service.delete_capture.return_value = False
        assert client.delete(f"/api/captures/{uuid4()}").status_code == 404


class TestAI:

    def test_analyze_card(self, client, engine):
        engine.capture_service.analyze_card.return_value = {"first_name": "Ana"}
        response = client.post("/api/ai/analyze-card", json={"image": "AAAA"})
        assert response.json() == {"data": {"first_name": "Ana"}}

    def test_analyze_note_accepts_camel_case(self, client, engine):
        contact_id = uuid4()
        engine.note_service.analyze_note.return_value = {"analysis": {"status": "contacted"}, "updated": True}

        response = client.post("/api/ai/analyze-note", json={"content": "met", "contactId": str(contact_id)})

        assert response.json() == {"success": True, "analysis": {"status": "contacted"}, "updated": True}
        engine.note_service.analyze_note.assert_awaited_once_with("met", contact_id)

    def test_transcribe_requires_audio(self, client):
        response = client.post("/api/ai/transcribe", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "No audio data provided"}

    def test_transcribe_failure(self, client, engine):
        engine.ai_service.transcribe_audio.side_effect = AIServiceError("down")
        response = client.post("/api/ai/transcribe", json={"audio_data": "AAAA"})
        assert response.status_code == 500


class TestNotes:

    def test_text_note_schedules_analysis(self, client, engine):
        note = Note(content="met at booth", contact_id=uuid4())
        engine.note_service.create_note.return_value = note
        engine.note_service.should_analyze.return_value = True

        response = client.post("/api/notes", json={"content": "met at booth", "contact_id": str(note.contact_id)})

        assert response.status_code == 200
        engine.note_service.analyze_saved_note.assert_awaited_once_with(note)

    def test_patch_by_body_requires_id(self, client):
        assert client.patch("/api/notes", json={"content": "x"}).status_code == 400


class TestEmails:

    def test_draft_requires_contact_and_type(self, client):
        assert client.post("/api/emails/draft", json={"email_type": "follow_up"}).status_code == 400

    def test_draft_passes_attached_assets(self, client, engine):
        asset_id = uuid4()
        engine.email_service.generate_draft.return_value = EmailDraft(subject="Hi")

        response = client.post("/api/emails/draft", json={
            "contact_id": str(uuid4()), "email_type": "follow_up", "attachments": [str(asset_id)],
        })

        assert response.status_code == 200
        assert engine.email_service.generate_draft.await_args.kwargs["asset_ids"] == [asset_id]

    def test_draft_rejects_malformed_asset_id(self, client, engine):
        response = client.post("/api/emails/draft", json={
            "contact_id": str(uuid4()), "email_type": "follow_up", "attachments": ["deck.pdf"],
        })

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid asset ID"}
        engine.email_service.generate_draft.assert_not_called()

    def test_delete_is_idempotent(self, client, engine):
        engine.email_service.delete_draft.return_value = 0
        response = client.delete(f"/api/emails/drafts/{uuid4()}")
        assert response.json() == {"success": True, "deleted": 0}

    def test_send(self, client, engine):
        engine.email_service.send_draft.return_value = EmailDraft(status="sent")
        response = client.post(f"/api/emails/drafts/{uuid4()}/send")
        assert response.json()["data"]["status"] == "sent"

    def test_send_delivery_failure_is_502(self, client, engine):
        engine.email_service.send_draft.side_effect = EmailDeliveryError("Connection refused")
        response = client.post(f"/api/emails/drafts/{uuid4()}/send")
        assert response.status_code == 502
        assert response.json() == {"error": "Connection refused"}


class TestReminders:

    def test_list_passes_filters(self, client, engine):
        engine.reminder_service.list_reminders.return_value = [Reminder(title="Call Ana")]

        response = client.get("/api/reminders?status=snoozed&limit=5")

        assert response.json()["data"][0]["title"] == "Call Ana"
        engine.reminder_service.list_reminders.assert_awaited_once_with("snoozed", 5)

    def test_delete_by_query(self, client, engine):
        reminder_id = uuid4()
        engine.reminder_service.delete_reminder.return_value = True

        assert client.delete(f"/api/reminders?id={reminder_id}").json() == {"success": True}
        engine.reminder_service.delete_reminder.assert_awaited_once_with(reminder_id)

    def test_patch_missing(self, client, engine):
        engine.reminder_service.update_reminder.side_effect = NotFoundError("Reminder")
        response = client.patch(f"/api/reminders/{uuid4()}", json={"status": "dismissed"})
        assert response.status_code == 404
