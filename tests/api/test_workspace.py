from uuid import uuid4

from expocrm.models.contact import Contact
from expocrm.models.marketing_asset import MarketingAsset
from expocrm.models.meeting_brief import MeetingBrief
from expocrm.models.user_settings import UserSettings
from expocrm.services.exceptions import NotFoundError
from expocrm.services.spreadsheet_service import XLSX_MEDIA_TYPE


class TestImportExport:

    def test_export_sets_attachment_headers(self, client, engine):
        engine.spreadsheet_service.export.return_value = (b"xlsx-bytes", "contacts-2025-03-10.xlsx")

        response = client.get("/api/export?type=contacts")

        assert response.status_code == 200
        assert response.content == b"xlsx-bytes"
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        assert response.headers["content-disposition"] == 'attachment; filename="contacts-2025-03-10.xlsx"'

    def test_export_invalid_type(self, client, engine):
        engine.spreadsheet_service.export.side_effect = ValueError("Invalid export type")
        assert client.get("/api/export?type=everything").status_code == 400

    def test_export_missing_event(self, client, engine):
        engine.spreadsheet_service.export.side_effect = NotFoundError("Event")
        assert client.get(f"/api/export?type=event&event_id={uuid4()}").status_code == 404

    def test_export_csv(self, client, engine):
        engine.spreadsheet_service.export_contacts_csv.return_value = "First Name\r\nAna\r\n"
        response = client.get("/api/export/csv")
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text == "First Name\r\nAna\r\n"

    def test_import_success(self, client, engine):
        engine.spreadsheet_service.import_contacts.return_value = {
            "failed": False,
            "data": [Contact(first_name="Ana")],
            "imported": 1,
            "total": 1,
            "errors": [],
            "warnings": [],
            "message": "Successfully imported 1 of 1 contacts",
        }

        response = client.post("/api/import", files={"file": ("leads.csv", b"First Name\nAna\n", "text/csv")})

        assert response.status_code == 200
        assert response.json()["imported"] == 1
        engine.spreadsheet_service.import_contacts.assert_awaited_once_with("leads.csv", b"First Name\nAna\n")

    def test_import_validation_errors_are_400(self, client, engine):
        engine.spreadsheet_service.import_contacts.return_value = {
            "failed": True,
            "data": [],
            "errors": [{"row": 2, "field": "first_name", "message": "First name is required"}],
            "warnings": [],
            "message": "Import completed with errors",
        }

        response = client.post("/api/import", files={"file": ("leads.csv", b"Email\nx@y.z\n", "text/csv")})

        assert response.status_code == 400
        assert response.json()["errors"][0]["row"] == 2

    def test_unreadable_workbook_is_400(self, client, engine):
        engine.spreadsheet_service.import_contacts.side_effect = ValueError("Could not read .xls file: corrupt")

        response = client.post("/api/import", files={"file": ("leads.xls", b"garbage", "application/vnd.ms-excel")})

        assert response.status_code == 400
        assert response.json() == {"error": "Could not read .xls file: corrupt"}

    def test_import_without_file(self, client):
        assert client.post("/api/import").status_code == 400


class TestMeetings:

    def test_get_includes_history(self, client, engine):
        meeting = MeetingBrief()
        engine.meeting_service.get_meeting_details.return_value = {
            "meeting": meeting, "interactions": [], "reminders": [],
        }

        response = client.get(f"/api/meetings/{meeting.id}")

        data = response.json()["data"]
        assert data["id"] == str(meeting.id)
        assert data["interactions"] == [] and data["reminders"] == []

    def test_prep_without_contact_is_400(self, client, engine):
        engine.meeting_service.prepare_meeting.side_effect = ValueError("Meeting has no contact")
        assert client.post(f"/api/meetings/{uuid4()}/prep").status_code == 400


class TestSettings:

    def test_defaults(self, client, engine):
        engine.profile_service.get_settings.return_value = UserSettings()
        response = client.get("/api/settings")
        assert response.status_code == 200
        assert "smtp_host" in response.json()["data"]

    def test_profile_missing_is_null(self, client, engine):
        engine.profile_service.get_profile.return_value = None
        assert client.get("/api/profile").json() == {"data": None}

    def test_profile_requires_name(self, client, engine):
        engine.profile_service.update_profile.side_effect = ValueError("Profile name is required")
        response = client.put("/api/profile", json={"industry": "robotics"})
        assert response.status_code == 400

    def test_new_asset_is_indexed_in_background(self, client, engine):
        asset = MarketingAsset(name="deck.pdf", file_url="https://files.acme.test/deck.pdf")
        engine.profile_service.create_asset.return_value = asset
        engine.profile_service.indexing_enabled = True

        response = client.post("/api/assets", json={"name": "deck.pdf", "file_url": asset.file_url})

        assert response.status_code == 200
        engine.profile_service.index_asset.assert_awaited_once_with(asset)

    def test_asset_not_indexed_when_disabled(self, client, engine):
        engine.profile_service.create_asset.return_value = MarketingAsset(name="deck.pdf", file_url="x")
        engine.profile_service.indexing_enabled = False

        client.post("/api/assets", json={"name": "deck.pdf", "file_url": "x"})

        engine.profile_service.index_asset.assert_not_called()

    def test_reindex_missing_asset(self, client, engine):
        engine.profile_service.reindex_asset.side_effect = NotFoundError("Asset")
        assert client.post(f"/api/assets/{uuid4()}/index").status_code == 404


def test_dashboard(client, engine):
    engine.dashboard_service.get_summary.return_value = {"summary": {"targets": 2}, "stages": {}}
    response = client.get("/api/dashboard/summary")
    assert response.json()["summary"]["targets"] == 2


def test_enrich_requires_input(client):
    assert client.post("/api/enrich", json={}).status_code == 400
    assert client.post("/api/enrich/batch", json={"contacts": []}).status_code == 400
