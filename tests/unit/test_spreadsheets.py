import io
from datetime import date

import pandas as pd
import pytest

from expocrm.models.company import Company
from expocrm.models.contact import Contact
from expocrm.models.event import Event
from expocrm.services import spreadsheet_service
from expocrm.services.spreadsheet_service import (
    contact_template_xlsx,
    export_contacts_csv,
    export_contacts_xlsx,
    export_event_xlsx,
    normalize_header,
    parse_contact_rows,
    read_rows,
)


@pytest.fixture
def acme():
    return Company(name="Acme", website="https://acme.test", industry="Robotics")


@pytest.fixture
def ana(acme):
    return Contact(first_name="Ana", last_name="Lopez", email="ana@acme.test", company_id=acme.id, company=acme)


class TestExport:

    def test_contacts_sheet(self, ana):
        df = pd.read_excel(io.BytesIO(export_contacts_xlsx([ana])), engine="openpyxl")
        assert list(df.columns)[:3] == ["First Name", "Last Name", "Email"]
        assert df.loc[0, "First Name"] == "Ana"
        assert df.loc[0, "Company"] == "Acme"

    def test_event_workbook_sheets(self, ana, acme):
        event = Event(name="Hannover Messe", location="Hannover", start_date=date(2025, 3, 31))
        sheets = pd.read_excel(io.BytesIO(export_event_xlsx(event, [ana], [acme])), sheet_name=None, engine="openpyxl")

        assert list(sheets) == ["Event Info", "Contacts", "Companies"]
        assert len(sheets["Contacts"].columns) == 6
        assert len(sheets["Companies"].columns) == 4
        assert sheets["Companies"].iloc[0, 0] == "Acme"

    def test_csv_has_header_and_row(self, ana):
        lines = export_contacts_csv([ana]).strip().splitlines()
        assert lines[0].startswith("First Name,Last Name,Email")
        assert lines[1].startswith("Ana,Lopez,ana@acme.test")

    def test_template_reads_back_as_valid_import(self):
        rows = read_rows("template.xlsx", contact_template_xlsx())
        result = parse_contact_rows(rows)

        assert result.errors == []
        assert result.warnings == []
        assert result.data[0]["first_name"] == "John"
        assert result.data[0]["company_name"] == "Example Corp"
        assert result.data[0]["linkedin_url"] == "https://linkedin.com/in/johndoe"


class TestImport:

    def test_normalize_header(self):
        assert normalize_header("First Name*") == "first_name"
        assert normalize_header(" LinkedIn URL ") == "linkedin_url"

    def test_csv_rows(self):
        content = b"First Name,Email,Company\nAna,ana@acme.test,Acme\n"
        assert read_rows("leads.csv", content) == [{"first_name": "Ana", "email": "ana@acme.test", "company": "Acme"}]

    def test_unsupported_file(self):
        with pytest.raises(ValueError, match="Unsupported file type"):
            read_rows("leads.pdf", b"%PDF")

    def test_xls_is_read_with_xlrd(self, monkeypatch):
        calls = []

        def read_excel(buffer, **kwargs):
            calls.append(kwargs["engine"])
            return pd.DataFrame({"First Name": ["Ana"], "Email": [None]})

        monkeypatch.setattr(spreadsheet_service.pd, "read_excel", read_excel)

        assert read_rows("Leads.XLS", b"\xd0\xcf\x11\xe0") == [{"first_name": "Ana", "email": ""}]
        assert calls == ["xlrd"]

    @pytest.mark.parametrize("filename", ["leads.xls", "leads.xlsx"])
    def test_corrupt_workbook_is_value_error(self, filename):
        with pytest.raises(ValueError, match="Could not read"):
            read_rows(filename, b"this is not a spreadsheet")

    def test_missing_first_name_is_error(self):
        result = parse_contact_rows([{"first_name": "Ana"}, {"first_name": "  ", "email": "x@y.z"}])

        assert [c["first_name"] for c in result.data] == ["Ana"]
        assert result.errors == [{"row": 3, "field": "first_name", "message": "First name is required"}]

    def test_invalid_email_is_warning(self):
        result = parse_contact_rows([{"first_name": "Ana", "email": "not-an-email"}])

        assert result.errors == []
        assert result.warnings == ["Row 2: Invalid email format - not-an-email"]
        assert len(result.data) == 1
