"""
Spreadsheet Service

Excel/CSV export of contacts, companies and events, and contact import
from .csv / .xlsx / .xls uploads.
"""
import csv
import io
import logging
import re
import zipfile
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from uuid import UUID

import asyncpg
import pandas as pd
import xlrd
from openpyxl.utils.exceptions import InvalidFileException

from ..models.common import utcnow
from ..models.company import Company
from ..models.contact import Contact
from ..models.event import Event
from ..storage.company_storage import CompanyStorage
from ..storage.contact_storage import ContactStorage
from ..storage.event_storage import EventStorage
from .company_service import CompanyService
from .exceptions import NotFoundError

logger = logging.getLogger("expocrm.services.spreadsheet")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"

EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}
UNREADABLE_FILE_ERRORS = (
    zipfile.BadZipFile,
    InvalidFileException,
    xlrd.XLRDError,
    pd.errors.ParserError,
    pd.errors.EmptyDataError,
    UnicodeDecodeError,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CONTACT_COLUMNS = [
    ("First Name", 15), ("Last Name", 15), ("Email", 30), ("Phone", 15), ("Job Title", 20),
    ("Company", 25), ("LinkedIn", 40), ("Notes", 50), ("Created Date", 20),
]
COMPANY_COLUMNS = [
    ("Company Name", 30), ("Website", 40), ("Industry", 20), ("Location", 25),
    ("Company Size", 15), ("Description", 50), ("Products/Services", 50),
]
TEMPLATE_COLUMNS = [
    ("First Name*", 15), ("Last Name", 15), ("Email", 30), ("Phone", 15), ("Job Title", 20),
    ("Company Name", 25), ("LinkedIn URL", 40), ("Notes", 50),
]
TEMPLATE_EXAMPLE = [
    "John", "Doe", "john.doe@example.com", "+1-555-0100", "CEO",
    "Example Corp", "https://linkedin.com/in/johndoe", "Met at Tech Conference 2024",
]

# normalized header -> contact field
HEADER_ALIASES = {
    "first_name": "first_name",
    "last_name": "last_name",
    "email": "email",
    "phone": "phone",
    "job_title": "job_title",
    "company": "company_name",
    "company_name": "company_name",
    "linkedin": "linkedin_url",
    "linkedin_url": "linkedin_url",
    "notes": "notes",
}


@dataclass
class ImportResult:
    """Parsed contact rows with blocking errors and non-blocking warnings"""
    data: List[dict] = field(default_factory=list)
    errors: List[dict] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ============================================
# Export
# ============================================

def _text(value) -> str:
    return "" if value is None else str(value)


def contact_row(contact: Contact) -> list:
    return [
        contact.first_name,
        _text(contact.last_name),
        _text(contact.email),
        _text(contact.phone),
        _text(contact.job_title),
        contact.company.name if contact.company else "",
        _text(contact.linkedin_url),
        _text(contact.notes),
        contact.created_at.date().isoformat() if contact.created_at else "",
    ]


def company_row(company: Company) -> list:
    return [
        company.name,
        _text(company.website),
        _text(company.industry),
        _text(company.location),
        _text(company.company_size),
        _text(company.description),
        _text(company.products_services),
    ]


def _frame(columns: List[Tuple[str, int]], rows: List[list]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=[name for name, _ in columns])


def _write_sheet(writer: pd.ExcelWriter, df: pd.DataFrame, sheet_name: str, widths: List[int], header: bool = True):
    df.to_excel(writer, index=False, header=header, sheet_name=sheet_name)
    worksheet = writer.sheets[sheet_name]
    for i, width in enumerate(widths):
        worksheet.set_column(i, i, width)


def export_contacts_xlsx(contacts: List[Contact]) -> bytes:
    df = _frame(CONTACT_COLUMNS, [contact_row(c) for c in contacts])
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_sheet(writer, df, "Contacts", [w for _, w in CONTACT_COLUMNS])
    return output.getvalue()


def export_companies_xlsx(companies: List[Company]) -> bytes:
    df = _frame(COMPANY_COLUMNS, [company_row(c) for c in companies])
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_sheet(writer, df, "Companies", [w for _, w in COMPANY_COLUMNS])
    return output.getvalue()


def export_event_xlsx(event: Event, contacts: List[Contact], companies: List[Company]) -> bytes:
    """Workbook with 'Event Info', 'Contacts' and 'Companies' sheets"""
    info = pd.DataFrame([
        ["Event Name", event.name],
        ["Location", _text(event.location)],
        ["Start Date", event.start_date.isoformat() if event.start_date else ""],
        ["End Date", event.end_date.isoformat() if event.end_date else ""],
        ["Type", event.event_type],
    ])
    contact_columns = CONTACT_COLUMNS[:6]
    company_columns = COMPANY_COLUMNS[:4]
    contacts_df = _frame(contact_columns, [contact_row(c)[:6] for c in contacts])
    companies_df = _frame(company_columns, [company_row(c)[:4] for c in companies])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_sheet(writer, info, "Event Info", [20, 40], header=False)
        _write_sheet(writer, contacts_df, "Contacts", [w for _, w in contact_columns])
        _write_sheet(writer, companies_df, "Companies", [w for _, w in company_columns])
    return output.getvalue()


def contact_template_xlsx() -> bytes:
    """Import template with one example row"""
    df = _frame(TEMPLATE_COLUMNS, [TEMPLATE_EXAMPLE])
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
        _write_sheet(writer, df, "Contact Template", [w for _, w in TEMPLATE_COLUMNS])
    return output.getvalue()


def export_contacts_csv(contacts: List[Contact]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([name for name, _ in CONTACT_COLUMNS])
    for contact in contacts:
        writer.writerow(contact_row(contact))
    return output.getvalue()


# ============================================
# Import
# ============================================

def normalize_header(header) -> str:
    """'First Name*' -> 'first_name'"""
    return re.sub(r"\s+", "_", str(header).strip().lower().rstrip("*").strip())


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def read_rows(filename: str, content: bytes) -> List[Dict[str, str]]:
    """
    Rows of an uploaded file as dicts keyed by normalized header.

    .xlsx is read with openpyxl, legacy .xls (BIFF) with xlrd.

    Raises:
        ValueError: If the file type is not .csv, .xlsx or .xls, or the
            file cannot be parsed
    """
    name = (filename or "").lower()
    extension = name[name.rfind("."):] if "." in name else ""
    if extension != ".csv" and extension not in EXCEL_ENGINES:
        raise ValueError("Unsupported file type. Please upload .xlsx, .xls, or .csv file")

    try:
        if extension == ".csv":
            df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False, skip_blank_lines=True)
        else:
            df = pd.read_excel(io.BytesIO(content), dtype=str, engine=EXCEL_ENGINES[extension]).fillna("")
    except UNREADABLE_FILE_ERRORS as e:
        logger.warning(f"Could not parse {filename}: {e}")
        raise ValueError(f"Could not read {extension} file: {e}")

    df.columns = [normalize_header(c) for c in df.columns]
    return df.to_dict(orient="records")


def parse_contact_rows(rows: List[Dict[str, str]]) -> ImportResult:
    """
    Validate rows into contact dicts.

    Row numbers are 1-based spreadsheet rows (the header is row 1).
    A missing first name is an error; a malformed email is a warning.
    """
    result = ImportResult()
    for index, row in enumerate(rows):
        row_number = index + 2
        contact = {}
        for header, value in row.items():
            key = HEADER_ALIASES.get(header)
            text = _text(value).strip()
            if key and text and key not in contact:
                contact[key] = text

        if not contact.get("first_name"):
            result.errors.append({"row": row_number, "field": "first_name", "message": "First name is required"})
            continue

        email = contact.get("email")
        if email and not is_valid_email(email):
            result.warnings.append(f"Row {row_number}: Invalid email format - {email}")

        result.data.append(contact)
    return result


class SpreadsheetService:
    """Service for spreadsheet import and export"""

    def __init__(
        self,
        contact_storage: ContactStorage,
        company_storage: CompanyStorage,
        event_storage: EventStorage,
        company_service: CompanyService,
    ):
        self.contact_storage = contact_storage
        self.company_storage = company_storage
        self.event_storage = event_storage
        self.company_service = company_service

    async def export(self, export_type: str = "contacts", event_id: Optional[UUID] = None) -> Tuple[bytes, str]:
        """
        Build an .xlsx export.

        Returns:
            (content, filename)

        Raises:
            ValueError: If the export type is unknown or an event export
                has no event_id
            NotFoundError: If the event does not exist
        """
        today = utcnow().date().isoformat()

        if export_type == "contacts":
            contacts = await self.contact_storage.list_all()
            return export_contacts_xlsx(contacts), f"contacts-{today}.xlsx"

        if export_type == "companies":
            companies = await self.company_storage.list_all()
            return export_companies_xlsx(companies), f"companies-{today}.xlsx"

        if export_type == "event" and event_id:
            event = await self.event_storage.get_by_id(event_id)
            if not event:
                raise NotFoundError("Event", event_id)
            contacts = await self.contact_storage.list_by_event(event_id)
            company_ids = list({c.company_id for c in contacts if c.company_id})
            companies = await self.company_storage.list_by_ids(company_ids)
            slug = re.sub(r"\s+", "-", event.name)
            return export_event_xlsx(event, contacts, companies), f"event-{slug}-{today}.xlsx"

        if export_type == "template":
            return contact_template_xlsx(), "contact-import-template.xlsx"

        raise ValueError("Invalid export type")

    async def export_contacts_csv(self) -> str:
        return export_contacts_csv(await self.contact_storage.list_all())

    async def import_contacts(self, filename: str, content: bytes) -> dict:
        """
        Import contacts from an uploaded file.

        When any row fails validation nothing is saved and the parse
        result is returned with 'failed' set. Otherwise each row is saved
        with its company found or created by name; per-row save failures
        are collected in 'errors'.
        """
        parsed = parse_contact_rows(read_rows(filename, content))
        if parsed.errors:
            return {
                "failed": True,
                "data": parsed.data,
                "errors": parsed.errors,
                "warnings": parsed.warnings,
                "message": "Import completed with errors",
            }

        saved: List[Contact] = []
        save_errors: List[str] = []
        for index, row in enumerate(parsed.data):
            row_number = index + 2
            fields = dict(row)
            company_name = fields.pop("company_name", None)
            try:
                company = await self.company_service.find_or_create(company_name) if company_name else None
                contact = await self.contact_storage.create(Contact(
                    company_id=company.id if company else None,
                    **fields,
                ))
                saved.append(contact)
            except (asyncpg.PostgresError, ValueError) as e:
                logger.warning(f"Import row {row_number} failed: {e}")
                save_errors.append(f"Row {row_number}: {e}")

        logger.info(f"Imported {len(saved)} of {len(parsed.data)} contacts from {filename}")
        return {
            "failed": False,
            "data": saved,
            "imported": len(saved),
            "total": len(parsed.data),
            "errors": save_errors,
            "warnings": parsed.warnings,
            "message": f"Successfully imported {len(saved)} of {len(parsed.data)} contacts",
        }
