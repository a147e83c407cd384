"""
Import / Export Routes

Excel and CSV downloads, and contact import from uploaded spreadsheets.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, File, UploadFile
from fastapi.responses import JSONResponse, Response

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from ..services.spreadsheet_service import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE
from ..models.common import utcnow
from .auth import get_current_user
from .common import parse_optional_id

logger = logging.getLogger("expocrm.routes.spreadsheets")
router = APIRouter(tags=["import-export"])


def attachment(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ============================================
# Export
# ============================================

@router.get("/export")
async def export(
    type: str = "contacts",
    event_id: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """Download contacts, companies, an event workbook or the import template"""
    engine = get_engine_service()
    try:
        content, filename = await engine.spreadsheet_service.export(type, parse_optional_id(event_id, "event ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return attachment(content, XLSX_MEDIA_TYPE, filename)


@router.get("/export/excel")
async def export_excel(current_user: dict = Depends(get_current_user)):
    """Download all contacts as .xlsx"""
    engine = get_engine_service()
    content, filename = await engine.spreadsheet_service.export("contacts")
    return attachment(content, XLSX_MEDIA_TYPE, filename)


@router.get("/export/csv")
async def export_csv(current_user: dict = Depends(get_current_user)):
    """Download all contacts as CSV"""
    engine = get_engine_service()
    content = await engine.spreadsheet_service.export_contacts_csv()
    return attachment(content, CSV_MEDIA_TYPE, f"contacts-{utcnow().date().isoformat()}.csv")


# ============================================
# Import
# ============================================

@router.post("/import")
async def import_contacts(
    file: Optional[UploadFile] = File(None),
    current_user: dict = Depends(get_current_user),
):
    """Import contacts from a .csv, .xlsx or .xls upload"""
    if file is None:
        raise HTTPException(status_code=400, detail="No file provided")

    engine = get_engine_service()
    content = await file.read()
    try:
        result = await engine.spreadsheet_service.import_contacts(file.filename or "", content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if result["failed"]:
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "data": result["data"],
                "errors": result["errors"],
                "warnings": result["warnings"],
                "message": result["message"],
            },
        )

    return {
        "success": True,
        "data": [c.to_dict() for c in result["data"]],
        "imported": result["imported"],
        "total": result["total"],
        "errors": result["errors"],
        "warnings": result["warnings"],
        "message": result["message"],
    }
