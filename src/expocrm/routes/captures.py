"""
Captures Routes

Endpoints for business card / badge captures made at events.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NoContactDataError
from .auth import get_current_user
from .common import parse_id, parse_optional_id

logger = logging.getLogger("expocrm.routes.captures")
router = APIRouter(prefix="/captures", tags=["captures"])


class CreateCaptureRequest(BaseModel):
    """Capture with the fields the client already extracted"""
    image: Optional[str] = None                # data URL or base64
    capture_type: Optional[str] = None         # card_scan | badge_scan | document | photo
    event_id: Optional[str] = None
    extracted_data: Optional[dict] = None
    raw_text: Optional[str] = None


@router.post("")
async def create_capture(
    request: CreateCaptureRequest,
    current_user: dict = Depends(get_current_user),
):
    """Save a capture and create the contact it describes"""
    engine = get_engine_service()
    try:
        result = await engine.capture_service.create_capture(
            image=request.image,
            capture_type=request.capture_type,
            event_id=parse_optional_id(request.event_id, "event ID"),
            extracted_data=request.extracted_data,
            raw_text=request.raw_text,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoContactDataError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "data": result["capture"].to_dict(),
        "contact_id": str(result["contact_id"]),
        "message": "Lead captured and contact linked successfully",
    }


@router.get("")
async def list_captures(
    event_id: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """List captures, newest first"""
    engine = get_engine_service()
    captures = await engine.capture_service.list_captures(parse_optional_id(event_id, "event ID"))
    return {"data": [c.to_dict() for c in captures]}


@router.delete("/{capture_id}")
async def delete_capture(capture_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a capture"""
    engine = get_engine_service()
    if not await engine.capture_service.delete_capture(parse_id(capture_id, "capture ID")):
        raise HTTPException(status_code=404, detail="Capture not found")
    return {"success": True}
