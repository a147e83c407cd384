"""
Emails Routes

AI email drafts: generate, improve, delete and send over SMTP.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import EmailDeliveryError, NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.emails")
router = APIRouter(prefix="/emails", tags=["emails"])


# ============================================
# Request Models
# ============================================

class DraftRequest(BaseModel):
    """Generate draft request"""
    contact_id: Optional[str] = None
    email_type: Optional[str] = None           # pre_event | follow_up | pre_meeting
    event_id: Optional[str] = None
    custom_context: Optional[str] = None
    attachments: Optional[List[str]] = None    # marketing asset ids to draw excerpts from


class ImproveRequest(BaseModel):
    """Rewrite a draft text"""
    text: Optional[str] = None
    instructions: Optional[str] = None


# ============================================
# Routes
# ============================================

@router.post("/draft")
async def generate_draft(
    request: DraftRequest,
    current_user: dict = Depends(get_current_user),
):
    """Generate and save an email draft for a contact"""
    if not request.contact_id or not request.email_type:
        raise HTTPException(status_code=400, detail="Contact ID and email type are required")

    engine = get_engine_service()
    try:
        draft = await engine.email_service.generate_draft(
            contact_id=request.contact_id,
            email_type=request.email_type,
            event_id=request.event_id,
            custom_context=request.custom_context,
            asset_ids=[parse_id(a, "asset ID") for a in request.attachments or []],
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": draft.to_dict()}


@router.post("/improve")
async def improve_email(
    request: ImproveRequest,
    current_user: dict = Depends(get_current_user),
):
    """Improve a draft text; the original comes back when the model fails"""
    engine = get_engine_service()
    try:
        improved = await engine.email_service.improve(request.text, request.instructions)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": improved}


@router.delete("/drafts/{draft_id}")
async def delete_draft(draft_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a draft; deleting a missing draft is not an error"""
    engine = get_engine_service()
    deleted = await engine.email_service.delete_draft(parse_id(draft_id, "draft ID"))
    return {"success": True, "deleted": deleted}


@router.post("/drafts/{draft_id}/send")
async def send_draft(draft_id: str, current_user: dict = Depends(get_current_user)):
    """Send a draft to its contact"""
    engine = get_engine_service()
    try:
        draft = await engine.email_service.send_draft(parse_id(draft_id, "draft ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EmailDeliveryError as e:
        logger.error(f"Email delivery failed for draft {draft_id}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return {"data": draft.to_dict()}
