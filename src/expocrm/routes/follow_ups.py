"""
Follow-ups Routes
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id, parse_optional_id

logger = logging.getLogger("expocrm.routes.follow_ups")
router = APIRouter(prefix="/follow-ups", tags=["follow-ups"])


class RecordFollowUpRequest(BaseModel):
    """Follow-up email sent to a contact"""
    contact_id: str
    summary: Optional[str] = None
    details: Optional[dict] = None


class UpdateFollowUpRequest(BaseModel):
    """Update follow-up interaction request"""
    summary: Optional[str] = None
    details: Optional[dict] = None
    interaction_type: Optional[str] = None
    interaction_date: Optional[str] = None
    event_id: Optional[str] = None


@router.get("")
async def list_follow_ups(
    event_id: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """Contacts grouped by follow-up state"""
    engine = get_engine_service()
    categorized = await engine.follow_up_service.categorize(parse_optional_id(event_id, "event ID"))
    return {"data": {status: [c.to_dict() for c in contacts] for status, contacts in categorized.items()}}


@router.post("")
async def record_follow_up(
    request: RecordFollowUpRequest,
    current_user: dict = Depends(get_current_user),
):
    """Log a follow-up email"""
    engine = get_engine_service()
    interaction = await engine.follow_up_service.record_follow_up(
        parse_id(request.contact_id, "contact ID"),
        summary=request.summary,
        details=request.details,
    )
    return {"data": interaction.to_dict()}


@router.put("/{follow_up_id}")
@router.patch("/{follow_up_id}")
async def update_follow_up(
    follow_up_id: str,
    request: UpdateFollowUpRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a follow-up interaction"""
    engine = get_engine_service()
    try:
        interaction = await engine.follow_up_service.update_follow_up(
            parse_id(follow_up_id, "follow-up ID"),
            request.model_dump(exclude_unset=True),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": interaction.to_dict()}


@router.delete("/{follow_up_id}")
async def delete_follow_up(follow_up_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a follow-up interaction"""
    engine = get_engine_service()
    if not await engine.follow_up_service.delete_follow_up(parse_id(follow_up_id, "follow-up ID")):
        raise HTTPException(status_code=404, detail="Follow-up not found")
    return {"success": True}
