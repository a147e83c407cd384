"""
Meetings Routes

Meeting briefs and AI meeting prep.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.meetings")
router = APIRouter(prefix="/meetings", tags=["meetings"])


# ============================================
# Request Models
# ============================================

class CreateMeetingRequest(BaseModel):
    """Schedule meeting request"""
    contact_id: Optional[str] = None
    meeting_date: Optional[str] = None
    company_id: Optional[str] = None
    event_id: Optional[str] = None
    meeting_type: Optional[str] = None         # in_person | video_call | phone_call
    meeting_location: Optional[str] = None
    pre_meeting_notes: Optional[str] = None


class UpdateMeetingRequest(BaseModel):
    """Update meeting request"""
    meeting_date: Optional[str] = None
    meeting_type: Optional[str] = None
    meeting_location: Optional[str] = None
    pre_meeting_notes: Optional[str] = None
    post_meeting_notes: Optional[str] = None
    ai_talking_points: Optional[str] = None
    interaction_summary: Optional[str] = None
    status: Optional[str] = None               # scheduled | completed | cancelled


# ============================================
# Routes
# ============================================

@router.get("")
async def list_meetings(
    status: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """Meetings with a status (default scheduled), soonest first"""
    engine = get_engine_service()
    meetings = await engine.meeting_service.list_meetings(status)
    return {"data": [m.to_dict() for m in meetings]}


@router.post("")
async def create_meeting(
    request: CreateMeetingRequest,
    current_user: dict = Depends(get_current_user),
):
    """Schedule a meeting with generated talking points"""
    engine = get_engine_service()
    try:
        meeting = await engine.meeting_service.create_meeting(request.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": meeting.to_dict()}


@router.get("/{meeting_id}")
async def get_meeting(meeting_id: str, current_user: dict = Depends(get_current_user)):
    """Meeting with the contact's interactions and its reminders"""
    engine = get_engine_service()
    try:
        details = await engine.meeting_service.get_meeting_details(parse_id(meeting_id, "meeting ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    data = details["meeting"].to_dict()
    data["interactions"] = [i.to_dict() for i in details["interactions"]]
    data["reminders"] = [r.to_dict() for r in details["reminders"]]
    return {"data": data}


@router.patch("/{meeting_id}")
async def update_meeting(
    meeting_id: str,
    request: UpdateMeetingRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a meeting"""
    engine = get_engine_service()
    try:
        meeting = await engine.meeting_service.update_meeting(
            parse_id(meeting_id, "meeting ID"),
            request.model_dump(exclude_unset=True),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": meeting.to_dict()}


@router.delete("/{meeting_id}")
async def delete_meeting(meeting_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a meeting"""
    engine = get_engine_service()
    if not await engine.meeting_service.delete_meeting(parse_id(meeting_id, "meeting ID")):
        raise HTTPException(status_code=404, detail="Meeting not found")
    return {"success": True}


@router.post("/{meeting_id}/prep")
async def prepare_meeting(meeting_id: str, current_user: dict = Depends(get_current_user)):
    """Generate meeting prep from the contact's history"""
    engine = get_engine_service()
    try:
        prep = await engine.meeting_service.prepare_meeting(parse_id(meeting_id, "meeting ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": prep}
