"""
Reminders Routes
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.reminders")
router = APIRouter(prefix="/reminders", tags=["reminders"])


class CreateReminderRequest(BaseModel):
    """Create reminder request"""
    reminder_type: Optional[str] = None        # follow_up | meeting | event | custom
    reminder_date: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    priority: Optional[str] = None             # low | medium | high
    contact_id: Optional[str] = None
    event_id: Optional[str] = None
    meeting_brief_id: Optional[str] = None


class UpdateReminderRequest(BaseModel):
    """Update reminder request; id is taken from the path when present"""
    id: Optional[str] = None
    status: Optional[str] = None               # pending | sent | dismissed | snoozed
    snoozed_until: Optional[str] = None
    reminder_date: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    priority: Optional[str] = None


async def _update(reminder_id: str, request: UpdateReminderRequest) -> dict:
    engine = get_engine_service()
    updates = request.model_dump(exclude_unset=True)
    updates.pop("id", None)
    try:
        reminder = await engine.reminder_service.update_reminder(parse_id(reminder_id, "reminder ID"), updates)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": reminder.to_dict()}


async def _delete(reminder_id: str) -> dict:
    engine = get_engine_service()
    if not await engine.reminder_service.delete_reminder(parse_id(reminder_id, "reminder ID")):
        raise HTTPException(status_code=404, detail="Reminder not found")
    return {"success": True}


@router.get("")
async def list_reminders(
    status: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    current_user: dict = Depends(get_current_user),
):
    """Reminders with a status (default pending), soonest first"""
    engine = get_engine_service()
    reminders = await engine.reminder_service.list_reminders(status, limit)
    return {"data": [r.to_dict() for r in reminders]}


@router.post("")
async def create_reminder(
    request: CreateReminderRequest,
    current_user: dict = Depends(get_current_user),
):
    """Create a reminder"""
    engine = get_engine_service()
    try:
        reminder = await engine.reminder_service.create_reminder(request.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": reminder.to_dict()}


@router.patch("")
async def update_reminder_by_body(
    request: UpdateReminderRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a reminder whose id is in the body"""
    if not request.id:
        raise HTTPException(status_code=400, detail="Reminder ID is required")
    return await _update(request.id, request)


@router.patch("/{reminder_id}")
async def update_reminder(
    reminder_id: str,
    request: UpdateReminderRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update, snooze or dismiss a reminder"""
    return await _update(reminder_id, request)


@router.delete("")
async def delete_reminder_by_query(id: Optional[str] = None, current_user: dict = Depends(get_current_user)):
    """Delete a reminder given as ?id="""
    if not id:
        raise HTTPException(status_code=400, detail="Reminder ID is required")
    return await _delete(id)


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a reminder"""
    return await _delete(reminder_id)
