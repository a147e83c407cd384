"""
Events Routes

Endpoints for events and their targets, stats, captures and email drafts.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import AIServiceError, NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.events")
router = APIRouter(prefix="/events", tags=["events"])


# ============================================
# Request Models
# ============================================

class CreateEventRequest(BaseModel):
    """Create event request"""
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None           # ISO date
    end_date: Optional[str] = None
    event_type: Optional[str] = None           # exhibition | conference | meeting
    status: Optional[str] = None


class UpdateEventRequest(BaseModel):
    """Update event request"""
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    event_type: Optional[str] = None
    status: Optional[str] = None


class AddTargetRequest(BaseModel):
    """Add target company request"""
    company_id: str
    priority: Optional[str] = None             # low | medium | high
    booth_location: Optional[str] = None
    notes: Optional[str] = None


class UpdateTargetRequest(BaseModel):
    """Update target company request"""
    priority: Optional[str] = None
    booth_location: Optional[str] = None
    talking_points: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = None               # not_contacted | contacted | followed_up


class ResearchTargetRequest(BaseModel):
    """Company name or website to research and add as a target"""
    query: str


class TalkingPointsRequest(BaseModel):
    """Extra company fields (e.g. fresh research) for talking points"""
    company: Optional[dict] = None
    save: bool = True


# ============================================
# Events
# ============================================

@router.get("")
async def list_events(current_user: dict = Depends(get_current_user)):
    """List events, newest first"""
    engine = get_engine_service()
    events = await engine.event_service.list_events()
    return {"data": [e.to_dict() for e in events]}


@router.post("")
async def create_event(
    request: CreateEventRequest,
    current_user: dict = Depends(get_current_user),
):
    """Create an event"""
    engine = get_engine_service()
    try:
        event = await engine.event_service.create_event(
            name=request.name,
            description=request.description,
            location=request.location,
            start_date=request.start_date,
            end_date=request.end_date,
            event_type=request.event_type,
            status=request.status,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": event.to_dict()}


@router.get("/{event_id}")
async def get_event(event_id: str, current_user: dict = Depends(get_current_user)):
    """Get an event by ID"""
    engine = get_engine_service()
    try:
        event = await engine.event_service.get_event(parse_id(event_id, "event ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": event.to_dict()}


@router.put("/{event_id}")
@router.patch("/{event_id}")
async def update_event(
    event_id: str,
    request: UpdateEventRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update an event"""
    engine = get_engine_service()
    try:
        event = await engine.event_service.update_event(
            parse_id(event_id, "event ID"),
            request.model_dump(exclude_unset=True),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": event.to_dict()}


@router.delete("/{event_id}")
async def delete_event(event_id: str, current_user: dict = Depends(get_current_user)):
    """Delete an event"""
    engine = get_engine_service()
    if not await engine.event_service.delete_event(parse_id(event_id, "event ID")):
        raise HTTPException(status_code=404, detail="Event not found")
    return {"success": True}


@router.get("/{event_id}/stats")
async def get_event_stats(event_id: str, current_user: dict = Depends(get_current_user)):
    """Target, capture, contact and follow-up counts for an event"""
    engine = get_engine_service()
    stats = await engine.event_service.get_stats(parse_id(event_id, "event ID"))
    return {"data": stats}


@router.get("/{event_id}/captures")
async def list_event_captures(
    event_id: str,
    status: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """Captures of an event with contact and company"""
    engine = get_engine_service()
    captures = await engine.event_service.list_captures(parse_id(event_id, "event ID"), status)
    return {"data": [c.to_dict() for c in captures]}


@router.get("/{event_id}/emails")
async def list_event_emails(event_id: str, current_user: dict = Depends(get_current_user)):
    """Email drafts of an event with contact and company"""
    engine = get_engine_service()
    drafts = await engine.event_service.list_drafts(parse_id(event_id, "event ID"))
    return {"data": [d.to_dict() for d in drafts]}


# ============================================
# Targets
# ============================================

@router.get("/{event_id}/targets")
async def list_targets(event_id: str, current_user: dict = Depends(get_current_user)):
    """Target companies of an event, high priority first"""
    engine = get_engine_service()
    targets = await engine.target_service.list_targets(parse_id(event_id, "event ID"))
    return {"data": [t.to_dict() for t in targets]}


@router.post("/{event_id}/targets")
async def add_target(
    event_id: str,
    request: AddTargetRequest,
    current_user: dict = Depends(get_current_user),
):
    """Add a company as target of an event"""
    engine = get_engine_service()
    try:
        target = await engine.target_service.add_target(
            parse_id(event_id, "event ID"),
            parse_id(request.company_id, "company ID"),
            priority=request.priority,
            booth_location=request.booth_location,
            notes=request.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": target.to_dict()}


@router.post("/{event_id}/targets/research")
async def research_target(
    event_id: str,
    request: ResearchTargetRequest,
    current_user: dict = Depends(get_current_user),
):
    """Research a company by name or website and add it as a target"""
    engine = get_engine_service()
    try:
        result = await engine.target_service.research_and_add(parse_id(event_id, "event ID"), request.query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AIServiceError as e:
        logger.error(f"Target research failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to research company")
    return {"data": {"research": result["research"], "target": result["target"].to_dict()}}


@router.put("/{event_id}/targets/{target_id}")
@router.patch("/{event_id}/targets/{target_id}")
async def update_target(
    event_id: str,
    target_id: str,
    request: UpdateTargetRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a target company"""
    engine = get_engine_service()
    parse_id(event_id, "event ID")
    try:
        target = await engine.target_service.update_target(
            parse_id(target_id, "target ID"),
            request.model_dump(exclude_unset=True),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": target.to_dict()}


@router.delete("/{event_id}/targets/{target_id}")
async def delete_target(
    event_id: str,
    target_id: str,
    current_user: dict = Depends(get_current_user),
):
    """Remove a target company from an event"""
    engine = get_engine_service()
    deleted = await engine.target_service.delete_target(
        parse_id(target_id, "target ID"),
        parse_id(event_id, "event ID"),
    )
    if not deleted:
        raise HTTPException(status_code=404, detail="Target not found")
    return {"success": True}


@router.post("/{event_id}/targets/{target_id}/talking-points")
async def generate_talking_points(
    event_id: str,
    target_id: str,
    request: Optional[TalkingPointsRequest] = None,
    current_user: dict = Depends(get_current_user),
):
    """Generate talking points for a target and store them on it"""
    engine = get_engine_service()
    request = request or TalkingPointsRequest()
    parse_id(event_id, "event ID")
    target_uuid = parse_id(target_id, "target ID")

    try:
        target = await engine.target_service.get_target(target_uuid)
        points = await engine.target_service.generate_talking_points(target.company_id, request.company)
        if request.save:
            target = await engine.target_service.save_talking_points(target_uuid, points)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AIServiceError as e:
        logger.error(f"Talking points failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate talking points")

    return {"data": {"talking_points": points, "target": target.to_dict()}}
