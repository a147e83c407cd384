"""
Notes Routes

Text and voice notes. Text notes about a contact are classified in the
background after the write.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.notes")
router = APIRouter(prefix="/notes", tags=["notes"])


class CreateNoteRequest(BaseModel):
    """Create note request"""
    content: Optional[str] = None
    note_type: Optional[str] = None            # text | voice | ai_summary
    contact_id: Optional[str] = None
    event_id: Optional[str] = None
    interaction_id: Optional[str] = None
    source_url: Optional[str] = None
    audio_data: Optional[str] = None           # stored as source_url for voice notes


class UpdateNoteRequest(BaseModel):
    """Update note request; id is taken from the path when present"""
    id: Optional[str] = None
    content: Optional[str] = None
    note_type: Optional[str] = None
    contact_id: Optional[str] = None
    event_id: Optional[str] = None
    interaction_id: Optional[str] = None
    source_url: Optional[str] = None


async def _update(note_id: str, request: UpdateNoteRequest, background_tasks: BackgroundTasks) -> dict:
    engine = get_engine_service()
    updates = request.model_dump(exclude_unset=True)
    updates.pop("id", None)
    try:
        note = await engine.note_service.update_note(parse_id(note_id, "note ID"), updates)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if "content" in updates and engine.note_service.should_analyze(note, require_text=False):
        background_tasks.add_task(engine.note_service.analyze_saved_note, note)
    return {"data": note.to_dict()}


@router.post("")
async def create_note(
    request: CreateNoteRequest,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
):
    """Create a note"""
    engine = get_engine_service()
    try:
        note = await engine.note_service.create_note(request.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if engine.note_service.should_analyze(note):
        background_tasks.add_task(engine.note_service.analyze_saved_note, note)
    return {"data": note.to_dict()}


@router.patch("")
async def update_note_by_body(
    request: UpdateNoteRequest,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
):
    """Update a note whose id is in the body"""
    if not request.id:
        raise HTTPException(status_code=400, detail="Note ID is required")
    return await _update(request.id, request, background_tasks)


@router.patch("/{note_id}")
async def update_note(
    note_id: str,
    request: UpdateNoteRequest,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
):
    """Update a note"""
    return await _update(note_id, request, background_tasks)


@router.get("/{note_id}")
async def get_note(note_id: str, current_user: dict = Depends(get_current_user)):
    """Get a note by ID"""
    engine = get_engine_service()
    try:
        note = await engine.note_service.get_note(parse_id(note_id, "note ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": note.to_dict()}
