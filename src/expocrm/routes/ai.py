"""
AI Routes

Card analysis, note classification and audio transcription.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel, Field

from ..services.engine_service import get_engine_service
from ..services.exceptions import AIServiceError
from .auth import get_current_user
from .common import parse_optional_id

logger = logging.getLogger("expocrm.routes.ai")
router = APIRouter(prefix="/ai", tags=["ai"])


# ============================================
# Request Models
# ============================================

class AnalyzeCardRequest(BaseModel):
    """Image as data URL or raw base64"""
    image: Optional[str] = None


class AnalyzeNoteRequest(BaseModel):
    """Note text to classify, optionally about a contact"""
    model_config = {"populate_by_name": True}

    content: Optional[str] = None
    contact_id: Optional[str] = Field(None, alias="contactId")
    note_id: Optional[str] = Field(None, alias="noteId")


class TranscribeRequest(BaseModel):
    """Audio as data URL or raw base64"""
    audio_data: Optional[str] = None


# ============================================
# Routes
# ============================================

@router.post("/analyze-card")
async def analyze_card(
    request: AnalyzeCardRequest,
    current_user: dict = Depends(get_current_user),
):
    """Read contact fields from a card or badge photo"""
    engine = get_engine_service()
    try:
        data = await engine.capture_service.analyze_card(request.image)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AIServiceError as e:
        logger.error(f"Card analysis failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze image")
    return {"data": data}


@router.post("/analyze-note")
async def analyze_note(
    request: AnalyzeNoteRequest,
    current_user: dict = Depends(get_current_user),
):
    """Classify a note and move the contact out of not_contacted when it applies"""
    engine = get_engine_service()
    try:
        result = await engine.note_service.analyze_note(
            request.content,
            parse_optional_id(request.contact_id, "contact ID"),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AIServiceError as e:
        logger.error(f"Note analysis failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to analyze note")
    return {"success": True, "analysis": result["analysis"], "updated": result["updated"]}


@router.post("/transcribe")
async def transcribe(
    request: TranscribeRequest,
    current_user: dict = Depends(get_current_user),
):
    """Transcribe recorded audio"""
    if not request.audio_data:
        raise HTTPException(status_code=400, detail="No audio data provided")

    engine = get_engine_service()
    try:
        transcript = await engine.ai_service.transcribe_audio(request.audio_data)
    except AIServiceError as e:
        logger.error(f"Transcription failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to transcribe audio")
    return {"transcript": transcript}
