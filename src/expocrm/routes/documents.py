"""
Documents Routes

Documents shared with contacts and their AI summaries.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.documents")
router = APIRouter(prefix="/documents", tags=["documents"])


class CreateDocumentRequest(BaseModel):
    """Attach a document to a contact"""
    contact_id: Optional[str] = None
    name: Optional[str] = None
    file_url: Optional[str] = None
    file_type: str = "pdf"
    description: Optional[str] = None
    text: Optional[str] = None                 # extracted text to summarize
    event_id: Optional[str] = None


class SummarizeRequest(BaseModel):
    """Summarize an existing document"""
    document_id: str
    text: Optional[str] = None


@router.post("")
async def create_document(
    request: CreateDocumentRequest,
    current_user: dict = Depends(get_current_user),
):
    """Attach a document, summarize it and log the upload"""
    engine = get_engine_service()
    try:
        document = await engine.document_service.add_document(
            contact_id=request.contact_id,
            name=request.name,
            file_url=request.file_url,
            description=request.description,
            text=request.text,
            event_id=request.event_id,
            file_type=request.file_type,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": document.to_dict()}


@router.get("")
async def list_documents(contact_id: Optional[str] = None, current_user: dict = Depends(get_current_user)):
    """Documents of a contact, newest first"""
    if not contact_id:
        raise HTTPException(status_code=400, detail="Contact ID is required")
    engine = get_engine_service()
    documents = await engine.document_service.list_documents(parse_id(contact_id, "contact ID"))
    return {"data": [d.to_dict() for d in documents]}


@router.post("/summarize")
async def summarize_document(
    request: SummarizeRequest,
    current_user: dict = Depends(get_current_user),
):
    """Regenerate a document summary"""
    engine = get_engine_service()
    try:
        document = await engine.document_service.summarize_document(
            parse_id(request.document_id, "document ID"),
            request.text,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": document.to_dict()}
