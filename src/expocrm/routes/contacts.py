"""
Contacts Routes

Endpoints for contacts, their timeline, interactions, enrichment and
relationship memory.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id, parse_optional_id

logger = logging.getLogger("expocrm.routes.contacts")
router = APIRouter(prefix="/contacts", tags=["contacts"])


# ============================================
# Request Models
# ============================================

class CreateContactRequest(BaseModel):
    """Create contact request"""
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None        # found or created when company_id is absent
    event_id: Optional[str] = None            # records the contact as met at this event


class UpdateContactRequest(BaseModel):
    """Update contact request"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_title: Optional[str] = None
    linkedin_url: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    company_id: Optional[str] = None
    follow_up_status: Optional[str] = None
    follow_up_urgency: Optional[str] = None
    last_contacted_at: Optional[str] = None
    is_enriched: Optional[bool] = None
    enrichment_confidence: Optional[float] = None
    enrichment_status: Optional[str] = None
    enrichment_suggestions: Optional[dict] = None


class CreateInteractionRequest(BaseModel):
    """Log an interaction with a contact"""
    interaction_type: str = "note"            # capture | meeting | email | note | document_upload
    summary: Optional[str] = None
    details: Optional[dict] = None
    event_id: Optional[str] = None
    interaction_date: Optional[str] = None


class EnrichContactRequest(BaseModel):
    """Enrichment fields confirmed by the user"""
    model_config = {"extra": "allow"}


# ============================================
# Contacts
# ============================================

@router.get("")
async def list_contacts(
    company_id: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """List contacts with their company, newest first"""
    engine = get_engine_service()
    contacts = await engine.contact_service.list_contacts(parse_optional_id(company_id, "company ID"))
    return {"data": [c.to_dict() for c in contacts]}


@router.post("")
async def create_contact(
    request: CreateContactRequest,
    current_user: dict = Depends(get_current_user),
):
    """Create a contact"""
    engine = get_engine_service()
    data = request.model_dump(exclude_none=True)
    for key, label in (("company_id", "company ID"), ("event_id", "event ID")):
        if key in data:
            data[key] = parse_id(data[key], label)

    try:
        contact = await engine.contact_service.create_contact(data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": contact.to_dict()}


@router.get("/{contact_id}")
async def get_contact(contact_id: str, current_user: dict = Depends(get_current_user)):
    """Get a contact by ID"""
    engine = get_engine_service()
    try:
        contact = await engine.contact_service.get_contact(parse_id(contact_id, "contact ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": contact.to_dict()}


@router.put("/{contact_id}")
@router.patch("/{contact_id}")
async def update_contact(
    contact_id: str,
    request: UpdateContactRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a contact"""
    engine = get_engine_service()
    try:
        contact = await engine.contact_service.update_contact(
            parse_id(contact_id, "contact ID"),
            request.model_dump(exclude_unset=True),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": contact.to_dict()}


@router.delete("/{contact_id}")
async def delete_contact(contact_id: str, current_user: dict = Depends(get_current_user)):
    """Delete a contact"""
    engine = get_engine_service()
    if not await engine.contact_service.delete_contact(parse_id(contact_id, "contact ID")):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"success": True}


# ============================================
# Timeline and interactions
# ============================================

@router.get("/{contact_id}/timeline")
async def get_timeline(
    contact_id: str,
    type: Optional[str] = Query(None, description="all | capture | meeting | email | note | document_upload"),
    current_user: dict = Depends(get_current_user),
):
    """Interactions, notes and meetings of a contact, newest first"""
    engine = get_engine_service()
    timeline = await engine.contact_service.get_timeline(parse_id(contact_id, "contact ID"), type)
    return {"data": timeline}


@router.post("/{contact_id}/timeline")
@router.post("/{contact_id}/interactions")
async def add_interaction(
    contact_id: str,
    request: CreateInteractionRequest,
    current_user: dict = Depends(get_current_user),
):
    """Log an interaction with a contact"""
    engine = get_engine_service()
    data = request.model_dump(exclude_none=True)
    if "event_id" in data:
        data["event_id"] = parse_id(data["event_id"], "event ID")

    try:
        interaction = await engine.contact_service.add_interaction(parse_id(contact_id, "contact ID"), data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": interaction.to_dict()}


# ============================================
# Enrichment and memory
# ============================================

@router.post("/{contact_id}/enrich")
async def enrich_contact(
    contact_id: str,
    request: EnrichContactRequest,
    current_user: dict = Depends(get_current_user),
):
    """Apply enrichment fields to a contact and log the enrichment"""
    engine = get_engine_service()
    try:
        contact = await engine.contact_service.mark_enriched(
            parse_id(contact_id, "contact ID"),
            request.model_dump(),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": contact.to_dict()}


@router.get("/{contact_id}/enrichment-jobs")
async def list_enrichment_jobs(contact_id: str, current_user: dict = Depends(get_current_user)):
    """Enrichment history of a contact"""
    engine = get_engine_service()
    jobs = await engine.contact_service.list_enrichment_jobs(parse_id(contact_id, "contact ID"))
    return {"data": [j.to_dict() for j in jobs]}


@router.get("/{contact_id}/memory")
async def get_relationship_memory(contact_id: str, current_user: dict = Depends(get_current_user)):
    """AI summary of the relationship with a contact"""
    engine = get_engine_service()
    memory = await engine.contact_service.get_relationship_memory(parse_id(contact_id, "contact ID"))
    return {"data": memory}
