"""
Enrichment Routes

Web-search grounded enrichment of contacts, one at a time or in batches.
"""
import logging
from typing import Optional, List

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.enrich")
router = APIRouter(prefix="/enrich", tags=["enrichment"])


class EnrichRequest(BaseModel):
    """Stored contact by id, or raw contact data"""
    contact_id: Optional[str] = None
    contact_data: Optional[dict] = None


class BatchEnrichRequest(BaseModel):
    """Raw contacts to enrich"""
    contacts: List[dict] = []


@router.post("")
async def enrich(
    request: EnrichRequest,
    current_user: dict = Depends(get_current_user),
):
    """Enrich a contact; stored contacts get the result saved as suggestions"""
    engine = get_engine_service()
    if request.contact_id:
        try:
            result = await engine.enrichment_service.enrich_contact(parse_id(request.contact_id, "contact ID"))
        except NotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
    elif request.contact_data:
        result = await engine.enrichment_service.enrich_contact_data(request.contact_data)
    else:
        raise HTTPException(status_code=400, detail="Contact ID or contact data is required")
    return {"success": True, "data": result}


@router.post("/batch")
async def enrich_batch(
    request: BatchEnrichRequest,
    current_user: dict = Depends(get_current_user),
):
    """Enrich several raw contacts"""
    if not request.contacts:
        raise HTTPException(status_code=400, detail="Contacts array is required")

    engine = get_engine_service()
    results = await engine.enrichment_service.enrich_batch(request.contacts)
    return {"success": True, "data": results}
