"""
Companies Routes

Endpoints for companies and AI company research.
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import AIServiceError, NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.companies")
router = APIRouter(prefix="/companies", tags=["companies"])


# ============================================
# Request Models
# ============================================

class CompanyRequest(BaseModel):
    """Create/update company request"""
    name: Optional[str] = None
    domain: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    region: Optional[str] = None
    company_size: Optional[str] = None
    products_services: Optional[str] = None


class ResearchRequest(BaseModel):
    """Company research request"""
    company_id: str
    force_refresh: bool = False


# ============================================
# Routes
# ============================================

@router.get("")
async def list_companies(
    search: Optional[str] = None,
    current_user: dict = Depends(get_current_user),
):
    """List companies by name, optionally searching name, website and industry"""
    engine = get_engine_service()
    companies = await engine.company_service.list_companies(search)
    return {"data": [c.to_dict() for c in companies]}


@router.post("")
async def create_company(
    request: CompanyRequest,
    current_user: dict = Depends(get_current_user),
):
    """Create a company"""
    engine = get_engine_service()
    try:
        company = await engine.company_service.create_company(request.model_dump(exclude_none=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": company.to_dict()}


@router.post("/research")
async def research_company(
    request: ResearchRequest,
    current_user: dict = Depends(get_current_user),
):
    """Research a company; fresh cached research is returned unless force_refresh"""
    engine = get_engine_service()
    try:
        result = await engine.company_service.research(
            parse_id(request.company_id, "company ID"),
            force_refresh=request.force_refresh,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AIServiceError as e:
        logger.error(f"Company research error: {e}")
        raise HTTPException(status_code=500, detail="Failed to research company")
    return result


@router.get("/{company_id}")
async def get_company(company_id: str, current_user: dict = Depends(get_current_user)):
    """Get a company by ID"""
    engine = get_engine_service()
    try:
        company = await engine.company_service.get_company(parse_id(company_id, "company ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": company.to_dict()}


@router.patch("/{company_id}")
async def update_company(
    company_id: str,
    request: CompanyRequest,
    current_user: dict = Depends(get_current_user),
):
    """Update a company"""
    engine = get_engine_service()
    updates = request.model_dump(exclude_unset=True)
    if "name" in updates and not (updates["name"] or "").strip():
        raise HTTPException(status_code=400, detail="Company name cannot be empty")

    try:
        company = await engine.company_service.update_company(parse_id(company_id, "company ID"), updates)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"data": company.to_dict()}
