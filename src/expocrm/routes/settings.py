"""
Settings Routes

App settings, the user profile used in every AI prompt, and marketing assets.
New assets are indexed for retrieval in the background.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, HTTPException, Depends
from pydantic import BaseModel

from ..services.engine_service import get_engine_service
from ..services.exceptions import NotFoundError
from .auth import get_current_user
from .common import parse_id

logger = logging.getLogger("expocrm.routes.settings")
router = APIRouter(tags=["settings"])


# ============================================
# Request Models
# ============================================

class SettingsRequest(BaseModel):
    """Update settings request"""
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None
    ai_api_key: Optional[str] = None
    enrichment_enabled: Optional[bool] = None
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    email_signature: Optional[str] = None


class ProfileRequest(BaseModel):
    """Upsert profile request"""
    profile_type: Optional[str] = None         # company | individual | employee
    name: Optional[str] = None
    tagline: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    products_services: Optional[str] = None
    value_proposition: Optional[str] = None
    target_audience: Optional[str] = None
    key_differentiators: Optional[str] = None
    company_size: Optional[str] = None
    founded_year: Optional[int] = None
    employee_role: Optional[str] = None
    employee_department: Optional[str] = None
    representing_company: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    additional_context: Optional[str] = None
    ai_tone: Optional[str] = None              # professional | casual | formal | friendly


class AssetRequest(BaseModel):
    """Register marketing asset request"""
    name: Optional[str] = None
    file_url: Optional[str] = None
    description: Optional[str] = None
    file_size: Optional[int] = None
    is_active: bool = True


# ============================================
# Settings
# ============================================

@router.get("/settings")
async def get_settings(current_user: dict = Depends(get_current_user)):
    """Stored settings, or defaults"""
    engine = get_engine_service()
    settings = await engine.profile_service.get_settings()
    return {"data": settings.to_dict()}


@router.put("/settings")
async def update_settings(
    request: SettingsRequest,
    current_user: dict = Depends(get_current_user),
):
    """Save settings"""
    engine = get_engine_service()
    settings = await engine.profile_service.update_settings(request.model_dump(exclude_unset=True))
    return {"data": settings.to_dict()}


# ============================================
# Profile
# ============================================

@router.get("/profile")
async def get_profile(current_user: dict = Depends(get_current_user)):
    """The user profile, or null when none was saved"""
    engine = get_engine_service()
    profile = await engine.profile_service.get_profile()
    return {"data": profile.to_dict() if profile else None}


@router.put("/profile")
async def update_profile(
    request: ProfileRequest,
    current_user: dict = Depends(get_current_user),
):
    """Create or update the user profile"""
    engine = get_engine_service()
    try:
        profile = await engine.profile_service.update_profile(request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": profile.to_dict()}


# ============================================
# Marketing assets
# ============================================

@router.get("/assets")
async def list_assets(current_user: dict = Depends(get_current_user)):
    engine = get_engine_service()
    assets = await engine.profile_service.list_assets()
    return {"data": [a.to_dict() for a in assets]}


@router.post("/assets")
async def create_asset(
    request: AssetRequest,
    background_tasks: BackgroundTasks,
    current_user: dict = Depends(get_current_user),
):
    """Register a marketing asset and index its text"""
    engine = get_engine_service()
    try:
        asset = await engine.profile_service.create_asset(
            name=request.name,
            file_url=request.file_url,
            description=request.description,
            file_size=request.file_size,
            is_active=request.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if engine.profile_service.indexing_enabled:
        background_tasks.add_task(engine.profile_service.index_asset, asset)
    return {"data": asset.to_dict()}


@router.delete("/assets/{asset_id}")
async def delete_asset(asset_id: str, current_user: dict = Depends(get_current_user)):
    engine = get_engine_service()
    if not await engine.profile_service.delete_asset(parse_id(asset_id, "asset ID")):
        raise HTTPException(status_code=404, detail="Asset not found")
    return {"success": True}


@router.post("/assets/{asset_id}/index")
async def reindex_asset(asset_id: str, current_user: dict = Depends(get_current_user)):
    """Rebuild the indexed chunks of an asset"""
    engine = get_engine_service()
    try:
        asset = await engine.profile_service.reindex_asset(parse_id(asset_id, "asset ID"))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"data": asset.to_dict()}
