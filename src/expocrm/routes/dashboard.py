"""
Dashboard Routes
"""
import logging

from fastapi import APIRouter, Depends

from ..services.engine_service import get_engine_service
from .auth import get_current_user

logger = logging.getLogger("expocrm.routes.dashboard")
router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
async def get_summary(current_user: dict = Depends(get_current_user)):
    """Pipeline counts, sample leads, upcoming meetings and recent activity"""
    engine = get_engine_service()
    return await engine.dashboard_service.get_summary()
