"""
Authentication Routes

Bearer token verification. Tokens are issued by the hosted auth provider;
this service only verifies them.
"""
import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Header

from ..config import Config

logger = logging.getLogger("expocrm.routes.auth")
router = APIRouter(prefix="/auth", tags=["auth"])


# ============================================
# Helpers
# ============================================

def create_token(user_id: str, email: Optional[str] = None, expires_in_hours: int = 1) -> str:
    """Create a token shaped like the auth provider's (local development and tests)"""
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": Config.JWT_AUDIENCE,
        "exp": datetime.now(timezone.utc) + timedelta(hours=expires_in_hours),
    }
    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify and decode JWT token"""
    try:
        return jwt.decode(
            token,
            Config.JWT_SECRET,
            algorithms=[Config.JWT_ALGORITHM],
            audience=Config.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid token: {e}")
        return None


async def get_current_user(authorization: str = Header(None)) -> dict:
    """Dependency to get current authenticated user"""
    if not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")

    # Expect "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    payload = verify_token(parts[1])
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return {
        "user_id": payload["sub"],
        "email": payload.get("email"),
    }


# ============================================
# Routes
# ============================================

@router.get("/me")
async def get_current_user_info(current_user: dict = Depends(get_current_user)):
    """Identity carried by the bearer token"""
    return {"data": current_user}
