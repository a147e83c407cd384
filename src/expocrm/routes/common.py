"""
Shared route helpers
"""
from typing import Optional
from uuid import UUID

from fastapi import HTTPException


def parse_id(value: str, label: str = "ID") -> UUID:
    """Path/query id as UUID; 400 when malformed"""
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {label}")


def parse_optional_id(value: Optional[str], label: str = "ID") -> Optional[UUID]:
    return parse_id(value, label) if value else None
