"""
User Settings Model

Application preferences. Only one settings row exists (single-tenant).
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from .common import iso


@dataclass
class UserSettings:
    """Settings with the defaults returned when none are stored"""
    id: Optional[UUID] = None
    ai_provider: str = "openai"
    ai_model: str = "gpt-4"
    ai_api_key: str = ""
    enrichment_enabled: bool = True
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    email_signature: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    EDITABLE = (
        "ai_provider", "ai_model", "ai_api_key", "enrichment_enabled",
        "smtp_host", "smtp_port", "smtp_user", "smtp_password", "email_signature",
    )

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in self.EDITABLE}
        if self.id:
            data["id"] = str(self.id)
            data["created_at"] = iso(self.created_at)
            data["updated_at"] = iso(self.updated_at)
        return data
