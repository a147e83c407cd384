"""
Settings Storage

PostgreSQL storage for the (single) settings row.
"""
import logging
from typing import Optional

from .base import BaseStorage
from ..models.user_settings import UserSettings

logger = logging.getLogger("expocrm.storage.settings")


class SettingsStorage(BaseStorage):
    """Storage for UserSettings"""

    async def get(self) -> Optional[UserSettings]:
        row = await self.fetchrow("SELECT * FROM user_settings ORDER BY created_at LIMIT 1")
        return self._row_to_settings(row) if row else None

    async def upsert(self, updates: dict) -> UserSettings:
        """Apply updates to the settings row, creating it with defaults first if needed"""
        existing = await self.fetchval("SELECT id FROM user_settings ORDER BY created_at LIMIT 1")
        if not existing:
            existing = await self.fetchval("INSERT INTO user_settings DEFAULT VALUES RETURNING id")
        row = await self.update_columns("user_settings", existing, updates, UserSettings.EDITABLE)
        return self._row_to_settings(row)

    def _row_to_settings(self, row) -> UserSettings:
        return UserSettings(
            id=row["id"],
            ai_provider=row["ai_provider"],
            ai_model=row["ai_model"],
            ai_api_key=row["ai_api_key"],
            enrichment_enabled=row["enrichment_enabled"],
            smtp_host=row["smtp_host"],
            smtp_port=row["smtp_port"],
            smtp_user=row["smtp_user"],
            smtp_password=row["smtp_password"],
            email_signature=row["email_signature"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
