"""
Profile Storage

PostgreSQL storage for the (single) user profile.
"""
import logging
from typing import Optional

from .base import BaseStorage
from ..models.user_profile import UserProfile

logger = logging.getLogger("expocrm.storage.profile")


class ProfileStorage(BaseStorage):
    """Storage for the UserProfile entity"""

    async def get(self) -> Optional[UserProfile]:
        """The stored profile, or None when none was saved yet"""
        row = await self.fetchrow("SELECT * FROM user_profiles ORDER BY created_at LIMIT 1")
        return self._row_to_profile(row) if row else None

    async def upsert(self, profile: UserProfile) -> UserProfile:
        """Update the existing profile row, or insert the first one"""
        columns = UserProfile.editable_fields()
        values = [getattr(profile, name) for name in columns]

        existing = await self.fetchval("SELECT id FROM user_profiles ORDER BY created_at LIMIT 1")
        if existing:
            assignments = ", ".join(f"{col} = ${i + 2}" for i, col in enumerate(columns))
            query = f"UPDATE user_profiles SET {assignments}, updated_at = NOW() WHERE id = $1 RETURNING *"
            row = await self.fetchrow(query, existing, *values)
        else:
            placeholders = ", ".join(f"${i + 2}" for i in range(len(columns)))
            query = f"INSERT INTO user_profiles (id, {', '.join(columns)}) VALUES ($1, {placeholders}) RETURNING *"
            row = await self.fetchrow(query, profile.id, *values)
        return self._row_to_profile(row)

    def _row_to_profile(self, row) -> UserProfile:
        """Convert database row to UserProfile"""
        data = dict(row)
        return UserProfile(**{key: data[key] for key in data if key in UserProfile.__dataclass_fields__})
