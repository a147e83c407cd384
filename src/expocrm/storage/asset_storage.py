"""
Marketing Asset Storage

PostgreSQL storage for marketing assets.
"""
import logging
from typing import List, Optional
from uuid import UUID

from .base import BaseStorage
from ..models.marketing_asset import MarketingAsset

logger = logging.getLogger("expocrm.storage.asset")


class AssetStorage(BaseStorage):
    """Storage for MarketingAsset entities"""

    async def create(self, asset: MarketingAsset) -> MarketingAsset:
        query = """
            INSERT INTO marketing_assets (id, name, description, file_url, file_size, is_active, chunk_count, created_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            asset.id, asset.name, asset.description, asset.file_url,
            asset.file_size, asset.is_active, asset.chunk_count, asset.created_at
        )
        return self._row_to_asset(row)

    async def get_by_id(self, asset_id: UUID) -> Optional[MarketingAsset]:
        row = await self.fetchrow("SELECT * FROM marketing_assets WHERE id = $1", asset_id)
        return self._row_to_asset(row) if row else None

    async def list_all(self, active_only: bool = False) -> List[MarketingAsset]:
        """Assets, newest first"""
        if active_only:
            query = "SELECT * FROM marketing_assets WHERE is_active = true ORDER BY created_at DESC"
        else:
            query = "SELECT * FROM marketing_assets ORDER BY created_at DESC"
        rows = await self.fetch(query)
        return [self._row_to_asset(row) for row in rows]

    async def set_chunk_count(self, asset_id: UUID, chunk_count: int) -> Optional[MarketingAsset]:
        query = """
            UPDATE marketing_assets SET chunk_count = $2
            WHERE id = $1
            RETURNING *
        """
        row = await self.fetchrow(query, asset_id, chunk_count)
        return self._row_to_asset(row) if row else None

    async def delete(self, asset_id: UUID) -> bool:
        result = await self.execute("DELETE FROM marketing_assets WHERE id = $1", asset_id)
        return self.affected(result) > 0

    def _row_to_asset(self, row) -> MarketingAsset:
        return MarketingAsset(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            file_url=row["file_url"],
            file_size=row["file_size"],
            is_active=row["is_active"],
            chunk_count=row["chunk_count"],
            created_at=row["created_at"]
        )
