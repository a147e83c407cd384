"""
Profile Service

User profile (cached in-process), application settings and marketing assets.
Asset text is indexed for retrieval; the AI context carries excerpts of it.
"""
import logging
import time
from typing import List, Optional
from uuid import UUID

import httpx

from ..config import Config
from ..models.marketing_asset import MarketingAsset
from ..models.user_profile import UserProfile
from ..models.user_settings import UserSettings
from ..storage.asset_storage import AssetStorage
from ..storage.profile_storage import ProfileStorage
from ..storage.settings_storage import SettingsStorage
from .asset_index import AssetIndex
from .exceptions import NotFoundError

logger = logging.getLogger("expocrm.services.profile")


class ProfileService:
    """Service for the user profile, settings and marketing assets"""

    def __init__(
        self,
        profile_storage: ProfileStorage,
        settings_storage: SettingsStorage,
        asset_storage: AssetStorage,
        asset_index: Optional[AssetIndex] = None,
        cache_seconds: Optional[int] = None,
    ):
        self.profile_storage = profile_storage
        self.settings_storage = settings_storage
        self.asset_storage = asset_storage
        self.asset_index = asset_index
        self.cache_seconds = Config.PROFILE_CACHE_SECONDS if cache_seconds is None else cache_seconds
        self._cached_profile: Optional[UserProfile] = None
        self._last_fetch: float = 0.0
        self._document_context: str = ""
        self._documents_fetched: float = 0.0

    # ============================================
    # Profile
    # ============================================

    async def get_profile(self, use_cache: bool = True) -> Optional[UserProfile]:
        """
        Get the user profile.

        A fetched result (including "no profile") is reused for cache_seconds.
        """
        now = time.monotonic()
        if use_cache and self._last_fetch and now - self._last_fetch < self.cache_seconds:
            return self._cached_profile

        self._cached_profile = await self.profile_storage.get()
        self._last_fetch = now
        return self._cached_profile

    async def update_profile(self, data: dict) -> UserProfile:
        """
        Create or update the profile.

        Raises:
            ValueError: If name is missing or profile_type is unknown
        """
        if not (data.get("name") or "").strip():
            raise ValueError("Profile name is required")
        if data.get("profile_type", "individual") not in ("company", "individual", "employee"):
            raise ValueError(f"Invalid profile type: {data.get('profile_type')}")

        profile = UserProfile(**{k: v for k, v in data.items() if k in UserProfile.editable_fields()})
        saved = await self.profile_storage.upsert(profile)
        self.clear_cache()
        logger.info(f"Profile saved: {saved.name} ({saved.profile_type})")
        return saved

    def clear_cache(self):
        self._cached_profile = None
        self._last_fetch = 0.0
        self._document_context = ""
        self._documents_fetched = 0.0

    async def get_document_context(self) -> str:
        """
        Company background retrieved from indexed marketing assets.

        Cached like the profile; search errors are logged and give ''.
        """
        if not self.asset_index or not self.asset_index.enabled:
            return ""
        now = time.monotonic()
        if self._documents_fetched and now - self._documents_fetched < self.cache_seconds:
            return self._document_context

        try:
            self._document_context = await self.asset_index.global_context()
        except Exception as e:
            logger.error(f"Failed to get document context: {e}")
            return ""
        self._documents_fetched = now
        return self._document_context

    async def get_ai_context(self) -> str:
        """
        Profile rendered as AI context, followed by excerpts of the
        marketing assets ('' when there is neither).
        """
        profile = await self.get_profile()
        profile_context = profile.to_context() if profile else ""
        return f"{profile_context}{await self.get_document_context()}"

    # ============================================
    # Settings
    # ============================================

    async def get_settings(self) -> UserSettings:
        """Stored settings, or defaults when none were saved"""
        return await self.settings_storage.get() or UserSettings()

    async def update_settings(self, data: dict) -> UserSettings:
        updates = {k: v for k, v in data.items() if k in UserSettings.EDITABLE}
        return await self.settings_storage.upsert(updates)

    # ============================================
    # Marketing assets
    # ============================================

    @property
    def indexing_enabled(self) -> bool:
        return bool(self.asset_index and self.asset_index.enabled)

    async def list_assets(self) -> List[MarketingAsset]:
        return await self.asset_storage.list_all()

    async def create_asset(
        self,
        name: str,
        file_url: str,
        description: Optional[str] = None,
        file_size: Optional[int] = None,
        is_active: bool = True,
    ) -> MarketingAsset:
        """
        Register a marketing asset.

        Indexing its text is a separate step (index_asset).

        Raises:
            ValueError: If name or file_url is missing
        """
        if not name or not file_url:
            raise ValueError("Asset name and file URL are required")
        asset = MarketingAsset(
            name=name,
            file_url=file_url,
            description=description,
            file_size=file_size,
            is_active=is_active,
        )
        return await self.asset_storage.create(asset)

    async def index_asset(self, asset: MarketingAsset) -> int:
        """
        Chunk and embed an asset's text, recording the chunk count.

        Runs after the asset is saved; failures are logged and the asset
        stays registered without chunks.
        """
        if not self.indexing_enabled:
            return 0
        try:
            count = await self.asset_index.index_asset(asset)
        except Exception as e:
            logger.error(f"Indexing asset {asset.id} failed (asset kept): {e}")
            return 0

        if count:
            await self.asset_storage.set_chunk_count(asset.id, count)
            self._documents_fetched = 0.0
        return count

    async def delete_asset(self, asset_id: UUID) -> bool:
        """Delete an asset and its indexed chunks"""
        asset = await self.asset_storage.get_by_id(asset_id)
        if not asset:
            return False

        if self.indexing_enabled and asset.chunk_count:
            try:
                await self.asset_index.remove_asset(asset.id, asset.chunk_count)
            except Exception as e:
                logger.error(f"Removing chunks of asset {asset_id} failed: {e}")
            self._documents_fetched = 0.0

        return await self.asset_storage.delete(asset_id)

    async def reindex_asset(self, asset_id: UUID) -> MarketingAsset:
        """
        Replace the indexed chunks of an asset.

        Raises:
            NotFoundError: If the asset does not exist
            ValueError: If indexing is not configured or the file cannot be
                downloaded or parsed
        """
        if not self.indexing_enabled:
            raise ValueError("Asset indexing is not configured")
        asset = await self.asset_storage.get_by_id(asset_id)
        if not asset:
            raise NotFoundError("Asset", asset_id)

        if asset.chunk_count:
            await self.asset_index.remove_asset(asset.id, asset.chunk_count)
        try:
            count = await self.asset_index.index_asset(asset)
        except httpx.HTTPError as e:
            raise ValueError(f"Could not download asset: {e}")

        self._documents_fetched = 0.0
        return await self.asset_storage.set_chunk_count(asset.id, count) or asset
