"""
Engine Service

Main composite service that manages all storages and services.
Singleton pattern - one instance per process.
"""
import logging
from typing import Optional

from ..config import Config
from ..storage.event_storage import EventStorage
from ..storage.company_storage import CompanyStorage
from ..storage.contact_storage import ContactStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.note_storage import NoteStorage
from ..storage.document_storage import DocumentStorage
from ..storage.capture_storage import CaptureStorage
from ..storage.enrichment_storage import EnrichmentStorage
from ..storage.email_draft_storage import EmailDraftStorage
from ..storage.target_storage import TargetStorage
from ..storage.reminder_storage import ReminderStorage
from ..storage.meeting_storage import MeetingStorage
from ..storage.research_storage import ResearchStorage
from ..storage.profile_storage import ProfileStorage
from ..storage.settings_storage import SettingsStorage
from ..storage.asset_storage import AssetStorage
from ..storage.dashboard_storage import DashboardStorage
from .ai_service import AIService
from .prompt_cache import PromptCache
from .web_search import WebSearchClient
from .asset_index import AssetIndex
from .profile_service import ProfileService
from .research_service import CompanyResearchService
from .company_service import CompanyService
from .event_service import EventService
from .target_service import TargetService
from .contact_service import ContactService
from .follow_up_service import FollowUpService
from .capture_service import CaptureService
from .note_service import NoteService
from .document_service import DocumentService
from .email_service import EmailService
from .enrichment_service import EnrichmentService
from .meeting_service import MeetingService
from .reminder_service import ReminderService
from .dashboard_service import DashboardService
from .spreadsheet_service import SpreadsheetService
from ..llm.providers.litellm import LiteLLMProvider

logger = logging.getLogger("expocrm.services.engine")

# Singleton instance
_engine_service: Optional["EngineService"] = None


class EngineService:
    """
    Composite engine service.

    Manages:
    - All storages (PostgreSQL, one shared pool owned by event_storage)
    - LLM provider, web search, prompt cache and the asset index
    - Business logic services
    - Graceful shutdown
    """

    def __init__(self):
        """Initialize engine service with all storages"""
        self.postgres_dsn = Config.get_postgres_dsn()

        # Initialize storages
        self.event_storage = EventStorage(self.postgres_dsn)
        self.company_storage = CompanyStorage(self.postgres_dsn)
        self.contact_storage = ContactStorage(self.postgres_dsn)
        self.interaction_storage = InteractionStorage(self.postgres_dsn)
        self.note_storage = NoteStorage(self.postgres_dsn)
        self.document_storage = DocumentStorage(self.postgres_dsn)
        self.capture_storage = CaptureStorage(self.postgres_dsn)
        self.enrichment_storage = EnrichmentStorage(self.postgres_dsn)
        self.email_draft_storage = EmailDraftStorage(self.postgres_dsn)
        self.target_storage = TargetStorage(self.postgres_dsn)
        self.reminder_storage = ReminderStorage(self.postgres_dsn)
        self.meeting_storage = MeetingStorage(self.postgres_dsn)
        self.research_storage = ResearchStorage(self.postgres_dsn)
        self.profile_storage = ProfileStorage(self.postgres_dsn)
        self.settings_storage = SettingsStorage(self.postgres_dsn)
        self.asset_storage = AssetStorage(self.postgres_dsn)
        self.dashboard_storage = DashboardStorage(self.postgres_dsn)

        # LLM proxy, web search and prompts
        self.llm_provider = LiteLLMProvider()
        self.web_search = WebSearchClient()
        self.prompt_cache = PromptCache(str(Config.PROMPTS_DIR))
        if not self.web_search.enabled:
            logger.info("Web search disabled (no TAVILY_API_KEY)")

        # Marketing asset retrieval
        self.asset_index = AssetIndex()
        if not self.asset_index.enabled:
            logger.info("Asset indexing disabled (no EMBEDDING_BASE_URL)")

        # Initialize services (after storages)
        self.ai_service = AIService(self.llm_provider, self.prompt_cache)
        self.profile_service = ProfileService(
            profile_storage=self.profile_storage,
            settings_storage=self.settings_storage,
            asset_storage=self.asset_storage,
            asset_index=self.asset_index,
        )
        self.research_service = CompanyResearchService(
            ai_service=self.ai_service,
            web_search=self.web_search,
            profile_service=self.profile_service,
        )
        self.company_service = CompanyService(
            storage=self.company_storage,
            research_storage=self.research_storage,
            research_service=self.research_service,
        )
        self.event_service = EventService(
            storage=self.event_storage,
            capture_storage=self.capture_storage,
            email_draft_storage=self.email_draft_storage,
        )
        self.target_service = TargetService(
            storage=self.target_storage,
            company_service=self.company_service,
            research_service=self.research_service,
            interaction_storage=self.interaction_storage,
            note_storage=self.note_storage,
        )
        self.contact_service = ContactService(
            storage=self.contact_storage,
            company_service=self.company_service,
            interaction_storage=self.interaction_storage,
            capture_storage=self.capture_storage,
            target_storage=self.target_storage,
            note_storage=self.note_storage,
            meeting_storage=self.meeting_storage,
            document_storage=self.document_storage,
            enrichment_storage=self.enrichment_storage,
            ai_service=self.ai_service,
        )
        self.follow_up_service = FollowUpService(
            contact_storage=self.contact_storage,
            interaction_storage=self.interaction_storage,
            email_draft_storage=self.email_draft_storage,
        )
        self.capture_service = CaptureService(
            storage=self.capture_storage,
            contact_storage=self.contact_storage,
            event_storage=self.event_storage,
            interaction_storage=self.interaction_storage,
            target_storage=self.target_storage,
            company_service=self.company_service,
            ai_service=self.ai_service,
        )
        self.note_service = NoteService(self.note_storage, self.contact_storage, self.ai_service)
        self.document_service = DocumentService(
            storage=self.document_storage,
            interaction_storage=self.interaction_storage,
            ai_service=self.ai_service,
        )
        self.email_service = EmailService(
            storage=self.email_draft_storage,
            contact_storage=self.contact_storage,
            event_storage=self.event_storage,
            note_storage=self.note_storage,
            interaction_storage=self.interaction_storage,
            profile_service=self.profile_service,
            ai_service=self.ai_service,
            asset_index=self.asset_index,
        )
        self.enrichment_service = EnrichmentService(
            ai_service=self.ai_service,
            web_search=self.web_search,
            contact_storage=self.contact_storage,
            enrichment_storage=self.enrichment_storage,
        )
        self.meeting_service = MeetingService(
            storage=self.meeting_storage,
            contact_storage=self.contact_storage,
            interaction_storage=self.interaction_storage,
            note_storage=self.note_storage,
            document_storage=self.document_storage,
            reminder_storage=self.reminder_storage,
            research_service=self.research_service,
            profile_service=self.profile_service,
            ai_service=self.ai_service,
        )
        self.reminder_service = ReminderService(self.reminder_storage)
        self.dashboard_service = DashboardService(
            storage=self.dashboard_storage,
            meeting_storage=self.meeting_storage,
            interaction_storage=self.interaction_storage,
            contact_storage=self.contact_storage,
        )
        self.spreadsheet_service = SpreadsheetService(
            contact_storage=self.contact_storage,
            company_storage=self.company_storage,
            event_storage=self.event_storage,
            company_service=self.company_service,
        )

        self._initialized = False
        logger.info("EngineService created")

    @property
    def _borrowing_storages(self) -> list:
        """Storages sharing the pool opened by event_storage"""
        return [
            self.company_storage,
            self.contact_storage,
            self.interaction_storage,
            self.note_storage,
            self.document_storage,
            self.capture_storage,
            self.enrichment_storage,
            self.email_draft_storage,
            self.target_storage,
            self.reminder_storage,
            self.meeting_storage,
            self.research_storage,
            self.profile_storage,
            self.settings_storage,
            self.asset_storage,
            self.dashboard_storage,
        ]

    async def initialize(self):
        """Initialize all storages"""
        if self._initialized:
            logger.info("EngineService already initialized")
            return

        logger.info("Initializing EngineService...")

        await self.event_storage.init()
        for storage in self._borrowing_storages:
            await storage.init(pool=self.event_storage.pg_pool)

        self._initialized = True
        logger.info("EngineService initialized successfully")

    async def close(self):
        """Close all connections"""
        logger.info("Closing EngineService...")

        for storage in self._borrowing_storages:
            await storage.close()
        await self.event_storage.close()
        await self.web_search.close()
        await self.ai_service.close()

        self._initialized = False
        logger.info("EngineService closed")

    @property
    def is_initialized(self) -> bool:
        """Check if service is initialized"""
        return self._initialized


def get_engine_service() -> EngineService:
    """Get or create engine service singleton"""
    global _engine_service
    if _engine_service is None:
        _engine_service = EngineService()
    return _engine_service


async def init_engine_service() -> EngineService:
    """Initialize and return engine service"""
    service = get_engine_service()
    await service.initialize()
    return service
