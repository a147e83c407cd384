"""
ExpoCRM Services

Business logic services for ExpoCRM.
"""
from .engine_service import EngineService
from .exceptions import NotFoundError, AIServiceError, NoContactDataError, EmailDeliveryError
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

__all__ = [
    'EngineService',
    'NotFoundError',
    'AIServiceError',
    'NoContactDataError',
    'EmailDeliveryError',
    'AIService',
    'PromptCache',
    'WebSearchClient',
    'AssetIndex',
    'ProfileService',
    'CompanyResearchService',
    'CompanyService',
    'EventService',
    'TargetService',
    'ContactService',
    'FollowUpService',
    'CaptureService',
    'NoteService',
    'DocumentService',
    'EmailService',
    'EnrichmentService',
    'MeetingService',
    'ReminderService',
    'DashboardService',
    'SpreadsheetService',
]
