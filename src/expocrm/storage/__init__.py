"""
ExpoCRM Storage Layer

PostgreSQL storage implementations for ExpoCRM entities.
"""
from .base import BaseStorage
from .event_storage import EventStorage
from .company_storage import CompanyStorage
from .contact_storage import ContactStorage
from .interaction_storage import InteractionStorage
from .note_storage import NoteStorage
from .document_storage import DocumentStorage
from .capture_storage import CaptureStorage
from .enrichment_storage import EnrichmentStorage
from .email_draft_storage import EmailDraftStorage
from .target_storage import TargetStorage
from .reminder_storage import ReminderStorage
from .meeting_storage import MeetingStorage
from .research_storage import ResearchStorage
from .profile_storage import ProfileStorage
from .settings_storage import SettingsStorage
from .asset_storage import AssetStorage
from .dashboard_storage import DashboardStorage

__all__ = [
    'BaseStorage',
    'EventStorage',
    'CompanyStorage',
    'ContactStorage',
    'InteractionStorage',
    'NoteStorage',
    'DocumentStorage',
    'CaptureStorage',
    'EnrichmentStorage',
    'EmailDraftStorage',
    'TargetStorage',
    'ReminderStorage',
    'MeetingStorage',
    'ResearchStorage',
    'ProfileStorage',
    'SettingsStorage',
    'AssetStorage',
    'DashboardStorage',
]
