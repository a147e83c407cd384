"""
ExpoCRM Data Models

Domain models for the event lead capture CRM.
"""
from .event import Event, EventStatus
from .company import Company
from .contact import Contact, FollowUpStatus
from .interaction import Interaction, InteractionType
from .note import Note, NoteType
from .document import Document
from .capture import Capture, CaptureType, CaptureStatus
from .enrichment import EnrichmentJob, EnrichmentType
from .email_draft import EmailDraft, EmailType, DraftStatus
from .target_company import TargetCompany, TargetPriority, TargetStatus, sort_targets
from .reminder import Reminder, ReminderStatus
from .meeting_brief import MeetingBrief, MeetingStatus
from .user_profile import UserProfile
from .marketing_asset import MarketingAsset
from .company_research import CompanyResearch
from .user_settings import UserSettings

__all__ = [
    'Event',
    'EventStatus',
    'Company',
    'Contact',
    'FollowUpStatus',
    'Interaction',
    'InteractionType',
    'Note',
    'NoteType',
    'Document',
    'Capture',
    'CaptureType',
    'CaptureStatus',
    'EnrichmentJob',
    'EnrichmentType',
    'EmailDraft',
    'EmailType',
    'DraftStatus',
    'TargetCompany',
    'TargetPriority',
    'TargetStatus',
    'sort_targets',
    'Reminder',
    'ReminderStatus',
    'MeetingBrief',
    'MeetingStatus',
    'UserProfile',
    'MarketingAsset',
    'CompanyResearch',
    'UserSettings',
]
