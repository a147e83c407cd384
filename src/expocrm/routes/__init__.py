"""
ExpoCRM API Routes

FastAPI route handlers for the ExpoCRM API.
"""
from .health import router as health_router
from .auth import router as auth_router
from .events import router as events_router
from .contacts import router as contacts_router
from .companies import router as companies_router
from .follow_ups import router as follow_ups_router
from .captures import router as captures_router
from .ai import router as ai_router
from .notes import router as notes_router
from .documents import router as documents_router
from .emails import router as emails_router
from .enrich import router as enrich_router
from .meetings import router as meetings_router
from .reminders import router as reminders_router
from .dashboard import router as dashboard_router
from .spreadsheets import router as spreadsheets_router
from .settings import router as settings_router

__all__ = [
    'health_router',
    'auth_router',
    'events_router',
    'contacts_router',
    'companies_router',
    'follow_ups_router',
    'captures_router',
    'ai_router',
    'notes_router',
    'documents_router',
    'emails_router',
    'enrich_router',
    'meetings_router',
    'reminders_router',
    'dashboard_router',
    'spreadsheets_router',
    'settings_router',
]
