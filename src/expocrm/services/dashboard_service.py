"""
Dashboard Service

Home page summary: lead journey counts, a few leads per stage, upcoming
meetings, recent activity and recently active contacts.
"""
import asyncio
import logging
from typing import Optional

from ..models.email_draft import DraftStatus
from ..storage.contact_storage import ContactStorage
from ..storage.dashboard_storage import DashboardStorage
from ..storage.interaction_storage import InteractionStorage
from ..storage.meeting_storage import MeetingStorage

logger = logging.getLogger("expocrm.services.dashboard")

STAGE_SAMPLE = 3
UPCOMING_MEETINGS = 5
RECENT_ACTIVITY = 10
ACTIVE_CONTACTS = 5


def _initial(name: Optional[str]) -> Optional[str]:
    return name[0] if name else None


def person_lead(row: dict) -> dict:
    """Stage entry for a row with first_name, last_name and company"""
    return {
        "id": str(row["id"]),
        "name": f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip(),
        "company": row.get("company"),
        "initials": _initial(row.get("first_name")),
    }


def active_contact(contact) -> dict:
    return {
        "id": str(contact.id),
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "avatar_url": contact.avatar_url,
    }


def company_lead(row: dict) -> dict:
    return {"id": str(row["id"]), "name": row["name"], "initials": _initial(row["name"])}


class DashboardService:
    """Service for the dashboard summary"""

    def __init__(
        self,
        storage: DashboardStorage,
        meeting_storage: MeetingStorage,
        interaction_storage: InteractionStorage,
        contact_storage: ContactStorage,
    ):
        self.storage = storage
        self.meeting_storage = meeting_storage
        self.interaction_storage = interaction_storage
        self.contact_storage = contact_storage

    async def get_summary(self) -> dict:
        (
            counts, targets, captured, enriched, drafts, sent,
            meetings, activity, contacts,
        ) = await asyncio.gather(
            self.storage.get_counts(),
            self.storage.sample_targets(STAGE_SAMPLE),
            self.storage.sample_captured(STAGE_SAMPLE),
            self.storage.sample_enriched(STAGE_SAMPLE),
            self.storage.sample_drafts(DraftStatus.DRAFT.value, STAGE_SAMPLE),
            self.storage.sample_drafts(DraftStatus.SENT.value, STAGE_SAMPLE),
            self.meeting_storage.list_upcoming(UPCOMING_MEETINGS),
            self.interaction_storage.list_recent(RECENT_ACTIVITY),
            self.contact_storage.list_recently_updated(ACTIVE_CONTACTS),
        )

        return {
            "summary": counts,
            "stages": {
                "targets": [company_lead(r) for r in targets],
                "captured": [person_lead(r) for r in captured],
                "enriched": [company_lead(r) for r in enriched],
                "drafts": [person_lead(r) for r in drafts],
                "sent": [person_lead(r) for r in sent],
            },
            "upcomingMeetings": [m.to_dict() for m in meetings],
            "recentActivity": activity,
            "activeContacts": [active_contact(c) for c in contacts],
        }