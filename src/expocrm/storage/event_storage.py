"""
Event Storage

PostgreSQL storage for events and their per-event statistics.
"""
import logging
from typing import Optional, List
from uuid import UUID

from .base import BaseStorage
from ..models.event import Event

logger = logging.getLogger("expocrm.storage.event")

EVENT_COLUMNS = ("name", "description", "location", "start_date", "end_date", "event_type", "status")


class EventStorage(BaseStorage):
    """Storage for Event entities"""

    async def create(self, event: Event) -> Event:
        """Create a new event"""
        query = """
            INSERT INTO events (
                id, name, description, location, start_date, end_date,
                event_type, status, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            event.id, event.name, event.description, event.location,
            event.start_date, event.end_date, event.event_type, event.status,
            event.created_at, event.updated_at
        )
        return self._row_to_event(row)

    async def get_by_id(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID"""
        row = await self.fetchrow("SELECT * FROM events WHERE id = $1", event_id)
        return self._row_to_event(row) if row else None

    async def list_all(self) -> List[Event]:
        """List events, newest start first"""
        rows = await self.fetch("SELECT * FROM events ORDER BY start_date DESC NULLS LAST, created_at DESC")
        return [self._row_to_event(row) for row in rows]

    async def update(self, event_id: UUID, updates: dict) -> Optional[Event]:
        """Update the given columns of an event"""
        row = await self.update_columns("events", event_id, updates, EVENT_COLUMNS)
        return self._row_to_event(row) if row else None

    async def delete(self, event_id: UUID) -> bool:
        """Delete event (targets and captures cascade)"""
        result = await self.execute("DELETE FROM events WHERE id = $1", event_id)
        return self.affected(result) > 0

    async def get_stats(self, event_id: UUID) -> dict:
        """
        Counts shown on the event page.

        followUps is the union of event contacts explicitly marked
        followed_up and contacts with a sent draft for this event.
        """
        query = """
            SELECT
                (SELECT COUNT(*) FROM target_companies WHERE event_id = $1) AS targets,
                (SELECT COUNT(*) FROM captures WHERE event_id = $1) AS captures,
                (SELECT COUNT(DISTINCT contact_id) FROM interactions
                  WHERE event_id = $1 AND contact_id IS NOT NULL) AS contacts,
                (SELECT COUNT(*) FROM (
                    SELECT c.id FROM contacts c
                    JOIN interactions i ON i.contact_id = c.id
                    WHERE i.event_id = $1 AND c.follow_up_status = 'followed_up'
                    UNION
                    SELECT d.contact_id FROM email_drafts d
                    WHERE d.event_id = $1 AND d.status = 'sent' AND d.contact_id IS NOT NULL
                ) followed) AS follow_ups
        """
        row = await self.fetchrow(query, event_id)
        return {
            "targets": row["targets"],
            "captures": row["captures"],
            "contacts": row["contacts"],
            "followUps": row["follow_ups"],
        }

    def _row_to_event(self, row) -> Event:
        """Convert database row to Event"""
        return Event(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            location=row["location"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            event_type=row["event_type"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
