"""
Interaction Storage

PostgreSQL storage for interactions (the contact activity log).
"""
import logging
from typing import Optional, List, Set
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.interaction import Interaction

logger = logging.getLogger("expocrm.storage.interaction")

INTERACTION_COLUMNS = ("contact_id", "event_id", "interaction_type", "interaction_date", "summary", "details")


class InteractionStorage(BaseStorage):
    """Storage for Interaction entities"""

    async def create(self, interaction: Interaction) -> Interaction:
        """Create a new interaction"""
        query = """
            INSERT INTO interactions (
                id, contact_id, event_id, interaction_type, interaction_date,
                summary, details, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7::jsonb, $8, $9)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            interaction.id, interaction.contact_id, interaction.event_id,
            interaction.interaction_type, interaction.interaction_date,
            interaction.summary, dump_json(interaction.details or {}),
            interaction.created_at, interaction.updated_at
        )
        return self._row_to_interaction(row)

    async def get_by_id(self, interaction_id: UUID) -> Optional[Interaction]:
        row = await self.fetchrow("SELECT * FROM interactions WHERE id = $1", interaction_id)
        return self._row_to_interaction(row) if row else None

    async def list_by_contact(
        self,
        contact_id: UUID,
        interaction_type: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Interaction]:
        """A contact's interactions, newest first, optionally of one type"""
        if interaction_type:
            query = """
                SELECT * FROM interactions
                WHERE contact_id = $1 AND interaction_type = $2
                ORDER BY interaction_date DESC
                LIMIT $3
            """
            rows = await self.fetch(query, contact_id, interaction_type, limit)
        else:
            query = """
                SELECT * FROM interactions
                WHERE contact_id = $1
                ORDER BY interaction_date DESC
                LIMIT $2
            """
            rows = await self.fetch(query, contact_id, limit)
        return [self._row_to_interaction(row) for row in rows]

    async def list_by_company(self, company_id: UUID, limit: int = 20) -> List[Interaction]:
        """Interactions with any contact of a company"""
        query = """
            SELECT i.* FROM interactions i
            JOIN contacts c ON c.id = i.contact_id
            WHERE c.company_id = $1
            ORDER BY i.interaction_date DESC
            LIMIT $2
        """
        rows = await self.fetch(query, company_id, limit)
        return [self._row_to_interaction(row) for row in rows]

    async def list_recent(self, limit: int = 10) -> List[dict]:
        """Most recent interactions across all contacts, with a contact summary"""
        query = """
            SELECT i.id, i.interaction_type, i.interaction_date, i.summary,
                   c.id AS contact_id, c.first_name, c.last_name, c.avatar_url
            FROM interactions i
            LEFT JOIN contacts c ON c.id = i.contact_id
            ORDER BY i.interaction_date DESC
            LIMIT $1
        """
        rows = await self.fetch(query, limit)
        return [
            {
                "id": str(row["id"]),
                "interaction_type": row["interaction_type"],
                "interaction_date": row["interaction_date"].isoformat(),
                "summary": row["summary"],
                "contact": {
                    "id": str(row["contact_id"]),
                    "first_name": row["first_name"],
                    "last_name": row["last_name"],
                    "avatar_url": row["avatar_url"],
                } if row["contact_id"] else None,
            }
            for row in rows
        ]

    async def contact_ids_with_interactions(self, event_id: Optional[UUID] = None) -> Set[UUID]:
        """Contacts having at least one interaction (at the event, when given)"""
        if event_id:
            rows = await self.fetch(
                "SELECT DISTINCT contact_id FROM interactions WHERE event_id = $1 AND contact_id IS NOT NULL",
                event_id
            )
        else:
            rows = await self.fetch("SELECT DISTINCT contact_id FROM interactions WHERE contact_id IS NOT NULL")
        return {row["contact_id"] for row in rows}

    async def update(self, interaction_id: UUID, updates: dict) -> Optional[Interaction]:
        """Update the given columns of an interaction"""
        if "details" in updates:
            updates = {**updates, "details": dump_json(updates["details"] or {})}
        row = await self.update_columns("interactions", interaction_id, updates, INTERACTION_COLUMNS)
        return self._row_to_interaction(row) if row else None

    async def delete(self, interaction_id: UUID) -> bool:
        result = await self.execute("DELETE FROM interactions WHERE id = $1", interaction_id)
        return self.affected(result) > 0

    def _row_to_interaction(self, row) -> Interaction:
        """Convert database row to Interaction"""
        return Interaction(
            id=row["id"],
            contact_id=row["contact_id"],
            event_id=row["event_id"],
            interaction_type=row["interaction_type"],
            interaction_date=row["interaction_date"],
            summary=row["summary"],
            details=load_json(row["details"], {}),
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
