"""
Target Company Storage

PostgreSQL storage for event target companies.
"""
import logging
from typing import Optional, List
from uuid import UUID

import asyncpg

from .base import BaseStorage
from ..models.common import load_json
from ..models.company import Company
from ..models.target_company import TargetCompany, TargetStatus, sort_targets

logger = logging.getLogger("expocrm.storage.target")

TARGET_COLUMNS = ("priority", "booth_location", "talking_points", "notes", "status")

SELECT_WITH_COMPANY = """
    SELECT t.*, to_jsonb(co) AS company
    FROM target_companies t
    LEFT JOIN companies co ON co.id = t.company_id
"""


class TargetStorage(BaseStorage):
    """Storage for TargetCompany entities"""

    async def create(self, target: TargetCompany) -> TargetCompany:
        """
        Create a target.

        A duplicate (event_id, company_id) pair is not an error: the
        existing target is returned unchanged.
        """
        query = """
            INSERT INTO target_companies (
                id, event_id, company_id, priority, booth_location, talking_points,
                notes, status, created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
        """
        try:
            await self.execute(
                query,
                target.id, target.event_id, target.company_id, target.priority,
                target.booth_location, target.talking_points, target.notes, target.status,
                target.created_at, target.updated_at
            )
        except asyncpg.UniqueViolationError:
            logger.info(f"Target already exists for event={target.event_id} company={target.company_id}")
            return await self.get_by_event_company(target.event_id, target.company_id)
        return await self.get_by_id(target.id)

    async def get_by_id(self, target_id: UUID) -> Optional[TargetCompany]:
        row = await self.fetchrow(SELECT_WITH_COMPANY + " WHERE t.id = $1", target_id)
        return self._row_to_target(row) if row else None

    async def get_by_event_company(self, event_id: UUID, company_id: UUID) -> Optional[TargetCompany]:
        row = await self.fetchrow(
            SELECT_WITH_COMPANY + " WHERE t.event_id = $1 AND t.company_id = $2",
            event_id, company_id
        )
        return self._row_to_target(row) if row else None

    async def list_by_event(self, event_id: UUID) -> List[TargetCompany]:
        """Targets of an event: high -> medium -> low, newest first within a priority"""
        rows = await self.fetch(SELECT_WITH_COMPANY + " WHERE t.event_id = $1", event_id)
        return sort_targets([self._row_to_target(row) for row in rows])

    async def update(self, target_id: UUID, updates: dict) -> Optional[TargetCompany]:
        row = await self.update_columns("target_companies", target_id, updates, TARGET_COLUMNS)
        return await self.get_by_id(target_id) if row else None

    async def mark_contacted(self, event_id: UUID, company_id: UUID) -> int:
        """Mark the event's target for this company as contacted"""
        query = """
            UPDATE target_companies SET status = $3, updated_at = NOW()
            WHERE event_id = $1 AND company_id = $2
        """
        result = await self.execute(query, event_id, company_id, TargetStatus.CONTACTED.value)
        return self.affected(result)

    async def delete(self, target_id: UUID, event_id: Optional[UUID] = None) -> bool:
        if event_id:
            result = await self.execute(
                "DELETE FROM target_companies WHERE id = $1 AND event_id = $2", target_id, event_id
            )
        else:
            result = await self.execute("DELETE FROM target_companies WHERE id = $1", target_id)
        return self.affected(result) > 0

    def _row_to_target(self, row) -> TargetCompany:
        """Convert database row to TargetCompany"""
        company = load_json(row["company"])
        return TargetCompany(
            id=row["id"],
            event_id=row["event_id"],
            company_id=row["company_id"],
            priority=row["priority"],
            booth_location=row["booth_location"],
            talking_points=row["talking_points"],
            notes=row["notes"],
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            company=Company.from_dict(company) if company else None
        )
