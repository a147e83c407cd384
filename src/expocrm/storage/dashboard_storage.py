"""
Dashboard Storage

Read-only aggregate queries for the home dashboard.
"""
import logging
from typing import List

from .base import BaseStorage

logger = logging.getLogger("expocrm.storage.dashboard")


class DashboardStorage(BaseStorage):
    """Counts and small samples across tables"""

    async def get_counts(self) -> dict:
        """Journey stage counts"""
        query = """
            SELECT
                (SELECT COUNT(*) FROM target_companies) AS targets,
                (SELECT COUNT(*) FROM captures) AS captured,
                (SELECT COUNT(*) FROM companies WHERE is_enriched = true) AS enriched,
                (SELECT COUNT(*) FROM email_drafts WHERE status = 'draft') AS drafts,
                (SELECT COUNT(*) FROM email_drafts WHERE status = 'sent') AS sent
        """
        row = await self.fetchrow(query)
        return {key: row[key] or 0 for key in ("targets", "captured", "enriched", "drafts", "sent")}

    async def sample_targets(self, limit: int = 3) -> List[dict]:
        query = """
            SELECT co.id, co.name
            FROM target_companies t
            JOIN companies co ON co.id = t.company_id
            ORDER BY t.created_at DESC
            LIMIT $1
        """
        return [dict(row) for row in await self.fetch(query, limit)]

    async def sample_captured(self, limit: int = 3) -> List[dict]:
        query = """
            SELECT c.id, c.first_name, c.last_name, co.name AS company
            FROM captures cap
            JOIN contacts c ON c.id = cap.contact_id
            LEFT JOIN companies co ON co.id = c.company_id
            ORDER BY cap.created_at DESC
            LIMIT $1
        """
        return [dict(row) for row in await self.fetch(query, limit)]

    async def sample_enriched(self, limit: int = 3) -> List[dict]:
        query = """
            SELECT id, name FROM companies
            WHERE is_enriched = true
            ORDER BY updated_at DESC
            LIMIT $1
        """
        return [dict(row) for row in await self.fetch(query, limit)]

    async def sample_drafts(self, status: str, limit: int = 3) -> List[dict]:
        query = """
            SELECT d.id, c.first_name, c.last_name, co.name AS company
            FROM email_drafts d
            LEFT JOIN contacts c ON c.id = d.contact_id
            LEFT JOIN companies co ON co.id = c.company_id
            WHERE d.status = $1
            ORDER BY d.created_at DESC
            LIMIT $2
        """
        return [dict(row) for row in await self.fetch(query, status, limit)]
