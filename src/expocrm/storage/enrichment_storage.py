"""
Enrichment Storage

PostgreSQL storage for the enrichment queue log.
"""
import logging
from typing import List
from uuid import UUID

from .base import BaseStorage
from ..models.common import load_json, dump_json
from ..models.enrichment import EnrichmentJob

logger = logging.getLogger("expocrm.storage.enrichment")


class EnrichmentStorage(BaseStorage):
    """Storage for EnrichmentJob entities (table enrichment_queue)"""

    async def create(self, job: EnrichmentJob) -> EnrichmentJob:
        query = """
            INSERT INTO enrichment_queue (
                id, contact_id, company_id, status, enrichment_type, result, error,
                created_at, updated_at
            )
            VALUES ($1, $2, $3, $4, $5, $6::jsonb, $7, $8, $9)
            RETURNING *
        """
        row = await self.fetchrow(
            query,
            job.id, job.contact_id, job.company_id, job.status, job.enrichment_type,
            dump_json(job.result), job.error, job.created_at, job.updated_at
        )
        return self._row_to_job(row)

    async def list_by_contact(self, contact_id: UUID) -> List[EnrichmentJob]:
        rows = await self.fetch(
            "SELECT * FROM enrichment_queue WHERE contact_id = $1 ORDER BY created_at DESC",
            contact_id
        )
        return [self._row_to_job(row) for row in rows]

    def _row_to_job(self, row) -> EnrichmentJob:
        return EnrichmentJob(
            id=row["id"],
            contact_id=row["contact_id"],
            company_id=row["company_id"],
            status=row["status"],
            enrichment_type=row["enrichment_type"],
            result=load_json(row["result"]),
            error=row["error"],
            created_at=row["created_at"],
            updated_at=row["updated_at"]
        )
