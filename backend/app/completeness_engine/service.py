"""CompletenessService — loads a client's snapshots, sweeps, scores.

The sweep is applied lazily to the client's current records before scoring and any
resulting transitions are written back through the document repository.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from app.client_profile import ClientProfile
from app.completeness_engine.scoring import (
    CompletenessReport,
    TypeEvaluation,
    build_completeness_report,
    types_to_refresh,
)
from app.config import Settings
from app.document_lifecycle.lifecycle import changed_records, sweep_expired
from app.exceptions import NotFoundError
from app.repositories.clients import ClientRepository
from app.repositories.documents import DocumentRepository

logger = logging.getLogger("onboarding.completeness")


@dataclass
class ReturningClientCheck:
    client_id: int
    tax_id: str
    can_reuse_documents: bool
    types_to_refresh: list[TypeEvaluation] = field(default_factory=list)
    report: CompletenessReport | None = None


class CompletenessService:
    def __init__(self, settings: Settings):
        self.can_proceed_threshold = settings.can_proceed_threshold

    async def evaluate(
        self,
        db: AsyncSession,
        client_id: int,
        today: date | None = None,
    ) -> CompletenessReport:
        client = await ClientRepository(db).get_client_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)
        return await self._evaluate_profile(db, client, today or date.today())

    async def evaluate_returning_client(
        self,
        db: AsyncSession,
        tax_id: str,
        today: date | None = None,
    ) -> ReturningClientCheck:
        """Whether a known client's previous documents can be reused for a new application."""
        client = await ClientRepository(db).find_client_by_tax_id(tax_id)
        if client is None:
            raise NotFoundError("Client with tax id", tax_id.strip().upper())

        report = await self._evaluate_profile(db, client, today or date.today())
        refresh = types_to_refresh(report.per_type)

        logger.info(
            "Returning client %s: %d document type(s) to refresh",
            client.client_id, len(refresh),
        )
        return ReturningClientCheck(
            client_id=client.client_id,
            tax_id=client.tax_id or tax_id.strip().upper(),
            can_reuse_documents=not refresh,
            types_to_refresh=refresh,
            report=report,
        )

    async def _evaluate_profile(
        self,
        db: AsyncSession,
        client: ClientProfile,
        today: date,
    ) -> CompletenessReport:
        documents = DocumentRepository(db)
        definitions = await documents.list_applicable_document_types(client.person_type)
        records = await documents.list_current_documents_for_client(client.client_id)

        swept = sweep_expired(records, today)
        changed = changed_records(records, swept)
        if changed:
            await documents.save_statuses(changed)
            await db.commit()
            logger.info("Marked %d document(s) expired for client %s", len(changed), client.client_id)

        report = build_completeness_report(
            client,
            definitions,
            swept,
            today=today,
            can_proceed_threshold=self.can_proceed_threshold,
        )
        logger.info(
            "Completeness for client %s: %d%% (can_proceed=%s, next=%s)",
            client.client_id, report.percentage, report.can_proceed, report.next_action.value,
        )
        return report
