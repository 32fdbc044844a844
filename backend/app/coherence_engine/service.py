"""CoherenceService — runs every currently valid document of a client (accepted and not
past its expiration date) through the analyzer and the comparators, then aggregates the report.

Read-only: nothing is written, so an analyzer failure leaves no partial state behind.
"""

import logging
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from app.coherence_engine.comparators import (
    DocumentValidation,
    ExtractedFieldSet,
    validate_against_client,
)
from app.coherence_engine.scoring import CoherenceReport, build_coherence_report
from app.config import Settings
from app.document_lifecycle.lifecycle import is_valid_now
from app.document_registry.catalog import DocumentCategory, category_for
from app.exceptions import NotFoundError, UpstreamAnalyzerError
from app.repositories.clients import ClientRepository
from app.repositories.documents import DocumentRepository

logger = logging.getLogger("onboarding.coherence")


class DocumentAnalyzer(Protocol):
    async def analyze(
        self,
        document_reference: str | None,
        declared_type: str,
        category: DocumentCategory | None = None,
        document_id: int | None = None,
    ) -> ExtractedFieldSet: ...


class CoherenceService:
    def __init__(self, settings: Settings, analyzer: DocumentAnalyzer):
        self.analyzer = analyzer
        self.coherence_threshold = settings.coherence_threshold
        self.address_threshold = settings.address_match_threshold
        self.fraud_threshold = settings.fraud_high_discrepancy_count

    async def analyze(
        self,
        db: AsyncSession,
        client_id: int,
        today: date | None = None,
    ) -> CoherenceReport:
        today = today or date.today()
        client = await ClientRepository(db).get_client_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)

        documents = DocumentRepository(db)
        types = {d.id: d for d in await documents.list_document_types()}
        records = await documents.list_current_documents_for_client(client_id)
        # Accepted records past their expiration date are not evidence
        accepted = [r for r in records if is_valid_now(r, today)]

        logger.info("Coherence analysis for client %s over %d accepted document(s)", client_id, len(accepted))

        validations: list[DocumentValidation] = []
        for record in accepted:
            definition = types.get(record.document_type_id)
            if definition is None:
                raise NotFoundError("Document type", record.document_type_id)
            category = category_for(definition)

            try:
                analysis = await self.analyzer.analyze(
                    record.file_reference,
                    definition.name,
                    category=category,
                    document_id=record.id,
                )
            except UpstreamAnalyzerError:
                raise
            except Exception as e:
                raise UpstreamAnalyzerError(
                    f"Document analyzer failed for document {record.id}: {e}", record.id
                ) from e

            validations.append(
                validate_against_client(
                    client,
                    category,
                    analysis,
                    document_id=record.id,
                    document_type=definition.name,
                    address_threshold=self.address_threshold,
                )
            )

        report = build_coherence_report(
            client,
            validations,
            coherence_threshold=self.coherence_threshold,
            fraud_threshold=self.fraud_threshold,
        )
        logger.info(
            "Coherence for client %s: score=%d coherent=%s discrepancies=%d alerts=%d",
            client_id, report.score, report.is_coherent, len(report.discrepancies), len(report.alerts),
        )
        return report
