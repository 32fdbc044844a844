"""Document and document-type reads/writes.

The verification core never sees ORM objects: rows go out as DocumentRecord and
DocumentTypeDefinition snapshots, and status changes come back as new records that
``save_statuses`` writes in one explicit step.
"""

from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.document_lifecycle.lifecycle import (
    SWEEPABLE_STATUSES,
    DocumentRecord,
    DocumentStatus,
    select_current,
)
from app.document_registry.catalog import DocumentTypeDefinition, PersonType, parse_person_type
from app.exceptions import NotFoundError
from app.models.document import Document
from app.models.document_type import DocumentType


def to_definition(row: DocumentType) -> DocumentTypeDefinition:
    return DocumentTypeDefinition(
        id=row.id,
        name=row.name,
        applies_to_pf=row.applies_to_pf,
        applies_to_pf_ae=row.applies_to_pf_ae,
        applies_to_pm=row.applies_to_pm,
        validity_days=row.validity_days,
        optional=row.optional,
        category=row.category,
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_record(row: Document) -> DocumentRecord:
    return DocumentRecord(
        id=row.id,
        client_id=row.client_id,
        document_type_id=row.document_type_id,
        document_date=row.document_date,
        upload_date=_as_utc(row.upload_date),
        expiration_date=row.expiration_date,
        status=DocumentStatus(row.status),
        reviewer_comment=row.reviewer_comment,
        file_reference=row.file_reference,
    )


_APPLICABILITY_COLUMNS = {
    PersonType.PF: DocumentType.applies_to_pf,
    PersonType.PF_AE: DocumentType.applies_to_pf_ae,
    PersonType.PM: DocumentType.applies_to_pm,
}


class DocumentRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Document types ──────────────────────────────────────────────

    async def list_document_types(self) -> list[DocumentTypeDefinition]:
        result = await self.db.execute(select(DocumentType).order_by(DocumentType.id))
        return [to_definition(row) for row in result.scalars().all()]

    async def list_applicable_document_types(
        self, person_type: PersonType | str
    ) -> list[DocumentTypeDefinition]:
        column = _APPLICABILITY_COLUMNS[parse_person_type(person_type)]
        result = await self.db.execute(
            select(DocumentType).where(column.is_(True)).order_by(DocumentType.id)
        )
        return [to_definition(row) for row in result.scalars().all()]

    async def get_document_type(self, document_type_id: int) -> DocumentTypeDefinition:
        row = await self.db.get(DocumentType, document_type_id)
        if row is None:
            raise NotFoundError("Document type", document_type_id)
        return to_definition(row)

    # ── Documents ───────────────────────────────────────────────────

    async def get_document(self, document_id: int) -> DocumentRecord:
        row = await self.db.get(Document, document_id)
        if row is None:
            raise NotFoundError("Document", document_id)
        return to_record(row)

    async def list_documents_for_client(self, client_id: int) -> list[DocumentRecord]:
        """Every record for the client, history included."""
        result = await self.db.execute(
            select(Document)
            .where(Document.client_id == client_id)
            .order_by(Document.upload_date, Document.id)
        )
        return [to_record(row) for row in result.scalars().all()]

    async def list_current_documents_for_client(self, client_id: int) -> list[DocumentRecord]:
        """Most recently uploaded record per document type."""
        return select_current(await self.list_documents_for_client(client_id))

    async def add_document(self, record: DocumentRecord) -> DocumentRecord:
        """Insert a new record; the database assigns its id."""
        row = Document(
            client_id=record.client_id,
            document_type_id=record.document_type_id,
            document_date=record.document_date,
            upload_date=record.upload_date,
            expiration_date=record.expiration_date,
            status=record.status,
            reviewer_comment=record.reviewer_comment,
            file_reference=record.file_reference,
        )
        self.db.add(row)
        await self.db.flush()
        return to_record(row)

    async def save_statuses(self, records: list[DocumentRecord]) -> int:
        """Persist status and reviewer comment of already-stored records."""
        saved = 0
        for record in records:
            row = await self.db.get(Document, record.id)
            if row is None:
                raise NotFoundError("Document", record.id)
            row.status = record.status
            row.reviewer_comment = record.reviewer_comment
            saved += 1
        if saved:
            await self.db.flush()
        return saved

    async def list_sweep_candidates(self, today: date) -> list[DocumentRecord]:
        """Pending/accepted records whose expiration date has passed."""
        result = await self.db.execute(
            select(Document)
            .where(
                Document.status.in_(list(SWEEPABLE_STATUSES)),
                Document.expiration_date.is_not(None),
                Document.expiration_date < today,
            )
            .order_by(Document.id)
        )
        return [to_record(row) for row in result.scalars().all()]

    async def list_expiring(self, today: date, within_days: int) -> list[DocumentRecord]:
        """Accepted records expiring after today and within ``within_days``."""
        result = await self.db.execute(
            select(Document)
            .where(
                Document.status == DocumentStatus.ACCEPTED,
                Document.expiration_date > today,
                Document.expiration_date <= today + timedelta(days=within_days),
            )
            .order_by(Document.expiration_date, Document.id)
        )
        return [to_record(row) for row in result.scalars().all()]
