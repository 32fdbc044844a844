"""Document registration and reviewer decisions on top of the lifecycle model."""

import logging
from datetime import date, datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.document_lifecycle.lifecycle import (
    DocumentRecord,
    DocumentStatus,
    build_record,
    is_past_expiration,
    sweep_expired,
    transition,
    validate_document_date,
)
from app.document_registry.catalog import applies_to
from app.exceptions import NotFoundError, ValidationError
from app.repositories.clients import ClientRepository
from app.repositories.documents import DocumentRepository

logger = logging.getLogger("onboarding.documents")

REVIEW_ACTIONS = {
    "accept": DocumentStatus.ACCEPTED,
    "reject": DocumentStatus.REJECTED,
}


class DocumentService:
    def __init__(self, settings: Settings):
        self.max_document_age_years = settings.max_document_age_years

    async def register_document(
        self,
        db: AsyncSession,
        *,
        client_id: int,
        document_type_id: int,
        document_date: date | str,
        file_reference: str | None = None,
        today: date | None = None,
    ) -> DocumentRecord:
        """Create a pending record with its expiration fixed now.

        Raises:
            NotFoundError: unknown client or document type.
            ValidationError: type not requested for the client's person type, date out
                of the accepted window, or document already expired on upload.
        """
        today = today or date.today()

        client = await ClientRepository(db).get_client_by_id(client_id)
        if client is None:
            raise NotFoundError("Client", client_id)

        documents = DocumentRepository(db)
        definition = await documents.get_document_type(document_type_id)
        if not applies_to(definition, client.person_type):
            raise ValidationError(
                f"Document type '{definition.name}' does not apply to person type "
                f"{client.person_type.value}",
                {"document_type_id": str(document_type_id)},
            )

        issued = validate_document_date(document_date, today, self.max_document_age_years)
        record = build_record(
            definition,
            record_id=0,
            client_id=client_id,
            document_date=issued,
            upload_date=datetime.now(timezone.utc),
            file_reference=file_reference,
        )
        if is_past_expiration(record, today):
            raise ValidationError(
                f"Document '{definition.name}' expired on {record.expiration_date.isoformat()}",
                {"document_date": issued.isoformat()},
            )

        stored = await documents.add_document(record)
        await db.commit()
        logger.info(
            "Registered document %s (%s) for client %s, expires %s",
            stored.id, definition.name, client_id,
            stored.expiration_date.isoformat() if stored.expiration_date else "never",
        )
        return stored

    async def review_document(
        self,
        db: AsyncSession,
        document_id: int,
        action: str,
        comment: str | None = None,
        today: date | None = None,
    ) -> DocumentRecord:
        """Apply a reviewer decision (accept/reject), enforcing the state machine."""
        target = REVIEW_ACTIONS.get(action)
        if target is None:
            raise ValidationError(
                f"Unknown review action: {action}",
                {"action": "must be 'accept' or 'reject'"},
            )

        documents = DocumentRepository(db)
        record = await documents.get_document(document_id)

        # A pending record past its date expires before any decision applies
        current = sweep_expired([record], today or date.today())[0]
        if current.status != record.status:
            await documents.save_statuses([current])
            await db.commit()

        reviewed = transition(current, target, comment)
        await documents.save_statuses([reviewed])
        await db.commit()

        logger.info("Document %s %s -> %s", document_id, current.status.value, reviewed.status.value)
        return reviewed
