from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.dependencies import get_db, get_document_service
from app.document_lifecycle.lifecycle import (
    DocumentRecord,
    days_until_expiration,
    is_expiring_soon,
    is_valid_now,
    needs_renewal,
)
from app.jobs.expiration_sweep import run_expiration_sweep
from app.repositories.documents import DocumentRepository
from app.schemas.document import (
    DocumentCreate,
    DocumentDetail,
    DocumentReviewRequest,
    ExpiringDocumentsResponse,
    SweepResponse,
)
from app.services.document_service import DocumentService

router = APIRouter()


@router.post("", response_model=DocumentDetail, status_code=201)
async def register_document(
    body: DocumentCreate,
    db: AsyncSession = Depends(get_db),
    service: DocumentService = Depends(get_document_service),
) -> DocumentDetail:
    """Register an uploaded document; its expiration date is fixed at this point."""
    record = await service.register_document(
        db,
        client_id=body.client_id,
        document_type_id=body.document_type_id,
        document_date=body.document_date,
        file_reference=body.file_reference,
    )
    return _to_response(record)


@router.post("/sweep-expired", response_model=SweepResponse)
async def sweep_expired_documents(db: AsyncSession = Depends(get_db)) -> SweepResponse:
    """Run the expiration sweep now instead of waiting for the scheduled job."""
    result = await run_expiration_sweep(db)
    return SweepResponse(
        run_date=result.run_date,
        examined=result.examined,
        expired=result.expired,
        document_ids=result.document_ids,
    )


@router.get("/expiring", response_model=ExpiringDocumentsResponse)
async def list_expiring_documents(
    within_days: int = Query(default=settings.expiring_soon_days, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
) -> ExpiringDocumentsResponse:
    """Accepted documents that expire within the next ``within_days`` days."""
    records = await DocumentRepository(db).list_expiring(date.today(), within_days)
    return ExpiringDocumentsResponse(
        items=[_to_response(r) for r in records],
        total=len(records),
        within_days=within_days,
    )


@router.get("/{document_id}", response_model=DocumentDetail)
async def get_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
) -> DocumentDetail:
    record = await DocumentRepository(db).get_document(document_id)
    return _to_response(record)


@router.post("/{document_id}/review", response_model=DocumentDetail)
async def review_document(
    document_id: int,
    body: DocumentReviewRequest,
    db: AsyncSession = Depends(get_db),
    service: DocumentService = Depends(get_document_service),
) -> DocumentDetail:
    """Reviewer decision: accept or reject a pending document."""
    record = await service.review_document(db, document_id, body.action, body.comment)
    return _to_response(record)


def _to_response(record: DocumentRecord) -> DocumentDetail:
    today = date.today()
    return DocumentDetail(
        id=record.id,
        client_id=record.client_id,
        document_type_id=record.document_type_id,
        document_date=record.document_date,
        upload_date=record.upload_date,
        expiration_date=record.expiration_date,
        status=record.status,
        reviewer_comment=record.reviewer_comment,
        file_reference=record.file_reference,
        days_until_expiration=days_until_expiration(record, today),
        is_valid=is_valid_now(record, today),
        needs_renewal=needs_renewal(record, today),
        expiring_soon=is_expiring_soon(record, today, settings.expiring_soon_days),
    )
