from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.coherence_engine.service import CoherenceService
from app.completeness_engine.service import CompletenessService
from app.dependencies import get_coherence_service, get_completeness_service, get_db
from app.schemas.coherence import CoherenceResponse
from app.schemas.completeness import (
    CompletenessResponse,
    ReturningClientResponse,
    TypeEvaluationResponse,
)

router = APIRouter()


@router.get("/returning", response_model=ReturningClientResponse)
async def check_returning_client(
    tax_id: str = Query(..., min_length=12, max_length=13),
    db: AsyncSession = Depends(get_db),
    service: CompletenessService = Depends(get_completeness_service),
) -> ReturningClientResponse:
    """Can a known client (by RFC) reuse their previous documents for a new application?"""
    check = await service.evaluate_returning_client(db, tax_id)
    return ReturningClientResponse(
        client_id=check.client_id,
        tax_id=check.tax_id,
        can_reuse_documents=check.can_reuse_documents,
        types_to_refresh=[TypeEvaluationResponse.model_validate(t) for t in check.types_to_refresh],
        completeness=CompletenessResponse.model_validate(check.report) if check.report else None,
    )


@router.get("/{client_id}/completeness", response_model=CompletenessResponse)
async def get_completeness(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    service: CompletenessService = Depends(get_completeness_service),
) -> CompletenessResponse:
    report = await service.evaluate(db, client_id)
    return CompletenessResponse.model_validate(report)


@router.post("/{client_id}/coherence", response_model=CoherenceResponse)
async def analyze_coherence(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    service: CoherenceService = Depends(get_coherence_service),
) -> CoherenceResponse:
    """Analyze every accepted document of the client and cross-check it against the profile."""
    report = await service.analyze(db, client_id)
    return CoherenceResponse.model_validate(report)
