from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_db
from app.document_registry.catalog import (
    DocumentTypeDefinition,
    category_for,
    describe_validity,
    parse_person_type,
    renews_per_application,
)
from app.repositories.documents import DocumentRepository
from app.schemas.document_type import DocumentTypeListResponse, DocumentTypeResponse

router = APIRouter()


@router.get("", response_model=DocumentTypeListResponse)
async def list_document_types(
    person_type: str | None = None,
    db: AsyncSession = Depends(get_db),
) -> DocumentTypeListResponse:
    """Document type catalog, optionally restricted to one person type (PF, PF_AE, PM)."""
    repository = DocumentRepository(db)
    if person_type:
        parsed = parse_person_type(person_type)
        definitions = await repository.list_applicable_document_types(parsed)
        person_type = parsed.value
    else:
        definitions = await repository.list_document_types()

    return DocumentTypeListResponse(
        items=[_to_response(d) for d in definitions],
        total=len(definitions),
        person_type=person_type,
    )


def _to_response(definition: DocumentTypeDefinition) -> DocumentTypeResponse:
    return DocumentTypeResponse(
        id=definition.id,
        name=definition.name,
        applies_to_pf=definition.applies_to_pf,
        applies_to_pf_ae=definition.applies_to_pf_ae,
        applies_to_pm=definition.applies_to_pm,
        validity_days=definition.validity_days,
        validity=describe_validity(definition),
        optional=definition.optional,
        category=category_for(definition),
        renews_per_application=renews_per_application(definition),
    )
