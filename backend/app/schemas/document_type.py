"""Pydantic schemas for the document type catalog."""

from pydantic import BaseModel

from app.document_registry.catalog import DocumentCategory


class DocumentTypeResponse(BaseModel):
    id: int
    name: str
    applies_to_pf: bool
    applies_to_pf_ae: bool
    applies_to_pm: bool
    validity_days: int | None = None
    validity: str
    optional: bool
    category: DocumentCategory | None = None
    renews_per_application: bool = False


class DocumentTypeListResponse(BaseModel):
    items: list[DocumentTypeResponse]
    total: int
    person_type: str | None = None
