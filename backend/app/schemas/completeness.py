"""Pydantic schemas for completeness reports and the returning-client check."""

from datetime import date

from pydantic import BaseModel, Field

from app.completeness_engine.scoring import NextAction, TypeStatus
from app.document_lifecycle.lifecycle import DocumentStatus
from app.document_registry.catalog import PersonType


class UploadedDocumentResponse(BaseModel):
    document_id: int
    document_date: date
    expiration_date: date | None = None
    status: DocumentStatus
    days_until_expiration: int | None = None
    is_valid: bool

    model_config = {"from_attributes": True}


class TypeEvaluationResponse(BaseModel):
    document_type_id: int
    name: str
    optional: bool
    validity_days: int | None = None
    status: TypeStatus
    documents: list[UploadedDocumentResponse] = Field(default_factory=list)
    days_until_expiration: int | None = None

    model_config = {"from_attributes": True}


class CompletenessSummaryResponse(BaseModel):
    total_types: int
    complete: int
    expired: int
    pending: int
    rejected: int

    model_config = {"from_attributes": True}


class CompletenessResponse(BaseModel):
    client_id: int
    person_type: PersonType
    percentage: int
    basic_data_complete: bool
    address_complete: bool
    documents_complete: bool
    file_complete: bool
    can_proceed: bool
    next_action: NextAction
    next_action_message: str
    message: str
    per_type: list[TypeEvaluationResponse]
    summary: CompletenessSummaryResponse

    model_config = {"from_attributes": True}


class ReturningClientResponse(BaseModel):
    client_id: int
    tax_id: str
    can_reuse_documents: bool
    types_to_refresh: list[TypeEvaluationResponse] = Field(default_factory=list)
    completeness: CompletenessResponse | None = None
