"""Pydantic schemas for document records and reviewer decisions."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.document_lifecycle.lifecycle import DocumentStatus


class DocumentCreate(BaseModel):
    client_id: int
    document_type_id: int
    document_date: date
    file_reference: str | None = Field(default=None, max_length=1024)


class DocumentReviewRequest(BaseModel):
    action: Literal["accept", "reject"]
    comment: str | None = None


class DocumentDetail(BaseModel):
    id: int
    client_id: int
    document_type_id: int
    document_date: date
    upload_date: datetime
    expiration_date: date | None = None
    status: DocumentStatus
    reviewer_comment: str | None = None
    file_reference: str | None = None
    days_until_expiration: int | None = None
    is_valid: bool
    needs_renewal: bool
    expiring_soon: bool = False


class ExpiringDocumentsResponse(BaseModel):
    items: list[DocumentDetail]
    total: int
    within_days: int


class SweepResponse(BaseModel):
    run_date: date
    examined: int
    expired: int
    document_ids: list[int]
