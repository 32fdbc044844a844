"""Pydantic schemas for coherence reports."""

from typing import Any

from pydantic import BaseModel, Field

from app.coherence_engine.comparators import Severity
from app.coherence_engine.scoring import AlertType
from app.document_registry.catalog import DocumentCategory, PersonType


class DiscrepancyResponse(BaseModel):
    field: str
    client_value: Any = None
    document_value: Any = None
    severity: Severity
    impact: str
    requires_review: bool

    model_config = {"from_attributes": True}


class DocumentValidationResponse(BaseModel):
    document_id: int
    document_type: str
    category: DocumentCategory | None = None
    is_valid: bool
    confidence: float
    extracted_fields: dict[str, Any] = Field(default_factory=dict)
    matching_fields: list[str] = Field(default_factory=list)
    discrepant_fields: list[str] = Field(default_factory=list)
    discrepancies: list[DiscrepancyResponse] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class RiskAlertResponse(BaseModel):
    type: AlertType
    description: str
    severity: Severity
    recommended_action: str

    model_config = {"from_attributes": True}


class CoherenceResponse(BaseModel):
    client_id: int
    person_type: PersonType
    score: int
    is_coherent: bool
    per_document: list[DocumentValidationResponse]
    discrepancies: list[DiscrepancyResponse]
    alerts: list[RiskAlertResponse]
    recommendations: list[str]

    model_config = {"from_attributes": True}
