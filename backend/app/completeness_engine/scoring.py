"""Pure completeness scoring — no DB dependency, easy to unit test.

Weights (business policy):
    40  basic identity/fiscal data present (all-or-nothing)
    20  full postal address present (all-or-nothing)
    40  x required document types complete / required types total
"""

import enum
from dataclasses import dataclass, field
from datetime import date

from app.client_profile import ClientProfile
from app.document_lifecycle.lifecycle import (
    DocumentRecord,
    DocumentStatus,
    days_until_expiration,
    is_valid_now,
    sweep_expired,
)
from app.document_registry.catalog import DocumentTypeDefinition, PersonType

BASIC_DATA_WEIGHT = 40
ADDRESS_WEIGHT = 20
DOCUMENTS_WEIGHT = 40


class TypeStatus(str, enum.Enum):
    COMPLETE = "complete"
    EXPIRED = "expired"
    REJECTED = "rejected"
    PENDING = "pending"


class NextAction(str, enum.Enum):
    COMPLETE_BASIC_DATA = "complete_basic_data"
    COMPLETE_ADDRESS = "complete_address"
    RESUBMIT_REJECTED = "resubmit_rejected"
    RENEW_EXPIRED = "renew_expired"
    UPLOAD_PENDING = "upload_pending"
    COMPLETE_DOCUMENTATION = "complete_documentation"
    READY_FOR_REVIEW = "ready_for_review"


@dataclass
class UploadedDocument:
    """One uploaded record as seen by the completeness report."""

    document_id: int
    document_date: date
    expiration_date: date | None
    status: DocumentStatus
    days_until_expiration: int | None
    is_valid: bool


@dataclass
class TypeEvaluation:
    """Status of one applicable document type for a client."""

    document_type_id: int
    name: str
    optional: bool
    validity_days: int | None
    status: TypeStatus
    documents: list[UploadedDocument] = field(default_factory=list)
    days_until_expiration: int | None = None


@dataclass
class CompletenessSummary:
    total_types: int = 0
    complete: int = 0
    expired: int = 0
    pending: int = 0
    rejected: int = 0


@dataclass
class CompletenessReport:
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
    per_type: list[TypeEvaluation] = field(default_factory=list)
    summary: CompletenessSummary = field(default_factory=CompletenessSummary)


def evaluate_document_type(
    definition: DocumentTypeDefinition,
    records: list[DocumentRecord],
    today: date | None = None,
) -> TypeEvaluation:
    """Status of one document type given zero or more of its records.

    Tie-break order: complete > expired > rejected > pending. A valid document wins
    even when the history also holds rejected or expired uploads.
    """
    today = today or date.today()
    # lazy sweep: statuses reflect the passage of time even if no job has run yet
    records = sweep_expired(records, today)
    uploaded = [
        UploadedDocument(
            document_id=r.id,
            document_date=r.document_date,
            expiration_date=r.expiration_date,
            status=r.status,
            days_until_expiration=days_until_expiration(r, today),
            is_valid=is_valid_now(r, today),
        )
        for r in records
    ]

    remaining = [u.days_until_expiration for u in uploaded if u.days_until_expiration is not None]

    return TypeEvaluation(
        document_type_id=definition.id,
        name=definition.name,
        optional=definition.optional,
        validity_days=definition.validity_days,
        status=_type_status(definition, records, today),
        documents=uploaded,
        days_until_expiration=min(remaining) if remaining else None,
    )


def _type_status(
    definition: DocumentTypeDefinition,
    records: list[DocumentRecord],
    today: date,
) -> TypeStatus:
    if not records:
        return TypeStatus.COMPLETE if definition.optional else TypeStatus.PENDING

    if any(is_valid_now(r, today) for r in records):
        return TypeStatus.COMPLETE

    if any(r.status == DocumentStatus.EXPIRED for r in records):
        return TypeStatus.EXPIRED

    if any(r.status == DocumentStatus.REJECTED for r in records):
        return TypeStatus.REJECTED

    return TypeStatus.PENDING


def raw_percentage(
    basic_data_complete: bool,
    address_complete: bool,
    evaluations: list[TypeEvaluation],
) -> float:
    """Weighted completeness before rounding."""
    percentage = 0.0
    if basic_data_complete:
        percentage += BASIC_DATA_WEIGHT
    if address_complete:
        percentage += ADDRESS_WEIGHT

    required = [e for e in evaluations if not e.optional]
    if required:
        complete = sum(1 for e in required if e.status == TypeStatus.COMPLETE)
        percentage += DOCUMENTS_WEIGHT * complete / len(required)
    else:
        percentage += DOCUMENTS_WEIGHT
    return percentage


def compute_percentage(
    basic_data_complete: bool,
    address_complete: bool,
    evaluations: list[TypeEvaluation],
) -> int:
    """Weighted completeness, rounded to the nearest integer."""
    # round half up; built-in round() would send 42.5 to 42
    return int(raw_percentage(basic_data_complete, address_complete, evaluations) + 0.5)


def summarize(evaluations: list[TypeEvaluation]) -> CompletenessSummary:
    def count(status: TypeStatus) -> int:
        return sum(1 for e in evaluations if e.status == status)

    return CompletenessSummary(
        total_types=len(evaluations),
        complete=count(TypeStatus.COMPLETE),
        expired=count(TypeStatus.EXPIRED),
        pending=count(TypeStatus.PENDING),
        rejected=count(TypeStatus.REJECTED),
    )


def can_proceed(percentage: float, summary: CompletenessSummary, threshold: int = 80) -> bool:
    """Threshold met and nothing expired or rejected.

    Pass the unrounded percentage: 79.5 rounds to 80 for display but does not
    meet an 80 threshold.
    """
    return percentage >= threshold and summary.expired == 0 and summary.rejected == 0


def determine_next_action(
    basic_data_complete: bool,
    address_complete: bool,
    documents_complete: bool,
    summary: CompletenessSummary,
) -> tuple[NextAction, str]:
    """Single highest-priority recommendation as (code, message)."""
    if not basic_data_complete:
        return NextAction.COMPLETE_BASIC_DATA, "Complete the client's basic data"

    if not address_complete:
        return NextAction.COMPLETE_ADDRESS, "Complete the client's address information"

    if summary.rejected > 0:
        return (
            NextAction.RESUBMIT_REJECTED,
            f"Review and resubmit {summary.rejected} rejected document(s)",
        )

    if summary.expired > 0:
        return NextAction.RENEW_EXPIRED, f"Renew {summary.expired} expired document(s)"

    if summary.pending > 0:
        return NextAction.UPLOAD_PENDING, f"Upload {summary.pending} pending document(s)"

    if not documents_complete:
        return NextAction.COMPLETE_DOCUMENTATION, "Complete the required documentation"

    return NextAction.READY_FOR_REVIEW, "File complete - ready for review"


def completeness_message(percentage: int, summary: CompletenessSummary) -> str:
    if percentage == 100:
        return "File complete and ready for processing"

    if percentage >= 80:
        if summary.expired > 0:
            return (
                f"File almost complete, but {summary.expired} expired document(s) "
                "need to be renewed"
            )
        if summary.rejected > 0:
            return (
                f"File almost complete, but {summary.rejected} rejected document(s) "
                "need to be corrected"
            )
        return "File almost complete, some minor documents are missing"

    if percentage >= 60:
        return "File partially complete, important documents are missing"

    if percentage >= 40:
        return "File in progress, basic data and documents are missing"

    return "File at an initial stage, basic information is required"


def build_completeness_report(
    client: ClientProfile,
    definitions: list[DocumentTypeDefinition],
    records: list[DocumentRecord],
    today: date | None = None,
    can_proceed_threshold: int = 80,
) -> CompletenessReport:
    """Evaluate every applicable type and aggregate the client's completeness.

    ``definitions`` must already be filtered to the client's person type and
    ``records`` should be the current record per type.
    """
    today = today or date.today()

    by_type: dict[int, list[DocumentRecord]] = {}
    for record in records:
        by_type.setdefault(record.document_type_id, []).append(record)

    evaluations = [
        evaluate_document_type(definition, by_type.get(definition.id, []), today)
        for definition in definitions
    ]

    basic = client.has_basic_data()
    address = client.has_full_address()
    required = [e for e in evaluations if not e.optional]
    documents_complete = all(e.status == TypeStatus.COMPLETE for e in required)

    unrounded = raw_percentage(basic, address, evaluations)
    percentage = int(unrounded + 0.5)
    summary = summarize(evaluations)
    action, action_message = determine_next_action(basic, address, documents_complete, summary)

    return CompletenessReport(
        client_id=client.client_id,
        person_type=client.person_type,
        percentage=percentage,
        basic_data_complete=basic,
        address_complete=address,
        documents_complete=documents_complete,
        file_complete=basic and address and documents_complete,
        can_proceed=can_proceed(unrounded, summary, can_proceed_threshold),
        next_action=action,
        next_action_message=action_message,
        message=completeness_message(percentage, summary),
        per_type=evaluations,
        summary=summary,
    )


def types_to_refresh(evaluations: list[TypeEvaluation]) -> list[TypeEvaluation]:
    """Types a returning client must upload again before reusing their file."""
    return [e for e in evaluations if e.status in (TypeStatus.EXPIRED, TypeStatus.REJECTED)]
