"""Document lifecycle — status state machine and time-based expiration.

Pure functions over immutable ``DocumentRecord`` snapshots. Nothing here writes to
storage: functions that change a status return new records and the caller persists them.

State machine:
    pending  -> accepted | rejected      (human reviewer)
    pending  -> expired                  (time)
    accepted -> expired                  (time)
rejected and expired are terminal; a new upload creates a new record.
"""

import enum
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta

from app.document_registry.catalog import DocumentTypeDefinition
from app.exceptions import ValidationError


class DocumentStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EXPIRED = "expired"


ALLOWED_TRANSITIONS: dict[DocumentStatus, frozenset[DocumentStatus]] = {
    DocumentStatus.PENDING: frozenset(
        {DocumentStatus.ACCEPTED, DocumentStatus.REJECTED, DocumentStatus.EXPIRED}
    ),
    DocumentStatus.ACCEPTED: frozenset({DocumentStatus.EXPIRED}),
    DocumentStatus.REJECTED: frozenset(),
    DocumentStatus.EXPIRED: frozenset(),
}

SWEEPABLE_STATUSES = frozenset({DocumentStatus.PENDING, DocumentStatus.ACCEPTED})


@dataclass(frozen=True)
class DocumentRecord:
    """One uploaded document for one client."""

    id: int
    client_id: int
    document_type_id: int
    document_date: date
    upload_date: datetime
    expiration_date: date | None = None
    status: DocumentStatus = DocumentStatus.PENDING
    reviewer_comment: str | None = None
    file_reference: str | None = None


def parse_date(value: date | datetime | str | None, field_name: str = "document_date") -> date:
    """Coerce a date, datetime or ISO-8601 string into a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValidationError(
        f"Invalid {field_name}: {value!r}",
        {field_name: "expected an ISO-8601 date (YYYY-MM-DD)"},
    )


def expiration_date(
    definition: DocumentTypeDefinition,
    document_date: date | datetime | str,
) -> date | None:
    """Expiration = document date + validity window, or None if the type never expires."""
    issued = parse_date(document_date)
    if definition.validity_days is None:
        return None
    if definition.validity_days < 0:
        raise ValidationError(
            f"Document type '{definition.name}' has a negative validity window",
            {"validity_days": str(definition.validity_days)},
        )
    return issued + timedelta(days=definition.validity_days)


def validate_document_date(
    document_date: date | datetime | str,
    today: date | None = None,
    max_age_years: int = 5,
) -> date:
    """Reject document dates in the future or older than ``max_age_years``."""
    issued = parse_date(document_date)
    today = today or date.today()

    if issued > today:
        raise ValidationError(
            "Document date cannot be in the future",
            {"document_date": issued.isoformat()},
        )

    try:
        oldest = today.replace(year=today.year - max_age_years)
    except ValueError:
        # Feb 29 on a non-leap target year
        oldest = today.replace(year=today.year - max_age_years, day=28)

    if issued < oldest:
        raise ValidationError(
            f"Document date is more than {max_age_years} years old",
            {"document_date": issued.isoformat()},
        )
    return issued


def build_record(
    definition: DocumentTypeDefinition,
    *,
    record_id: int,
    client_id: int,
    document_date: date | datetime | str,
    upload_date: datetime | None = None,
    file_reference: str | None = None,
) -> DocumentRecord:
    """New pending record with its expiration fixed at creation time."""
    issued = parse_date(document_date)
    return DocumentRecord(
        id=record_id,
        client_id=client_id,
        document_type_id=definition.id,
        document_date=issued,
        upload_date=upload_date or datetime.now(),
        expiration_date=expiration_date(definition, issued),
        status=DocumentStatus.PENDING,
        file_reference=file_reference,
    )


def is_past_expiration(record: DocumentRecord, today: date | None = None) -> bool:
    if record.expiration_date is None:
        return False
    return record.expiration_date < (today or date.today())


def is_valid_now(record: DocumentRecord, today: date | None = None) -> bool:
    """Accepted and not past its expiration date."""
    return record.status == DocumentStatus.ACCEPTED and not is_past_expiration(record, today)


def days_until_expiration(record: DocumentRecord, today: date | None = None) -> int | None:
    """Days left before expiration, negative once expired, None if it never expires."""
    if record.expiration_date is None:
        return None
    return (record.expiration_date - (today or date.today())).days


def needs_renewal(record: DocumentRecord, today: date | None = None) -> bool:
    return (
        record.status in (DocumentStatus.EXPIRED, DocumentStatus.REJECTED)
        or is_past_expiration(record, today)
    )


def is_expiring_soon(
    record: DocumentRecord,
    today: date | None = None,
    within_days: int = 30,
) -> bool:
    days_left = days_until_expiration(record, today)
    if days_left is None:
        return False
    return 0 < days_left <= within_days


def sweep_expired(
    records: list[DocumentRecord],
    today: date | None = None,
) -> list[DocumentRecord]:
    """Mark every pending/accepted record past its expiration as expired.

    Returns a new list in the same order. Idempotent: records already expired or
    rejected are returned unchanged, so a second pass with the same ``today`` is a no-op.
    """
    today = today or date.today()
    swept = []
    for record in records:
        if record.status in SWEEPABLE_STATUSES and is_past_expiration(record, today):
            record = replace(record, status=DocumentStatus.EXPIRED)
        swept.append(record)
    return swept


def changed_records(
    before: list[DocumentRecord],
    after: list[DocumentRecord],
) -> list[DocumentRecord]:
    """Records whose status differs between two aligned lists (for the save step)."""
    return [new for old, new in zip(before, after) if old.status != new.status]


def transition(
    record: DocumentRecord,
    new_status: DocumentStatus | str,
    comment: str | None = None,
) -> DocumentRecord:
    """Apply a status change, enforcing the state machine."""
    try:
        target = DocumentStatus(new_status)
    except ValueError as e:
        raise ValidationError(f"Unknown document status: {new_status}") from e

    if target not in ALLOWED_TRANSITIONS[record.status]:
        raise ValidationError(
            f"Invalid status transition: {record.status.value} -> {target.value}",
            {"status": record.status.value},
        )
    return replace(
        record,
        status=target,
        reviewer_comment=comment if comment is not None else record.reviewer_comment,
    )


def select_current(records: list[DocumentRecord]) -> list[DocumentRecord]:
    """Most recently uploaded record per document type; older ones are history."""
    current: dict[int, DocumentRecord] = {}
    for record in records:
        existing = current.get(record.document_type_id)
        if existing is None or (record.upload_date, record.id) > (existing.upload_date, existing.id):
            current[record.document_type_id] = record
    return sorted(current.values(), key=lambda r: r.document_type_id)
