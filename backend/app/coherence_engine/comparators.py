"""Per-document-type comparators: extracted fields vs. declared client profile.

Pure functions, no DB or Claude dependency. Each supported ``DocumentCategory`` has
exactly one comparator registered in ``COMPARATORS``; a type without a category is
validated with no field checks.
"""

import enum
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.client_profile import ClientProfile
from app.coherence_engine.normalization import (
    ADDRESS_MATCH_THRESHOLD,
    compare_addresses,
    dates_match,
    identifiers_match,
    texts_match,
)
from app.document_registry.catalog import DocumentCategory, PersonType
from app.exceptions import ValidationError


class Severity(str, enum.Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


REVIEW_SEVERITIES = frozenset({Severity.HIGH, Severity.MEDIUM})

# Canonical extracted-field names and the aliases analyzers commonly return
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "full_name": ("full_name", "nombre_completo", "name"),
    "national_id": ("national_id", "curp"),
    "tax_id": ("tax_id", "rfc"),
    "address": ("address", "direccion", "domicilio"),
    "birth_date": ("birth_date", "fecha_nacimiento"),
    "legal_name": ("legal_name", "razon_social"),
    "tax_regime": ("tax_regime", "regimen_fiscal"),
    "holder": ("holder", "titular", "account_holder"),
    "legal_representative": ("legal_representative", "representante_legal"),
}


class ExtractedFieldSet(Protocol):
    """What the document analyzer hands back for one document."""

    is_valid: bool
    confidence: float
    extracted_fields: Any


@dataclass
class Discrepancy:
    field: str
    client_value: Any
    document_value: Any
    severity: Severity
    impact: str
    requires_review: bool = False

    def __post_init__(self):
        self.requires_review = self.severity in REVIEW_SEVERITIES


@dataclass
class DocumentValidation:
    """Outcome of comparing one analyzed document against the client profile."""

    document_id: int
    document_type: str
    category: DocumentCategory | None
    is_valid: bool
    confidence: float
    extracted_fields: dict[str, Any] = field(default_factory=dict)
    matching_fields: list[str] = field(default_factory=list)
    discrepant_fields: list[str] = field(default_factory=list)
    discrepancies: list[Discrepancy] = field(default_factory=list)

    @property
    def fields_evaluated(self) -> int:
        return len(self.matching_fields) + len(self.discrepant_fields)


class FieldChecks:
    """Accumulates field outcomes for one document."""

    def __init__(self, fields: Mapping[str, Any], address_threshold: float = ADDRESS_MATCH_THRESHOLD):
        self.fields = fields
        self.address_threshold = address_threshold
        self.matching: list[str] = []
        self.discrepant: list[str] = []
        self.discrepancies: list[Discrepancy] = []

    def get(self, name: str) -> Any:
        """Extracted value under the canonical name or any of its aliases; blanks are None."""
        for key in FIELD_ALIASES.get(name, (name,)):
            value = self.fields.get(key)
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            return value
        return None

    def record(
        self,
        name: str,
        matched: bool,
        client_value: Any,
        document_value: Any,
        severity: Severity,
        impact: str,
    ) -> None:
        if matched:
            self.matching.append(name)
            return
        self.discrepant.append(name)
        self.discrepancies.append(
            Discrepancy(
                field=name,
                client_value=client_value,
                document_value=document_value,
                severity=severity,
                impact=impact,
            )
        )

    def name(self, name: str, client_value: str | None, severity: Severity, impact: str) -> None:
        """Name-like field: compared whenever the document carries it."""
        document_value = self.get(name)
        if document_value is None:
            return
        self.record(
            name, texts_match(client_value, document_value), client_value, document_value,
            severity, impact,
        )

    def identifier(self, name: str, client_value: str | None, impact: str) -> None:
        """Identifier field: compared only when both sides carry a value."""
        document_value = self.get(name)
        if document_value is None or not client_value:
            return
        self.record(
            name, identifiers_match(client_value, document_value), client_value, document_value,
            Severity.HIGH, impact,
        )

    def date(self, name: str, client_value, impact: str) -> None:
        document_value = self.get(name)
        if document_value is None or client_value is None:
            return
        client_text = client_value.isoformat() if hasattr(client_value, "isoformat") else client_value
        self.record(
            name, dates_match(client_value, document_value), client_text, document_value,
            Severity.HIGH, impact,
        )

    def address(self, name: str, client_value: str, impact: str) -> None:
        document_value = self.get(name)
        if document_value is None:
            return
        matched = compare_addresses(client_value, document_value, self.address_threshold)
        self.record(name, matched, client_value, document_value, Severity.MEDIUM, impact)


Comparator = Callable[[ClientProfile, FieldChecks], None]


# ── Comparators ──────────────────────────────────────────────────────────


def compare_identity_document(client: ClientProfile, checks: FieldChecks) -> None:
    checks.name(
        "full_name", client.personal_name, Severity.HIGH,
        "The name on the identity document does not match the registered name",
    )
    checks.identifier(
        "national_id", client.national_id,
        "The CURP does not match the identity document",
    )
    checks.address(
        "address", client.address_line,
        "The address may have changed since the identity document was issued",
    )


def compare_tax_registration(client: ClientProfile, checks: FieldChecks) -> None:
    checks.identifier("tax_id", client.tax_id, "The RFC does not match the tax registration")

    if client.person_type == PersonType.PM:
        checks.name(
            "legal_name", client.legal_name, Severity.HIGH,
            "The legal name does not match the tax registration",
        )

    if client.tax_regime and checks.get("tax_regime") is not None:
        checks.name(
            "tax_regime", client.tax_regime, Severity.MEDIUM,
            "The tax regime differs from the registered one",
        )


def compare_national_id(client: ClientProfile, checks: FieldChecks) -> None:
    checks.identifier("national_id", client.national_id, "The CURP does not match")
    checks.date(
        "birth_date", client.birth_date,
        "The birth date does not match the CURP",
    )


def compare_proof_of_address(client: ClientProfile, checks: FieldChecks) -> None:
    # A relative may hold the utility contract
    checks.name(
        "holder", client.full_name, Severity.MEDIUM,
        "The proof of address is not in the client's name (may be a relative)",
    )
    checks.address(
        "address", client.address_line,
        "The address on the proof of address does not match the registered address",
    )


def compare_incorporation_document(client: ClientProfile, checks: FieldChecks) -> None:
    if client.person_type != PersonType.PM:
        checks.record(
            "person_type", False, client.person_type.value, PersonType.PM.value, Severity.HIGH,
            "Articles of incorporation only apply to legal entities",
        )
        return

    if client.legal_name:
        checks.name(
            "legal_name", client.legal_name, Severity.HIGH,
            "The legal name does not match the articles of incorporation",
        )
    if client.legal_representative:
        checks.name(
            "legal_representative", client.legal_representative, Severity.MEDIUM,
            "Different legal representative (powers may have changed)",
        )


def compare_income_proof(client: ClientProfile, checks: FieldChecks) -> None:
    checks.name(
        "holder", client.full_name, Severity.HIGH,
        "The income proof does not belong to the client",
    )
    checks.identifier("tax_id", client.tax_id, "The RFC on the income proof does not match")


def compare_bank_statement(client: ClientProfile, checks: FieldChecks) -> None:
    checks.name(
        "holder", client.full_name, Severity.HIGH,
        "The bank statement does not belong to the client",
    )


COMPARATORS: dict[DocumentCategory, Comparator] = {
    DocumentCategory.IDENTITY_DOCUMENT: compare_identity_document,
    DocumentCategory.TAX_REGISTRATION: compare_tax_registration,
    DocumentCategory.NATIONAL_ID: compare_national_id,
    DocumentCategory.PROOF_OF_ADDRESS: compare_proof_of_address,
    DocumentCategory.INCORPORATION_DOCUMENT: compare_incorporation_document,
    DocumentCategory.INCOME_PROOF: compare_income_proof,
    DocumentCategory.BANK_STATEMENT: compare_bank_statement,
}


def validate_against_client(
    client: ClientProfile,
    category: DocumentCategory | None,
    analysis: ExtractedFieldSet,
    *,
    document_id: int = 0,
    document_type: str = "",
    address_threshold: float = ADDRESS_MATCH_THRESHOLD,
) -> DocumentValidation:
    """Run the comparator registered for ``category`` over one analyzed document.

    Raises ValidationError if the analyzer's extracted fields are not a mapping.
    """
    fields = analysis.extracted_fields
    if fields is None:
        fields = {}
    if not isinstance(fields, Mapping):
        raise ValidationError(
            f"Extracted fields for document {document_id} must be a key/value mapping",
            {"extracted_fields": type(fields).__name__},
        )

    checks = FieldChecks(fields, address_threshold)
    comparator = COMPARATORS.get(category) if category is not None else None
    if comparator is not None:
        comparator(client, checks)

    return DocumentValidation(
        document_id=document_id,
        document_type=document_type,
        category=category,
        is_valid=bool(analysis.is_valid),
        confidence=float(analysis.confidence or 0.0),
        extracted_fields=dict(fields),
        matching_fields=checks.matching,
        discrepant_fields=checks.discrepant,
        discrepancies=checks.discrepancies,
    )
