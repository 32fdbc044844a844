"""Coherence aggregation: score, risk alerts and recommendations — no DB dependency.

Scoring:
    base  = 100 x matching fields / evaluated fields   (0 when nothing was evaluated)
    score = max(0, base - 20 x high - 10 x medium - 5 x low), rounded
"""

import enum
from dataclasses import dataclass, field

from app.client_profile import ClientProfile
from app.coherence_engine.comparators import Discrepancy, DocumentValidation, Severity
from app.document_registry.catalog import DocumentCategory, PersonType

SEVERITY_PENALTIES = {
    Severity.HIGH: 20,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}

COHERENCE_THRESHOLD = 80
FRAUD_HIGH_DISCREPANCY_COUNT = 3


class AlertType(str, enum.Enum):
    DATA_INCONSISTENCY = "data_inconsistency"
    INVALID_DOCUMENT = "invalid_document"
    MISSING_INFORMATION = "missing_information"
    POSSIBLE_FRAUD = "possible_fraud"


@dataclass
class RiskAlert:
    type: AlertType
    description: str
    severity: Severity
    recommended_action: str


@dataclass
class CoherenceReport:
    client_id: int
    person_type: PersonType
    score: int
    is_coherent: bool
    per_document: list[DocumentValidation] = field(default_factory=list)
    discrepancies: list[Discrepancy] = field(default_factory=list)
    alerts: list[RiskAlert] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


# Mandatory document categories per person type, with the severity of a missing one
_PF_REQUIRED = (
    (DocumentCategory.IDENTITY_DOCUMENT, Severity.HIGH),
    (DocumentCategory.TAX_REGISTRATION, Severity.HIGH),
    (DocumentCategory.PROOF_OF_ADDRESS, Severity.HIGH),
)

REQUIRED_CATEGORIES: dict[PersonType, tuple[tuple[DocumentCategory, Severity], ...]] = {
    PersonType.PF: _PF_REQUIRED,
    PersonType.PF_AE: _PF_REQUIRED + ((DocumentCategory.INCOME_PROOF, Severity.MEDIUM),),
    PersonType.PM: (
        (DocumentCategory.INCORPORATION_DOCUMENT, Severity.HIGH),
        (DocumentCategory.TAX_REGISTRATION, Severity.HIGH),
        (DocumentCategory.PROOF_OF_ADDRESS, Severity.HIGH),
    ),
}

CATEGORY_LABELS = {
    DocumentCategory.IDENTITY_DOCUMENT: "identity document (INE)",
    DocumentCategory.TAX_REGISTRATION: "tax registration (RFC)",
    DocumentCategory.NATIONAL_ID: "CURP",
    DocumentCategory.PROOF_OF_ADDRESS: "proof of address",
    DocumentCategory.INCORPORATION_DOCUMENT: "articles of incorporation",
    DocumentCategory.INCOME_PROOF: "income proof",
    DocumentCategory.BANK_STATEMENT: "bank statement",
}


def flatten_discrepancies(validations: list[DocumentValidation]) -> list[Discrepancy]:
    return [d for v in validations for d in v.discrepancies]


def count_severity(discrepancies: list[Discrepancy], severity: Severity) -> int:
    return sum(1 for d in discrepancies if d.severity == severity)


def compute_coherence_score(validations: list[DocumentValidation]) -> int:
    matching = sum(len(v.matching_fields) for v in validations)
    evaluated = sum(v.fields_evaluated for v in validations)
    base = 100 * matching / evaluated if evaluated else 0.0

    penalty = sum(SEVERITY_PENALTIES[d.severity] for d in flatten_discrepancies(validations))
    score = max(0.0, base - penalty)
    # round half up, matching the completeness percentage
    return int(score + 0.5)


def is_coherent(
    score: int,
    discrepancies: list[Discrepancy],
    threshold: int = COHERENCE_THRESHOLD,
) -> bool:
    return score >= threshold and count_severity(discrepancies, Severity.HIGH) == 0


def generate_risk_alerts(
    validations: list[DocumentValidation],
    fraud_threshold: int = FRAUD_HIGH_DISCREPANCY_COUNT,
) -> list[RiskAlert]:
    """Alerts derived from the discrepancy and validity set across all documents."""
    alerts = []
    high = count_severity(flatten_discrepancies(validations), Severity.HIGH)

    if high > 0:
        alerts.append(RiskAlert(
            type=AlertType.DATA_INCONSISTENCY,
            description=f"{high} critical discrepancies found",
            severity=Severity.HIGH,
            recommended_action="Review manually and request clarification from the client",
        ))

    invalid = [v for v in validations if not v.is_valid]
    if invalid:
        alerts.append(RiskAlert(
            type=AlertType.INVALID_DOCUMENT,
            description=f"{len(invalid)} documents failed validation",
            severity=Severity.HIGH,
            recommended_action="Request valid and legible documents",
        ))

    if high >= fraud_threshold:
        alerts.append(RiskAlert(
            type=AlertType.POSSIBLE_FRAUD,
            description="Multiple critical inconsistencies detected",
            severity=Severity.HIGH,
            recommended_action="Escalate to the fraud team for detailed review",
        ))

    return alerts


def check_person_type_requirements(
    person_type: PersonType,
    validations: list[DocumentValidation],
) -> list[RiskAlert]:
    """Missing-information alerts for mandatory categories absent from the analyzed set."""
    present = {v.category for v in validations if v.category is not None}
    alerts = []
    for category, severity in REQUIRED_CATEGORIES.get(person_type, ()):
        if category in present:
            continue
        label = CATEGORY_LABELS[category]
        alerts.append(RiskAlert(
            type=AlertType.MISSING_INFORMATION,
            description=f"Missing document for {person_type.value}: {label}",
            severity=severity,
            recommended_action=f"Request the {label} from the client",
        ))
    return alerts


def generate_recommendations(
    person_type: PersonType,
    discrepancies: list[Discrepancy],
    alerts: list[RiskAlert],
) -> list[str]:
    """Short prioritized reviewer guidance."""
    recommendations = []

    if not discrepancies:
        recommendations.append("All documents are coherent with the client's data")
    else:
        recommendations.append(f"Review {len(discrepancies)} discrepancies found")

    high = count_severity(discrepancies, Severity.HIGH)
    if high > 0:
        recommendations.append(f"Resolve {high} critical discrepancies immediately")

    if person_type == PersonType.PM:
        recommendations.append("Verify that the legal representative holds current powers")
        recommendations.append("Confirm the legal name matches across all documents")
    elif person_type == PersonType.PF_AE:
        recommendations.append("Validate that the business activity is properly registered")

    if any(a.type == AlertType.POSSIBLE_FRAUD for a in alerts):
        recommendations.append("Escalate for manual fraud review")

    return recommendations


def build_coherence_report(
    client: ClientProfile,
    validations: list[DocumentValidation],
    coherence_threshold: int = COHERENCE_THRESHOLD,
    fraud_threshold: int = FRAUD_HIGH_DISCREPANCY_COUNT,
) -> CoherenceReport:
    """Aggregate per-document validations into the client's coherence report."""
    discrepancies = flatten_discrepancies(validations)
    score = compute_coherence_score(validations)

    alerts = generate_risk_alerts(validations, fraud_threshold)
    alerts.extend(check_person_type_requirements(client.person_type, validations))

    return CoherenceReport(
        client_id=client.client_id,
        person_type=client.person_type,
        score=score,
        is_coherent=is_coherent(score, discrepancies, coherence_threshold),
        per_document=validations,
        discrepancies=discrepancies,
        alerts=alerts,
        recommendations=generate_recommendations(client.person_type, discrepancies, alerts),
    )
