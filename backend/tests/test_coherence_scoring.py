"""Tests for coherence aggregation: score, alerts, recommendations."""

from app.coherence_engine.comparators import Discrepancy, DocumentValidation, Severity
from app.coherence_engine.scoring import (
    AlertType,
    check_person_type_requirements,
    compute_coherence_score,
    generate_recommendations,
    generate_risk_alerts,
    is_coherent,
)
from app.document_registry.catalog import DocumentCategory, PersonType


def discrepancy(severity: Severity, name: str = "tax_id") -> Discrepancy:
    return Discrepancy(field=name, client_value="a", document_value="b", severity=severity, impact="x")


def validation(
    matching: int = 0,
    discrepancies: list[Discrepancy] | None = None,
    category: DocumentCategory | None = DocumentCategory.IDENTITY_DOCUMENT,
    is_valid: bool = True,
    document_id: int = 1,
) -> DocumentValidation:
    discrepancies = discrepancies or []
    return DocumentValidation(
        document_id=document_id,
        document_type="doc",
        category=category,
        is_valid=is_valid,
        confidence=0.9,
        matching_fields=[f"field_{i}" for i in range(matching)],
        discrepant_fields=[d.field for d in discrepancies],
        discrepancies=discrepancies,
    )


class TestDiscrepancy:
    def test_requires_review_by_severity(self):
        assert discrepancy(Severity.HIGH).requires_review is True
        assert discrepancy(Severity.MEDIUM).requires_review is True
        assert discrepancy(Severity.LOW).requires_review is False


class TestScore:
    def test_nothing_evaluated_scores_zero(self):
        assert compute_coherence_score([]) == 0
        assert compute_coherence_score([validation(matching=0)]) == 0

    def test_all_matching(self):
        assert compute_coherence_score([validation(matching=3), validation(matching=2)]) == 100

    def test_high_penalty(self):
        # base 75, minus 20
        assert compute_coherence_score([validation(matching=3, discrepancies=[discrepancy(Severity.HIGH)])]) == 55

    def test_medium_and_low_penalties(self):
        # base 50, minus 10 and 5
        v = validation(matching=2, discrepancies=[discrepancy(Severity.MEDIUM), discrepancy(Severity.LOW, "holder")])
        assert compute_coherence_score([v]) == 35

    def test_floored_at_zero(self):
        v = validation(discrepancies=[discrepancy(Severity.HIGH, f"f{i}") for i in range(3)])
        assert compute_coherence_score([v]) == 0

    def test_rounded(self):
        # base 66.67, minus 10
        v = validation(matching=2, discrepancies=[discrepancy(Severity.MEDIUM)])
        assert compute_coherence_score([v]) == 57


class TestIsCoherent:
    def test_threshold_and_no_high(self):
        assert is_coherent(80, []) is True
        assert is_coherent(79, []) is False
        assert is_coherent(95, [discrepancy(Severity.HIGH)]) is False
        assert is_coherent(90, [discrepancy(Severity.MEDIUM)]) is True


class TestRiskAlerts:
    def test_clean_set_has_no_alerts(self):
        assert generate_risk_alerts([validation(matching=3)]) == []

    def test_inconsistency(self):
        alerts = generate_risk_alerts([validation(discrepancies=[discrepancy(Severity.HIGH)])])
        assert [a.type for a in alerts] == [AlertType.DATA_INCONSISTENCY]

    def test_medium_only_raises_nothing(self):
        assert generate_risk_alerts([validation(discrepancies=[discrepancy(Severity.MEDIUM)])]) == []

    def test_invalid_document(self):
        alerts = generate_risk_alerts([validation(matching=2, is_valid=False)])
        assert [a.type for a in alerts] == [AlertType.INVALID_DOCUMENT]
        assert "1 documents" in alerts[0].description

    def test_possible_fraud_across_documents(self):
        validations = [
            validation(discrepancies=[discrepancy(Severity.HIGH)], document_id=i)
            for i in range(3)
        ]
        types = [a.type for a in generate_risk_alerts(validations)]
        assert AlertType.POSSIBLE_FRAUD in types
        assert AlertType.DATA_INCONSISTENCY in types

    def test_two_high_is_not_fraud(self):
        v = validation(discrepancies=[discrepancy(Severity.HIGH, "a"), discrepancy(Severity.HIGH, "b")])
        assert AlertType.POSSIBLE_FRAUD not in [a.type for a in generate_risk_alerts([v])]

    def test_fraud_threshold_configurable(self):
        v = validation(discrepancies=[discrepancy(Severity.HIGH, "a"), discrepancy(Severity.HIGH, "b")])
        types = [a.type for a in generate_risk_alerts([v], fraud_threshold=2)]
        assert AlertType.POSSIBLE_FRAUD in types


class TestPersonTypeRequirements:
    def test_pf_missing_everything(self):
        alerts = check_person_type_requirements(PersonType.PF, [])
        assert len(alerts) == 3
        assert all(a.type == AlertType.MISSING_INFORMATION for a in alerts)
        assert all(a.severity == Severity.HIGH for a in alerts)

    def test_pf_complete(self):
        validations = [
            validation(category=DocumentCategory.IDENTITY_DOCUMENT),
            validation(category=DocumentCategory.TAX_REGISTRATION),
            validation(category=DocumentCategory.PROOF_OF_ADDRESS),
        ]
        assert check_person_type_requirements(PersonType.PF, validations) == []

    def test_pf_ae_income_proof_is_medium(self):
        validations = [
            validation(category=DocumentCategory.IDENTITY_DOCUMENT),
            validation(category=DocumentCategory.TAX_REGISTRATION),
            validation(category=DocumentCategory.PROOF_OF_ADDRESS),
        ]
        alerts = check_person_type_requirements(PersonType.PF_AE, validations)
        assert len(alerts) == 1
        assert alerts[0].severity == Severity.MEDIUM
        assert "income proof" in alerts[0].description

    def test_pm_requires_incorporation(self):
        validations = [
            validation(category=DocumentCategory.TAX_REGISTRATION),
            validation(category=DocumentCategory.PROOF_OF_ADDRESS),
        ]
        alerts = check_person_type_requirements(PersonType.PM, validations)
        assert len(alerts) == 1
        assert "articles of incorporation" in alerts[0].description


class TestRecommendations:
    def test_confirmation_when_clean(self):
        assert generate_recommendations(PersonType.PF, [], []) == [
            "All documents are coherent with the client's data"
        ]

    def test_critical_and_fraud(self):
        discrepancies = [discrepancy(Severity.HIGH, f"f{i}") for i in range(3)]
        alerts = generate_risk_alerts([validation(discrepancies=discrepancies)])
        recommendations = generate_recommendations(PersonType.PF, discrepancies, alerts)
        assert recommendations[0] == "Review 3 discrepancies found"
        assert "Resolve 3 critical discrepancies immediately" in recommendations
        assert recommendations[-1] == "Escalate for manual fraud review"

    def test_pm_reminders(self):
        recommendations = generate_recommendations(PersonType.PM, [], [])
        assert len(recommendations) == 3
        assert any("legal representative" in r for r in recommendations)

    def test_pf_ae_reminder(self):
        recommendations = generate_recommendations(PersonType.PF_AE, [], [])
        assert any("business activity" in r for r in recommendations)
