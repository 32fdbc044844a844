"""Tests for the per-category coherence comparators."""

from dataclasses import replace
from datetime import date

import pytest

from app.client_profile import ClientProfile
from app.coherence_engine.comparators import (
    COMPARATORS,
    Severity,
    validate_against_client,
)
from app.document_registry.catalog import DocumentCategory, PersonType
from app.exceptions import ValidationError
from app.services.document_analyzer import DocumentAnalysis

PF_CLIENT = ClientProfile(
    client_id=1,
    person_type=PersonType.PF,
    tax_id="PELJ800101AB1",
    email="jose@example.com",
    first_name="José",
    paternal_surname="Pérez",
    maternal_surname="López",
    national_id="PELJ800101HDFRPS09",
    birth_date=date(1980, 1, 1),
    tax_regime="Sueldos y Salarios",
    street="Insurgentes Sur",
    exterior_number="1602",
    neighborhood="Crédito Constructor",
    postal_code="03940",
    city="Ciudad de México",
    state="CDMX",
)

PM_CLIENT = ClientProfile(
    client_id=2,
    person_type=PersonType.PM,
    tax_id="CNO100505AB1",
    email="legal@cno.mx",
    legal_name="Comercializadora del Norte, S.A. de C.V.",
    legal_representative="María Fernández Ruiz",
    incorporation_date=date(2010, 5, 5),
)


def analysis(fields, is_valid: bool = True, confidence: float = 0.95) -> DocumentAnalysis:
    return DocumentAnalysis(is_valid=is_valid, confidence=confidence, extracted_fields=fields)


def validate(client, category, fields, **kwargs):
    return validate_against_client(client, category, analysis(fields), document_id=10, document_type="x", **kwargs)


class TestRegistry:
    def test_every_category_has_a_comparator(self):
        assert set(COMPARATORS) == set(DocumentCategory)


class TestIdentityDocument:
    def test_accent_insensitive_name(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, {"full_name": "JOSE PEREZ LOPEZ"})
        assert result.matching_fields == ["full_name"]
        assert result.discrepancies == []

    def test_name_mismatch_is_high(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, {"full_name": "Juan Pérez López"})
        assert result.discrepant_fields == ["full_name"]
        assert result.discrepancies[0].severity == Severity.HIGH
        assert result.discrepancies[0].requires_review is True

    def test_curp_and_address(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, {
            "full_name": "José Pérez López",
            "curp": "pelj800101hdfrps09",
            "direccion": "INSURGENTES SUR 1602 COL. CREDITO CONSTRUCTOR, CIUDAD DE MEXICO, CDMX",
        })
        assert result.matching_fields == ["full_name", "national_id", "address"]

    def test_address_mismatch_is_medium(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, {
            "address": "Calle Morelos 45 Centro Guadalajara Jalisco",
        })
        assert result.discrepant_fields == ["address"]
        assert result.discrepancies[0].severity == Severity.MEDIUM
        assert result.discrepancies[0].requires_review is True

    def test_identifier_skipped_when_client_has_none(self):
        client = replace(PF_CLIENT, national_id=None)
        result = validate(client, DocumentCategory.IDENTITY_DOCUMENT, {"national_id": "XXXX"})
        assert result.fields_evaluated == 0

    def test_missing_fields_are_not_evaluated(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, {"full_name": None, "address": "  "})
        assert result.fields_evaluated == 0


class TestTaxRegistration:
    def test_single_character_tax_id_difference_is_high(self):
        result = validate(PF_CLIENT, DocumentCategory.TAX_REGISTRATION, {"rfc": "PELJ800101AB2"})
        assert result.discrepant_fields == ["tax_id"]
        assert result.discrepancies[0].severity == Severity.HIGH

    def test_pm_legal_name(self):
        result = validate(PM_CLIENT, DocumentCategory.TAX_REGISTRATION, {
            "tax_id": "CNO100505AB1",
            "legal_name": "COMERCIALIZADORA DEL NORTE SA DE CV",
        })
        assert result.matching_fields == ["tax_id", "legal_name"]

    def test_pf_legal_name_ignored(self):
        result = validate(PF_CLIENT, DocumentCategory.TAX_REGISTRATION, {"legal_name": "Otra Empresa"})
        assert result.fields_evaluated == 0

    def test_tax_regime_mismatch_is_medium(self):
        result = validate(PF_CLIENT, DocumentCategory.TAX_REGISTRATION, {"tax_regime": "Régimen Simplificado de Confianza"})
        assert result.discrepancies[0].field == "tax_regime"
        assert result.discrepancies[0].severity == Severity.MEDIUM


class TestNationalId:
    def test_birth_date(self):
        result = validate(PF_CLIENT, DocumentCategory.NATIONAL_ID, {
            "national_id": "PELJ800101HDFRPS09",
            "birth_date": "1980-01-01",
        })
        assert result.matching_fields == ["national_id", "birth_date"]

    def test_birth_date_mismatch_is_high(self):
        result = validate(PF_CLIENT, DocumentCategory.NATIONAL_ID, {"fecha_nacimiento": "1981-01-01"})
        assert result.discrepancies[0].severity == Severity.HIGH
        assert result.discrepancies[0].client_value == "1980-01-01"


class TestProofOfAddress:
    def test_holder_mismatch_is_medium(self):
        result = validate(PF_CLIENT, DocumentCategory.PROOF_OF_ADDRESS, {"titular": "Rosa López Martínez"})
        assert result.discrepancies[0].field == "holder"
        assert result.discrepancies[0].severity == Severity.MEDIUM

    def test_address_miss_is_never_high(self):
        result = validate(PF_CLIENT, DocumentCategory.PROOF_OF_ADDRESS, {"address": "Otra Calle 99 Monterrey"})
        assert [d.severity for d in result.discrepancies] == [Severity.MEDIUM]

    def test_address_threshold_is_configurable(self):
        fields = {"address": "Insurgentes Sur 1602 Napoles Guadalajara Jalisco"}
        assert validate(PF_CLIENT, DocumentCategory.PROOF_OF_ADDRESS, fields).discrepant_fields == ["address"]
        loose = validate(PF_CLIENT, DocumentCategory.PROOF_OF_ADDRESS, fields, address_threshold=0.3)
        assert loose.matching_fields == ["address"]


class TestIncorporationDocument:
    def test_non_pm_client(self):
        result = validate(PF_CLIENT, DocumentCategory.INCORPORATION_DOCUMENT, {"legal_name": "Algo SA"})
        assert result.discrepant_fields == ["person_type"]
        assert result.discrepancies[0].severity == Severity.HIGH
        assert result.discrepancies[0].document_value == "PM"

    def test_legal_representative_mismatch_is_medium(self):
        result = validate(PM_CLIENT, DocumentCategory.INCORPORATION_DOCUMENT, {
            "razon_social": "Comercializadora del Norte SA de CV",
            "representante_legal": "Pedro Gómez",
        })
        assert result.matching_fields == ["legal_name"]
        assert result.discrepancies[0].field == "legal_representative"
        assert result.discrepancies[0].severity == Severity.MEDIUM


class TestIncomeAndBank:
    def test_income_holder_uses_legal_name_for_pm(self):
        result = validate(PM_CLIENT, DocumentCategory.INCOME_PROOF, {
            "holder": "Comercializadora del Norte S.A. de C.V.",
            "tax_id": "CNO100505AB1",
        })
        assert result.matching_fields == ["holder", "tax_id"]

    def test_income_holder_mismatch_is_high(self):
        result = validate(PF_CLIENT, DocumentCategory.INCOME_PROOF, {"holder": "Ana Torres"})
        assert result.discrepancies[0].severity == Severity.HIGH

    def test_bank_statement_holder(self):
        result = validate(PF_CLIENT, DocumentCategory.BANK_STATEMENT, {"account_holder": "JOSE PEREZ LOPEZ"})
        assert result.matching_fields == ["holder"]


class TestValidateAgainstClient:
    def test_no_category_evaluates_nothing(self):
        result = validate(PF_CLIENT, None, {"full_name": "Someone Else"})
        assert result.fields_evaluated == 0
        assert result.is_valid is True

    def test_carries_analyzer_verdict(self):
        result = validate_against_client(
            PF_CLIENT, DocumentCategory.NATIONAL_ID,
            analysis({}, is_valid=False, confidence=0.4), document_id=3, document_type="CURP",
        )
        assert result.is_valid is False
        assert result.confidence == 0.4
        assert result.document_id == 3

    @pytest.mark.parametrize("fields", [["full_name", "José"], "José Pérez", 42])
    def test_non_mapping_fields_rejected(self, fields):
        with pytest.raises(ValidationError):
            validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, fields)

    def test_none_fields_treated_as_empty(self):
        result = validate(PF_CLIENT, DocumentCategory.IDENTITY_DOCUMENT, None)
        assert result.fields_evaluated == 0
