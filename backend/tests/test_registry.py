"""Tests for the document type registry."""

import pytest

from app.document_registry.catalog import (
    DEFAULT_DOCUMENT_TYPES,
    DocumentCategory,
    DocumentTypeDefinition,
    PersonType,
    applicable_types,
    applies_to,
    category_for,
    describe_validity,
    normalize_type_name,
    parse_person_type,
    renews_per_application,
)
from app.exceptions import ValidationError


def by_name(name: str) -> DocumentTypeDefinition:
    return next(d for d in DEFAULT_DOCUMENT_TYPES if d.name == name)


class TestApplicability:
    def test_pf_types(self):
        names = [d.name for d in applicable_types(DEFAULT_DOCUMENT_TYPES, PersonType.PF)]
        assert "INE" in names
        assert "Acta Constitutiva" not in names
        assert "Declaración Anual (2 últimos ejercicios)" not in names

    def test_pf_ae_adds_annual_return(self):
        names = [d.name for d in applicable_types(DEFAULT_DOCUMENT_TYPES, "PF_AE")]
        assert "Declaración Anual (2 últimos ejercicios)" in names

    def test_pm_types(self):
        names = [d.name for d in applicable_types(DEFAULT_DOCUMENT_TYPES, "pm")]
        assert "Acta Constitutiva" in names
        assert "INE" not in names

    def test_applies_to_single(self):
        assert applies_to(by_name("Comprobante de Domicilio"), PersonType.PM) is True

    def test_unknown_person_type(self):
        with pytest.raises(ValidationError):
            parse_person_type("XX")


class TestCategory:
    def test_explicit_category_wins(self):
        definition = DocumentTypeDefinition(id=50, name="INE", category=DocumentCategory.BANK_STATEMENT)
        assert category_for(definition) == DocumentCategory.BANK_STATEMENT

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("INE", DocumentCategory.IDENTITY_DOCUMENT),
            ("Credencial de Elector", DocumentCategory.IDENTITY_DOCUMENT),
            ("RFC", DocumentCategory.TAX_REGISTRATION),
            ("CONSTANCIA DE SITUACIÓN FISCAL", DocumentCategory.TAX_REGISTRATION),
            ("Estado de cuenta", DocumentCategory.BANK_STATEMENT),
        ],
    )
    def test_alias_lookup(self, name, expected):
        assert category_for(DocumentTypeDefinition(id=99, name=name)) == expected

    def test_no_comparator(self):
        assert category_for(by_name("eFirma")) is None

    def test_normalize_type_name(self):
        assert normalize_type_name("  Carátula  Estado-de Cuenta ") == "caratula estado de cuenta"


class TestDescriptions:
    @pytest.mark.parametrize(
        "days, text",
        [(None, "Does not expire"), (30, "30 calendar days"), (90, "3 months"),
         (365, "1 year"), (730, "2 years"), (45, "45 days")],
    )
    def test_describe_validity(self, days, text):
        assert describe_validity(DocumentTypeDefinition(id=1, name="x", validity_days=days)) == text

    def test_renews_per_application(self):
        assert renews_per_application(by_name("Comprobante de Ingresos")) is True
        assert renews_per_application(by_name("Carátula Estado de Cuenta")) is True
        assert renews_per_application(by_name("INE")) is False
