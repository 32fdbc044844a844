"""Document type registry — catalog of document kinds, applicability and validity windows.

Pure data and lookup functions, no DB dependency. The ORM table ``document_types``
is converted into ``DocumentTypeDefinition`` snapshots by the document repository.
"""

import enum
import re
import unicodedata
from dataclasses import dataclass

from app.exceptions import ValidationError


class PersonType(str, enum.Enum):
    PF = "PF"  # individual
    PF_AE = "PF_AE"  # individual with business activity
    PM = "PM"  # legal entity


class DocumentCategory(str, enum.Enum):
    """Closed set of document variants that have a coherence comparator."""

    IDENTITY_DOCUMENT = "identity_document"
    TAX_REGISTRATION = "tax_registration"
    NATIONAL_ID = "national_id"
    PROOF_OF_ADDRESS = "proof_of_address"
    INCORPORATION_DOCUMENT = "incorporation_document"
    INCOME_PROOF = "income_proof"
    BANK_STATEMENT = "bank_statement"


@dataclass(frozen=True)
class DocumentTypeDefinition:
    """A kind of document a client may be asked for."""

    id: int
    name: str
    applies_to_pf: bool = False
    applies_to_pf_ae: bool = False
    applies_to_pm: bool = False
    validity_days: int | None = None
    optional: bool = False
    category: DocumentCategory | None = None

    @property
    def never_expires(self) -> bool:
        return self.validity_days is None


# Normalized type names (and common aliases) mapped to their comparator variant.
# Used when a catalog row carries no explicit category.
CATEGORY_ALIASES: dict[str, DocumentCategory] = {
    "ine": DocumentCategory.IDENTITY_DOCUMENT,
    "ine ife": DocumentCategory.IDENTITY_DOCUMENT,
    "ineife": DocumentCategory.IDENTITY_DOCUMENT,
    "credencial de elector": DocumentCategory.IDENTITY_DOCUMENT,
    "identificacion oficial": DocumentCategory.IDENTITY_DOCUMENT,
    "rfc": DocumentCategory.TAX_REGISTRATION,
    "constancia de situacion fiscal": DocumentCategory.TAX_REGISTRATION,
    "constancia situacion fiscal": DocumentCategory.TAX_REGISTRATION,
    "curp": DocumentCategory.NATIONAL_ID,
    "comprobante de domicilio": DocumentCategory.PROOF_OF_ADDRESS,
    "acta constitutiva": DocumentCategory.INCORPORATION_DOCUMENT,
    "comprobante de ingresos": DocumentCategory.INCOME_PROOF,
    "estado de cuenta": DocumentCategory.BANK_STATEMENT,
    "caratula estado de cuenta": DocumentCategory.BANK_STATEMENT,
}

# Documents that must be refreshed for every new application regardless of validity
PER_APPLICATION_RENEWAL = frozenset({
    "comprobante de ingresos",
    "pasivos bancarios",
    "caratula estado de cuenta",
    "declaracion de impuestos 2 ultimas",
    "caratula estado de cuenta pm",
    "pasivos bancarios pm",
})


DEFAULT_DOCUMENT_TYPES: tuple[DocumentTypeDefinition, ...] = (
    DocumentTypeDefinition(
        id=1, name="INE", applies_to_pf=True, applies_to_pf_ae=True,
        category=DocumentCategory.IDENTITY_DOCUMENT,
    ),
    DocumentTypeDefinition(
        id=2, name="CURP", applies_to_pf=True, applies_to_pf_ae=True,
        category=DocumentCategory.NATIONAL_ID,
    ),
    DocumentTypeDefinition(
        id=3, name="Constancia de Situación Fiscal", applies_to_pf=True, applies_to_pf_ae=True,
        applies_to_pm=True, validity_days=90, category=DocumentCategory.TAX_REGISTRATION,
    ),
    DocumentTypeDefinition(
        id=4, name="eFirma", applies_to_pf=True, applies_to_pf_ae=True, applies_to_pm=True,
        optional=True,
    ),
    DocumentTypeDefinition(
        id=5, name="Comprobante de Ingresos", applies_to_pf=True, applies_to_pf_ae=True,
        validity_days=30, category=DocumentCategory.INCOME_PROOF,
    ),
    DocumentTypeDefinition(
        id=6, name="Carátula Estado de Cuenta", applies_to_pf=True, applies_to_pf_ae=True,
        applies_to_pm=True, validity_days=90, optional=True,
        category=DocumentCategory.BANK_STATEMENT,
    ),
    DocumentTypeDefinition(
        id=7, name="Declaración Anual (2 últimos ejercicios)", applies_to_pf_ae=True,
        validity_days=365,
    ),
    DocumentTypeDefinition(
        id=8, name="Comprobante de Domicilio", applies_to_pf=True, applies_to_pf_ae=True,
        applies_to_pm=True, validity_days=90, category=DocumentCategory.PROOF_OF_ADDRESS,
    ),
    DocumentTypeDefinition(
        id=9, name="Acta Constitutiva", applies_to_pm=True,
        category=DocumentCategory.INCORPORATION_DOCUMENT,
    ),
    DocumentTypeDefinition(
        id=10, name="Poderes del Representante Legal", applies_to_pm=True, validity_days=365,
    ),
)


def normalize_type_name(name: str) -> str:
    """Lowercase, strip accents and punctuation so catalog names compare loosely."""
    decomposed = unicodedata.normalize("NFD", name.lower())
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    stripped = re.sub(r"[^\w\s]", " ", stripped)
    return " ".join(stripped.split())


def applies_to(definition: DocumentTypeDefinition, person_type: PersonType | str) -> bool:
    """Whether a document type is requested for the given person type."""
    person_type = parse_person_type(person_type)
    if person_type == PersonType.PF:
        return definition.applies_to_pf
    if person_type == PersonType.PF_AE:
        return definition.applies_to_pf_ae
    return definition.applies_to_pm


def applicable_types(
    definitions: list[DocumentTypeDefinition] | tuple[DocumentTypeDefinition, ...],
    person_type: PersonType | str,
) -> list[DocumentTypeDefinition]:
    """Filter the catalog down to the types that apply to a person type."""
    return [d for d in definitions if applies_to(d, person_type)]


def parse_person_type(value: PersonType | str) -> PersonType:
    if isinstance(value, PersonType):
        return value
    try:
        return PersonType(str(value).upper())
    except ValueError as e:
        raise ValidationError(
            f"Invalid person type: {value}",
            {"person_type": "must be one of PF, PF_AE, PM"},
        ) from e


def category_for(definition: DocumentTypeDefinition) -> DocumentCategory | None:
    """Resolve the comparator variant for a type.

    The explicit category wins; otherwise the type name is looked up in the alias table.
    """
    if definition.category is not None:
        return definition.category
    return CATEGORY_ALIASES.get(normalize_type_name(definition.name))


def describe_validity(definition: DocumentTypeDefinition) -> str:
    """Human-readable validity window."""
    days = definition.validity_days
    if days is None:
        return "Does not expire"
    if days == 30:
        return "30 calendar days"
    if days == 90:
        return "3 months"
    if days == 365:
        return "1 year"
    if days == 730:
        return "2 years"
    return f"{days} days"


def renews_per_application(definition: DocumentTypeDefinition) -> bool:
    """Documents that must be uploaded again for every new application."""
    return normalize_type_name(definition.name) in PER_APPLICATION_RENEWAL
