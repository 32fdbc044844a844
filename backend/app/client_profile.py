"""Immutable snapshot of a client's declared profile, as read from the client registry."""

from dataclasses import dataclass
from datetime import date

from app.document_registry.catalog import PersonType


@dataclass(frozen=True)
class ClientProfile:
    client_id: int
    person_type: PersonType
    tax_id: str | None = None  # RFC
    email: str | None = None
    country: str | None = "México"
    # Individuals
    first_name: str | None = None
    paternal_surname: str | None = None
    maternal_surname: str | None = None
    national_id: str | None = None  # CURP
    birth_date: date | None = None
    # Legal entities
    legal_name: str | None = None
    legal_representative: str | None = None
    incorporation_date: date | None = None
    tax_regime: str | None = None
    phone: str | None = None
    # Address
    street: str | None = None
    exterior_number: str | None = None
    interior_number: str | None = None
    neighborhood: str | None = None
    postal_code: str | None = None
    city: str | None = None
    state: str | None = None

    @property
    def is_legal_entity(self) -> bool:
        return self.person_type == PersonType.PM

    @property
    def personal_name(self) -> str:
        parts = [self.first_name, self.paternal_surname, self.maternal_surname]
        return " ".join(p for p in parts if p).strip()

    @property
    def full_name(self) -> str:
        if self.is_legal_entity:
            return self.legal_name or ""
        return self.personal_name

    @property
    def address_line(self) -> str:
        parts = [self.street, self.exterior_number, self.neighborhood, self.city, self.state]
        return " ".join(p for p in parts if p).strip()

    def has_basic_data(self) -> bool:
        """All identity/fiscal fields required for the person type are present."""
        common = _present(self.tax_id, self.email, self.country)
        if self.is_legal_entity:
            return common and _present(
                self.legal_name, self.incorporation_date, self.legal_representative
            )
        return common and _present(
            self.first_name, self.paternal_surname, self.birth_date, self.national_id
        )

    def has_full_address(self) -> bool:
        return _present(
            self.street,
            self.exterior_number,
            self.neighborhood,
            self.postal_code,
            self.city,
            self.state,
        )


def _present(*values) -> bool:
    for value in values:
        if value is None:
            return False
        if isinstance(value, str) and not value.strip():
            return False
    return True
