"""ORM model for the client registry (read-only to the verification core)."""

from datetime import date

from sqlalchemy import Date, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.document_registry.catalog import PersonType
from app.models.base import Base, TimestampMixin


class Client(Base, TimestampMixin):
    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    person_type: Mapped[PersonType] = mapped_column(
        SAEnum(PersonType, name="person_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    tax_id: Mapped[str | None] = mapped_column(String(13), nullable=True, unique=True, index=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True, default="México")

    # Individuals (PF / PF_AE)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    paternal_surname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    maternal_surname: Mapped[str | None] = mapped_column(String(100), nullable=True)
    national_id: Mapped[str | None] = mapped_column(String(18), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Legal entities (PM)
    legal_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    legal_representative: Mapped[str | None] = mapped_column(String(255), nullable=True)
    incorporation_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    tax_regime: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Address
    street: Mapped[str | None] = mapped_column(String(255), nullable=True)
    exterior_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    interior_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    neighborhood: Mapped[str | None] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(10), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
