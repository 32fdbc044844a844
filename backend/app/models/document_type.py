"""ORM model for the document type catalog."""

from sqlalchemy import Boolean, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.document_registry.catalog import DocumentCategory
from app.models.base import Base


class DocumentType(Base):
    __tablename__ = "document_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    applies_to_pf: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    applies_to_pf_ae: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    applies_to_pm: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # NULL means the document never expires
    validity_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    optional: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    category: Mapped[DocumentCategory | None] = mapped_column(
        SAEnum(
            DocumentCategory,
            name="document_category",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )
