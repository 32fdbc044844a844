"""Client, document type and document tables; seed the default document catalog

Revision ID: 001_onboarding
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_onboarding"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERSON_TYPES = ("PF", "PF_AE", "PM")
DOCUMENT_STATUSES = ("pending", "accepted", "rejected", "expired")
DOCUMENT_CATEGORIES = (
    "identity_document",
    "tax_registration",
    "national_id",
    "proof_of_address",
    "incorporation_document",
    "income_proof",
    "bank_statement",
)

# (id, name, pf, pf_ae, pm, validity_days, optional, category)
DEFAULT_DOCUMENT_TYPES = [
    (1, "INE", True, True, False, None, False, "identity_document"),
    (2, "CURP", True, True, False, None, False, "national_id"),
    (3, "Constancia de Situación Fiscal", True, True, True, 90, False, "tax_registration"),
    (4, "eFirma", True, True, True, None, True, None),
    (5, "Comprobante de Ingresos", True, True, False, 30, False, "income_proof"),
    (6, "Carátula Estado de Cuenta", True, True, True, 90, True, "bank_statement"),
    (7, "Declaración Anual (2 últimos ejercicios)", False, True, False, 365, False, None),
    (8, "Comprobante de Domicilio", True, True, True, 90, False, "proof_of_address"),
    (9, "Acta Constitutiva", False, False, True, None, False, "incorporation_document"),
    (10, "Poderes del Representante Legal", False, False, True, 365, False, None),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("person_type", sa.Enum(*PERSON_TYPES, name="person_type"), nullable=False),
        sa.Column("tax_id", sa.String(13), nullable=True, unique=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("paternal_surname", sa.String(100), nullable=True),
        sa.Column("maternal_surname", sa.String(100), nullable=True),
        sa.Column("national_id", sa.String(18), nullable=True),
        sa.Column("birth_date", sa.Date, nullable=True),
        sa.Column("legal_name", sa.String(255), nullable=True),
        sa.Column("legal_representative", sa.String(255), nullable=True),
        sa.Column("incorporation_date", sa.Date, nullable=True),
        sa.Column("tax_regime", sa.String(100), nullable=True),
        sa.Column("street", sa.String(255), nullable=True),
        sa.Column("exterior_number", sa.String(20), nullable=True),
        sa.Column("interior_number", sa.String(20), nullable=True),
        sa.Column("neighborhood", sa.String(100), nullable=True),
        sa.Column("postal_code", sa.String(10), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("state", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_clients_tax_id", "clients", ["tax_id"])

    document_types = op.create_table(
        "document_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("applies_to_pf", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("applies_to_pf_ae", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("applies_to_pm", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("validity_days", sa.Integer, nullable=True),
        sa.Column("optional", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("category", sa.Enum(*DOCUMENT_CATEGORIES, name="document_category"), nullable=True),
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer, sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("document_type_id", sa.Integer, sa.ForeignKey("document_types.id"), nullable=False),
        sa.Column("document_date", sa.Date, nullable=False),
        sa.Column("upload_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("expiration_date", sa.Date, nullable=True),
        sa.Column(
            "status",
            sa.Enum(*DOCUMENT_STATUSES, name="document_status"),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("reviewer_comment", sa.Text, nullable=True),
        sa.Column("file_reference", sa.String(1024), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_documents_client_id", "documents", ["client_id"])
    op.create_index("ix_documents_expiration_date", "documents", ["expiration_date"])
    # Sweep candidates: pending/accepted with a past expiration date
    op.create_index("ix_documents_status_expiration", "documents", ["status", "expiration_date"])

    op.bulk_insert(
        document_types,
        [
            {
                "id": type_id,
                "name": name,
                "applies_to_pf": pf,
                "applies_to_pf_ae": pf_ae,
                "applies_to_pm": pm,
                "validity_days": validity_days,
                "optional": optional,
                "category": category,
            }
            for type_id, name, pf, pf_ae, pm, validity_days, optional, category in DEFAULT_DOCUMENT_TYPES
        ],
    )
    op.execute("SELECT setval('document_types_id_seq', (SELECT MAX(id) FROM document_types))")


def downgrade() -> None:
    op.drop_table("documents")
    op.drop_table("document_types")
    op.drop_index("ix_clients_tax_id", table_name="clients")
    op.drop_table("clients")
    op.execute("DROP TYPE IF EXISTS document_status")
    op.execute("DROP TYPE IF EXISTS document_category")
    op.execute("DROP TYPE IF EXISTS person_type")
