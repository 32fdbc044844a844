"""Client registry reads. ORM rows are handed out as immutable ClientProfile snapshots."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.client_profile import ClientProfile
from app.models.client import Client


def to_profile(row: Client) -> ClientProfile:
    return ClientProfile(
        client_id=row.id,
        person_type=row.person_type,
        tax_id=row.tax_id,
        email=row.email,
        country=row.country,
        first_name=row.first_name,
        paternal_surname=row.paternal_surname,
        maternal_surname=row.maternal_surname,
        national_id=row.national_id,
        birth_date=row.birth_date,
        legal_name=row.legal_name,
        legal_representative=row.legal_representative,
        incorporation_date=row.incorporation_date,
        tax_regime=row.tax_regime,
        phone=row.phone,
        street=row.street,
        exterior_number=row.exterior_number,
        interior_number=row.interior_number,
        neighborhood=row.neighborhood,
        postal_code=row.postal_code,
        city=row.city,
        state=row.state,
    )


class ClientRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_client_by_id(self, client_id: int) -> ClientProfile | None:
        row = await self.db.get(Client, client_id)
        return to_profile(row) if row is not None else None

    async def find_client_by_tax_id(self, tax_id: str) -> ClientProfile | None:
        """Case-insensitive RFC lookup."""
        normalized = tax_id.strip().upper()
        if not normalized:
            return None
        result = await self.db.execute(
            select(Client).where(func.upper(Client.tax_id) == normalized)
        )
        row = result.scalars().first()
        return to_profile(row) if row is not None else None
