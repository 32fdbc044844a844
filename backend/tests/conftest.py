from datetime import date, datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.document_registry.catalog import DEFAULT_DOCUMENT_TYPES
from app.models.base import Base
# Import all models so they register with Base.metadata for create_all
import app.models  # noqa: F401
from app.models.document_type import DocumentType


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def test_engine(tmp_path):
    # SQLite for tests (no Postgres dependency needed), one file per test
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        session.add_all([
            DocumentType(
                id=d.id,
                name=d.name,
                applies_to_pf=d.applies_to_pf,
                applies_to_pf_ae=d.applies_to_pf_ae,
                applies_to_pm=d.applies_to_pm,
                validity_days=d.validity_days,
                optional=d.optional,
                category=d.category,
            )
            for d in DEFAULT_DOCUMENT_TYPES
        ])
        await session.commit()
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session, tmp_path):
    from app.database import get_db
    from app.main import app
    from app.config import settings

    # Override upload dir to temp
    original_upload_dir = settings.upload_dir
    settings.upload_dir = str(tmp_path)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    settings.upload_dir = original_upload_dir


@pytest.fixture
async def pf_client(db_session):
    from app.models.client import Client
    from app.document_registry.catalog import PersonType

    row = Client(
        person_type=PersonType.PF,
        tax_id="PELJ800101AB1",
        email="jose@example.com",
        country="México",
        first_name="José",
        paternal_surname="Pérez",
        maternal_surname="López",
        national_id="PELJ800101HDFRPS09",
        birth_date=date(1980, 1, 1),
        street="Insurgentes Sur",
        exterior_number="1602",
        neighborhood="Crédito Constructor",
        postal_code="03940",
        city="Ciudad de México",
        state="CDMX",
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest.fixture
async def pm_client(db_session):
    from app.models.client import Client
    from app.document_registry.catalog import PersonType

    row = Client(
        person_type=PersonType.PM,
        tax_id="CNO100505AB1",
        email="legal@cno.mx",
        country="México",
        legal_name="Comercializadora del Norte, S.A. de C.V.",
        legal_representative="María Fernández Ruiz",
        incorporation_date=date(2010, 5, 5),
    )
    db_session.add(row)
    await db_session.commit()
    return row


@pytest.fixture
def add_document(db_session):
    """Insert a document row directly, bypassing registration rules."""
    from app.document_lifecycle.lifecycle import DocumentStatus
    from app.models.document import Document

    async def _add(
        client_id: int,
        document_type_id: int,
        document_date: date,
        expiration: date | None = None,
        status: DocumentStatus = DocumentStatus.ACCEPTED,
        uploaded: datetime | None = None,
        file_reference: str | None = None,
    ) -> Document:
        row = Document(
            client_id=client_id,
            document_type_id=document_type_id,
            document_date=document_date,
            upload_date=uploaded or datetime.now(timezone.utc),
            expiration_date=expiration,
            status=status,
            file_reference=file_reference or f"client-{client_id}/type-{document_type_id}.txt",
        )
        db_session.add(row)
        await db_session.commit()
        return row

    return _add
