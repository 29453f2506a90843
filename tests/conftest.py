"""Shared fixtures: an in-memory SQLite database per test, seeded users and an HTTP client."""

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from episure.core.config import Settings
from episure.core.db import Database
from episure.modules.cases.schemas import CaseCreate
from episure.modules.cases.service import CaseService
from episure.modules.patients.schemas import PatientCreate
from episure.modules.patients.service import PatientService
from episure.modules.users.repository import UserRepository

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENV="dev",
        DATABASE_URL=TEST_DB_URL,
        DB_MANAGE="migrations",
        JWT_SECRET="test-secret",
        ALLOW_LEGACY_USER_HEADER=True,
    )


@pytest_asyncio.fixture
async def db():
    database = Database(TEST_DB_URL)
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def session(db: Database):
    async with db.sessionmaker() as s:
        yield s


@pytest_asyncio.fixture
async def users(session: AsyncSession) -> tuple[int, int]:
    """Two registered users; returned as plain ids so they survive rollbacks."""
    repo = UserRepository(session)
    alice = await repo.create(entra_oid="oid-alice", email="alice@example.com", first_name="Alice", last_name="Owner")
    bob = await repo.create(entra_oid="oid-bob", email="bob@example.com", first_name="Bob", last_name="Other")
    await session.commit()
    return alice.id, bob.id


@pytest.fixture
def alice_id(users) -> int:
    return users[0]


@pytest.fixture
def bob_id(users) -> int:
    return users[1]


def patient_payload(case_code: str, **overrides) -> PatientCreate:
    data = {
        "case_id": case_code,
        "first_name": "Jamie",
        "last_name": "Rivera",
        "date_of_birth": date(2012, 5, 17),
        "location": "Boston",
        "postal_code": "02118",
    }
    data.update(overrides)
    return PatientCreate(**data)


@pytest.fixture
def make_case(session: AsyncSession):
    async def _make(user_id: int, code: str, *, with_patient: bool = False):
        view = await CaseService(session).create_case(CaseCreate(case_id=code, case_name=f"Case {code}"), user_id)
        if with_patient:
            view = await PatientService(session).link_patient(patient_payload(code), user_id)
        return view
    return _make


@pytest_asyncio.fixture
async def client(settings: Settings, db: Database, users):
    from episure.main import create_app

    app = create_app(settings, db=db)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def as_user(user_id: int) -> dict:
    return {"x-user-id": str(user_id)}
