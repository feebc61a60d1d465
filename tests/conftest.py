import os
import tempfile
import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# FORCE TESTING MODE
# Must be set BEFORE importing app.main so settings and the engine
# pick up the SQLite database.
# ------------------------------------------------------------------
_DB_PATH = os.path.join(tempfile.gettempdir(), f"campus_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

from app.main import app
from app.core.database import AsyncSessionLocal, drop_db, init_db
from app.core.security import create_access_token, hash_password
from app.models.user import User, UserRole, UserStatus

PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest_asyncio.fixture
async def db():
    """Fresh tables for every test."""
    await drop_db()
    await init_db()
    yield


@pytest_asyncio.fixture
async def session(db):
    async with AsyncSessionLocal() as s:
        yield s


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def make_user(session):
    """
    Insert a user straight into the store. Defaults give a CSE student
    admitted in 2023; pass ``role`` for faculty / admin.
    """

    async def _make(
        role: UserRole = UserRole.Student,
        department="CSE",
        admission_year=2023,
        name=None,
        email=None,
        student_code=None,
        status=UserStatus.Active,
    ):
        suffix = uuid.uuid4().hex[:8]
        is_student = role == UserRole.Student
        user = User(
            name=name or f"{role.value.title()} {suffix}",
            email=email or f"{role.value}_{suffix}@example.edu",
            password_hash=PASSWORD_HASH,
            role=role,
            department=department if role != UserRole.Admin else None,
            admission_year=admission_year if is_student else None,
            student_code=(student_code or f"S{suffix}".upper()) if is_student else None,
            faculty_code=f"F{suffix}" if role == UserRole.Faculty else None,
            status=status,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make


def auth_headers(user: User) -> dict:
    token = create_access_token(subject=str(user.id), data={"role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers
