"""Shared fixtures and utilities for tests."""

import base64
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key-min-32-chars-long-for-security")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("S3_ENDPOINT", "http://localhost:9000")
os.environ.setdefault("S3_ACCESS_KEY_ID", "testing")
os.environ.setdefault("S3_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("S3_BUCKET", "test-resumes")
os.environ.setdefault("JSON_LOGS", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from api.dependencies import get_storage
from api.main import app
from core.config import settings
from core.security import create_access_token, hash_password
from database.engine import Base, get_db
from database.models.admins import Admin, AdminBootstrap, AdminRole, RecordStatus
from database.models.positions import Position, WorkType
from database.models import candidates, applications  # noqa: F401


TEST_PASSWORD = "Password123!"


class FakeStorage:
    """In-memory stand-in for S3Storage."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.deleted: list[str] = []
        self.fail_uploads = False
        self.fail_downloads = False

    async def upload(self, file_data, key, content_type=None, metadata=None):
        if self.fail_uploads:
            raise ConnectionError("storage unavailable")
        self.objects[key] = file_data
        self.content_types[key] = content_type
        return key

    async def download(self, key):
        if self.fail_downloads:
            raise ConnectionError("storage unavailable")
        return self.objects[key]

    async def delete(self, key):
        self.objects.pop(key, None)
        self.deleted.append(key)
        return True


def create_minimal_pdf(text: str = "Test PDF") -> bytes:
    """Create a minimal valid PDF with embedded text."""
    return (
        b"%PDF-1.4\n"
        b"1 0 obj<</Type/Catalog/Pages 2 0 R>>endobj\n"
        b"2 0 obj<</Type/Pages/Kids[3 0 R]/Count 1>>endobj\n"
        b"3 0 obj<</Type/Page/Parent 2 0 R/MediaBox[0 0 612 792]/Contents 4 0 R>>endobj\n"
        b"4 0 obj<</Length 44>>stream\nBT /F1 12 Tf 100 700 Td ("
        + text.encode()
        + b") Tj ET\nendstream endobj\n"
        b"trailer<</Size 5/Root 1 0 R>>\n%%EOF"
    )


def create_png() -> bytes:
    """Bytes that sniff as a PNG image."""
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def token_for(admin: Admin) -> str:
    return create_access_token(
        admin_id=admin.id,
        first_name=admin.first_name,
        last_name=admin.last_name,
        email=admin.email,
        role=admin.role.value,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest_asyncio.fixture
async def db_engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest_asyncio.fixture
async def client(session_factory, storage):
    """HTTP client against the app with database and storage overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_admin(
    session: AsyncSession,
    email: str,
    role: AdminRole,
    status: RecordStatus = RecordStatus.ACTIVE,
    created_by: int | None = None,
) -> Admin:
    admin = Admin(
        first_name="Test",
        last_name="Admin",
        email=email,
        hashed_password=hash_password(TEST_PASSWORD),
        role=role,
        status=status,
        created_by_admin_id=created_by,
    )
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    return admin


@pytest_asyncio.fixture
async def superadmin(db_session):
    admin = await _create_admin(db_session, "root@example.com", AdminRole.SUPERADMIN)
    db_session.add(AdminBootstrap(id=1, admin_id=admin.id))
    await db_session.commit()
    return admin


@pytest_asyncio.fixture
async def standard_admin(db_session, superadmin):
    return await _create_admin(
        db_session, "staff@example.com", AdminRole.STANDARD, created_by=superadmin.id
    )


@pytest_asyncio.fixture
async def deleted_admin(db_session, superadmin):
    return await _create_admin(
        db_session,
        "gone@example.com",
        AdminRole.STANDARD,
        status=RecordStatus.DELETED,
        created_by=superadmin.id,
    )


@pytest.fixture
def superadmin_token(superadmin):
    return token_for(superadmin)


@pytest.fixture
def standard_token(standard_admin):
    return token_for(standard_admin)


@pytest_asyncio.fixture
async def position(db_session, superadmin):
    position = Position(
        title="Backend Engineer",
        category="Engineering",
        work_type=WorkType.REMOTE,
        location="Berlin",
        description="Build and run the job board API.",
        status=RecordStatus.ACTIVE,
        created_by_admin_id=superadmin.id,
    )
    db_session.add(position)
    await db_session.commit()
    await db_session.refresh(position)
    return position


@pytest_asyncio.fixture
async def deleted_position(db_session, superadmin):
    position = Position(
        title="Retired Role",
        category="Engineering",
        work_type=WorkType.ONSITE,
        description="No longer open.",
        status=RecordStatus.DELETED,
        created_by_admin_id=superadmin.id,
    )
    db_session.add(position)
    await db_session.commit()
    await db_session.refresh(position)
    return position


@pytest.fixture
def pdf_bytes():
    return create_minimal_pdf()


@pytest.fixture
def application_payload(pdf_bytes):
    return {
        "fullName": "JOHN   doe",
        "email": "john@example.com",
        "fileB64": b64(pdf_bytes),
        "fileName": "john doe cv.pdf",
    }


@pytest.fixture
def png_bytes():
    return create_png()


@pytest.fixture
def superadmin_headers(superadmin_token):
    return auth_headers(superadmin_token)


@pytest.fixture
def standard_headers(standard_token):
    return auth_headers(standard_token)
