"""Shared pytest fixtures for all test suites."""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from bidplatform.app.config import Settings, get_settings
from bidplatform.app.db.engine import get_session
from bidplatform.app.db.models import Base, User
from bidplatform.app.main import app
from bidplatform.app.security import create_access_token, hash_password

TEST_PASSWORD = "correct-horse"


class RecordingStore:
    """In-memory document store that records every call."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.folders: list[str] = []
        self.files: dict[str, str | bytes] = {}

    async def create_folder(self, folder_name: str) -> dict[str, Any]:
        if self.fail_on == "create_folder":
            raise RuntimeError("folder creation failed")
        self.folders.append(folder_name)
        return {"name": folder_name, "folder": {}}

    async def upload_file(
        self, folder_name: str, file_name: str, content: str | bytes
    ) -> dict[str, Any]:
        if self.fail_on == "upload_file":
            raise RuntimeError("upload failed")
        self.files[f"{folder_name}/{file_name}"] = content
        return {"name": file_name}


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def make_store() -> type[RecordingStore]:
    return RecordingStore


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test SQLite file and upload directory."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret=SecretStr("test-secret-key-with-enough-length-for-hs256"),
        upload_dir=str(tmp_path / "uploads"),
        openai_api_key=None,
    )


@pytest_asyncio.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with all tables on a file-backed SQLite database."""
    assert test_settings.database_url is not None
    engine = create_async_engine(test_settings.database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[User]]:
    """Factory fixture inserting a user with a known password."""

    async def _make_user(role: str = "Bid Creator", name: str = "Test User") -> User:
        async with session_factory() as session:
            user = User(
                user_id=uuid.uuid4(),
                name=name,
                email=f"{uuid.uuid4().hex[:8]}@example.com",
                password_hash=hash_password(TEST_PASSWORD),
                role=role,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


@pytest.fixture
def auth_headers(test_settings: Settings) -> Callable[[User], dict[str, str]]:
    """Build an Authorization header for a user."""

    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(str(user.user_id), user.role, test_settings)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest_asyncio.fixture
async def client(
    test_settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with database and settings overridden."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
