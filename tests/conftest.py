"""Test fixtures.

Every test gets a fresh in-memory SQLite database. The application's
database and storage dependencies are overridden to point at it.
"""

import os
import tempfile
from uuid import UUID

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-0123456789-abcdefghijklmnopqrstuvwxyz")
os.environ.setdefault("ENABLE_SCHEDULER", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="workforce-test-"))

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from workforce_api.database import get_db  # noqa: E402
from workforce_api.dependencies import get_file_storage  # noqa: E402
from workforce_api.main import app  # noqa: E402
from workforce_api.models.orm import Base, RoleORM, UserORM, UserRoleORM  # noqa: E402
from workforce_api.security.auth import create_access_token  # noqa: E402
from workforce_api.security.password import get_password_service  # noqa: E402
from workforce_api.services.permission_sync_service import PermissionSyncService  # noqa: E402
from workforce_api.services.storage import LocalFileStorage  # noqa: E402

TEST_PASSWORD = "Passw0rd-test"


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with the schema and system roles."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSession(engine, expire_on_commit=False) as session:
        await PermissionSyncService(session).sync_system_roles()

    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker, tmp_path) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the application with test dependencies."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: LocalFileStorage(str(tmp_path))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user(session_maker) -> Callable[..., Awaitable[UserORM]]:
    """Factory creating a user holding one system role."""

    async def factory(email: str, role_code: str = "SUPER_ADMIN", worksite_id=None) -> UserORM:
        async with session_maker() as session:
            role = (await session.execute(select(RoleORM).where(RoleORM.code == role_code))).scalar_one()
            user = UserORM(
                email=email,
                name=email.split("@")[0],
                password_hash=get_password_service().hash_password(TEST_PASSWORD),
            )
            session.add(user)
            await session.flush()
            if isinstance(worksite_id, str):
                worksite_id = UUID(worksite_id)
            session.add(UserRoleORM(user_id=user.id, role_id=role.id, worksite_id=worksite_id))
            await session.commit()
            return user

    return factory


def auth_headers(user: UserORM) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest_asyncio.fixture
async def admin_headers(create_user) -> dict[str, str]:
    """Bearer headers of a super administrator."""
    return auth_headers(await create_user("admin@example.com"))


@pytest_asyncio.fixture
async def headers_for() -> Callable[[UserORM], dict[str, str]]:
    return auth_headers


@pytest_asyncio.fixture
async def user_password() -> str:
    return TEST_PASSWORD
