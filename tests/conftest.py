"""Pytest configuration and shared fixtures."""

import os


# Settings are read from the environment on first use; pin them before any
# rolegate import.
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-access-secret-0123456789-abcdefghijkl"
os.environ["REFRESH_SECRET_KEY"] = "test-refresh-secret-0123456789-abcdefghij"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Awaitable, Callable, Iterable  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rolegate.config import Settings, get_settings  # noqa: E402
from rolegate.core.auth.schemas import AuthIdentity  # noqa: E402
from rolegate.core.auth.tokens import TokenService  # noqa: E402
from rolegate.core.database import Base, create_session_factory, get_db  # noqa: E402
from rolegate.core.permissions.models import Permission, Role, RolePermission, UserRole  # noqa: E402, F401
from rolegate.core.seeding import SeedReport, create_account, seed_defaults  # noqa: E402
from rolegate.main import create_app  # noqa: E402
from rolegate.modules.permissions.repos import PermissionRepository  # noqa: E402
from rolegate.modules.roles.repos import RoleRepository  # noqa: E402
from rolegate.modules.users.models import RefreshToken, User, UserProfile, UserStatus  # noqa: E402, F401
from rolegate.modules.users.repos import UserRepository  # noqa: E402
from tests.factories.user import VALID_PASSWORD  # noqa: E402


DEFAULT_PASSWORD = VALID_PASSWORD


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with foreign keys and working SAVEPOINTs."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record):
        # Let SQLAlchemy emit BEGIN itself so nested transactions behave
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Session shared by the test body and every request it makes."""
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
def app(db: AsyncSession, settings: Settings):
    """Create test application instance."""
    application = create_app(settings)

    # Override database dependency
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Data Fixtures
# ============================================================


@pytest.fixture
async def seeded(db: AsyncSession, settings: Settings) -> SeedReport:
    """Default roles, the twelve permissions and the super admin."""
    return await seed_defaults(db, settings)


@pytest.fixture
async def super_admin(db: AsyncSession, settings: Settings, seeded: SeedReport) -> User:
    user = await UserRepository(db).get_by_username(settings.super_admin_username)
    assert user is not None
    return user


MakeUser = Callable[..., Awaitable[User]]


@pytest.fixture
def make_user(db: AsyncSession, settings: Settings) -> MakeUser:
    """Factory creating a persisted user with the given role names."""

    async def _make(
        username: str,
        *,
        password: str = DEFAULT_PASSWORD,
        roles: Iterable[str] = (),
        status: UserStatus = UserStatus.ACTIVE,
    ) -> User:
        user = await create_account(
            db,
            settings,
            username=username,
            email=f"{username}@example.com",
            password=password,
            role_names=list(roles),
        )
        if status != UserStatus.ACTIVE:
            user.status = status.value
            await db.flush()
        return user

    return _make


MakeRole = Callable[..., Awaitable[Role]]


@pytest.fixture
def make_role(db: AsyncSession) -> MakeRole:
    """Factory creating a role granting the named (existing) permissions."""

    async def _make(name: str, permissions: Iterable[str] = ()) -> Role:
        roles = RoleRepository(db)
        permission_repo = PermissionRepository(db)
        role = await roles.create(Role(name=name))
        ids = []
        for permission_name in permissions:
            permission = await permission_repo.get_by_name(permission_name)
            assert permission is not None, permission_name
            ids.append(permission.id)
        await roles.grant(role.id, ids)
        return await roles.reload(role.id)

    return _make


@pytest.fixture
def auth_headers(db: AsyncSession, settings: Settings) -> Callable[[User], dict[str, str]]:
    """Build Authorization headers carrying an access token for a user."""
    tokens = TokenService(db, settings)

    def _headers(user: User) -> dict[str, str]:
        token = tokens.issue_access_token(AuthIdentity(user_id=user.id, username=user.username))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
