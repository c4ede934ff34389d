from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import medilink.db.models  # noqa: F401  registers every table on SQLModel.metadata
from medilink.core.roles import Role, RoleResolver
from medilink.schemas.auth import SignupRequest
from medilink.services.auth_service import AuthService
from medilink.services.tenant_service import TenantService


# ── Helpers / Fakes ──────────────────────────────────────────────────

class FakeTokenStore:
    """In-memory stand-in for the Redis token store."""

    def __init__(self):
        self.sessions = {}

    async def set_session(self, token, value, expire):
        self.sessions[token] = value

    async def get_session(self, token):
        return self.sessions.get(token)

    async def delete_session(self, token):
        return self.sessions.pop(token, None) is not None

    async def close(self):
        pass


class QueryCounter:
    """Records SELECT statements sent to the database cursor."""

    def __init__(self):
        self.statements = []

    def __call__(self, conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            self.statements.append(statement)

    @property
    def count(self):
        return len(self.statements)

    def reset(self):
        self.statements.clear()


# ── Fixtures ─────────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'medilink.db'}")

    # let SQLAlchemy emit BEGIN itself so SAVEPOINTs nest inside a real transaction
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def queries(engine):
    counter = QueryCounter()
    event.listen(engine.sync_engine, "before_cursor_execute", counter)
    yield counter
    event.remove(engine.sync_engine, "before_cursor_execute", counter)


@pytest.fixture
def tokens():
    return FakeTokenStore()


@pytest.fixture
def register(session, tokens):
    """Create an account with a role and its tenant row, return the tenant."""

    async def _register(role: Role, name: str = "Test Tenant", email: str = None):
        auth = AuthService(session, tokens)
        account = await auth.sign_up(
            SignupRequest(
                email=email or f"{role.value}-{uuid4().hex[:8]}@example.com",
                password="secret123",
                full_name=name,
            ),
            role,
        )
        return await TenantService(session).get_tenant(role, account.id)

    return _register


@pytest_asyncio.fixture
async def client(session_factory, tokens):
    from medilink.api.deps import get_role_resolver, get_token_store
    from medilink.db.session import get_session
    from medilink.main import app

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_token_store] = lambda: tokens
    app.dependency_overrides[get_role_resolver] = lambda: RoleResolver(session_factory)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
