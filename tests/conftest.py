"""
Shared fixtures.

Every test gets its own SQLite file. The app's ``get_db`` dependency is
pointed at it, and each signed-in user gets a separate ``TestClient`` so
cookie jars never mix.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

import ideaboard.models  # noqa: F401
from ideaboard.config import settings
from ideaboard.database import Base, build_engine, get_db
from ideaboard.main import app
from ideaboard.models.user import Role, User
from ideaboard.services.passwords import hash_password

PASSWORD = "secret-password"

# Minimum bcrypt cost keeps the suite fast.
settings.BCRYPT_ROUNDS = 4


@pytest.fixture()
def session_factory(tmp_path):
    engine = build_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ideaboard-test.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async def _create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_tables())
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture()
def run_db(session_factory):
    """Run ``await fn(session)`` against the test database and return its result."""

    def _run(fn):
        async def _inner():
            async with session_factory() as session:
                return await fn(session)

        return asyncio.run(_inner())

    return _run


@pytest.fixture()
def count_rows(run_db):
    def _count(model, *criteria):
        async def _query(session):
            stmt = select(func.count()).select_from(model)
            if criteria:
                stmt = stmt.where(*criteria)
            return (await session.execute(stmt)).scalar()

        return run_db(_query)

    return _count


@pytest.fixture()
def api_app(session_factory):
    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def create_user(run_db):
    def _create(email, name=None, role=Role.USER, password=PASSWORD):
        async def _insert(session):
            user = User(
                email=email,
                name=name or email.split("@")[0].title(),
                password_hash=hash_password(password),
                role=role,
            )
            session.add(user)
            await session.commit()
            return user.id

        return run_db(_insert)

    return _create


@pytest.fixture()
def make_client(api_app):
    def _make(email=None, password=PASSWORD):
        client = TestClient(api_app)
        if email:
            response = client.post("/auth/login", json={"email": email, "password": password})
            assert response.status_code == 200, response.text
        return client

    return _make


@pytest.fixture()
def anon_client(make_client):
    return make_client()


@pytest.fixture()
def admin_id(create_user):
    return create_user("admin@example.com", "Ada Admin", Role.ADMIN)


@pytest.fixture()
def admin_client(admin_id, make_client):
    return make_client("admin@example.com")


@pytest.fixture()
def alice_id(create_user):
    return create_user("alice@example.com", "Alice")


@pytest.fixture()
def alice_client(alice_id, make_client):
    return make_client("alice@example.com")


@pytest.fixture()
def bob_id(create_user):
    return create_user("bob@example.com", "Bob")


@pytest.fixture()
def bob_client(bob_id, make_client):
    return make_client("bob@example.com")


@pytest.fixture()
def category_id(admin_client):
    response = admin_client.post(
        "/admin", json={"type": "category", "data": {"name": "UX", "description": "User experience"}}
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


@pytest.fixture()
def submit_idea(category_id):
    def _submit(client, title="Dark mode", description="<p>Add a dark theme.</p>"):
        response = client.post(
            "/ideas",
            json={"title": title, "description": description, "categoryId": category_id},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _submit
