"""
Shared pytest fixtures for the complaint portal test suite.

Provides an in-process httpx AsyncClient bound to an app whose Mongo
database is an in-memory mongomock-motor instance, plus helpers that
register and log in citizens.
"""
import httpx
import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from citizen_portal.app_factory import create_app
from citizen_portal.core.config import Settings
from citizen_portal.db.mongo import ensure_indexes
from citizen_portal.services import portal_service

BASE_URL = "http://testserver"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        JWT_SECRET="test-secret",
        MONGO_DB="portal_test",
        PUBLIC_BASE_URL=BASE_URL,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_BYTES=1024,
        LOG_LEVEL="WARNING",
    )


@pytest_asyncio.fixture
async def db():
    database = AsyncMongoMockClient()["portal_test"]
    await ensure_indexes(database)
    return database


@pytest_asyncio.fixture
async def client(settings, db):
    app = create_app(settings, db=db)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as c:
        yield c


async def register(client: httpx.AsyncClient, name: str, email: str, password: str = "pw") -> dict:
    resp = await client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


async def login_headers(client: httpx.AsyncClient, email: str, password: str = "pw") -> dict:
    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"Login failed for {email}: {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['token']}"}


async def rpc(client: httpx.AsyncClient, name: str, args: dict | None = None, headers: dict | None = None):
    return await client.post(f"/api/rpc/{name}", json={"args": args or {}}, headers=headers or {})


@pytest_asyncio.fixture
async def alice(client):
    citizen = await register(client, "Alice", "alice@x.com")
    return citizen, await login_headers(client, "alice@x.com")


@pytest_asyncio.fixture
async def bob(client):
    citizen = await register(client, "Bob", "bob@x.com")
    return citizen, await login_headers(client, "bob@x.com")


@pytest_asyncio.fixture
async def admin(client, db):
    citizen = await register(client, "Ada", "admin@x.com")
    await portal_service.grant_admin(db, citizen["id"])
    return citizen, await login_headers(client, "admin@x.com")
