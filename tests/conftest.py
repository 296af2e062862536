"""Pytest configuration and fixtures for files-manager tests."""
import base64
import time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from files_manager.core.redis_client import SessionStore
from files_manager.core.security import get_password_hash
from files_manager.main import create_app
from files_manager.models.user import User
from files_manager.services.blob_storage import LocalBlobStorage
from files_manager.services.content_service import ContentService
from files_manager.services.credential_store import CredentialStore
from files_manager.services.file_service import FileService
from files_manager.services.listing import ListingService
from files_manager.services.session_manager import SessionManager


class InMemoryRedis:
    """The subset of the redis.asyncio client used by SessionStore."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    def _expired(self, key):
        deadline = self.expiry.get(key)
        if deadline is not None and deadline <= time.monotonic():
            self.data.pop(key, None)
            self.expiry.pop(key, None)
            return True
        return False

    async def ping(self):
        return True

    async def get(self, key):
        if self._expired(key):
            return None
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.expiry[key] = time.monotonic() + ex
        return True

    async def delete(self, key):
        self.expiry.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def aclose(self):
        self.closed = True


def basic_credential(email, password):
    return base64.b64encode(f"{email}:{password}".encode()).decode()


@pytest.fixture
def redis_client():
    return InMemoryRedis()


@pytest_asyncio.fixture
async def session_store(redis_client):
    store = SessionStore(client=redis_client)
    await store.connect()
    yield store


@pytest_asyncio.fixture
async def credential_store(tmp_path):
    store = CredentialStore(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def blob_storage(tmp_path):
    return LocalBlobStorage(str(tmp_path / "files"))


@pytest.fixture
def make_user(credential_store):
    async def _make_user(email="bob@dylan.com", password="toto1234!"):
        user = User(email=email, hashed_password=get_password_hash(password))
        async with credential_store.sessionmaker() as db:
            db.add(user)
            await db.commit()
            await db.refresh(user)
        return user
    return _make_user


@pytest_asyncio.fixture
async def owner(make_user):
    return await make_user("owner@example.com", "owner-pass")


@pytest_asyncio.fixture
async def stranger(make_user):
    return await make_user("stranger@example.com", "stranger-pass")


@pytest.fixture
def session_manager(session_store, credential_store):
    return SessionManager(session_store, credential_store)


@pytest.fixture
def file_service(credential_store, blob_storage):
    return FileService(credential_store, blob_storage)


@pytest.fixture
def listing_service(credential_store):
    return ListingService(credential_store)


@pytest.fixture
def content_service(credential_store, blob_storage):
    return ContentService(credential_store, blob_storage)


@pytest.fixture
def app(session_store, credential_store, blob_storage):
    return create_app(
        session_store=session_store,
        credential_store=credential_store,
        blob_storage=blob_storage,
    )


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
