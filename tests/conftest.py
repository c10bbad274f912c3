# tests/conftest.py
from datetime import datetime, timedelta, timezone
from itertools import count
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from httpx import AsyncClient
from httpx._transports.asgi import ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from academy.api.models.registration import Registration
from academy.api.security.jwt import ADMIN_SCOPE, create_access_token
from academy.api.services.blob import BlobStorage, get_blob_storage
from academy.core.db.session import get_db
from academy.main import app
from tests.utils import BlobRecorder

ADMIN_PHONE = "9363141888"
ADMIN_PASSWORD = "shuttle-court-7"


@pytest.fixture
def mock_db():
    """Mock AsyncSession; refresh() plays the database assigning id and createdAt."""
    ids = count(1)
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.close = AsyncMock()
    db.add = MagicMock()

    def refresh_side_effect(obj):
        if isinstance(obj, Registration):
            obj.id = next(ids)
            obj.created_at = datetime.now(timezone.utc).replace(tzinfo=None)

    db.refresh = AsyncMock(side_effect=refresh_side_effect)
    return db


@pytest.fixture
def blob_recorder():
    return BlobRecorder()


@pytest.fixture
async def async_client(mock_db, blob_recorder):
    async def override_get_db():
        yield mock_db

    async def override_get_blob_storage():
        async with httpx.AsyncClient(transport=httpx.MockTransport(blob_recorder)) as client:
            yield BlobStorage(client=client, token="test-blob-token", base_url="https://blob.example")

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = override_get_blob_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return create_access_token({"sub": ADMIN_PHONE, "scope": ADMIN_SCOPE})


@pytest.fixture
def expired_admin_token():
    return create_access_token(
        {"sub": ADMIN_PHONE, "scope": ADMIN_SCOPE},
        expires_delta=timedelta(minutes=-5),
    )


@pytest.fixture
def admin_credentials(monkeypatch):
    from academy.core import config as settings
    from starlette.datastructures import Secret

    monkeypatch.setattr(settings, "ADMIN_PHONE", ADMIN_PHONE)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", Secret(ADMIN_PASSWORD))
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "")
    return ADMIN_PHONE, ADMIN_PASSWORD
