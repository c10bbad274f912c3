import logging
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi import status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from academy.api.models.registration import Registration as RegistrationModel
from academy.api.schemas.registration import RegistrationCreate
from academy.api.services.registration import RegistrationService
from academy.core.errors import PersistenceError
from tests.utils import registration_model_stub, scalars_result

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


# --- Schema tests ---

def test_create_schema_turns_blank_strings_into_none():
    registration_in = RegistrationCreate(**{
        "type": "student",
        "studentName": "Priya Raman",
        "age": "",
        "fatherEmail": "",
        "dob": "",
        "proofType": "",
    })
    assert registration_in.age is None
    assert registration_in.father_email is None
    assert registration_in.dob is None
    assert registration_in.proof_type is None


def test_create_schema_rejects_invalid_email():
    with pytest.raises(ValidationError):
        RegistrationCreate(type="student", studentName="Priya", fatherEmail="not-an-email")


def test_create_schema_rejects_unknown_type_and_long_name():
    with pytest.raises(ValidationError):
        RegistrationCreate(type="coach", studentName="Priya")
    with pytest.raises(ValidationError):
        RegistrationCreate(type="member", studentName="x" * 101)


def test_create_schema_rejects_blank_name():
    """A blank name is normalized to None and then fails as missing."""
    with pytest.raises(ValidationError):
        RegistrationCreate(type="member", studentName="")


def test_create_schema_rejects_whitespace_only_name():
    with pytest.raises(ValidationError):
        RegistrationCreate(type="member", studentName="   ")


def test_create_schema_keeps_name_as_typed():
    registration_in = RegistrationCreate(type="member", studentName=" Alex Kumar ")
    assert registration_in.student_name == " Alex Kumar "


def test_create_schema_keeps_email_as_typed():
    registration_in = RegistrationCreate(
        type="student", studentName="Priya", fatherEmail="Raman@Example.COM"
    )
    assert registration_in.father_email == "Raman@Example.COM"


def test_create_schema_ignores_server_assigned_fields():
    registration_in = RegistrationCreate(
        type="member", studentName="Alex Kumar", id=99, createdAt="2020-01-01T00:00:00"
    )
    dumped = registration_in.model_dump()
    assert "id" not in dumped
    assert "created_at" not in dumped


# --- Service-level tests for academy/api/services/registration.py ---

@pytest.mark.asyncio
async def test_service_get_all_registrations_newest_first():
    db = AsyncMock()
    rows = [
        registration_model_stub(id=2, created_at=datetime(2026, 1, 11)),
        registration_model_stub(id=1, created_at=datetime(2026, 1, 10)),
    ]
    db.execute.return_value = scalars_result(rows)

    registrations = await RegistrationService.get_all_registrations(db)

    assert [r.id for r in registrations] == [2, 1]
    statement = str(db.execute.await_args.args[0])
    assert 'ORDER BY registrations."createdAt" DESC, registrations.id DESC' in statement
    db.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_service_get_all_registrations_empty():
    db = AsyncMock()
    db.execute.return_value = scalars_result([])
    assert await RegistrationService.get_all_registrations(db) == []


@pytest.mark.asyncio
async def test_service_get_all_registrations_db_failure():
    db = AsyncMock()
    db.execute.side_effect = SQLAlchemyError("connection refused")
    with pytest.raises(PersistenceError, match="connection refused"):
        await RegistrationService.get_all_registrations(db)


@pytest.mark.asyncio
async def test_service_create_registration(mock_db):
    registration_in = RegistrationCreate(
        type="student",
        studentName="Priya Raman",
        fatherEmail="raman@example.com",
        motherEmail="",
        studentSignature="Priya Raman",
        declarationDate="2026-01-10",
    )

    registration = await RegistrationService.create_registration(registration_in, mock_db)

    assert registration.id == 1
    assert registration.created_at is not None
    assert registration.type == "student"
    added = mock_db.add.call_args.args[0]
    assert isinstance(added, RegistrationModel)
    assert added.mother_email is None
    assert added.declaration_date == date(2026, 1, 10)
    mock_db.commit.assert_awaited_once()
    mock_db.refresh.assert_awaited_once()


@pytest.mark.asyncio
async def test_service_create_registration_db_commit_failure(mock_db):
    mock_db.commit.side_effect = SQLAlchemyError("Simulated commit error")
    registration_in = RegistrationCreate(type="member", studentName="Alex Kumar")

    with pytest.raises(PersistenceError, match="Simulated commit error"):
        await RegistrationService.create_registration(registration_in, mock_db)

    mock_db.rollback.assert_awaited_once()
    mock_db.refresh.assert_not_awaited()


@pytest.mark.asyncio
async def test_service_create_registration_no_row_returned(mock_db):
    mock_db.refresh = AsyncMock(return_value=None)
    registration_in = RegistrationCreate(type="member", studentName="Alex Kumar")

    with pytest.raises(PersistenceError, match="Insert returned no row"):
        await RegistrationService.create_registration(registration_in, mock_db)


# --- Route tests ---

@pytest.mark.asyncio
async def test_register_member_without_files(async_client, mock_db):
    payload = {"type": "member", "studentName": "Alex Kumar", "studentSignature": "Alex Kumar"}
    response = await async_client.post("/api/register", json=payload)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    logger.debug(f"Register response: {body}")
    assert body["id"] == 1
    assert body["type"] == "member"
    assert body["studentName"] == "Alex Kumar"
    assert "createdAt" in body
    assert "photoUrl" not in body
    assert "proofUrl" not in body


@pytest.mark.asyncio
async def test_register_stores_null_for_blank_fields(async_client, mock_db):
    payload = {
        "type": "student",
        "studentName": "Priya Raman",
        "fatherName": "",
        "fatherEmail": "",
        "area": "Sulur",
        "photoUrl": "https://store.public.blob.example/photo.jpg",
    }
    response = await async_client.post("/api/register", json=payload)

    assert response.status_code == status.HTTP_200_OK
    added = mock_db.add.call_args.args[0]
    assert added.father_name is None
    assert added.father_email is None
    assert added.area == "Sulur"
    assert added.photo_url == "https://store.public.blob.example/photo.jpg"
    assert response.json()["photoUrl"] == "https://store.public.blob.example/photo.jpg"


@pytest.mark.asyncio
async def test_register_invalid_email_is_rejected(async_client, mock_db):
    payload = {"type": "student", "studentName": "Priya", "fatherEmail": "not-an-email"}
    response = await async_client.post("/api/register", json=payload)

    assert response.status_code == 422
    assert response.json()["error"] == "Invalid request"
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
async def test_register_whitespace_name_is_rejected(async_client, mock_db):
    response = await async_client.post("/api/register", json={"type": "member", "studentName": "   "})

    assert response.status_code == 422
    mock_db.add.assert_not_called()


@pytest.mark.asyncio
async def test_register_stores_email_as_typed(async_client, mock_db):
    payload = {"type": "student", "studentName": "Priya", "fatherEmail": "Raman@Example.COM"}
    response = await async_client.post("/api/register", json=payload)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["fatherEmail"] == "Raman@Example.COM"
    assert mock_db.add.call_args.args[0].father_email == "Raman@Example.COM"


@pytest.mark.asyncio
async def test_register_persistence_failure(async_client, mock_db):
    mock_db.commit.side_effect = SQLAlchemyError("duplicate key")
    payload = {"type": "member", "studentName": "Alex Kumar"}
    response = await async_client.post("/api/register", json=payload)

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["error"] == "Failed to save registration"
    assert "duplicate key" in body["details"]


@pytest.mark.asyncio
async def test_register_wrong_method(async_client):
    response = await async_client.get("/api/register")
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_register_without_database(async_client, monkeypatch):
    """No DATABASE_URL: the process keeps serving, the insert fails at call time."""
    from academy.core.db.session import get_db
    from academy.main import app

    monkeypatch.setattr("academy.core.db.session.AsyncSessionLocal", None)
    del app.dependency_overrides[get_db]

    response = await async_client.post("/api/register", json={"type": "member", "studentName": "Alex"})

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["error"] == "Service unavailable"
    assert "DATABASE_URL" in response.json()["details"]


@pytest.mark.asyncio
async def test_list_registrations_requires_token(async_client):
    response = await async_client.get("/api/registrations")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Invalid or missing token"


@pytest.mark.asyncio
async def test_list_registrations_rejects_expired_token(async_client, expired_admin_token):
    response = await async_client.get(
        "/api/registrations", headers={"Authorization": f"Bearer {expired_admin_token}"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"] == "Token expired"


@pytest.mark.asyncio
async def test_list_registrations(async_client, mock_db, admin_token):
    newest = datetime(2026, 1, 11, 8, 0)
    mock_db.execute.return_value = scalars_result([
        registration_model_stub(id=2, type="member", created_at=newest),
        registration_model_stub(id=1, father_email="raman@example.com", created_at=newest - timedelta(days=1)),
    ])

    response = await async_client.get(
        "/api/registrations", headers={"Authorization": f"Bearer {admin_token}"}
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [r["id"] for r in body] == [2, 1]
    assert body[0]["createdAt"] >= body[1]["createdAt"]
    assert body[1]["fatherEmail"] == "raman@example.com"


@pytest.mark.asyncio
async def test_list_registrations_failure(async_client, mock_db, admin_token):
    mock_db.execute.side_effect = SQLAlchemyError("timeout")
    response = await async_client.get(
        "/api/registrations", headers={"Authorization": f"Bearer {admin_token}"}
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"error": "Failed to fetch registrations"}


@pytest.mark.asyncio
async def test_list_registrations_wrong_method(async_client, admin_token):
    response = await async_client.delete(
        "/api/registrations", headers={"Authorization": f"Bearer {admin_token}"}
    )
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
