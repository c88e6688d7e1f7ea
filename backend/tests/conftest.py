# tests/conftest.py
import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.models  # noqa: F401
from app.core.auth import create_access_token
from app.db.base import Base
from app.main import app as fastapi_app
from app.routes.health import services

TODAY = date(2024, 1, 3)

PATIENT = {"user_id": "patient-1", "email": "pat@example.com"}
OTHER_PATIENT = {"user_id": "patient-2", "email": "other@example.com"}
DOCTOR = {"user_id": "doctor-1", "email": "doc@example.com"}


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def health_app(session_factory, monkeypatch):
    # lifespan doesn't run under ASGITransport, wire the state by hand
    fastapi_app.state.session_factory = session_factory
    monkeypatch.setattr(services, "today", lambda: TODAY)
    return fastapi_app


@pytest.fixture
async def client(health_app):
    transport = httpx.ASGITransport(app=health_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def bearer(user):
    token = create_access_token({"sub": user["user_id"], "email": user["email"]}, timedelta(minutes=5))
    return {"Authorization": f"Bearer {token}"}


class Api:
    """Calls `/api/health?action=...` as a given user."""

    def __init__(self, client):
        self.client = client

    async def get(self, user, action, **params):
        return await self.client.get(
            "/api/health", params={"action": action, **params}, headers=bearer(user)
        )

    async def post(self, user, action, body=None, **params):
        return await self.client.post(
            "/api/health",
            params={"action": action, **params},
            json=body or {},
            headers=bearer(user),
        )

    async def register(self, user, role, name=None, **detail):
        response = await self.post(
            user, "profile.upsert", {"role": role, "name": name, role: detail}
        )
        assert response.status_code == 200, response.text
        return response.json()["profile"]


@pytest.fixture
def api(client):
    return Api(client)


@pytest.fixture
async def patient(api):
    return await api.register(PATIENT, "patient", "Pat Patient", age=34)


@pytest.fixture
async def doctor(api):
    return await api.register(
        DOCTOR, "doctor", "Dr Doc", speciality="Cardiology", languages_spoken="English"
    )


@pytest.fixture
async def linked(api, patient, doctor):
    """Patient and doctor with mutual consent."""
    r1 = await api.post(PATIENT, "link.select", {"doctor_id": DOCTOR["user_id"]})
    r2 = await api.post(DOCTOR, "link.select", {"patient_email": PATIENT["email"]})
    assert r1.status_code == r2.status_code == 200
    return patient, doctor
