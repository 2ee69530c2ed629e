import os
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from portal.core.config import get_settings
from portal.db import session as db_session
from portal.db.base import Base
from portal.models import UserRole
from portal.services import auth as auth_service

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "AdminPass123"
MAX_UPLOAD_BYTES = 1024 * 1024


@pytest.fixture(scope="session", autouse=True)
def configure_environment(tmp_path_factory):
    workdir = tmp_path_factory.mktemp("portal")
    os.environ["ENV"] = "test"
    os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{workdir / 'test.db'}"
    os.environ["JWT_SECRET_KEY"] = "test-secret"
    os.environ["UPLOAD_DIR"] = str(workdir / "uploads")
    os.environ["MAX_UPLOAD_BYTES"] = str(MAX_UPLOAD_BYTES)
    os.environ.pop("ADMIN_EMAIL", None)
    os.environ.pop("ADMIN_PASSWORD", None)
    get_settings.cache_clear()
    db_session.reset_session_factory()
    return workdir


@pytest.fixture(scope="session")
def app_instance(configure_environment):
    from portal.main import create_app

    return create_app()


@pytest.fixture
def upload_dir(app_instance) -> Path:
    return app_instance.state.upload_store.root


@pytest_asyncio.fixture
async def database(app_instance):
    engine = db_session.get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await db_session.dispose_engine()


@pytest_asyncio.fixture
async def client(app_instance, database):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest_asyncio.fixture
async def admin_headers(client):
    session_factory = db_session.get_session_factory()
    async with session_factory() as session:
        await auth_service.create_user(
            session, ADMIN_EMAIL, ADMIN_PASSWORD, "Site Admin", UserRole.ADMIN
        )

    resp = await client.post(
        "/api/auth/admin/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest_asyncio.fixture
async def student(client):
    resp = await client.post(
        "/api/auth/student/register",
        json={
            "email": "Student@Example.com",
            "password": "Student123",
            "full_name": "Asha Devi",
            "class_name": "10",
            "phone": "9800000001",
            "fee_level": "block",
        },
    )
    assert resp.status_code == 201
    data = resp.json()
    return {
        "headers": {"Authorization": f"Bearer {data['token']}"},
        "user": data["user"],
        "registration_number": data["registration_number"],
    }
