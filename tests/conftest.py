import json
import os
import tempfile

import pytest

_workdir = tempfile.mkdtemp(prefix="lines-tests-")
CREDENTIALS_PATH = os.path.join(_workdir, "credentials.json")

# Settings are read at import time, so the environment goes first.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CREDENTIALS_FILE"] = CREDENTIALS_PATH
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FILE"] = ""
os.environ["DEBUG"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from core.security import get_password_hash  # noqa: E402

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin-password"
RESELLER_USERNAME = "aboselem"
RESELLER_PASSWORD = "reseller-password"
RESELLER_DISPLAY_NAME = "abo selem"
SINGLE_MOBILE = "1012345678"


def write_credentials(path, users):
    with open(path, "w", encoding="utf-8") as fh:
        json.dump({"users": users}, fh, ensure_ascii=False)


write_credentials(CREDENTIALS_PATH, [
    {
        "user_type": "admin",
        "username": ADMIN_USERNAME,
        "password_hash": get_password_hash(ADMIN_PASSWORD),
        "display_name": "Admin",
    },
    {
        "user_type": "multiple",
        "username": RESELLER_USERNAME,
        "password_hash": get_password_hash(RESELLER_PASSWORD),
        "display_name": RESELLER_DISPLAY_NAME,
    },
])

from config.database import Base, SessionLocal, engine, init_database  # noqa: E402
from main import app  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    init_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def _login(client, user_type, username, password=None):
    payload = {"user_type": user_type, "username": username}
    if password is not None:
        payload["password"] = password
    response = client.post("/api/v1/auth/login", json=payload)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", ADMIN_USERNAME, ADMIN_PASSWORD)


@pytest.fixture
def reseller_headers(client):
    return _login(client, "multiple", RESELLER_USERNAME, RESELLER_PASSWORD)


@pytest.fixture
def single_headers(client):
    return _login(client, "single", SINGLE_MOBILE)
