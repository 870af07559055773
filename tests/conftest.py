import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from admingate.app import create_app
from admingate.auth.session import TokenIssuer
from admingate.auth.store import AdminStore
from admingate.config import Settings
from admingate.services.auth_service import AuthService

TEST_SECRET = "test-secret-key-0123456789"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(secret_key=TEST_SECRET, data_dir=tmp_path / "data")


@pytest.fixture()
def issuer(settings: Settings) -> TokenIssuer:
    return TokenIssuer(settings.secret_key, ttl=settings.token_ttl)


@pytest.fixture()
def store(settings: Settings) -> AdminStore:
    return AdminStore(settings.admin_path)


@pytest.fixture()
def auth(store: AdminStore, issuer: TokenIssuer) -> AuthService:
    return AuthService(store, issuer)


@pytest.fixture()
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))


@pytest.fixture()
def admin_token(client: TestClient) -> str:
    r = client.post("/api/admin/setup", json={"email": "a@x.com", "password": "longpassword"})
    assert r.status_code == 200
    return r.json()["token"]
