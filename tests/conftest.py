from __future__ import annotations

import pytest
from argon2 import PasswordHasher

from api import create_app
from models import storage
from services.member_service import MemberService
from utils.security import Argon2PasswordEncoder


@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    app.config["UPLOAD_DIR"] = str(tmp_path / "upload")
    # Cheap argon2 parameters keep the suite fast
    encoder = Argon2PasswordEncoder(PasswordHasher(time_cost=1, memory_cost=8, parallelism=1))
    app.extensions["member_service"] = MemberService.from_app(app, storage, encoder)
    yield app
    storage.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app) -> MemberService:
    return app.extensions["member_service"]


@pytest.fixture
def register(client):
    def _register(login_id="alice", password="password123", name="Alice", email=None):
        r = client.post(
            "/api/v1/members",
            json={
                "login_id": login_id,
                "password": password,
                "name": name,
                "email": email or f"{login_id}@example.com",
            },
        )
        assert r.status_code == 201, r.get_json()
        return r.get_json()["data"]

    return _register


@pytest.fixture
def login(client):
    def _login(login_id="alice", password="password123"):
        r = client.post("/api/v1/auth/login", json={"login_id": login_id, "password": password})
        assert r.status_code == 200, r.get_json()
        return r.get_json()

    return _login


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
