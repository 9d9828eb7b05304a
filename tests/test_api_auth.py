from __future__ import annotations

from tests.conftest import bearer


def test_health(client):
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.get_json() == {"status": "ok", "database": "ok"}


def test_login_issues_and_stores_tokens(client, service, register, login):
    member = register()
    body = login()

    assert body["data"]["login_id"] == "alice"
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 24 * 60 * 60
    claims = service.token_codec.decode(body["access_token"])
    assert claims == {"id": str(member["id"]), "loginId": "alice", "authorities": ["ROLE_MEMBER"]}
    assert service.read(member["id"]).refresh_token == body["refresh_token"]


def test_login_unknown_member(client):
    r = client.post("/api/v1/auth/login", json={"login_id": "ghost", "password": "password123"})
    assert r.status_code == 404
    assert r.get_json()["error"] == "MEMBER_NOT_FOUND"


def test_login_wrong_password(client, register):
    register()
    r = client.post("/api/v1/auth/login", json={"login_id": "alice", "password": "wrongpass1"})
    assert r.status_code == 401
    assert r.get_json()["error"] == "MEMBER_LOGIN_DENIED"


def test_login_requires_fields(client):
    r = client.post("/api/v1/auth/login", json={"login_id": "alice"})
    assert r.status_code == 422
    assert "password" in r.get_json()["details"]


def test_refresh_returns_new_access_token(client, service, login):
    service.create("admin", "password123", email="admin@example.com")
    tokens = login(login_id="admin")

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert r.status_code == 200
    claims = service.token_codec.decode(r.get_json()["access_token"])
    assert claims["loginId"] == "admin"
    assert claims["authorities"] == ["ROLE_ADMIN"]


def test_second_login_revokes_previous_refresh_token(client, register, login):
    register()
    first = login()["refresh_token"]
    second = login()["refresh_token"]

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": first})
    assert r.status_code == 401
    assert r.get_json()["error"] == "MEMBER_LOGIN_DENIED"

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": second})
    assert r.status_code == 200


def test_refresh_with_expired_token(client, service, register):
    member = register()
    expired = service.token_codec.encode("refresh", -1, {"id": str(member["id"]), "loginId": "alice"})
    service.set_refresh_token(member["id"], expired)

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": expired})

    assert r.status_code == 401
    assert r.get_json()["error"] == "MEMBER_REFRESH_TOKEN_EXPIRED"


def test_logout_clears_refresh_token(client, service, register, login):
    member = register()
    tokens = login()

    r = client.post("/api/v1/auth/logout", headers=bearer(tokens["access_token"]))
    assert r.status_code == 204
    assert service.read(member["id"]).refresh_token is None

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 401


def test_logout_requires_access_token(client, register, login):
    register()
    tokens = login()
    r = client.post("/api/v1/auth/logout", headers=bearer(tokens["refresh_token"]))
    assert r.status_code == 401
    r = client.post("/api/v1/auth/logout")
    assert r.status_code == 401
    assert r.get_json()["error"] == "UNAUTHORIZED"


def test_find_login_id(client, register):
    register(email="Alice@Example.com")
    r = client.post("/api/v1/auth/find-login-id", json={"email": "alice@example.com"})
    assert r.status_code == 200
    assert r.get_json()["data"] == {"login_id": "alice"}

    r = client.post("/api/v1/auth/find-login-id", json={"email": "nobody@example.com"})
    assert r.status_code == 404


def test_temp_password_is_delivered_not_returned(app, client, register, login):
    sent = []
    app.extensions["send_temp_password"] = lambda login_id, email, password: sent.append((login_id, email, password))
    register(login_id="bob", email="bob@x.com")

    r = client.post("/api/v1/auth/temp-password", json={"login_id": "bob", "email": "bob@y.com"})
    assert r.status_code == 404
    assert sent == []

    r = client.post("/api/v1/auth/temp-password", json={"login_id": "bob", "email": "bob@x.com"})
    assert r.status_code == 202
    assert r.get_json() == {"data": {"status": "sent"}}
    assert len(sent) == 1
    login_id, email, temp = sent[0]
    assert (login_id, email) == ("bob", "bob@x.com")
    assert temp not in r.get_data(as_text=True)

    assert login(login_id="bob", password=temp)["data"]["login_id"] == "bob"
    r = client.post("/api/v1/auth/login", json={"login_id": "bob", "password": "password123"})
    assert r.status_code == 401


def test_temp_password_default_hook_keeps_password_out_of_response(app, client, register):
    register(login_id="bob", email="bob@x.com")
    r = client.post("/api/v1/auth/temp-password", json={"login_id": "bob", "email": "bob@x.com"})
    assert r.status_code == 202
    assert "temporary_password" not in r.get_json()["data"]


def test_long_non_ascii_login_id_can_refresh(client, service, register, login):
    login_id = "가" * 50
    member = register(login_id=login_id, email="long@example.com")
    tokens = login(login_id=login_id)
    assert len(tokens["refresh_token"]) > 512
    assert service.read(member["id"]).refresh_token == tokens["refresh_token"]

    r = client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert r.status_code == 200
    assert service.token_codec.decode(r.get_json()["access_token"])["loginId"] == login_id
