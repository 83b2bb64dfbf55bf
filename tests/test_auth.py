"""
Tests for authentication endpoints and session handling.
"""
import threading
from datetime import timedelta

from fastapi.testclient import TestClient

from content_agent.core.rate_limit import RateLimiter
from content_agent.core.security import create_access_token, hash_token, verify_password
from content_agent.db.models.user import User
from content_agent.db.models.user_session import UserSession
from content_agent.db.models.workspace import Workspace
from content_agent.main import create_app

REGISTER_PAYLOAD = {
    "email": "new.user@example.com",
    "password": "SecurePass123",
    "first_name": "New",
    "last_name": "User",
}


def test_register_success(client, db):
    """Test registration returns a token, the user, and creates a default workspace."""
    response = client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 201
    data = response.json()
    assert data["token"]
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["subscription_plan"] == "free"
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "new.user@example.com").first()
    assert user is not None
    assert user.password_hash != "SecurePass123"
    assert verify_password("SecurePass123", user.password_hash)

    workspaces = db.query(Workspace).filter(Workspace.owner_id == user.id).all()
    assert [w.name for w in workspaces] == ["Personal Workspace"]


def test_register_duplicate_email(client):
    """Test registering an existing email returns 409."""
    assert client.post("/api/auth/register", json=REGISTER_PAYLOAD).status_code == 201

    response = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, "email": "NEW.USER@example.com"})

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_register_validation_errors(client):
    """Test malformed registration input is rejected with 400 before anything is stored."""
    bad_payloads = [
        {**REGISTER_PAYLOAD, "email": "not-an-email"},
        {**REGISTER_PAYLOAD, "password": "short"},
        {**REGISTER_PAYLOAD, "password": "x" * 73},
        {**REGISTER_PAYLOAD, "first_name": "   "},
        {"email": "missing@example.com"},
    ]
    for payload in bad_payloads:
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 400, payload
        assert response.json()["error"] == "validation_error"


def test_login_then_me(client):
    """Test a token from login resolves to the same user on /auth/me."""
    registered = client.post("/api/auth/register", json=REGISTER_PAYLOAD).json()

    response = client.post(
        "/api/auth/login",
        json={"email": REGISTER_PAYLOAD["email"], "password": REGISTER_PAYLOAD["password"]},
    )
    assert response.status_code == 200
    token = response.json()["token"]
    assert token != registered["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == registered["user"]["id"]


def test_login_failures_are_indistinguishable(client):
    """Test unknown email and wrong password produce the same 401."""
    client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    wrong_password = client.post(
        "/api/auth/login", json={"email": REGISTER_PAYLOAD["email"], "password": "WrongPass999"}
    )
    unknown_email = client.post(
        "/api/auth/login", json={"email": "nobody@example.com", "password": "WrongPass999"}
    )

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_tampered_token_rejected(client, registered_user):
    token, _ = registered_user
    tampered = token[:-2] + ("AA" if not token.endswith("AA") else "BB")

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {tampered}"})
    assert response.status_code == 401


def test_expired_token_rejected(client, db, test_user):
    """Test an expired token fails even when a session row matches it."""
    token = create_access_token(test_user.id, timedelta(seconds=-1))
    db.add(UserSession(
        user_id=test_user.id,
        token_hash=hash_token(token),
        expires_at=test_user.created_at + timedelta(days=7),
    ))
    db.commit()

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_without_session_rejected(client, test_user):
    """Test a validly signed token with no session row is rejected."""
    token = create_access_token(test_user.id)

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_logout_revokes_token(client, auth_headers):
    assert client.post("/api/auth/logout", headers=auth_headers).status_code == 200

    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 401


def test_refresh_replaces_all_sessions(client, db, test_user, auth_headers):
    """Test refresh leaves exactly one session and invalidates earlier tokens."""
    second_login = client.post(
        "/api/auth/login", json={"email": "jane@example.com", "password": "SecurePass123"}
    ).json()["token"]

    response = client.post("/api/auth/refresh", headers=auth_headers)
    assert response.status_code == 200
    new_token = response.json()["token"]

    db.expire_all()
    assert db.query(UserSession).filter(UserSession.user_id == test_user.id).count() == 1
    assert client.get("/api/auth/me", headers=auth_headers).status_code == 401
    assert client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {second_login}"}
    ).status_code == 401
    assert client.get(
        "/api/auth/me", headers={"Authorization": f"Bearer {new_token}"}
    ).status_code == 200


def test_update_profile(client, auth_headers):
    response = client.put(
        "/api/auth/me",
        headers=auth_headers,
        json={"first_name": "Janet", "avatar_url": "https://example.com/a.png", "email": "hijack@example.com"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["first_name"] == "Janet"
    assert data["last_name"] == "Doe"
    assert data["avatar_url"] == "https://example.com/a.png"
    assert data["email"] == "jane@example.com"


def test_login_rate_limited(app, client):
    """Test the auth limiter returns 429 once the window is full."""
    app.state.auth_rate_limiter = RateLimiter(max_requests=2, window_seconds=60)
    credentials = {"email": "nobody@example.com", "password": "WrongPass999"}

    assert client.post("/api/auth/login", json=credentials).status_code == 401
    assert client.post("/api/auth/login", json=credentials).status_code == 401

    response = client.post("/api/auth/login", json=credentials)
    assert response.status_code == 429
    assert response.json()["error"] == "rate_limited"
    assert "Maximum 2 requests" in response.json()["detail"]


def test_concurrent_duplicate_registration(tmp_path, provider):
    """Test racing registrations for one email give one 201 and 409s, never a 500."""
    app = create_app(f"sqlite:///{tmp_path / 'register.db'}", provider, run_migrations=False)
    app.state.auth_rate_limiter = RateLimiter(max_requests=100, window_seconds=60)
    payload = {**REGISTER_PAYLOAD, "email": "dup@example.com"}
    codes = []
    start = threading.Barrier(8)

    with TestClient(app) as client:
        def worker():
            start.wait()
            codes.append(client.post("/api/auth/register", json=payload).status_code)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        session = app.state.SessionLocal()
        try:
            assert session.query(User).filter(User.email == "dup@example.com").count() == 1
            assert session.query(Workspace).count() == 1
        finally:
            session.close()

    app.state.engine.dispose()
    assert sorted(codes) == [201] + [409] * 7
