from datetime import datetime, timedelta, timezone

from clerva.core.security import create_refresh_token

from conftest import DEFAULT_PASSWORD, auth_headers, create_user


def test_signup_creates_user(client):
    payload = {"name": "New Student", "email": "new@example.com", "password": "Sup3rsecure"}
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["email"] == "new@example.com"
    assert "hashed_password" not in body["user"]


def test_signup_rejects_duplicate_email(client, user):
    payload = {"name": "Again", "email": user.email.upper(), "password": "Sup3rsecure"}
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 409
    assert response.json() == {"error": "User with this email already exists"}


def test_signup_rejects_weak_password(client):
    payload = {"name": "Weak", "email": "weak@example.com", "password": "alllowercase"}
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request data"
    assert any(detail["field"].endswith("password") for detail in body["details"])


def test_signup_rejects_blank_name(client):
    payload = {"name": "   ", "email": "blank@example.com", "password": "Sup3rsecure"}
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 400
    assert any(detail["field"].endswith("name") for detail in response.json()["details"])


def test_signup_trims_name(client):
    payload = {"name": "  Ada  ", "email": "ada@example.com", "password": "Sup3rsecure"}
    response = client.post("/api/auth/signup", json=payload)
    assert response.status_code == 201
    assert response.json()["user"]["name"] == "Ada"


def test_signin_returns_tokens_and_cookie(client, user):
    response = client.post(
        "/api/auth/signin", json={"email": user.email, "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["access_token"]
    assert tokens["refresh_token"]
    assert "session_token" in response.cookies


def test_signin_rejects_bad_password(client, user):
    response = client.post("/api/auth/signin", json={"email": user.email, "password": "Wrong123"})
    assert response.status_code == 401
    assert response.json() == {"error": "Incorrect email or password"}


def test_signin_rejects_inactive_account(client, db_session):
    create_user(db_session, "gone@example.com", is_active=False)
    response = client.post(
        "/api/auth/signin", json={"email": "gone@example.com", "password": DEFAULT_PASSWORD}
    )
    assert response.status_code == 401


def test_refresh_issues_new_pair(client, user):
    response = client.post(
        "/api/auth/refresh", json={"refresh_token": create_refresh_token(user.id)}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]


def test_refresh_rejects_access_token(client, user):
    access = auth_headers(user)["Authorization"].split()[1]
    response = client.post("/api/auth/refresh", json={"refresh_token": access})
    assert response.status_code == 401


def test_session_is_null_without_token(client):
    response = client.get("/api/auth/session")
    assert response.status_code == 200
    assert response.json() is None


def test_session_reports_roles(client, founder_headers):
    body = client.get("/api/auth/session", headers=founder_headers).json()
    assert body["user"]["email"] == "founder@clerva.app"
    assert body["user"]["is_founder"] is True
    assert body["user"]["is_admin"] is True
    expires = datetime.fromisoformat(body["expires"].replace("Z", "+00:00"))
    assert expires > datetime.now(timezone.utc) + timedelta(minutes=30)


def test_session_reads_cookie(client, user):
    client.post("/api/auth/signin", json={"email": user.email, "password": DEFAULT_PASSWORD})
    body = client.get("/api/auth/session").json()
    assert body["user"]["id"] == user.id
    assert body["user"]["is_founder"] is False


def test_session_null_for_deleted_user(client, db_session, user, user_headers):
    db_session.delete(user)
    db_session.commit()
    assert client.get("/api/auth/session", headers=user_headers).json() is None


def test_protected_route_requires_session(client):
    response = client.get("/api/user/profile")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_signout_clears_cookie(client, user):
    client.post("/api/auth/signin", json={"email": user.email, "password": DEFAULT_PASSWORD})
    response = client.post("/api/auth/signout")
    assert response.status_code == 200
    assert client.get("/api/auth/session").json() is None
