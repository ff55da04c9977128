from datetime import datetime, timedelta, timezone

from participium.core.settings import settings
from participium.repositories.user_repository import get_user_repository

from conftest import PASSWORD

SIGNUP = {"firstName": "Giulia", "lastName": "Neri", "email": "Giulia@Example.com", "password": "secret123"}


def _code(email):
    return get_user_repository().find_by_email(email)["verification_code"]


class TestSignup:

    def test_signup_verify_login(self, client):
        resp = client.post("/api/citizen/signup", json=SIGNUP)
        assert resp.status_code == 201
        user = resp.json()["user"]
        assert user["email"] == "giulia@example.com"
        assert user["role"] == ["CITIZEN"]
        assert user["isVerified"] is False
        assert "passwordHash" not in user

        login = {"email": "giulia@example.com", "password": "secret123"}
        assert client.post("/api/session", json=login).status_code == 403

        resp = client.post("/api/citizen/verify-email", json={"email": "giulia@example.com", "code": _code("giulia@example.com")})
        assert resp.status_code == 200

        resp = client.post("/api/session", json=login)
        assert resp.status_code == 200
        assert resp.json()["authenticated"] is True
        assert settings.SESSION_COOKIE_NAME in resp.cookies

        session = client.get("/api/session")
        assert session.json()["user"]["email"] == "giulia@example.com"

        client.delete("/api/session")
        client.cookies.clear()
        assert client.get("/api/session").json()["authenticated"] is False

    def test_duplicate_email(self, client):
        client.post("/api/citizen/signup", json=SIGNUP)
        resp = client.post("/api/citizen/signup", json={**SIGNUP, "email": "giulia@example.com"})
        assert resp.status_code == 409
        assert resp.json()["message"] == "Email already in use"

    def test_missing_fields(self, client):
        resp = client.post("/api/citizen/signup", json={"email": "a@example.com"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "BadRequest"

    def test_wrong_code(self, client):
        client.post("/api/citizen/signup", json=SIGNUP)
        wrong = "111111" if _code("giulia@example.com") != "111111" else "222222"
        resp = client.post("/api/citizen/verify-email", json={"email": "giulia@example.com", "code": wrong})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid verification code"

    def test_expired_code(self, client):
        client.post("/api/citizen/signup", json=SIGNUP)
        repo = get_user_repository()
        user = repo.find_by_email("giulia@example.com")
        repo.update(user["id"], {"verification_expires_at": datetime.now(timezone.utc) - timedelta(minutes=1)})

        resp = client.post("/api/citizen/verify-email", json={"email": "giulia@example.com", "code": user["verification_code"]})
        assert resp.status_code == 410

    def test_resend_code_replaces_previous(self, client):
        client.post("/api/citizen/signup", json=SIGNUP)
        assert client.post("/api/citizen/resend-code", json={"email": "giulia@example.com"}).status_code == 200
        assert client.post("/api/citizen/resend-code", json={"email": "nobody@example.com"}).status_code == 404


class TestSession:

    def test_bad_credentials(self, client, citizen):
        resp = client.post("/api/session", json={"email": citizen["email"], "password": "wrong"})
        assert resp.status_code == 401

    def test_staff_login_returns_token(self, client, technical):
        resp = client.post("/api/session", json={"email": technical["email"], "password": PASSWORD})
        token = resp.json()["token"]
        client.cookies.clear()
        me = client.get("/api/session", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["user"]["id"] == technical["id"]

    def test_invalid_token(self, client):
        resp = client.get("/api/reports/mine", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 401


class TestProfile:

    def test_update_profile(self, client, citizen, auth):
        resp = client.patch("/api/citizen/me", json={"telegramUsername": "mrossi", "emailNotificationsEnabled": False},
                            headers=auth(citizen))
        assert resp.status_code == 200
        assert resp.json()["telegramUsername"] == "mrossi"
        assert resp.json()["emailNotificationsEnabled"] is False

    def test_profile_is_for_citizens(self, client, technical, auth):
        assert client.get("/api/citizen/me", headers=auth(technical)).status_code == 403
