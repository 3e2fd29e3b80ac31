# tests/test_auth.py
# Registration, login, logout and session identity

from sqlalchemy import text

from sales_tracker_api.app.core.config import settings
from sales_tracker_api.app.core.db import get_engine
from sales_tracker_api.app.core.security import hash_password, verify_password


class TestPasswordHashing:
    """bcrypt helpers"""

    def test_hash_verifies(self):
        hashed = hash_password("correct horse")
        assert verify_password("correct horse", hashed)
        assert not verify_password("wrong horse", hashed)

    def test_hash_is_salted(self):
        assert hash_password("same") != hash_password("same")

    def test_default_cost_factor(self, monkeypatch):
        monkeypatch.setattr(settings, "bcrypt_rounds", 10)
        assert hash_password("pw").startswith("$2b$10$")

    def test_malformed_hash_never_verifies(self):
        assert not verify_password("pw", "not-a-bcrypt-hash")
        assert not verify_password("pw", None)


class TestRegister:
    """POST /api/register"""

    def test_register_returns_user(self, client):
        response = client.post(
            "/api/register",
            json={"email": "rep@example.com", "password": "pw123456", "name": "Rep"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == "rep@example.com"
        assert data["user"]["name"] == "Rep"
        assert isinstance(data["user"]["id"], int)

    def test_register_logs_in(self, client, user):
        me = client.get("/api/me").json()
        assert me["user"] == {"id": user["id"], "name": user["name"]}

    def test_password_is_stored_hashed(self, client, user):
        with get_engine().begin() as conn:
            stored = conn.execute(
                text("SELECT password FROM users WHERE id = :id"), {"id": user["id"]}
            ).scalar_one()
        assert stored.startswith("$2b$")
        assert "s3cret-pass" not in stored

    def test_missing_fields(self, client):
        for body in (
            {"email": "a@example.com", "password": "pw"},
            {"email": "a@example.com", "name": "A"},
            {"password": "pw", "name": "A"},
            {"email": "", "password": "pw", "name": "A"},
        ):
            response = client.post("/api/register", json=body)
            assert response.status_code == 400
            assert "required" in response.json()["error"]

    def test_empty_body(self, client):
        response = client.post("/api/register")
        assert response.status_code == 400

    def test_duplicate_email_conflicts(self, client, register_user):
        register_user(client)
        response = client.post(
            "/api/register",
            json={"email": "rep@example.com", "password": "other", "name": "Again"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Email already registered"

    def test_duplicate_email_is_case_insensitive(self, client, register_user):
        register_user(client)
        response = client.post(
            "/api/register",
            json={"email": "REP@example.com", "password": "other", "name": "Again"},
        )
        assert response.status_code == 400


class TestLogin:
    """POST /api/login"""

    def test_login_then_me(self, client, other_client, user):
        response = other_client.post(
            "/api/login", json={"email": "rep@example.com", "password": "s3cret-pass"}
        )
        assert response.status_code == 200
        assert response.json()["user"] == user

        me = other_client.get("/api/me").json()
        assert me["user"]["id"] == user["id"]

    def test_wrong_password(self, client, other_client, user):
        response = other_client.post(
            "/api/login", json={"email": "rep@example.com", "password": "nope"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email or password"
        assert other_client.get("/api/me").json() == {"user": None}

    def test_unknown_email_gives_same_error(self, client):
        response = client.post(
            "/api/login", json={"email": "ghost@example.com", "password": "nope"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid email or password"

    def test_missing_credentials(self, client):
        assert client.post("/api/login", json={}).status_code == 400


class TestLogout:
    """POST /api/logout and GET /api/me"""

    def test_me_without_session(self, client):
        assert client.get("/api/me").json() == {"user": None}

    def test_logout_clears_identity(self, client, user):
        response = client.post("/api/logout")
        assert response.json() == {"success": True}
        assert client.get("/api/me").json() == {"user": None}
        assert client.get("/api/entries").status_code == 401

    def test_logout_is_idempotent(self, client):
        assert client.post("/api/logout").status_code == 200
        assert client.post("/api/logout").status_code == 200

    def test_old_cookie_is_useless_after_logout(self, client, other_client, user):
        cookie = client.cookies.get(settings.session_cookie_name)
        assert cookie
        client.post("/api/logout")

        response = other_client.get(
            "/api/entries", headers={"Cookie": f"{settings.session_cookie_name}={cookie}"}
        )
        assert response.status_code == 401

    def test_webhook_user_cannot_log_in(self, client, monkeypatch):
        monkeypatch.setattr(settings, "webhook_target", "entries")
        client.post("/api/webhook/google-form", json={"role": "Setter"})
        response = client.post(
            "/api/login", json={"email": settings.webhook_user_email, "password": ""}
        )
        assert response.status_code == 400
