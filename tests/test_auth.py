# AXTRESO/backend/tests/test_auth.py : tests pour l'authentification

from axtreso import auth
from axtreso.config import SESSION_COOKIE_NAME
from axtreso.models import models
from axtreso.services.identity_provider import ExternalIdentity, IdentityProvider, get_identity_provider
from axtreso.main import app
from conftest import MANAGER_PASSWORD, auth_headers, error_code

REGISTRATION = {
    "email": "nouvelle@example.com",
    "password": "Test1234!",
    "salon_name": "Salon Nouvelle",
    "city": "Libreville",
    "phone": "+241 01 23 45 67",
}


class FakeIdentityProvider(IdentityProvider):
    def __init__(self, identity):
        self.identity = identity
        self.calls = []

    async def exchange(self, code, redirect_uri):
        self.calls.append((code, redirect_uri))
        return self.identity


class TestRegisterManager:
    def test_register_creates_user_salon_and_settings(self, client, store):
        """Inscription : compte gérant, salon et réglages par défaut"""
        response = client.post("/api/auth/registerManager", json=REGISTRATION)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True

        user = store.get_user_by_id(data["user_id"])
        assert user.role == "manager"
        assert user.login_method == "email"
        assert user.password_hash != REGISTRATION["password"]
        assert auth.verify_password(REGISTRATION["password"], user.password_hash)

        salons = store.get_salons_by_manager(user.id)
        assert len(salons) == 1
        assert salons[0].name == "Salon Nouvelle"
        assert salons[0].status == "active"

        settings = store.get_notification_settings(salons[0].id)
        assert settings.daily_reminder and settings.inactivity_alert and settings.report_notification

    def test_duplicate_email_is_conflict(self, client, db_session):
        """Un email déjà utilisé donne CONFLICT et une seule ligne en base"""
        assert client.post("/api/auth/registerManager", json=REGISTRATION).status_code == 200

        response = client.post("/api/auth/registerManager", json=REGISTRATION)
        assert response.status_code == 409
        assert error_code(response) == "CONFLICT"

        count = db_session.query(models.User).filter(models.User.email == REGISTRATION["email"]).count()
        assert count == 1

    def test_invalid_payloads_are_bad_request(self, client):
        for field, value in [
            ("email", "pas-un-email"),
            ("password", "court"),
            ("salon_name", "A"),
            ("city", "Douala"),
        ]:
            response = client.post("/api/auth/registerManager", json={**REGISTRATION, field: value})
            assert response.status_code == 400, field
            assert error_code(response) == "BAD_REQUEST"
            assert response.json()["error"]["details"]


class TestLoginManager:
    def test_login_sets_session_cookie(self, client, manager):
        user, _ = manager
        response = client.post("/api/auth/loginManager", json={
            "email": "gerante@example.com",
            "password": MANAGER_PASSWORD,
        })
        assert response.status_code == 200
        assert response.json() == {"success": True, "user_id": user.id}
        assert SESSION_COOKIE_NAME in response.cookies

        # Le cookie suffit pour les appels suivants
        me = client.get("/api/auth/me")
        assert me.json()["id"] == user.id
        assert me.json()["role"] == "manager"

    def test_wrong_password_is_unauthorized(self, client, manager):
        response = client.post("/api/auth/loginManager", json={
            "email": "gerante@example.com",
            "password": "mauvais-mot-de-passe",
        })
        assert response.status_code == 401
        assert error_code(response) == "UNAUTHORIZED"

    def test_unknown_email_is_unauthorized(self, client):
        response = client.post("/api/auth/loginManager", json={
            "email": "inconnu@example.com",
            "password": MANAGER_PASSWORD,
        })
        assert response.status_code == 401

    def test_oauth_account_cannot_use_password(self, client, store):
        """Un compte OAuth n'est jamais utilisable avec un mot de passe"""
        store.create_user(
            open_id="oauth-1", email="oauth@example.com", login_method="oauth",
            password_hash=auth.hash_password(MANAGER_PASSWORD), role="admin",
        )
        response = client.post("/api/auth/loginManager", json={
            "email": "oauth@example.com",
            "password": MANAGER_PASSWORD,
        })
        assert response.status_code == 401

    def test_login_updates_last_signed_in(self, client, manager, db_session):
        user, _ = manager
        before = user.last_signed_in
        client.post("/api/auth/loginManager", json={"email": user.email, "password": MANAGER_PASSWORD})

        db_session.expire_all()
        assert db_session.get(models.User, user.id).last_signed_in >= before


class TestSession:
    def test_me_is_null_for_anonymous(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json() is None

    def test_me_accepts_bearer_token(self, client, manager):
        user, _ = manager
        response = client.get("/api/auth/me", headers=auth_headers(user))
        assert response.json()["email"] == "gerante@example.com"

    def test_invalid_token_is_anonymous(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer pas-un-jeton"})
        assert response.json() is None

    def test_logout_clears_cookie_without_session(self, client):
        """La déconnexion efface le cookie même sans session ouverte"""
        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        set_cookie = response.headers["set-cookie"]
        assert f"{SESSION_COOKIE_NAME}=" in set_cookie
        assert "Max-Age=0" in set_cookie

    def test_logout_ends_session(self, client, manager):
        user, _ = manager
        client.post("/api/auth/loginManager", json={"email": user.email, "password": MANAGER_PASSWORD})
        assert client.get("/api/auth/me").json() is not None

        client.post("/api/auth/logout")
        assert client.get("/api/auth/me").json() is None

    def test_session_token_round_trip(self):
        token = auth.create_session_token(42)
        assert auth.decode_session_token(token) == 42
        assert auth.decode_session_token(token + "x") is None


class TestLoginMethods:
    def test_login_method_of(self):
        manager = models.User(email="a@example.com", password_hash="hash", login_method="email")
        admin = models.User(open_id="abc", login_method="oauth")
        incomplete = models.User(email="b@example.com", login_method="email")

        assert auth.login_method_of(manager) == auth.PasswordLogin(email="a@example.com", password_hash="hash")
        assert auth.login_method_of(admin) == auth.ExternalIdentityLogin(open_id="abc")
        assert auth.login_method_of(incomplete) is None
        assert auth.check_password_login(None, "x") is False


class TestRestForms:
    def test_register_missing_fields(self, client):
        response = client.post("/api/auth/manager/register", json={"email": "x@example.com"})
        assert response.status_code == 400
        assert response.json() == {"error": "Tous les champs sont requis"}

    def test_register_then_duplicate(self, client):
        payload = {k: REGISTRATION[k] for k in ("email", "password", "salon_name", "city")}
        first = client.post("/api/auth/manager/register", json=payload)
        assert first.status_code == 200
        assert first.json()["success"] is True

        second = client.post("/api/auth/manager/register", json=payload)
        assert second.status_code == 409
        assert second.json() == {"error": "Cet email est déjà utilisé"}

    def test_register_rejects_short_password(self, client):
        payload = {**REGISTRATION, "password": "court"}
        response = client.post("/api/auth/manager/register", json=payload)
        assert response.status_code == 400

    def test_register_accepts_camel_case_salon_name(self, client, store):
        payload = {"email": "camel@example.com", "password": "Test1234!", "salonName": "Salon Camel", "city": "Brazzaville"}
        response = client.post("/api/auth/manager/register", json=payload)
        assert response.status_code == 200

        user = store.get_user_by_email("camel@example.com")
        assert store.get_salons_by_manager(user.id)[0].name == "Salon Camel"

    def test_register_rejects_malformed_fields_without_side_effect(self, client, db_session):
        """Champs de mauvais type ou invalides : 400 et aucun compte créé"""
        for field, value in [
            ("email", 123),
            ("email", "pas-un-email"),
            ("password", 12345678),
            ("salon_name", ["liste"]),
            ("city", "Douala"),
            ("phone", "0" * 21),
        ]:
            response = client.post("/api/auth/manager/register", json={**REGISTRATION, field: value})
            assert response.status_code == 400, (field, value)
            assert "error" in response.json()

        assert db_session.query(models.User).count() == 0
        assert db_session.query(models.Salon).count() == 0

    def test_login_rejects_non_string_fields(self, client, manager):
        user, _ = manager
        for payload in (
            {"email": user.email, "password": 12345678},
            {"email": 42, "password": MANAGER_PASSWORD},
            {"email": "pas-un-email", "password": MANAGER_PASSWORD},
        ):
            response = client.post("/api/auth/manager/login", json=payload)
            assert response.status_code == 400, payload
            assert SESSION_COOKIE_NAME not in response.cookies

    def test_json_login(self, client, manager):
        user, _ = manager
        response = client.post("/api/auth/manager/login", json={"email": user.email, "password": MANAGER_PASSWORD})
        assert response.status_code == 200
        assert response.json()["user_id"] == user.id
        assert response.json()["auth"]
        assert SESSION_COOKIE_NAME in response.cookies

        assert client.post("/api/auth/manager/login", json={}).status_code == 400
        bad = client.post("/api/auth/manager/login", json={"email": user.email, "password": "faux"})
        assert bad.status_code == 401

    def test_form_login_redirects_to_dashboard(self, client, manager):
        user, _ = manager
        response = client.post(
            "/api/auth/manager/login-form",
            data={"email": user.email, "password": MANAGER_PASSWORD},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"].startswith("/manager/dashboard?auth=")
        assert SESSION_COOKIE_NAME in response.cookies


class TestOAuthCallback:
    def test_owner_is_promoted_to_admin(self, client, store, monkeypatch):
        monkeypatch.setattr("axtreso.services.store.OWNER_OPEN_ID", "owner-123")
        provider = FakeIdentityProvider(ExternalIdentity(open_id="owner-123", name="Propriétaire"))
        app.dependency_overrides[get_identity_provider] = lambda: provider

        response = client.get("/api/oauth/callback", params={"code": "abc", "state": "xyz"}, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/"
        assert provider.calls[0][0] == "abc"

        user = store.get_user_by_open_id("owner-123")
        assert user.role == "admin"
        assert user.login_method == "oauth"
        assert client.get("/api/auth/me").json()["id"] == user.id

    def test_other_identities_stay_users(self, client, store, db_session):
        provider = FakeIdentityProvider(ExternalIdentity(open_id="visiteur-1", name="Visiteur"))
        app.dependency_overrides[get_identity_provider] = lambda: provider

        client.get("/api/oauth/callback", params={"code": "abc"}, follow_redirects=False)
        client.get("/api/oauth/callback", params={"code": "def"}, follow_redirects=False)

        user = store.get_user_by_open_id("visiteur-1")
        assert user.role == "user"
        assert db_session.query(models.User).filter(models.User.open_id == "visiteur-1").count() == 1

    def test_unconfigured_provider_is_unavailable(self, client):
        response = client.get("/api/oauth/callback", params={"code": "abc"}, follow_redirects=False)
        assert response.status_code == 503
        assert error_code(response) == "UNAVAILABLE"
