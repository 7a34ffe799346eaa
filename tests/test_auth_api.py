"""HTTP-level tests for the account endpoints."""

from fastapi.testclient import TestClient

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, auth_header, register_and_login
from devsphere.core.app_factory import create_application
from devsphere.core.config import Settings
from devsphere.domain.models import Role


def _error(resp):
    return resp.json()["detail"]


def _request_otp(client, notifier, email):
    resp = client.post("/forgot-password", json={"email": email})
    assert resp.status_code == 200
    return notifier.send_password_reset_otp.call_args.args[1]


class TestRegisterAndLogin:
    def test_register_returns_public_projection(self, client):
        resp = client.post(
            "/register",
            json={"email": "a@x.com", "password": "pw123456", "firstname": "Ada"},
        )
        assert resp.status_code == 201
        assert resp.json() == {"message": "User registered", "email": "a@x.com", "roles": ["USER"]}

    def test_duplicate_register_is_400(self, client):
        register_and_login(client)
        resp = client.post("/register", json={"email": "a@x.com", "password": "other"})
        assert resp.status_code == 400
        assert _error(resp) == {"message": "Email exists", "code": "EMAIL_EXISTS"}

    def test_malformed_payloads_are_400(self, client):
        assert client.post("/register", json={"email": "not-an-email", "password": "pw"}).status_code == 400
        assert client.post("/register", json={"email": "a@x.com"}).status_code == 400
        assert client.post("/register", json={"email": "a@x.com", "password": ""}).status_code == 400
        resp = client.post("/login", json={})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request payload"

    def test_login_returns_camel_case_tokens(self, client):
        body = register_and_login(client)
        assert body["message"] == "success"
        assert body["email"] == "a@x.com"
        assert body["roles"] == ["USER"]
        assert body["accessToken"] and body["refreshToken"]
        assert body["accessToken"] != body["refreshToken"]

    def test_login_failures_share_one_response(self, client):
        register_and_login(client)
        wrong_password = client.post("/login", json={"email": "a@x.com", "password": "nope"})
        unknown_email = client.post("/login", json={"email": "ghost@x.com", "password": "nope"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert _error(wrong_password)["message"] == "Invalid credentials"


class TestProtectedRoutes:
    def test_me_requires_token(self, client):
        resp = client.get("/me")
        assert resp.status_code == 401
        assert _error(resp) == {"message": "No token provided", "code": "TOKEN_MISSING"}

    def test_non_bearer_scheme_counts_as_missing(self, client):
        resp = client.get("/me", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401
        assert _error(resp)["code"] == "TOKEN_MISSING"

    def test_garbage_token_is_invalid(self, client):
        resp = client.get("/me", headers=auth_header("garbage"))
        assert resp.status_code == 401
        assert _error(resp)["code"] == "TOKEN_INVALID"

    def test_refresh_token_cannot_access_me(self, client):
        tokens = register_and_login(client)
        resp = client.get("/me", headers=auth_header(tokens["refreshToken"]))
        assert resp.status_code == 401

    def test_me_returns_profile(self, client):
        tokens = register_and_login(client)
        resp = client.get("/me", headers=auth_header(tokens["accessToken"]))
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "ok"
        assert body["email"] == "a@x.com"
        assert body["roles"] == ["USER"]
        assert body["id"]
        assert "passwordHash" not in body and "password_hash" not in body

    def test_update_me_changes_names(self, client):
        tokens = register_and_login(client)
        resp = client.put(
            "/me",
            json={"firstname": "Grace", "lastname": "Hopper"},
            headers=auth_header(tokens["accessToken"]),
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "updated"
        assert (resp.json()["firstname"], resp.json()["lastname"]) == ("Grace", "Hopper")

    def test_update_me_password_rules(self, client):
        tokens = register_and_login(client)
        headers = auth_header(tokens["accessToken"])

        resp = client.put("/me", json={"newPassword": "newpassword"}, headers=headers)
        assert resp.status_code == 400
        assert _error(resp)["message"] == "Current password is required"

        resp = client.put(
            "/me", json={"currentPassword": "pw123456", "newPassword": "short"}, headers=headers
        )
        assert resp.status_code == 400

        resp = client.put(
            "/me", json={"currentPassword": "pw123456", "newPassword": "newpassword"}, headers=headers
        )
        assert resp.status_code == 200
        assert client.post("/login", json={"email": "a@x.com", "password": "newpassword"}).status_code == 200

    def test_update_me_to_taken_email_is_400(self, client):
        register_and_login(client, email="b@x.com")
        tokens = register_and_login(client)
        resp = client.put(
            "/me", json={"email": "b@x.com"}, headers=auth_header(tokens["accessToken"])
        )
        assert resp.status_code == 400
        assert _error(resp)["code"] == "EMAIL_EXISTS"


class TestAdminRegistration:
    def test_plain_user_is_forbidden(self, client):
        tokens = register_and_login(client)
        resp = client.post(
            "/admin/register",
            json={"email": "boss@x.com", "password": "pw123456"},
            headers=auth_header(tokens["accessToken"]),
        )
        assert resp.status_code == 403
        assert _error(resp) == {"message": "Forbidden", "code": "FORBIDDEN"}

    def test_user_holding_admin_among_roles_is_admitted(self, client):
        register_and_login(client)
        store = client.app.state.container.persistence
        user = store.find_by_email("a@x.com")
        user.roles = frozenset({Role.USER, Role.ADMIN})
        store.save(user)

        tokens = client.post("/login", json={"email": "a@x.com", "password": "pw123456"}).json()
        assert tokens["roles"] == ["USER", "ADMIN"]
        resp = client.post(
            "/admin/register",
            json={"email": "boss@x.com", "password": "pw123456"},
            headers=auth_header(tokens["accessToken"]),
        )
        assert resp.status_code == 201

    def test_requires_token(self, client):
        resp = client.post("/admin/register", json={"email": "boss@x.com", "password": "pw123456"})
        assert resp.status_code == 401

    def test_bootstrap_admin_can_register_admins(self, client):
        login = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert login.status_code == 200
        assert login.json()["roles"] == ["ADMIN"]

        resp = client.post(
            "/admin/register",
            json={"email": "boss@x.com", "password": "pw123456"},
            headers=auth_header(login.json()["accessToken"]),
        )
        assert resp.status_code == 201
        assert resp.json() == {"message": "Admin registered", "email": "boss@x.com", "roles": ["ADMIN"]}


class TestRefresh:
    def test_refresh_issues_new_access_token(self, client):
        tokens = register_and_login(client)
        resp = client.post("/refresh", json={"token": tokens["refreshToken"]})
        assert resp.status_code == 200
        access = resp.json()["accessToken"]
        assert client.get("/me", headers=auth_header(access)).status_code == 200

    def test_missing_token_is_400(self, client):
        assert client.post("/refresh", json={}).status_code == 400
        assert client.post("/refresh", json={"token": ""}).status_code == 400

    def test_access_token_is_not_a_refresh_token(self, client):
        tokens = register_and_login(client)
        resp = client.post("/refresh", json={"token": tokens["accessToken"]})
        assert resp.status_code == 403
        assert _error(resp)["message"] == "Invalid or expired token"


class TestPasswordReset:
    def test_forgot_password_bodies_do_not_reveal_accounts(self, client, notifier):
        register_and_login(client)
        known = client.post("/forgot-password", json={"email": "a@x.com"})
        unknown = client.post("/forgot-password", json={"email": "ghost@x.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert notifier.send_password_reset_otp.call_count == 1

    def test_forgot_password_survives_mailer_failure(self, client, notifier):
        register_and_login(client)
        notifier.send_password_reset_otp.side_effect = RuntimeError("smtp down")
        resp = client.post("/forgot-password", json={"email": "a@x.com"})
        assert resp.status_code == 200

    def test_full_reset_flow(self, client, notifier):
        register_and_login(client)
        otp = _request_otp(client, notifier, "a@x.com")

        resp = client.post("/verify-otp", json={"email": "a@x.com", "otp": otp})
        assert resp.status_code == 200
        assert resp.json() == {"message": "OTP verified successfully"}

        resp = client.post(
            "/reset-password", json={"email": "a@x.com", "otp": otp, "password": "reset-pw-1"}
        )
        assert resp.status_code == 200
        assert resp.json() == {"message": "Password updated successfully"}

        assert client.post("/login", json={"email": "a@x.com", "password": "reset-pw-1"}).status_code == 200
        assert client.post("/login", json={"email": "a@x.com", "password": "pw123456"}).status_code == 401

        again = client.post(
            "/reset-password", json={"email": "a@x.com", "otp": otp, "password": "reset-pw-2"}
        )
        assert again.status_code == 400
        assert _error(again)["code"] == "INVALID_OR_EXPIRED_OTP"

    def test_numeric_otp_is_accepted(self, client, notifier):
        register_and_login(client)
        otp = _request_otp(client, notifier, "a@x.com")
        resp = client.post("/verify-otp", json={"email": "a@x.com", "otp": int(otp)})
        assert resp.status_code == 200

    def test_wrong_otp_is_400(self, client, notifier):
        register_and_login(client)
        otp = _request_otp(client, notifier, "a@x.com")
        wrong = "100000" if otp != "100000" else "100001"
        resp = client.post("/verify-otp", json={"email": "a@x.com", "otp": wrong})
        assert resp.status_code == 400
        assert _error(resp)["code"] == "INVALID_OR_EXPIRED_OTP"

    def test_reset_requires_all_fields(self, client):
        resp = client.post("/reset-password", json={"email": "a@x.com", "otp": "123456"})
        assert resp.status_code == 400


def test_missing_jwt_secret_is_a_server_error(settings, monkeypatch, notifier):
    monkeypatch.setenv("JWT_SECRET", "")
    app = create_application(Settings(), email_service=notifier)
    with TestClient(app) as test_client:
        resp = test_client.get("/me", headers=auth_header("anything"))
        assert resp.status_code == 500
        assert _error(resp)["message"] == "JWT secret not configured"

        test_client.post("/register", json={"email": "a@x.com", "password": "pw123456"})
        login = test_client.post("/login", json={"email": "a@x.com", "password": "pw123456"})
        assert login.status_code == 500


def test_health_reports_generator_state(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "generator": True}
