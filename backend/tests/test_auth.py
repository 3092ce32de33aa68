"""
Registration, login and token verification tests.

Verifies:
- Duplicate email registration is rejected with 400
- Bad credentials get one undifferentiated 401
- Missing tokens get 403, invalid or expired ones 401
- Tokens keep the role they were issued with
"""

from datetime import timedelta

import pytest

from storefront.extensions import db
from storefront.models import User
from storefront.services import auth_service, token_service
from tests.conftest import register, get_auth_token, auth_headers, upload_product


# =============================================================================
# REGISTRATION
# =============================================================================


class TestRegister:

    def test_register_returns_public_fields(self, client):
        resp = register(client, "b@x.com", role="buyer")
        assert resp.status_code == 201
        body = resp.json
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "b@x.com"
        assert body["user"]["role"] == "buyer"
        assert isinstance(body["user"]["id"], int)
        assert "password" not in body["user"]
        assert "password_hash" not in body["user"]

    def test_same_email_twice_conflicts(self, client):
        assert register(client, "b@x.com").status_code == 201
        resp = register(client, "b@x.com", password="other", role="seller")
        assert resp.status_code == 400
        assert resp.json["code"] == "conflict"
        assert resp.json["message"] == "User already exists"

    def test_email_is_case_insensitive(self, client):
        assert register(client, "Mixed@X.com").status_code == 201
        resp = register(client, "mixed@x.com")
        assert resp.status_code == 400
        assert resp.json["code"] == "conflict"

    @pytest.mark.parametrize("role", ["admin", "", "Buyer", None, 1])
    def test_invalid_role(self, client, role):
        resp = client.post("/register", json={"email": "x@x.com", "password": "pw", "role": role})
        assert resp.status_code == 400
        assert resp.json["code"] == "validation_error"

    def test_missing_fields(self, client):
        resp = client.post("/register", json={"email": "x@x.com", "role": "buyer"})
        assert resp.status_code == 400
        assert "password" in resp.json["message"]

    def test_non_json_body(self, client):
        resp = client.post("/register", data="not json", content_type="text/plain")
        assert resp.status_code == 400

    @pytest.mark.parametrize("body", [[1, 2], "abc", 5])
    def test_non_object_json_body(self, client, body):
        resp = client.post("/register", json=body)
        assert resp.status_code == 400
        assert resp.json["code"] == "validation_error"
        assert resp.json["message"] == "Request body must be a JSON object"

    def test_duplicate_committed_by_concurrent_request(self, app, client, monkeypatch):
        assert register(client, "b@x.com").status_code == 201

        # The existence check runs before the other request commits
        monkeypatch.setattr(auth_service, "email_taken", lambda session, email: False)

        resp = register(client, "b@x.com", password="other")
        assert resp.status_code == 400
        assert resp.json["code"] == "conflict"
        with app.app_context():
            assert db.session.query(User).filter_by(email="b@x.com").count() == 1

    def test_password_is_hashed(self, app, client):
        register(client, "b@x.com", password="pw")
        with app.app_context():
            user = db.session.query(User).filter_by(email="b@x.com").one()
            assert user.password_hash != "pw"
            assert user.password_hash.startswith("$2")


# =============================================================================
# LOGIN
# =============================================================================


class TestLogin:

    def test_login_returns_token_and_role(self, client):
        register(client, "s@x.com", role="seller")
        resp = client.post("/login", json={"email": "s@x.com", "password": "pw"})
        assert resp.status_code == 200
        assert resp.json["message"] == "Login successful"
        assert resp.json["role"] == "seller"
        assert isinstance(resp.json["token"], str)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self, client):
        register(client, "b@x.com", password="pw")
        wrong_password = client.post("/login", json={"email": "b@x.com", "password": "nope"})
        unknown_email = client.post("/login", json={"email": "ghost@x.com", "password": "pw"})

        assert wrong_password.status_code == 401
        assert unknown_email.status_code == 401
        assert wrong_password.json == unknown_email.json
        assert wrong_password.json["message"] == "Invalid credentials"

    def test_non_object_json_body(self, client):
        resp = client.post("/login", json=[1, 2])
        assert resp.status_code == 400
        assert resp.json["code"] == "validation_error"

    def test_missing_password(self, client):
        resp = client.post("/login", json={"email": "b@x.com"})
        assert resp.status_code == 400


# =============================================================================
# TOKEN VERIFICATION
# =============================================================================


class TestTokens:

    def test_missing_token_is_403(self, client):
        resp = client.post("/orders", json={"products": [{"id": 1}], "total": 1})
        assert resp.status_code == 403
        assert resp.json["code"] == "auth_required"

    @pytest.mark.parametrize("token", ["garbage", "a.b.c", "Bearer not-a-jwt"])
    def test_invalid_token_is_401(self, client, token):
        resp = client.post("/upload-product", json={"name": "x", "price": 1, "stock": 1},
                           headers={"Authorization": token})
        assert resp.status_code == 401
        assert resp.json["code"] == "invalid_token"

    def test_token_signed_with_other_secret_is_401(self, app, client):
        register(client, "s@x.com", role="seller")
        token = get_auth_token(client, "s@x.com")
        app.config["SECRET_KEY"] = "rotated"
        resp = upload_product(client, auth_headers(token))
        assert resp.status_code == 401

    def test_expired_token_is_401(self, app, client):
        register(client, "s@x.com", role="seller")
        with app.app_context():
            user = db.session.query(User).filter_by(email="s@x.com").one()
            token = token_service.issue_token(user, expires_in=timedelta(seconds=-5))

        resp = upload_product(client, auth_headers(token))
        assert resp.status_code == 401
        assert resp.json["message"] == "Invalid or expired token"

    def test_bearer_prefix_is_accepted(self, client):
        register(client, "s@x.com", role="seller")
        token = get_auth_token(client, "s@x.com")
        resp = upload_product(client, {"Authorization": f"Bearer {token}"})
        assert resp.status_code == 201

    def test_token_keeps_role_from_issuance(self, app, client):
        register(client, "s@x.com", role="seller")
        register(client, "b@x.com", role="buyer")
        seller_token = get_auth_token(client, "s@x.com")
        buyer_token = get_auth_token(client, "b@x.com")

        with app.app_context():
            db.session.query(User).filter_by(email="s@x.com").update({"role": "buyer"})
            db.session.query(User).filter_by(email="b@x.com").update({"role": "seller"})
            db.session.commit()

        assert upload_product(client, auth_headers(seller_token)).status_code == 201
        assert upload_product(client, auth_headers(buyer_token)).status_code == 403

    def test_verify_token_returns_claims(self, app, client):
        register(client, "s@x.com", role="seller")
        token = get_auth_token(client, "s@x.com")
        with app.app_context():
            claims = token_service.verify_token(token)
        assert claims.email == "s@x.com"
        assert claims.role == "seller"
        assert claims.to_dict() == {"id": claims.id, "email": "s@x.com", "role": "seller"}
