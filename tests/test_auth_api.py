"""Registration, verification and login endpoints"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from dsa_tracker.backend.config import Settings
from dsa_tracker.backend.security import create_access_token


def _register(client, email="ann@example.com", password="secret1", name="Ann"):
    return client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password},
    )


def _other_code(code: str) -> str:
    return "000000" if code != "000000" else "111111"


def test_register_creates_pending_account(client, email_service):
    """New email → 201, code sent, no token"""
    response = _register(client, email="Ann@Example.COM")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"] == {"requires_verification": True, "email": "ann@example.com"}
    assert "access_token" not in body["data"]
    assert len(email_service.codes["ann@example.com"]) == 6
    assert email_service.codes["ann@example.com"].isdigit()


def test_register_rejects_invalid_input(client):
    """Short password, bad email and blank name are validation errors"""
    for payload in (
        {"name": "Ann", "email": "ann@example.com", "password": "12345"},
        {"name": "Ann", "email": "not-an-email", "password": "secret1"},
        {"name": "   ", "email": "ann@example.com", "password": "secret1"},
        {"name": "x" * 51, "email": "ann@example.com", "password": "secret1"},
    ):
        response = client.post("/auth/register", json=payload)
        assert response.status_code == 400, payload
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "VALIDATION_ERROR"


def test_reregister_unverified_reissues_code(client, email_service):
    """Unverified email → 200, old code replaced, new password applies"""
    assert _register(client, password="secret1").status_code == 201
    first_code = email_service.codes["ann@example.com"]

    response = _register(client, password="secret2", name="Annie")
    assert response.status_code == 200
    second_code = email_service.codes["ann@example.com"]

    if first_code != second_code:
        stale = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": first_code})
        assert stale.json()["error"]["code"] == "INVALID_CODE"

    verified = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": second_code})
    assert verified.status_code == 200
    assert verified.json()["data"]["user"]["name"] == "Annie"

    assert client.post("/auth/login", json={"email": "ann@example.com", "password": "secret1"}).status_code == 400
    assert client.post("/auth/login", json={"email": "ann@example.com", "password": "secret2"}).status_code == 200


def test_register_verified_email_conflicts(client, signup):
    signup()
    response = _register(client)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CONFLICT"


def test_register_undone_when_email_fails(client, email_service):
    """Send failure → 500, and the email stays free for a new registration"""
    email_service.fail = True
    response = _register(client)
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "NOTIFICATION_ERROR"

    email_service.fail = False
    assert _register(client).status_code == 201


def test_reregister_restored_when_email_fails(client, email_service):
    """Send failure on re-registration keeps the previous password and code"""
    _register(client, password="secret1")
    original_code = email_service.codes["ann@example.com"]

    email_service.fail = True
    assert _register(client, password="secret2").status_code == 500

    response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": original_code})
    assert response.status_code == 200
    assert client.post("/auth/login", json={"email": "ann@example.com", "password": "secret1"}).status_code == 200


def test_verify_error_order(client, email_service, signup):
    """Unknown email → 404, wrong code → INVALID_CODE, verified → CONFLICT"""
    response = client.post("/auth/verify-otp", json={"email": "nobody@example.com", "otp": "123456"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"

    _register(client, email="bob@example.com")
    wrong = _other_code(email_service.codes["bob@example.com"])
    response = client.post("/auth/verify-otp", json={"email": "bob@example.com", "otp": wrong})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CODE"

    signup()
    response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": "123456"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "CONFLICT"


def test_verify_rejects_malformed_code(client):
    response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": "12ab"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_verify_expired_code(make_client, email_service):
    """Code is expired once its expiry time is reached"""
    client = make_client(verification_code_expire_minutes=0)
    _register(client)

    response = client.post(
        "/auth/verify-otp",
        json={"email": "ann@example.com", "otp": email_service.codes["ann@example.com"]},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EXPIRED_CODE"


def test_verify_issues_token_and_welcome(client, email_service):
    _register(client)
    response = client.post(
        "/auth/verify-otp",
        json={"email": "ann@example.com", "otp": email_service.codes["ann@example.com"]},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "ann@example.com"
    assert data["user"]["preferences"] == {"dark_mode": False, "notifications": True}
    assert "hashed_password" not in data["user"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == data["user"]["id"]

    # shutdown waits for the detached welcome email
    client.__exit__(None, None, None)
    assert ("welcome", "ann@example.com") in email_service.sent


def test_verify_succeeds_when_welcome_email_fails(client, email_service):
    """A failing welcome email never fails verification"""
    email_service.fail_welcome = True
    _register(client)

    response = client.post(
        "/auth/verify-otp",
        json={"email": "ann@example.com", "otp": email_service.codes["ann@example.com"]},
    )
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]
    assert token

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200

    client.__exit__(None, None, None)
    assert ("welcome", "ann@example.com") in email_service.sent


def test_configured_code_length_is_verifiable(make_client, email_service):
    client = make_client(verification_code_length=8)
    assert _register(client).status_code == 201

    code = email_service.codes["ann@example.com"]
    assert len(code) == 8
    response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": code})
    assert response.status_code == 200


def test_code_length_setting_is_bounded(settings):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, verification_code_length=12)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, verification_code_length=3)


def test_resend_code(client, email_service, signup):
    assert client.post("/auth/resend-otp", json={"email": "nobody@example.com"}).status_code == 404

    _register(client, email="bob@example.com")
    response = client.post("/auth/resend-otp", json={"email": "bob@example.com"})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "bob@example.com"

    signup()
    response = client.post("/auth/resend-otp", json={"email": "ann@example.com"})
    assert response.json()["error"]["code"] == "CONFLICT"


def test_resend_failure_keeps_new_code(client, email_service):
    """Send failure → 500, but the regenerated code is stored and usable"""
    _register(client)
    email_service.fail = True
    response = client.post("/auth/resend-otp", json={"email": "ann@example.com"})
    assert response.status_code == 500
    assert response.json()["error"]["code"] == "NOTIFICATION_ERROR"

    response = client.post(
        "/auth/verify-otp",
        json={"email": "ann@example.com", "otp": email_service.codes["ann@example.com"]},
    )
    assert response.status_code == 200


def test_login_invalid_credentials_same_message(client, signup):
    signup()
    unknown = client.post("/auth/login", json={"email": "nobody@example.com", "password": "secret1"})
    wrong = client.post("/auth/login", json={"email": "ann@example.com", "password": "wrong-password"})

    assert unknown.status_code == wrong.status_code == 400
    assert unknown.json()["error"]["code"] == wrong.json()["error"]["code"] == "INVALID_CREDENTIALS"
    assert unknown.json()["message"] == wrong.json()["message"]


def test_login_unverified_requires_verification(client, email_service):
    """Unverified login → 403 with a fresh code sent"""
    _register(client)
    email_service.sent.clear()

    response = client.post("/auth/login", json={"email": "ann@example.com", "password": "secret1"})
    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "VERIFICATION_REQUIRED"
    assert error["details"] == {"requires_verification": True, "email": "ann@example.com"}
    assert email_service.sent == [("verification", "ann@example.com")]

    response = client.post(
        "/auth/verify-otp",
        json={"email": "ann@example.com", "otp": email_service.codes["ann@example.com"]},
    )
    assert response.status_code == 200


def test_login_unverified_when_code_email_fails(client, email_service):
    """Send failure during login still answers VERIFICATION_REQUIRED with a new code stored"""
    _register(client)
    first_code = email_service.codes["ann@example.com"]
    email_service.fail = True
    email_service.sent.clear()

    response = client.post("/auth/login", json={"email": "ann@example.com", "password": "secret1"})
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "VERIFICATION_REQUIRED"
    assert email_service.sent == []

    new_code = email_service.codes["ann@example.com"]
    if new_code != first_code:
        stale = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": first_code})
        assert stale.json()["error"]["code"] == "INVALID_CODE"

    response = client.post("/auth/verify-otp", json={"email": "ann@example.com", "otp": new_code})
    assert response.status_code == 200


def test_login_verified(client, signup):
    signup()
    response = client.post("/auth/login", json={"email": "ANN@example.com", "password": "secret1"})
    assert response.status_code == 200
    assert response.json()["data"]["access_token"]


def test_me_requires_valid_token(client, settings, signup):
    """Missing, malformed and expired tokens are all 401 UNAUTHORIZED"""
    signup()
    expired = create_access_token(1, settings, expires_delta=timedelta(seconds=-1))

    for headers in (
        {},
        {"Authorization": "Bearer not-a-jwt"},
        {"Authorization": f"Bearer {expired}"},
        {"Authorization": "Basic YW5uOnNlY3JldA=="},
    ):
        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 401, headers
        assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_token_of_unverified_account_rejected(client, settings):
    """A token is only honoured for verified accounts"""
    _register(client)
    token = create_access_token(1, settings)
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"
