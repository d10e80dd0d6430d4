import pytest

from cityat.core.backend_client import BackendError
from cityat.services.auth import (
    login_with_facebook,
    login_with_google,
    logout,
    refresh_session,
    request_otp,
    verify_otp,
)
from conftest import make_product

SESSION = {
    "user": {"id": "u1", "name": "Asha", "email": "asha@example.com", "provider": "google"},
    "token": "access-token",
    "refreshToken": "refresh-token",
}


async def test_phone_otp_login(store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/login", {"otpSent": True})
    fake_backend.add("POST", "/auth/verify-otp", {"token": "otp-token", "refreshToken": "otp-refresh"})
    fake_backend.add("GET", "/users/profile", {"id": "u2", "name": "Ravi", "phone": "9876543210"})

    await request_otp(store, backend_client, "9876543210")
    assert store.auth.pending_phone == "9876543210"
    assert store.auth.is_loading is False

    session = await verify_otp(store, backend_client, "9876543210", "123456")

    assert session.user.id == "u2"
    assert store.auth.is_authenticated is True
    assert store.auth.token == "otp-token"
    assert store.auth.pending_phone is None
    profile_request = fake_backend.calls("GET", "/users/profile")[0]
    assert profile_request.headers["Authorization"] == "Bearer otp-token"


async def test_verify_otp_without_request(store, backend_client):
    with pytest.raises(ValueError, match="No OTP was requested"):
        await verify_otp(store, backend_client, "9876543210", "123456")


async def test_wrong_otp_records_failure(store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/login", {"otpSent": True})
    fake_backend.add("POST", "/auth/verify-otp", "Invalid OTP", status_code=400)
    await request_otp(store, backend_client, "9876543210")

    with pytest.raises(BackendError):
        await verify_otp(store, backend_client, "9876543210", "000000")

    assert store.auth.is_authenticated is False
    assert store.auth.error == "Invalid OTP"
    assert store.auth.is_loading is False


async def test_otp_request_failure(store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/login", "SMS gateway down", status_code=503)

    with pytest.raises(BackendError):
        await request_otp(store, backend_client, "9876543210")

    assert store.auth.error == "Failed to send OTP"


async def test_google_login(store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/google", SESSION)

    session = await login_with_google(store, backend_client, "g-access", "g-id")

    assert session.user.provider == "google"
    assert store.auth.is_authenticated is True
    assert store.auth.refresh_token == "refresh-token"
    body = fake_backend.calls("POST", "/auth/google")[0].read()
    assert b'"idToken":"g-id"' in body.replace(b" ", b"")


async def test_facebook_login_failure(store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/facebook", "Facebook token expired", status_code=401)

    with pytest.raises(BackendError):
        await login_with_facebook(store, backend_client, "fb-token")

    assert store.auth.is_authenticated is False
    assert store.auth.error == "Facebook token expired"


async def test_refresh_session(signed_in_store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/refresh", {"token": "new-token", "refreshToken": "new-refresh"})

    await refresh_session(signed_in_store, backend_client)

    assert signed_in_store.auth.token == "new-token"
    assert signed_in_store.auth.refresh_token == "new-refresh"


async def test_rejected_refresh_signs_out(signed_in_store, backend_client, fake_backend):
    fake_backend.add("POST", "/auth/refresh", "Refresh token expired", status_code=401)

    with pytest.raises(BackendError):
        await refresh_session(signed_in_store, backend_client)

    assert signed_in_store.auth.is_authenticated is False
    assert signed_in_store.auth.token is None


def test_logout_resets_session(signed_in_store):
    signed_in_store.cart.add_item(make_product("p1"), 1)

    logout(signed_in_store)

    assert signed_in_store.auth.is_authenticated is False
    assert signed_in_store.cart.items == []
