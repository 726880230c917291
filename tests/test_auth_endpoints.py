"""Tests for authentication endpoints."""

from fastapi.testclient import TestClient

from adcraft.api.app import create_app
from tests.conftest import FakeAuthProvider


def _set_cookie_headers(response) -> dict[str, str]:  # type: ignore[no-untyped-def]
    return {
        header.split("=", 1)[0]: header.lower()
        for header in response.headers.get_list("set-cookie")
    }


def test_signup_login_me_flow(container, auth_provider: FakeAuthProvider) -> None:
    client = TestClient(create_app(container))
    credentials = {"email": "a@b.com", "password": "abcdef"}

    signup = client.post("/auth/signup", json=credentials)

    assert signup.status_code == 201
    body = signup.json()
    assert body["message"] == "Signup successful"
    assert body["user"]["email"] == "a@b.com"

    login = client.post("/auth/login", json=credentials)

    assert login.status_code == 200
    assert login.json() == {"message": "Login successful"}
    cookies = _set_cookie_headers(login)
    assert {"access_token", "refresh_token"} <= set(cookies)
    assert "httponly" in cookies["access_token"]

    me = client.get("/auth/me")

    assert me.status_code == 200
    assert me.json()["user"]["email"] == "a@b.com"
    assert me.json()["user"]["id"] == body["user"]["id"]


def test_signup_rejects_invalid_email(container) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/signup", json={"email": "nope", "password": "abcdef"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email format"}


def test_signup_missing_fields(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/auth/signup", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Email and password are required"}


def test_signup_duplicate_surfaces_provider_status(
    container, auth_provider: FakeAuthProvider
) -> None:
    auth_provider.add_user("a@b.com")
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/signup", json={"email": "a@b.com", "password": "abcdef"}
    )

    assert response.status_code == 422
    assert response.json() == {"error": "User already registered"}


def test_login_wrong_password(container, auth_provider: FakeAuthProvider) -> None:
    auth_provider.add_user("a@b.com", "abcdef")
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "a@b.com", "password": "wrong-pass"}
    )

    assert response.status_code == 400
    assert "error" in response.json()
    assert response.headers.get_list("set-cookie") == []


def test_login_without_session(container, auth_provider: FakeAuthProvider) -> None:
    auth_provider.add_user("a@b.com", "abcdef")
    auth_provider.return_no_session = True
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "a@b.com", "password": "abcdef"}
    )

    assert response.status_code == 500
    assert response.json() == {"error": "No session returned"}


def test_logout_without_cookies_returns_no_content(container) -> None:
    client = TestClient(create_app(container))

    response = client.post("/auth/logout")

    assert response.status_code == 204
    cookies = _set_cookie_headers(response)
    assert "max-age=0" in cookies["access_token"]
    assert "max-age=0" in cookies["refresh_token"]


def test_logout_after_login_clears_cookies(
    container, auth_provider: FakeAuthProvider
) -> None:
    auth_provider.add_user("a@b.com", "abcdef")
    client = TestClient(create_app(container))
    client.post("/auth/login", json={"email": "a@b.com", "password": "abcdef"})

    client.post("/auth/logout")
    me = client.get("/auth/me")

    assert me.status_code == 401
    assert me.json() == {"error": "Not authenticated"}


def test_me_refreshes_expired_access_token(
    container, auth_provider: FakeAuthProvider
) -> None:
    auth_provider.add_user("a@b.com", "abcdef")
    client = TestClient(create_app(container))
    client.post("/auth/login", json={"email": "a@b.com", "password": "abcdef"})
    old_access = client.cookies.get("access_token")
    auth_provider.expire(old_access)

    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@b.com"
    cookies = _set_cookie_headers(response)
    assert "max-age=2592000" in cookies["refresh_token"]
    new_access = client.cookies.get("access_token")
    assert new_access != old_access
    assert client.get("/auth/me").status_code == 200


def test_me_with_invalid_refresh_clears_cookies(container) -> None:
    client = TestClient(create_app(container))
    client.cookies.set("access_token", "stale")
    client.cookies.set("refresh_token", "revoked")

    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Authentication failed"}
    cookies = _set_cookie_headers(response)
    assert "max-age=0" in cookies["access_token"]
    assert "max-age=0" in cookies["refresh_token"]


def test_me_without_cookies(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}
    assert response.headers.get_list("set-cookie") == []
