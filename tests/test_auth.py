import pytest
from starlette.requests import Request

from app.core.settings import Settings
from app.exceptions import UnauthorizedException
from app.models.user import UserRole
from app.services.auth import (
    FirebaseIdentityResolver,
    MockIdentityResolver,
    build_identity_resolver,
    get_current_user,
)


def _request(headers: dict) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


def test_get_auth_user_requires_token(client):
    resp = client.get("/api/auth/user")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Authorization header missing or invalid"


def test_get_auth_user_creates_user_on_first_request(client, mentee_headers):
    resp = client.get("/api/auth/user", headers=mentee_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "mock-mentee-1"
    assert body["email"] == "mentee@example.com"
    assert body["role"] == "mentee"
    assert body["mentorProfile"] is None


def test_mock_mentor_gets_profile(client, mentor_headers):
    body = client.get("/api/auth/user", headers=mentor_headers).json()
    assert body["role"] == "mentor"
    assert body["mentorProfile"]["expertise"] == ["career", "technical", "leadership"]


def test_update_auth_user(client, mentee_headers):
    resp = client.patch(
        "/api/auth/user",
        json={"firstName": "Jordan", "profileImageUrl": "https://cdn.example.com/me.png"},
        headers=mentee_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["firstName"] == "Jordan"
    assert body["lastName"] == "Mentee"
    assert body["profileImageUrl"] == "https://cdn.example.com/me.png"


def test_update_auth_user_bad_image_url(client, mentee_headers):
    resp = client.patch("/api/auth/user", json={"profileImageUrl": "ftp://x"}, headers=mentee_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "profileImageUrl must start with http(s)://"


def test_mock_login(client):
    resp = client.get("/api/mock-login/mentor")
    assert resp.status_code == 200
    body = resp.json()
    assert body["token"] == "mock-mentor-token"
    assert body["user"]["id"] == "mock-mentor-1"
    assert body["user"]["mentorProfile"]["title"] == "Senior Software Engineer"

    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["id"] == "mock-mentor-1"


def test_mock_login_unknown_role(client):
    resp = client.get("/api/mock-login/admin")
    assert resp.status_code == 400


def test_login_lists_mock_roles(client):
    body = client.get("/api/login").json()
    assert body["availableRoles"] == ["mentee", "mentor", "both"]


def test_logout(client):
    assert client.get("/api/logout").status_code == 200


def test_correlation_id_is_echoed(client):
    resp = client.get("/api/auth/user", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["X-Correlation-ID"] == "abc-123"
    assert resp.json()["correlation_id"] == "abc-123"


def test_mock_resolver_tokens():
    resolver = MockIdentityResolver()
    identity = resolver.resolve_identity(_request({"Authorization": "Bearer mock-both-token"}))
    assert identity.uid == "mock-both-1"
    assert identity.role == UserRole.both

    with pytest.raises(UnauthorizedException):
        resolver.resolve_identity(_request({"Authorization": "Bearer mock-admin-token"}))
    with pytest.raises(UnauthorizedException):
        resolver.resolve_identity(_request({"Authorization": "Basic abc"}))


def test_firebase_resolver_rejects_bad_token(monkeypatch):
    def _boom(token):
        raise ValueError("bad token")

    monkeypatch.setattr("app.services.auth.firebase_auth.verify_id_token", _boom)
    with pytest.raises(UnauthorizedException):
        FirebaseIdentityResolver().resolve_identity(_request({"Authorization": "Bearer xyz"}))


def test_firebase_identity_becomes_user(monkeypatch, storage):
    monkeypatch.setattr(
        "app.services.auth.firebase_auth.verify_id_token",
        lambda token: {"uid": "fb-42", "email": "pat@acme-corp.com", "name": "Pat Rivera"},
    )
    resolver = FirebaseIdentityResolver()
    user = get_current_user(_request({"Authorization": "Bearer t"}), resolver=resolver, storage=storage)
    assert user.id == "fb-42"
    assert user.first_name == "Pat"
    assert user.last_name == "Rivera"
    assert user.role == UserRole.mentee
    assert user.mentor_profile is None


def test_build_identity_resolver_uses_auth_mode(monkeypatch):
    monkeypatch.setenv("AUTH_MODE", "mock")
    assert isinstance(build_identity_resolver(Settings()), MockIdentityResolver)

    monkeypatch.setenv("AUTH_MODE", "firebase")
    monkeypatch.setattr("app.services.auth.init_firebase", lambda settings: False)
    assert isinstance(build_identity_resolver(Settings()), FirebaseIdentityResolver)


def test_auth_mode_defaults_by_environment(monkeypatch):
    monkeypatch.delenv("AUTH_MODE", raising=False)
    monkeypatch.setenv("ENV", "development")
    assert Settings().use_mock_auth
    monkeypatch.setenv("ENV", "production")
    assert not Settings().use_mock_auth
