"""Caller identity.

Identity comes from an ``IdentityResolver`` chosen once at startup:
``FirebaseIdentityResolver`` verifies Firebase ID tokens, and
``MockIdentityResolver`` accepts fixed ``mock-<role>-token`` bearer tokens
for local development. Both return an ``Identity``; ``get_current_user``
turns that into a ``User`` row, creating it on first sight.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from firebase_admin import auth as firebase_auth

from app.config import init_firebase
from app.core.settings import Settings
from app.exceptions import ForbiddenException, UnauthorizedException
from app.models.user import User, UserRole
from app.services import audit
from app.services.storage import Storage, get_storage

logger = logging.getLogger("app.auth")


@dataclass(frozen=True)
class Identity:
    uid: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Optional[UserRole] = None


def _bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise UnauthorizedException("Authorization header missing or invalid")
    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        raise UnauthorizedException("Authorization header missing or invalid")
    return token


class IdentityResolver(ABC):
    name: str = "base"

    @abstractmethod
    def resolve_identity(self, request: Request) -> Identity:
        """Return the caller's identity or raise UnauthorizedException."""

    def provision(self, storage: Storage, user: User) -> None:
        """Hook run once when a user row is first created."""


class FirebaseIdentityResolver(IdentityResolver):
    name = "firebase"

    def resolve_identity(self, request: Request) -> Identity:
        token = _bearer_token(request)
        try:
            decoded_token = firebase_auth.verify_id_token(token)
        except Exception:
            raise UnauthorizedException("Invalid or expired Firebase token")

        first_name = decoded_token.get("given_name")
        last_name = decoded_token.get("family_name")
        if not (first_name or last_name) and decoded_token.get("name"):
            first_name, _, last_name = decoded_token["name"].partition(" ")

        role = decoded_token.get("role")
        return Identity(
            uid=decoded_token["uid"],
            email=decoded_token.get("email"),
            first_name=first_name or None,
            last_name=last_name or None,
            profile_image_url=decoded_token.get("picture"),
            role=UserRole(role) if role in {r.value for r in UserRole} else None,
        )


MOCK_USERS = {
    UserRole.mentee: Identity(
        uid="mock-mentee-1", email="mentee@example.com",
        first_name="Test", last_name="Mentee", role=UserRole.mentee,
    ),
    UserRole.mentor: Identity(
        uid="mock-mentor-1", email="mentor@example.com",
        first_name="Test", last_name="Mentor", role=UserRole.mentor,
    ),
    UserRole.both: Identity(
        uid="mock-both-1", email="both@example.com",
        first_name="Test", last_name="Both", role=UserRole.both,
    ),
}

MOCK_MENTOR_PROFILE = {
    "title": "Senior Software Engineer",
    "company": "Tech Company",
    "bio": "Mock mentor for local development",
    "expertise": ["career", "technical", "leadership"],
    "weekly_capacity": 5,
    "is_active": True,
}


def mock_token_for(role: UserRole) -> str:
    return f"mock-{role.value}-token"


class MockIdentityResolver(IdentityResolver):
    name = "mock"

    def __init__(self):
        self.tokens = {mock_token_for(role): identity for role, identity in MOCK_USERS.items()}

    def resolve_identity(self, request: Request) -> Identity:
        token = _bearer_token(request)
        identity = self.tokens.get(token)
        if identity is None:
            raise UnauthorizedException("Invalid mock token")
        return identity

    def provision(self, storage: Storage, user: User) -> None:
        if user.role in (UserRole.mentor, UserRole.both) and not storage.get_mentor_profile(user.id):
            storage.create_mentor_profile(user.id, **MOCK_MENTOR_PROFILE)
            logger.info(f"Provisioned mock mentor profile for {user.id}")

    def login(self, storage: Storage, role: UserRole) -> User:
        """Make sure the mock user for ``role`` (and its mentor profile) exists."""
        identity = MOCK_USERS[role]
        user = storage.get_user(identity.uid)
        if not user:
            user = _create_user(storage, identity, self.name)
        self.provision(storage, user)
        return user


def build_identity_resolver(settings: Settings) -> IdentityResolver:
    if settings.use_mock_auth:
        logger.warning("🔓 Using MOCK authentication for local development")
        return MockIdentityResolver()
    init_firebase(settings)
    return FirebaseIdentityResolver()


def get_identity_resolver(request: Request) -> IdentityResolver:
    return request.app.state.identity_resolver


def _create_user(storage: Storage, identity: Identity, auth_mode: str) -> User:
    email = identity.email
    if email and storage.get_user_by_email(email):
        # email belongs to another account; keep the new user but leave email unset
        logger.warning(f"Email {email} already linked to another user; creating {identity.uid} without email")
        email = None
    user = storage.upsert_user(
        identity.uid,
        email=email,
        first_name=identity.first_name,
        last_name=identity.last_name,
        profile_image_url=identity.profile_image_url,
        role=identity.role or UserRole.mentee,
    )
    audit.log_user_created(user.id, role=user.role.value, auth_mode=auth_mode)
    return user


def get_current_user(
    request: Request,
    resolver: IdentityResolver = Depends(get_identity_resolver),
    storage: Storage = Depends(get_storage),
) -> User:
    identity = resolver.resolve_identity(request)
    user = storage.get_user(identity.uid)
    if user:
        return user
    user = _create_user(storage, identity, resolver.name)
    resolver.provision(storage, user)
    return user


def require_reviewer(request: Request, user: User = Depends(get_current_user)) -> User:
    """Gate for application review endpoints.

    With ADMIN_USER_IDS configured only those users may review; otherwise any
    authenticated user can, since there is no admin role on User.
    """
    admin_ids = request.app.state.settings.admin_user_ids
    if admin_ids and user.id not in admin_ids:
        raise ForbiddenException("Admin privileges required")
    return user
