from fastapi import APIRouter, Depends

from app.exceptions import NotFoundException, ValidationException
from app.models.user import User, UserRole
from app.schemas.user import UserUpdate, UserWithProfileOut
from app.services.auth import (
    MOCK_USERS,
    MockIdentityResolver,
    get_current_user,
    get_identity_resolver,
    mock_token_for,
)
from app.services.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Auth"])


@router.get("/auth/user", response_model=UserWithProfileOut)
def get_auth_user(current_user: User = Depends(get_current_user)):
    return UserWithProfileOut.model_validate(current_user)


@router.patch("/auth/user", response_model=UserWithProfileOut)
def update_auth_user(
    payload: UserUpdate,
    current_user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    user = storage.update_user(current_user.id, **payload.model_dump(exclude_unset=True))
    if not user:
        raise NotFoundException("User not found")
    return UserWithProfileOut.model_validate(user)


@router.get("/login")
def login(resolver=Depends(get_identity_resolver)):
    if isinstance(resolver, MockIdentityResolver):
        return {
            "message": "Mock auth is enabled. Use /api/mock-login/{role} to get a token",
            "availableRoles": [role.value for role in MOCK_USERS],
        }
    return {
        "message": "Sign in with Firebase on the client and send the ID token as a Bearer token",
        "provider": resolver.name,
    }


@router.get("/logout")
def logout(resolver=Depends(get_identity_resolver)):
    # tokens are stateless; the client drops its token
    if isinstance(resolver, MockIdentityResolver):
        return {"message": "Logged out, reset to default mentee", "token": mock_token_for(UserRole.mentee)}
    return {"message": "Logged out"}


@router.get("/mock-login/{role}")
def mock_login(
    role: str,
    resolver: MockIdentityResolver = Depends(get_identity_resolver),
    storage: Storage = Depends(get_storage),
):
    if not isinstance(resolver, MockIdentityResolver):
        raise NotFoundException("Mock login is only available with AUTH_MODE=mock")
    if role not in {r.value for r in UserRole}:
        raise ValidationException("Invalid role. Choose: mentee, mentor, or both")
    user = resolver.login(storage, UserRole(role))
    return {
        "message": f"Logged in as {role}",
        "token": mock_token_for(UserRole(role)),
        "user": UserWithProfileOut.model_validate(user).model_dump(mode="json", by_alias=True),
    }
