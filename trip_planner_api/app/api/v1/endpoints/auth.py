"""
Authentication endpoints for API v1.

Signup and login return the redacted user together with a session
token.  Clients send the token back as ``Authorization: Bearer <token>``
on every later request.  Logout always succeeds.
"""

from fastapi import APIRouter, Depends

from trip_planner_api.app.api.v1.deps import get_auth_service
from trip_planner_api.app.core.security import get_bearer_token, get_current_user
from trip_planner_api.app.schemas.user import (
    AuthResponse,
    MessageResponse,
    UserLogin,
    UserRead,
    UserResponse,
    UserSignup,
)
from trip_planner_api.app.services.auth_service import AuthService

router = APIRouter()


@router.post("/signup", response_model=AuthResponse)
async def signup(
    payload: UserSignup,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Register a new user and open a session.

    Returns 400 when a field is missing, the password is shorter than
    six characters or the email is already registered.
    """
    user, token = await auth.signup(payload.name, payload.email, payload.password)
    return AuthResponse(user=user, session_token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """Authenticate and open a new session; 401 on invalid credentials."""
    user, token = await auth.login(payload.email, payload.password)
    return AuthResponse(user=user, session_token=token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_bearer_token),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(current_user: UserRead = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user=current_user)
