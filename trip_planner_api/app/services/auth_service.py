"""
Business logic for authentication.

``AuthService`` validates credentials against the user collection,
creates users on signup and issues or revokes sessions through the
``SessionManager``.  Users returned to callers are always the redacted
``UserRead`` view.
"""

import logging
from typing import Optional, Tuple
from urllib.parse import quote

from ..core.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UnauthenticatedError,
    UserNotFoundError,
    ValidationError,
)
from ..core.logging_config import mask_token
from ..core.security import PasswordHasher
from ..core.store import EntityStore, utcnow
from ..schemas.user import UserRead, UserRecord
from .session_service import SessionManager

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def avatar_for(email: str) -> str:
    return AVATAR_URL.format(seed=quote(email, safe="@."))


class AuthService:
    """Signup, login, logout and token resolution."""

    def __init__(self, store: EntityStore, sessions: SessionManager, hasher: PasswordHasher) -> None:
        self.store = store
        self.sessions = sessions
        self.hasher = hasher

    def create_user(self, name: str, email: str, password: str, **extra) -> UserRecord:
        """Insert a user after the uniqueness check; no field validation."""
        with self.store.atomic():
            if self.store.users.find_one_by(email=email) is not None:
                raise DuplicateEmailError("User with this email already exists")
            fields = {
                "avatar": avatar_for(email),
                "join_date": utcnow(),
                "trip_count": 0,
                **extra,
            }
            return self.store.users.create(
                name=name,
                email=email,
                password=self.hasher.hash(password),
                **fields,
            )

    async def signup(
        self, name: Optional[str], email: Optional[str], password: Optional[str]
    ) -> Tuple[UserRead, str]:
        """Register a user and open a session for it.

        Fails with ``ValidationError`` when a field is empty or the secret
        is shorter than six characters, and with ``DuplicateEmailError``
        when the email is already registered (exact, case-sensitive match).
        """
        if not name or not email or not password:
            logger.info("Signup rejected: missing required fields")
            raise ValidationError("Name, email, and password are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            logger.info("Signup rejected: password too short")
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        try:
            user = self.create_user(name, email, password)
        except DuplicateEmailError:
            logger.info("Signup rejected: %s already registered", email)
            raise
        token = self.sessions.create(user.id)
        logger.info("User %s signed up as %s", user.id, user.email)
        return user.to_public(), token

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[UserRead, str]:
        """Check credentials and open a new session.

        An unknown email and a wrong secret raise the same
        ``InvalidCredentialsError``.  Earlier sessions of the user stay
        valid.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")
        user = self.store.users.find_one_by(email=email)
        if user is None or not self.hasher.verify(password, user.password):
            logger.info("Login failed for %s", email)
            raise InvalidCredentialsError("Invalid email or password")
        token = self.sessions.create(user.id)
        logger.info("User %s logged in", user.id)
        return user.to_public(), token

    async def logout(self, token: Optional[str]) -> None:
        if token:
            self.sessions.revoke(token)
        logger.debug("Logout processed for %s", mask_token(token))

    async def current_user(self, token: Optional[str]) -> UserRead:
        """Resolve a session token into the redacted user it belongs to."""
        if not token:
            raise UnauthenticatedError("No session token provided")
        user_id = self.sessions.validate(token)
        user = self.store.users.get(user_id)
        if user is None:
            logger.warning("Session %s refers to missing user %s", mask_token(token), user_id)
            raise UserNotFoundError("User not found")
        return user.to_public()
