"""
Security helpers: password hashing, session tokens and the bearer gate.

Credential secrets are never compared directly by the services.  They go
through a ``PasswordHasher`` chosen by configuration:

* ``Pbkdf2PasswordHasher`` hashes secrets with PBKDF2-HMAC-SHA256 and a
  random 16-byte salt, stored as ``salthex$hashhex``.
* ``PlaintextPasswordHasher`` keeps the secret exactly as given.  It
  reproduces the behaviour of the original demo backend and is only
  meant for local experiments.

Session tokens are opaque random strings; everything about them (owner,
expiry) lives in the session store, not in the token itself.

``get_current_user`` is the FastAPI dependency that every protected
route goes through.  It extracts the ``Authorization: Bearer <token>``
credential, resolves it via the auth service and attaches the resulting
user to ``request.state.user``.
"""

import hashlib
import hmac
import logging
import os
import secrets

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import UnauthenticatedError
from ..schemas.user import UserRead

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Interface for storing and checking credential secrets."""

    scheme = "abstract"

    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, password: str, stored: str) -> bool:
        raise NotImplementedError


class PlaintextPasswordHasher(PasswordHasher):
    scheme = "plaintext"

    def hash(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


class Pbkdf2PasswordHasher(PasswordHasher):
    scheme = "pbkdf2"

    def __init__(self, iterations: int = 100_000) -> None:
        self.iterations = iterations

    def hash(self, password: str) -> str:
        """Hash a password using PBKDF2-HMAC with SHA-256.

        A 16-byte random salt is generated for each password.  The
        resulting string contains the salt and hash separated by a
        ``$`` (salt in hex, then hash in hex).

        Parameters
        ----------
        password : str
            The plain text password to hash.

        Returns
        -------
        str
            Salt and hash concatenated with ``$``.
        """
        salt = os.urandom(16)
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, self.iterations)
        return f"{salt.hex()}${dk.hex()}"

    def verify(self, password: str, stored: str) -> bool:
        """Verify a plain password against a stored salt+hash string.

        Splits the stored string into salt and hash, recomputes the
        PBKDF2-HMAC digest and compares it in constant time.  Malformed
        stored values never match.
        """
        salt_hex, sep, hash_hex = stored.partition("$")
        if not sep:
            return False
        try:
            salt = bytes.fromhex(salt_hex)
            stored_hash = bytes.fromhex(hash_hex)
        except ValueError:
            return False
        dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, self.iterations)
        return hmac.compare_digest(dk, stored_hash)


def get_password_hasher(scheme: str, iterations: int = 100_000) -> PasswordHasher:
    """Return the hasher configured by ``scheme`` (``pbkdf2`` or ``plaintext``)."""
    scheme = scheme.lower()
    if scheme == PlaintextPasswordHasher.scheme:
        logger.warning("Credential secrets are stored in plain text")
        return PlaintextPasswordHasher()
    if scheme == Pbkdf2PasswordHasher.scheme:
        return Pbkdf2PasswordHasher(iterations=iterations)
    raise ValueError(f"Unknown password hasher: {scheme}")


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


security = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UserRead:
    """Dependency that retrieves the current authenticated user.

    If the request does not carry a bearer token, the request is
    rejected with ``UnauthenticatedError`` before any handler runs.
    Otherwise the token is resolved exactly as ``AuthService.current_user``
    resolves it, and the redacted user is attached to the request state
    for downstream handlers.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required")
    user = await request.app.state.auth_service.current_user(credentials.credentials)
    request.state.user = user
    return user


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Return the bearer token, or an empty string when none was sent."""
    if credentials is None:
        return ""
    return credentials.credentials
