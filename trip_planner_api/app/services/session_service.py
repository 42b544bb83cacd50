"""
Session management.

``SessionManager`` mints, validates and revokes opaque session tokens
stored in the ``sessions`` collection of the entity store.  Expired
sessions are removed lazily when they are looked up and eagerly by
``SessionSweeper``, an asyncio task that calls ``sweep`` on a fixed
interval for the lifetime of the application.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..core.errors import SessionExpiredError, SessionNotFoundError
from ..core.logging_config import mask_token
from ..core.security import generate_session_token
from ..core.store import EntityStore, utcnow
from ..schemas.session import Session

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


class SessionManager:
    """Create, validate, revoke and sweep sessions.

    ``clock`` returns the current time as an aware ``datetime``; tests
    replace it to move time forward without sleeping.
    """

    def __init__(
        self,
        store: EntityStore,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
        token_factory: Callable[[], str] = generate_session_token,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.clock = clock
        self._token_factory = token_factory

    def create(self, user_id: str) -> str:
        now = self.clock()
        token = self._token_factory()
        self.store.sessions.insert(
            Session(token=token, user_id=user_id, expires_at=now + self.ttl, created_at=now)
        )
        logger.info("Session %s created for user %s", mask_token(token), user_id)
        return token

    def validate(self, token: str) -> str:
        """Return the user id bound to ``token``.

        Raises ``SessionNotFoundError`` for unknown tokens and
        ``SessionExpiredError`` (after deleting the session) for tokens
        whose expiry has passed.
        """
        session = self.store.sessions.get(token)
        if session is None:
            logger.info("Session %s not found", mask_token(token))
            raise SessionNotFoundError("Invalid or expired session")
        if session.is_expired(self.clock()):
            self.store.sessions.delete(token)
            logger.info("Session %s expired at %s", mask_token(token), session.expires_at.isoformat())
            raise SessionExpiredError("Invalid or expired session")
        return session.user_id

    def revoke(self, token: str) -> bool:
        """Delete the session; unknown tokens are ignored."""
        removed = self.store.sessions.delete(token)
        if removed:
            logger.info("Session %s revoked", mask_token(token))
        return removed

    def sweep(self) -> int:
        """Delete every expired session and return how many were removed."""
        now = self.clock()
        with self.store.atomic():
            expired = [s.token for s in self.store.sessions.all() if s.is_expired(now)]
            for token in expired:
                self.store.sessions.delete(token)
        return len(expired)


class SessionSweeper:
    """Background task that periodically calls ``SessionManager.sweep``."""

    def __init__(self, manager: SessionManager, interval_seconds: float = 3600) -> None:
        self.manager = manager
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="session-sweeper")
        logger.info("Session sweeper started (every %s seconds)", self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                purged = self.manager.sweep()
            except Exception:
                logger.exception("Session sweep failed")
                continue
            if purged:
                logger.info("Session sweep purged %d expired session(s)", purged)
