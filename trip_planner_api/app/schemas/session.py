"""Stored session record."""

from datetime import datetime

from .base import ApiModel


class Session(ApiModel):
    """Opaque bearer token bound to a user with an absolute expiry.

    A session is valid while it is present in the store and the current
    time is before ``expires_at``.
    """

    token: str
    user_id: str
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
