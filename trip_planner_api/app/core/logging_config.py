"""
Logging configuration for the Trip Planner API.

``setup_logging`` configures the root logger once per process with a
console handler and, when a path is given, a file handler.  Every
handler carries a ``SessionTokenFilter`` so that bearer credentials
which reach a log message (for example through an exception text or a
request header dump) are masked before they are written.  Services that
log a token on purpose pass it through ``mask_token`` first.
"""

import logging
import re
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_BEARER = re.compile(r"(Bearer\s+|sessionToken[\"']?\s*[:=]\s*[\"']?)([A-Za-z0-9_\-]{9,})")


def mask_token(token: Optional[str]) -> str:
    """Return a log-safe prefix of a session token."""
    if not token:
        return "<none>"
    return f"{token[:8]}..."


class SessionTokenFilter(logging.Filter):
    """Rewrite records so that bearer tokens only show their prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _BEARER.sub(lambda m: m.group(1) + mask_token(m.group(2)), message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of an additional log file.  If omitted, only the console
        is used.
    """
    root = logging.getLogger()
    if root.handlers:
        # create_app runs once per test; the first configuration wins.
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    token_filter = SessionTokenFilter()

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(token_filter)
        root.addHandler(handler)
