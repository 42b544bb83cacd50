"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables, so no ``pydantic_settings`` dependency is
needed.  Defaults are provided for all fields.  Tests and embedding
applications may construct their own ``Settings`` instance and pass it
to ``create_app`` instead of relying on the module-level ``settings``.
"""

import os
from dataclasses import dataclass
from typing import List


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Trip Planner API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api/v1")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Sessions are opaque bearer tokens with an absolute expiry.  The
    # default lifetime is seven days; the sweeper purges expired sessions
    # once an hour whether or not they were ever looked up again.
    session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60)))
    session_sweep_interval_seconds: float = float(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "3600"))

    # ``pbkdf2`` stores salted hashes.  ``plaintext`` keeps the secret as
    # given and exists for compatibility with the legacy demo data.
    password_hasher: str = os.getenv("PASSWORD_HASHER", "pbkdf2")
    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))

    seed_demo_data: bool = _env_flag("SEED_DEMO_DATA", "true")
    ping_message: str = os.getenv("PING_MESSAGE", "pong")

    # Comma-separated list of allowed CORS origins.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
