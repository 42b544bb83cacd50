"""
Application package initializer.

The API is organised into ``core`` (configuration, logging, errors,
security and the entity store), ``schemas``, ``services`` and versioned
routers under ``api/<version>/``.
"""

from .main import app  # noqa: F401
