"""
Pydantic schema definitions for API payloads and stored records.

Each domain (users, sessions, trips) defines its own models.  Stored
records that hold secrets (``UserRecord``) have a separate read model
so that the API never exposes them.
"""
