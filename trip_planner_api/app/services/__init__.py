"""
Service layer.

Each service encapsulates business logic for a domain and works against
the in-memory ``EntityStore``.  Services are constructed once per
application in ``main.create_app`` and shared through ``app.state``.
"""
