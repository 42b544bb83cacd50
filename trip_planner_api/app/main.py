"""
Main entrypoint for the Trip Planner API.

This module assembles the FastAPI application, sets up logging, builds
the entity store and the services that share it, and includes the
versioned routers.  The ``create_app`` function builds and configures
the app, which is then instantiated at module import time as ``app``,
so it can be run with uvicorn, e.g.::

    uvicorn trip_planner_api.app.main:app --reload
"""

from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.security import get_password_hasher
from .core.store import EntityStore
from .services.auth_service import AuthService
from .services.seed_service import seed_demo_data
from .services.session_service import SessionManager, SessionSweeper
from .services.trip_service import TripService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Each call builds its own ``EntityStore`` and services, so separate
    applications (for example one per test) never share state.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings read
        from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    store = EntityStore()
    sessions = SessionManager(store, ttl=timedelta(seconds=settings.session_ttl_seconds))
    hasher = get_password_hasher(settings.password_hasher, settings.password_hash_iterations)
    app.state.settings = settings
    app.state.store = store
    app.state.session_manager = sessions
    app.state.auth_service = AuthService(store, sessions, hasher)
    app.state.trip_service = TripService(store)
    app.state.session_sweeper = SessionSweeper(sessions, settings.session_sweep_interval_seconds)

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        store.open()
        if settings.seed_demo_data:
            await seed_demo_data(app.state.auth_service, app.state.trip_service)
        app.state.session_sweeper.start()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await app.state.session_sweeper.stop()
        store.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
