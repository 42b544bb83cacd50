"""
Health check endpoint.

Publicly accessible.  Reports the configured ping message and the size
of the user and trip collections.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from trip_planner_api.app.core.store import EntityStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ping")
async def ping(request: Request, store: EntityStore = Depends(get_store)) -> Dict[str, Any]:
    stats = store.stats()
    logger.debug("Health check: %s", stats)
    return {
        "message": request.app.state.settings.ping_message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {
            "users": stats["users"],
            "trips": stats["trips"],
            "status": "connected" if store.is_open else "closed",
        },
    }
