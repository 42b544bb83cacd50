"""
Demo data.

Creates the demo account and two sample trips on startup so the front
end has something to show before anyone signs up.  Seeding is skipped
when the demo user already exists.
"""

import logging
from datetime import date, datetime, timezone

from ..schemas.trip import TripStatus
from .auth_service import AuthService
from .trip_service import TripService

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@travelgenius.com"
DEMO_PASSWORD = "demo123"

DEMO_TRIPS = [
    {
        "destination": "Paris, France",
        "start_date": date(2024, 6, 15),
        "end_date": date(2024, 6, 20),
        "travelers": 2,
        "budget": 1500,
        "interests": ["Culture", "Food", "History"],
        "status": TripStatus.COMPLETED,
        "thumbnail": "https://images.unsplash.com/photo-1502602898536-47ad22581b52?w=400&h=250&fit=crop",
    },
    {
        "destination": "Tokyo, Japan",
        "start_date": date(2024, 8, 10),
        "end_date": date(2024, 8, 17),
        "travelers": 2,
        "budget": 2500,
        "interests": ["Food", "Culture", "Shopping"],
        "status": TripStatus.UPCOMING,
        "thumbnail": "https://images.unsplash.com/photo-1540959733332-eab4deabeeaf?w=400&h=250&fit=crop",
    },
]


async def seed_demo_data(auth: AuthService, trips: TripService) -> None:
    store = auth.store
    if store.users.find_one_by(email=DEMO_EMAIL) is not None:
        logger.info("Demo data already present")
        return
    user = auth.create_user(
        "Demo User",
        DEMO_EMAIL,
        DEMO_PASSWORD,
        join_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    for fields in DEMO_TRIPS:
        itinerary = trips.itineraries.generate(fields["destination"], fields["start_date"], fields["end_date"])
        await trips.create(user.id, dict(fields), itinerary)
    logger.info("Seeded demo user %s with %d trips", user.id, len(DEMO_TRIPS))
