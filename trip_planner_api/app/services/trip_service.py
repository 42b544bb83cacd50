"""
Business logic for trips.

``TripService`` creates, reads, updates and deletes trips and keeps the
owner's denormalised ``trip_count`` in step.  Every single-trip
operation goes through ``_owned_trip``, which applies the ownership
rule (the requester must be the recorded owner) in one place.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..core.errors import ForbiddenError, NotFoundError, ValidationError
from ..core.store import EntityStore
from ..schemas.trip import STATUS_ORDER, DayPlan, Trip, TripGenerate, TripStatus, TripUpdate
from .itinerary_service import ItineraryService, check_itinerary, itinerary_cost, trip_duration

logger = logging.getLogger(__name__)

THUMBNAIL_URL = "https://images.unsplash.com/search/photos?query={query}&w=400&h=250&fit=crop"

NULLABLE_FIELDS = {"budget", "thumbnail"}


def thumbnail_for(destination: str) -> str:
    return THUMBNAIL_URL.format(query=quote(destination, safe=""))


def owner_of(trip: Trip) -> str:
    return trip.user_id


def is_owner(trip: Trip, requester_id: str) -> bool:
    return owner_of(trip) == requester_id


def check_status_transition(current: TripStatus, new: TripStatus) -> None:
    """Allow only forward moves along planned -> upcoming -> completed."""
    if STATUS_ORDER.index(new) < STATUS_ORDER.index(current):
        raise ValidationError(f"Cannot change trip status from {current.value} to {new.value}")


class TripService:
    """Ownership-checked trip lifecycle operations."""

    def __init__(self, store: EntityStore, itineraries: Optional[ItineraryService] = None) -> None:
        self.store = store
        self.itineraries = itineraries or ItineraryService()

    async def generate(self, owner_id: str, request: TripGenerate) -> Trip:
        """Generate an itinerary for ``request`` and store it as a new trip."""
        if not request.destination or not request.start_date or not request.end_date:
            raise ValidationError("Destination, start date, and end date are required")
        itinerary = self.itineraries.generate(
            request.destination,
            request.start_date,
            request.end_date,
            interests=request.interests,
            budget=request.budget,
        )
        fields = {
            "destination": request.destination,
            "start_date": request.start_date,
            "end_date": request.end_date,
            "travelers": request.travelers,
            "budget": request.budget,
            "interests": request.interests,
        }
        return await self.create(owner_id, fields, itinerary)

    async def create(
        self,
        owner_id: str,
        trip_fields: Dict[str, Any],
        itinerary: List[DayPlan],
        status: TripStatus = TripStatus.PLANNED,
    ) -> Trip:
        """Persist a trip and increment the owner's trip count by one.

        Duration and cost are always derived from the dates and the
        itinerary; values for them in ``trip_fields`` are ignored.
        """
        fields = {k: v for k, v in trip_fields.items() if k not in {"duration", "cost", "user_id"}}
        fields.setdefault("status", status)
        fields.setdefault("thumbnail", thumbnail_for(fields["destination"]))
        duration = trip_duration(fields["start_date"], fields["end_date"])
        cost = itinerary_cost(itinerary)
        with self.store.atomic():
            owner = self.store.users.get(owner_id)
            if owner is None:
                raise NotFoundError("User not found")
            trip = self.store.trips.create(
                user_id=owner_id,
                duration=duration,
                cost=cost,
                itinerary=itinerary,
                **fields,
            )
            self.store.users.update(owner_id, {"trip_count": owner.trip_count + 1})
        logger.info("User %s created trip %s to %s (%d days)", owner_id, trip.id, trip.destination, duration)
        return trip

    def _owned_trip(self, trip_id: str, requester_id: str) -> Trip:
        trip = self.store.trips.get(trip_id)
        if trip is None:
            raise NotFoundError("Trip not found")
        if not is_owner(trip, requester_id):
            logger.warning("User %s denied access to trip %s", requester_id, trip_id)
            raise ForbiddenError("Access denied")
        return trip

    async def get(self, trip_id: str, requester_id: str) -> Trip:
        return self._owned_trip(trip_id, requester_id)

    async def list_for_owner(self, owner_id: str) -> List[Trip]:
        return self.store.trips.find_by(user_id=owner_id)

    async def update(self, trip_id: str, requester_id: str, changes: TripUpdate) -> Trip:
        """Merge the provided fields into the trip.

        Dates are re-validated and duration and cost recomputed so that
        the stored trip keeps its invariants.  Moving the dates without
        sending an itinerary regenerates it; a supplied itinerary must
        cover every trip day in order.  ``budget`` and ``thumbnail`` can
        be cleared with ``null``.  Status may only move forward.
        """
        updates = {
            field: value
            for field, value in changes.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        with self.store.atomic():
            trip = self._owned_trip(trip_id, requester_id)
            if "status" in updates:
                check_status_transition(trip.status, updates["status"])
            start = updates.get("start_date", trip.start_date)
            end = updates.get("end_date", trip.end_date)
            duration = trip_duration(start, end)
            updates["duration"] = duration
            if "itinerary" in updates:
                itinerary = changes.itinerary
            elif (start, end) != (trip.start_date, trip.end_date):
                itinerary = self.itineraries.generate(
                    updates.get("destination", trip.destination),
                    start,
                    end,
                    interests=updates.get("interests", trip.interests),
                    budget=updates.get("budget", trip.budget),
                )
                updates["itinerary"] = itinerary
            else:
                itinerary = None
            if itinerary is not None:
                check_itinerary(itinerary, start, duration)
                updates["cost"] = itinerary_cost(itinerary)
            updated = self.store.trips.update(trip_id, updates)
        logger.info("User %s updated trip %s (%s)", requester_id, trip_id, ", ".join(sorted(updates)))
        return updated

    async def delete(self, trip_id: str, requester_id: str) -> None:
        """Remove the trip and decrement the owner's trip count (never below zero)."""
        with self.store.atomic():
            trip = self._owned_trip(trip_id, requester_id)
            self.store.trips.delete(trip_id)
            owner = self.store.users.get(owner_of(trip))
            if owner is not None and owner.trip_count > 0:
                self.store.users.update(owner.id, {"trip_count": owner.trip_count - 1})
        logger.info("User %s deleted trip %s", requester_id, trip_id)
