"""
Trip endpoints for API v1.

Every route in this module sits behind ``get_current_user`` (declared
on the router), so no handler runs for an unauthenticated request.
Single-trip routes are additionally ownership-checked by the trip
service: 404 when the trip does not exist, 403 when it belongs to
someone else.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from trip_planner_api.app.api.v1.deps import get_trip_service
from trip_planner_api.app.core.security import get_current_user
from trip_planner_api.app.schemas.trip import (
    TripGenerate,
    TripGenerateResponse,
    TripListResponse,
    TripResponse,
    TripShareResponse,
    TripUpdate,
)
from trip_planner_api.app.schemas.user import MessageResponse, UserRead
from trip_planner_api.app.services.export_service import ExportService
from trip_planner_api.app.services.trip_service import TripService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/generate", response_model=TripGenerateResponse)
async def generate_trip(
    payload: TripGenerate,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> TripGenerateResponse:
    """Generate an itinerary and save it as a new trip for the caller.

    Destination, start date and end date are required; travelers
    defaults to 1 and interests to an empty list.
    """
    trip = await trips.generate(current_user.id, payload)
    return TripGenerateResponse(trip=trip, itinerary=trip.itinerary)


@router.get("", response_model=TripListResponse)
async def list_trips(
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> TripListResponse:
    return TripListResponse(trips=await trips.list_for_owner(current_user.id))


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: str,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> TripResponse:
    return TripResponse(trip=await trips.get(trip_id, current_user.id))


@router.put("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: str,
    updates: TripUpdate,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> TripResponse:
    """Update an existing trip.

    Partial updates are supported; unspecified fields remain unchanged.
    Status can only move forward (planned, upcoming, completed).
    """
    return TripResponse(trip=await trips.update(trip_id, current_user.id, updates))


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    trip_id: str,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> MessageResponse:
    await trips.delete(trip_id, current_user.id)
    return MessageResponse(message="Trip deleted successfully")


@router.get("/{trip_id}/share", response_model=TripShareResponse)
async def share_trip(
    trip_id: str,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> TripShareResponse:
    trip = await trips.get(trip_id, current_user.id)
    return TripShareResponse(title=ExportService.share_title(trip), text=ExportService.share_text(trip))


@router.get("/{trip_id}/export", response_class=PlainTextResponse)
async def export_trip(
    trip_id: str,
    current_user: UserRead = Depends(get_current_user),
    trips: TripService = Depends(get_trip_service),
) -> PlainTextResponse:
    """Return a printable plain-text version of the itinerary."""
    trip = await trips.get(trip_id, current_user.id)
    filename = f"trip-{trip.id}.txt"
    return PlainTextResponse(
        ExportService.itinerary_text(trip),
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
