"""
Pydantic models for trips and their itineraries.

A ``Trip`` owns an ordered list of ``DayPlan`` entries, each of which
holds an ordered list of ``Activity`` entries.  Cost and duration on
activities are display labels (``"$15"``, ``"Free"``, ``"2 hours"``);
the trip-level ``cost`` is the numeric sum of the daily totals.
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import ApiModel


class ActivityType(str, Enum):
    ATTRACTION = "attraction"
    RESTAURANT = "restaurant"
    ACTIVITY = "activity"
    TRANSPORT = "transport"


class TripStatus(str, Enum):
    PLANNED = "planned"
    UPCOMING = "upcoming"
    COMPLETED = "completed"


# Forward order of the advisory trip lifecycle.
STATUS_ORDER = [TripStatus.PLANNED, TripStatus.UPCOMING, TripStatus.COMPLETED]


class Activity(ApiModel):
    time: str = Field(..., examples=["9:00 AM"])
    title: str
    description: str
    duration: str = Field(..., examples=["2 hours"])
    cost: str = Field(..., examples=["$15", "Free"])
    type: ActivityType
    rating: Optional[float] = None


class DayPlan(ApiModel):
    day: int = Field(..., ge=1)
    date: dt.date
    theme: str
    activities: List[Activity] = []
    total_cost: str = Field(..., examples=["$61"])


class TripBase(ApiModel):
    destination: str = Field(..., examples=["Lisbon, Portugal"])
    start_date: dt.date
    end_date: dt.date
    travelers: int = 1
    budget: Optional[int] = None
    interests: List[str] = []
    status: TripStatus = TripStatus.PLANNED
    thumbnail: Optional[str] = None


class Trip(TripBase):
    """Stored trip, also used as the API read model."""

    id: str
    user_id: str
    duration: int
    cost: int
    itinerary: List[DayPlan] = []
    created_at: dt.datetime
    updated_at: dt.datetime


class TripGenerate(ApiModel):
    """Payload for ``POST /trips/generate``.

    Destination and dates are optional here so that the trip service can
    reject incomplete requests with one consistent message.
    """

    destination: Optional[str] = Field(None, examples=["Lisbon, Portugal"])
    start_date: Optional[dt.date] = Field(None, examples=["2024-06-15"])
    end_date: Optional[dt.date] = Field(None, examples=["2024-06-17"])
    budget: Optional[int] = Field(None, ge=0)
    travelers: int = Field(1, ge=1)
    interests: List[str] = []


class TripUpdate(ApiModel):
    """Schema for updating a trip.

    All fields are optional; only provided fields are merged.  Owner,
    identity and timestamps are not part of this schema and therefore
    cannot be rewritten by clients.
    """

    destination: Optional[str] = None
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    travelers: Optional[int] = Field(None, ge=1)
    budget: Optional[int] = Field(None, ge=0)
    interests: Optional[List[str]] = None
    status: Optional[TripStatus] = None
    thumbnail: Optional[str] = None
    itinerary: Optional[List[DayPlan]] = None


class TripResponse(ApiModel):
    success: bool = True
    trip: Trip


class TripGenerateResponse(ApiModel):
    success: bool = True
    trip: Trip
    itinerary: List[DayPlan]


class TripListResponse(ApiModel):
    success: bool = True
    trips: List[Trip]


class TripShareResponse(ApiModel):
    success: bool = True
    title: str
    text: str
