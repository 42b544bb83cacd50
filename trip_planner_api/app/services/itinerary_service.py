"""
Itinerary generation.

Itineraries are built from five fixed day templates rotated by day
offset: day 1 uses the first template, day 6 the first again, and so
on.  Output is deterministic for a given date range.  Destination,
interests and budget are accepted so that a smarter generator can be
dropped in behind the same call, but the templates ignore them.
"""

import re
from datetime import date, timedelta
from typing import Iterable, List, Optional

from ..core.errors import ValidationError
from ..schemas.trip import Activity, DayPlan

DAY_TEMPLATES = [
    {
        "theme": "Historic Heart & Cultural Immersion",
        "activities": [
            ("9:00 AM", "Historic Cathedral District", "Start your adventure at iconic religious and historic sites. Explore stunning architecture and learn about local history.", "2 hours", "$15", "attraction", 4.8),
            ("11:30 AM", "River Walk", "Stroll along historic riverbanks, enjoying street performers and local vendors.", "1 hour", "Free", "activity", 4.5),
            ("12:30 PM", "Local Eatery", "Experience authentic local cuisine at this popular neighborhood spot.", "1 hour", "$12", "restaurant", 4.6),
            ("2:00 PM", "Main Museum", "Dive into world-class art and culture. Book timed entry in advance for popular exhibits.", "3 hours", "$18", "attraction", 4.7),
            ("6:00 PM", "Sunset Viewpoint", "Golden hour photography at scenic viewpoints. Perfect for memorable photos!", "1 hour", "Free", "activity", 4.9),
        ],
    },
    {
        "theme": "Arts & Culture Discovery",
        "activities": [
            ("9:00 AM", "Art District", "Explore the artistic heart of the city with galleries and creative spaces.", "2 hours", "$8", "attraction", 4.6),
            ("11:30 AM", "Artist Quarter", "Watch local artists at work and browse unique artwork and crafts.", "1.5 hours", "$25", "activity", 4.4),
            ("1:00 PM", "Cultural Bistro", "Hidden gem restaurant loved by locals. Try regional specialties in an authentic setting.", "1.5 hours", "$35", "restaurant", 4.7),
            ("3:00 PM", "Creative District", "Explore unique shops and soak in the bohemian atmosphere of the creative quarter.", "2 hours", "$10", "activity", 4.3),
            ("6:00 PM", "Evening Landmark", "Visit iconic landmarks as they light up for the evening. Spectacular views guaranteed!", "2 hours", "$30", "attraction", 4.8),
        ],
    },
    {
        "theme": "Nature & Adventure",
        "activities": [
            ("8:00 AM", "City Park", "Start early at the main city park. Great for morning walks and fresh air.", "2 hours", "Free", "activity", 4.5),
            ("10:30 AM", "Outdoor Market", "Browse local produce and artisan goods at the vibrant morning market.", "1.5 hours", "$20", "activity", 4.3),
            ("12:00 PM", "Garden Café", "Lunch at a charming café with outdoor seating and local specialties.", "1 hour", "$22", "restaurant", 4.4),
            ("2:00 PM", "Nature Reserve", "Explore natural areas and hiking trails just outside the city center.", "3 hours", "$12", "activity", 4.6),
            ("6:30 PM", "Waterfront Dining", "End the day with dinner overlooking water views and beautiful scenery.", "2 hours", "$45", "restaurant", 4.7),
        ],
    },
    {
        "theme": "Local Life & Hidden Gems",
        "activities": [
            ("9:30 AM", "Neighborhood Walk", "Explore authentic local neighborhoods away from tourist crowds.", "2 hours", "Free", "activity", 4.4),
            ("11:30 AM", "Local Workshop", "Participate in a traditional craft or cooking workshop with locals.", "2 hours", "$40", "activity", 4.8),
            ("2:00 PM", "Family Restaurant", "Lunch at a family-run restaurant serving traditional recipes passed down generations.", "1.5 hours", "$28", "restaurant", 4.6),
            ("4:00 PM", "Community Center", "Visit local community spaces and learn about daily life and culture.", "1.5 hours", "$5", "activity", 4.2),
            ("7:00 PM", "Night Market", "Experience the vibrant evening atmosphere at local night markets.", "2 hours", "$25", "activity", 4.5),
        ],
    },
    {
        "theme": "Shopping & Entertainment",
        "activities": [
            ("10:00 AM", "Main Shopping District", "Browse the primary shopping areas with both local and international brands.", "2.5 hours", "$50", "activity", 4.3),
            ("12:30 PM", "Food Court Favorites", "Sample diverse local foods at the popular food court or market hall.", "1 hour", "$18", "restaurant", 4.4),
            ("2:30 PM", "Entertainment Complex", "Visit entertainment venues, arcades, or cultural centers for afternoon fun.", "2 hours", "$35", "activity", 4.5),
            ("5:00 PM", "Rooftop Bar", "Enjoy sunset drinks with panoramic city views from a popular rooftop venue.", "2 hours", "$40", "restaurant", 4.6),
            ("8:00 PM", "Evening Show", "Experience local entertainment, live music, or cultural performances.", "2 hours", "$55", "activity", 4.7),
        ],
    },
]

MAX_TRIP_DAYS = 365

_COST_LABEL = re.compile(r"^\$?(\d[\d,]*)(?:\.\d+)?$")

_ACTIVITY_FIELDS = ("time", "title", "description", "duration", "cost", "type", "rating")


def parse_cost_label(label: str) -> int:
    """Convert a display cost (``"$15"``, ``"Free"``) into whole dollars."""
    cleaned = label.strip()
    if not cleaned or cleaned.lower() == "free":
        return 0
    match = _COST_LABEL.match(cleaned)
    if match is None:
        raise ValidationError(f"Unrecognised cost label: {label!r}")
    # Cents are dropped.
    return int(match.group(1).replace(",", ""))


def format_cost(amount: int) -> str:
    return f"${amount}"


def trip_duration(start: date, end: date) -> int:
    """Inclusive number of calendar days between ``start`` and ``end``.

    Spans longer than ``MAX_TRIP_DAYS`` are rejected.
    """
    if end < start:
        raise ValidationError("End date must not be before start date")
    days = (end - start).days + 1
    if days > MAX_TRIP_DAYS:
        raise ValidationError(f"Trips may span at most {MAX_TRIP_DAYS} days")
    return days


def itinerary_cost(itinerary: Iterable[DayPlan]) -> int:
    return sum(parse_cost_label(day.total_cost) for day in itinerary)


def check_itinerary(itinerary: List[DayPlan], start: date, duration: int) -> None:
    """Require one plan per trip day, numbered from 1 and dated in order."""
    if len(itinerary) != duration:
        raise ValidationError(f"Itinerary must contain {duration} days, got {len(itinerary)}")
    for offset, plan in enumerate(itinerary):
        expected = start + timedelta(days=offset)
        if plan.day != offset + 1 or plan.date != expected:
            raise ValidationError(f"Itinerary day {offset + 1} must be dated {expected.isoformat()}")


class ItineraryService:
    """Generate day-by-day itineraries from the fixed templates."""

    templates = DAY_TEMPLATES

    def build_day(self, offset: int, start: date) -> DayPlan:
        template = self.templates[offset % len(self.templates)]
        activities = [Activity(**dict(zip(_ACTIVITY_FIELDS, row))) for row in template["activities"]]
        total = sum(parse_cost_label(activity.cost) for activity in activities)
        return DayPlan(
            day=offset + 1,
            date=start + timedelta(days=offset),
            theme=template["theme"],
            activities=activities,
            total_cost=format_cost(total),
        )

    def generate(
        self,
        destination: str,
        start: date,
        end: date,
        interests: Optional[List[str]] = None,
        budget: Optional[int] = None,
    ) -> List[DayPlan]:
        days = trip_duration(start, end)
        return [self.build_day(offset, start) for offset in range(days)]
