"""
Trip export helpers.

Produces the short share summary and the printable plain-text itinerary
offered by ``GET /trips/{id}/share`` and ``GET /trips/{id}/export``.
"""

from datetime import date
from typing import List

from ..schemas.trip import Trip

BRAND = "TravelGenius"


def _format_date(value: date) -> str:
    return f"{value.strftime('%B')} {value.day}, {value.year}"


class ExportService:

    @staticmethod
    def share_title(trip: Trip) -> str:
        return f"{trip.destination} Trip Itinerary"

    @staticmethod
    def share_text(trip: Trip) -> str:
        return (
            f"My {trip.duration}-day trip to {trip.destination}!\n\n"
            f"{_format_date(trip.start_date)} - {_format_date(trip.end_date)}\n"
            f"${trip.cost:,} total\n\n"
            f"Planned with {BRAND}"
        )

    @staticmethod
    def itinerary_text(trip: Trip) -> str:
        """Render the whole trip as a printable plain-text document."""
        lines: List[str] = [
            f"{trip.destination} Itinerary",
            "=" * (len(trip.destination) + 10),
            f"Dates: {_format_date(trip.start_date)} - {_format_date(trip.end_date)} ({trip.duration} days)",
            f"Travelers: {trip.travelers}",
            f"Estimated cost: ${trip.cost:,}",
        ]
        if trip.budget is not None:
            lines.append(f"Budget: ${trip.budget:,}")
        if trip.interests:
            lines.append(f"Interests: {', '.join(trip.interests)}")
        for day in trip.itinerary:
            lines.append("")
            lines.append(f"Day {day.day} - {_format_date(day.date)}: {day.theme}")
            for activity in day.activities:
                lines.append(
                    f"  {activity.time:>8}  {activity.title} ({activity.duration}, {activity.cost})"
                )
                lines.append(f"            {activity.description}")
            lines.append(f"  Daily total: {day.total_cost}")
        lines.append("")
        lines.append(f"Generated by {BRAND}")
        return "\n".join(lines) + "\n"
