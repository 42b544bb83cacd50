"""Tests for trip lifecycle operations and ownership checks."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from trip_planner_api.app.core.errors import ForbiddenError, NotFoundError, ValidationError
from trip_planner_api.app.schemas.trip import DayPlan, TripGenerate, TripStatus, TripUpdate


@pytest.fixture
def owner(auth_service):
    return auth_service.create_user("Ana", "ana@x.com", "abcdef")


@pytest.fixture
def stranger(auth_service):
    return auth_service.create_user("Bob", "bob@x.com", "abcdef")


def _request(**overrides):
    fields = {
        "destination": "Lisbon, Portugal",
        "start_date": date(2024, 6, 15),
        "end_date": date(2024, 6, 17),
        "travelers": 2,
        "interests": ["Food"],
    }
    fields.update(overrides)
    return TripGenerate(**fields)


@pytest.mark.asyncio
async def test_generate_computes_duration_cost_and_increments_count(trip_service, store, owner):
    trip = await trip_service.generate(owner.id, _request())
    assert trip.duration == 3
    assert trip.cost == 252
    assert trip.status == TripStatus.PLANNED
    assert trip.user_id == owner.id
    assert "Lisbon" in trip.thumbnail
    assert store.users.get(owner.id).trip_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["destination", "start_date", "end_date"])
async def test_generate_requires_destination_and_dates(trip_service, store, owner, missing):
    with pytest.raises(ValidationError):
        await trip_service.generate(owner.id, _request(**{missing: None}))
    assert len(store.trips) == 0
    assert store.users.get(owner.id).trip_count == 0


@pytest.mark.asyncio
async def test_generate_rejects_reversed_dates(trip_service, owner):
    with pytest.raises(ValidationError):
        await trip_service.generate(owner.id, _request(start_date=date(2024, 6, 17), end_date=date(2024, 6, 15)))


@pytest.mark.asyncio
async def test_create_ignores_supplied_duration_and_cost(trip_service, owner):
    fields = {
        "destination": "Oslo",
        "start_date": date(2024, 1, 1),
        "end_date": date(2024, 1, 2),
        "duration": 99,
        "cost": 1,
    }
    trip = await trip_service.create(owner.id, fields, [])
    assert trip.duration == 2
    assert trip.cost == 0


@pytest.mark.asyncio
async def test_trip_count_tracks_creates_minus_deletes(trip_service, store, owner):
    trips = [await trip_service.generate(owner.id, _request()) for _ in range(4)]
    for trip in trips[:3]:
        await trip_service.delete(trip.id, owner.id)
    assert store.users.get(owner.id).trip_count == 1


@pytest.mark.asyncio
async def test_trip_count_never_goes_negative(trip_service, store, owner):
    trip = await trip_service.generate(owner.id, _request())
    store.users.update(owner.id, {"trip_count": 0})
    await trip_service.delete(trip.id, owner.id)
    assert store.users.get(owner.id).trip_count == 0


@pytest.mark.asyncio
async def test_get_list_for_owner(trip_service, owner, stranger):
    mine = await trip_service.generate(owner.id, _request())
    await trip_service.generate(stranger.id, _request(destination="Rome"))
    assert (await trip_service.get(mine.id, owner.id)).id == mine.id
    listed = await trip_service.list_for_owner(owner.id)
    assert [t.id for t in listed] == [mine.id]


@pytest.mark.asyncio
async def test_non_owner_is_forbidden(trip_service, store, owner, stranger):
    trip = await trip_service.generate(owner.id, _request())
    with pytest.raises(ForbiddenError):
        await trip_service.get(trip.id, stranger.id)
    with pytest.raises(ForbiddenError):
        await trip_service.update(trip.id, stranger.id, TripUpdate(destination="Rome"))
    with pytest.raises(ForbiddenError):
        await trip_service.delete(trip.id, stranger.id)
    assert store.trips.get(trip.id).destination == "Lisbon, Portugal"
    assert store.users.get(owner.id).trip_count == 1


@pytest.mark.asyncio
async def test_missing_trip_is_not_found(trip_service, owner):
    with pytest.raises(NotFoundError):
        await trip_service.get("missing", owner.id)
    with pytest.raises(NotFoundError):
        await trip_service.update("missing", owner.id, TripUpdate(destination="Rome"))
    with pytest.raises(NotFoundError):
        await trip_service.delete("missing", owner.id)


@pytest.mark.asyncio
async def test_update_merges_partial_fields(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    updated = await trip_service.update(trip.id, owner.id, TripUpdate(destination="Porto", travelers=3))
    assert updated.destination == "Porto"
    assert updated.travelers == 3
    assert updated.interests == ["Food"]
    assert updated.user_id == owner.id
    assert updated.updated_at >= trip.updated_at


@pytest.mark.asyncio
async def test_update_recomputes_duration_and_validates_dates(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    updated = await trip_service.update(trip.id, owner.id, TripUpdate(end_date=date(2024, 6, 20)))
    assert updated.duration == 6
    with pytest.raises(ValidationError):
        await trip_service.update(trip.id, owner.id, TripUpdate(end_date=date(2024, 6, 1)))


@pytest.mark.asyncio
async def test_update_itinerary_recomputes_cost(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    days = [
        DayPlan(day=offset + 1, date=date(2024, 6, 15 + offset), theme="Slow day", activities=[], total_cost="$10")
        for offset in range(3)
    ]
    updated = await trip_service.update(trip.id, owner.id, TripUpdate(itinerary=days))
    assert updated.cost == 30
    assert [d.theme for d in updated.itinerary] == ["Slow day"] * 3


@pytest.mark.asyncio
async def test_update_rejects_itinerary_that_does_not_match_dates(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    gappy = [
        DayPlan(day=7, date=date(2024, 6, 15), theme="A", total_cost="$1"),
        DayPlan(day=2, date=date(2024, 6, 16), theme="B", total_cost="$1"),
        DayPlan(day=3, date=date(2024, 6, 17), theme="C", total_cost="$1"),
    ]
    with pytest.raises(ValidationError):
        await trip_service.update(trip.id, owner.id, TripUpdate(itinerary=gappy))
    with pytest.raises(ValidationError):
        await trip_service.update(trip.id, owner.id, TripUpdate(itinerary=gappy[1:]))
    stored = await trip_service.get(trip.id, owner.id)
    assert [d.day for d in stored.itinerary] == [1, 2, 3]
    assert stored.cost == 252


@pytest.mark.asyncio
async def test_moving_dates_regenerates_itinerary(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    updated = await trip_service.update(
        trip.id, owner.id, TripUpdate(start_date=date(2024, 7, 1), end_date=date(2024, 7, 10))
    )
    assert updated.duration == 10
    assert [d.day for d in updated.itinerary] == list(range(1, 11))
    assert updated.itinerary[0].date == date(2024, 7, 1)
    assert updated.itinerary[-1].date == date(2024, 7, 10)
    assert updated.cost == 2 * (45 + 108 + 99 + 98 + 198)


@pytest.mark.asyncio
async def test_update_with_bad_cost_label_is_rejected(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    days = [DayPlan(day=1 + i, date=date(2024, 6, 15 + i), theme="T", total_cost="$1e400") for i in range(3)]
    with pytest.raises(ValidationError):
        await trip_service.update(trip.id, owner.id, TripUpdate(itinerary=days))


@pytest.mark.asyncio
async def test_null_clears_optional_fields_only(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request(budget=800))
    changes = TripUpdate.model_validate({"budget": None, "thumbnail": None, "destination": None})
    updated = await trip_service.update(trip.id, owner.id, changes)
    assert updated.budget is None
    assert updated.thumbnail is None
    assert updated.destination == "Lisbon, Portugal"


def test_trip_count_survives_concurrent_creates_and_deletes(trip_service, store, owner):
    existing = [asyncio.run(trip_service.generate(owner.id, _request())) for _ in range(10)]
    counts = []

    def create(_):
        asyncio.run(trip_service.generate(owner.id, _request()))
        counts.append(store.users.get(owner.id).trip_count)

    def delete(trip):
        asyncio.run(trip_service.delete(trip.id, owner.id))
        counts.append(store.users.get(owner.id).trip_count)

    with ThreadPoolExecutor(max_workers=8) as pool:
        jobs = [pool.submit(create, n) for n in range(25)]
        jobs += [pool.submit(delete, trip) for trip in existing]
        for job in jobs:
            job.result()

    assert store.users.get(owner.id).trip_count == 25
    assert len(store.trips.find_by(user_id=owner.id)) == 25
    assert min(counts) >= 0

    remaining = store.trips.find_by(user_id=owner.id)
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(delete, remaining))
    assert store.users.get(owner.id).trip_count == 0


@pytest.mark.asyncio
async def test_status_moves_forward_only(trip_service, owner):
    trip = await trip_service.generate(owner.id, _request())
    trip = await trip_service.update(trip.id, owner.id, TripUpdate(status=TripStatus.UPCOMING))
    assert trip.status == TripStatus.UPCOMING
    trip = await trip_service.update(trip.id, owner.id, TripUpdate(status=TripStatus.UPCOMING))
    assert trip.status == TripStatus.UPCOMING
    with pytest.raises(ValidationError):
        await trip_service.update(trip.id, owner.id, TripUpdate(status=TripStatus.PLANNED))
    trip = await trip_service.update(trip.id, owner.id, TripUpdate(status=TripStatus.COMPLETED))
    assert trip.status == TripStatus.COMPLETED


def test_update_schema_cannot_change_owner():
    changes = TripUpdate.model_validate({"userId": "someone-else", "destination": "Rome"})
    assert "user_id" not in changes.model_dump(exclude_unset=True)
