"""Tests for the in-memory entity store."""

from datetime import datetime, timezone

from trip_planner_api.app.core.store import EntityStore, generate_id


def _user_fields(email="ana@x.com"):
    return {
        "name": "Ana",
        "email": email,
        "password": "secret",
        "join_date": datetime(2024, 1, 1, tzinfo=timezone.utc),
    }


def test_create_assigns_identity_and_timestamps(store):
    user = store.users.create(**_user_fields())
    assert user.id
    assert user.created_at == user.updated_at
    assert store.users.get(user.id) == user


def test_find_by_secondary_key(store):
    ana = store.users.create(**_user_fields("ana@x.com"))
    store.users.create(**_user_fields("bob@x.com"))
    assert store.users.find_one_by(email="ana@x.com").id == ana.id
    assert store.users.find_one_by(email="ANA@x.com") is None


def test_update_merges_fields_and_refreshes_timestamp(store):
    user = store.users.create(**_user_fields())
    updated = store.users.update(user.id, {"trip_count": 3})
    assert updated.trip_count == 3
    assert updated.name == "Ana"
    assert updated.updated_at >= user.updated_at
    # The earlier copy handed out by the store is not mutated.
    assert user.trip_count == 0


def test_update_and_delete_missing_record(store):
    assert store.users.update("missing", {"name": "x"}) is None
    assert store.users.delete("missing") is False


def test_delete_and_list_all(store):
    first = store.users.create(**_user_fields("a@x.com"))
    second = store.users.create(**_user_fields("b@x.com"))
    assert [u.id for u in store.users.all()] == [first.id, second.id]
    assert store.users.delete(first.id) is True
    assert [u.id for u in store.users.all()] == [second.id]


def test_generated_ids_are_unique():
    ids = {generate_id() for _ in range(2000)}
    assert len(ids) == 2000


def test_close_clears_collections():
    store = EntityStore().open()
    store.users.create(**_user_fields())
    assert store.stats()["users"] == 1
    store.close()
    assert store.stats() == {"users": 0, "trips": 0, "sessions": 0}
    assert store.is_open is False
