import pytest

from moment.errors import Conflict, NotFound


def test_put_and_get(store):
    doc_id = store.put("bookings", {"providerId": "p1", "guestCount": 40})
    assert store.get("bookings", doc_id) == {"id": doc_id, "providerId": "p1", "guestCount": 40}


def test_id_is_not_stored_in_the_body(store):
    doc_id = store.put("users", {"id": "ignored", "name": "Asha"}, doc_id="uid-1")
    assert doc_id == "uid-1"
    assert store.get("users", "uid-1") == {"id": "uid-1", "name": "Asha"}


def test_get_missing_returns_none(store):
    assert store.get("users", "nobody") is None


def test_put_without_overwrite_conflicts(store):
    store.put("users", {"name": "Asha"}, doc_id="uid-1", overwrite=False)
    with pytest.raises(Conflict):
        store.put("users", {"name": "Other"}, doc_id="uid-1", overwrite=False)
    assert store.get("users", "uid-1")["name"] == "Asha"


def test_put_with_overwrite_replaces(store):
    store.put("users", {"name": "Asha", "phone": "1"}, doc_id="uid-1")
    store.put("users", {"name": "Ravi"}, doc_id="uid-1")
    assert store.get("users", "uid-1") == {"id": "uid-1", "name": "Ravi"}


def test_update_merges_shallowly(store):
    doc_id = store.put("providers", {"uid": "u1", "images": ["a"], "rating": 0})
    store.update("providers", doc_id, {"images": ["b", "c"]})
    assert store.get("providers", doc_id) == {"id": doc_id, "uid": "u1", "images": ["b", "c"], "rating": 0}


def test_update_missing_raises_not_found(store):
    with pytest.raises(NotFound):
        store.update("bookings", "missing", {"status": "confirmed"})


def test_delete(store):
    doc_id = store.put("services", {"name": "Catering"})
    store.delete("services", doc_id)
    assert store.get("services", doc_id) is None
    # Deleting again is a no-op
    store.delete("services", doc_id)


def test_query_filters_are_anded(store):
    store.put("services", {"providerId": "p1", "category": "food", "available": True})
    store.put("services", {"providerId": "p1", "category": "decor", "available": True})
    store.put("services", {"providerId": "p2", "category": "food", "available": False})

    assert len(store.query("services", {"providerId": "p1"})) == 2
    assert len(store.query("services", {"providerId": "p1", "category": "food"})) == 1
    unavailable = store.query("services", {"available": False})
    assert [s["providerId"] for s in unavailable] == ["p2"]


def test_query_does_not_cross_collections(store):
    store.put("services", {"providerId": "p1"})
    store.put("bookings", {"providerId": "p1"})
    assert len(store.query("bookings", {"providerId": "p1"})) == 1


def test_query_numeric_filter(store):
    store.put("providers", {"uid": "a", "rating": 4})
    store.put("providers", {"uid": "b", "rating": 0})
    assert [p["uid"] for p in store.query("providers", {"rating": 4})] == ["a"]


def test_query_ordering(store):
    store.put("bookings", {"n": 1, "createdAt": "2025-01-01T00:00:00+00:00"})
    store.put("bookings", {"n": 3, "createdAt": "2025-03-01T00:00:00+00:00"})
    store.put("bookings", {"n": 2, "createdAt": "2025-02-01T00:00:00+00:00"})

    ascending = store.query("bookings", order_by="createdAt")
    descending = store.query("bookings", order_by="createdAt", descending=True)
    assert [b["n"] for b in ascending] == [1, 2, 3]
    assert [b["n"] for b in descending] == [3, 2, 1]


def test_unique_field_is_enforced(store):
    store.put("providers", {"uid": "u1", "businessName": "First"})
    with pytest.raises(Conflict):
        store.put("providers", {"uid": "u1", "businessName": "Second"})
    assert len(store.query("providers", {"uid": "u1"})) == 1


def test_unique_field_on_update(store):
    store.put("providers", {"uid": "u1"})
    second = store.put("providers", {"uid": "u2"})
    with pytest.raises(Conflict):
        store.update("providers", second, {"uid": "u1"})
    # Other collections are not constrained
    store.put("bookings", {"uid": "u1"})
    store.put("bookings", {"uid": "u1"})
