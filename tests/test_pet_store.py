"""Tests for the SQLite-backed pet record store."""

from __future__ import annotations

import sqlite3

import pytest

from pet_registry_api.app.core.errors import StorageError
from pet_registry_api.app.schemas.pet import Pet
from pet_registry_api.app.services.pet_store import PetStore


def make_pet(pet_id: str, **overrides) -> Pet:
    data = {
        "id": pet_id,
        "name": "Bella",
        "breed": "Labrador",
        "age": 4,
        "weight": 25.0,
        "health_record": "",
        "vaccination": True,
        "owner": "alice",
        "created_at": 1,
    }
    data.update(overrides)
    return Pet(**data)


def test_empty_store(store):
    assert store.size() == 0
    assert store.values() == []
    assert store.get("missing") is None


def test_insert_and_get(store):
    pet = make_pet("a")
    store.insert("a", pet)
    assert store.get("a") == pet
    assert store.size() == 1


def test_insert_overwrites_existing_key(store):
    store.insert("a", make_pet("a"))
    store.insert("a", make_pet("a", name="Luna", updated_at=5))
    assert store.size() == 1
    stored = store.get("a")
    assert stored.name == "Luna"
    assert stored.updated_at == 5


def test_values_are_ordered_by_key(store):
    for key in ["c", "a", "b"]:
        store.insert(key, make_pet(key))
    assert [pet.id for pet in store.values()] == ["a", "b", "c"]


def test_values_is_a_snapshot(store):
    store.insert("a", make_pet("a"))
    snapshot = store.values()
    store.insert("b", make_pet("b"))
    assert len(snapshot) == 1


def test_returned_records_are_detached(store):
    store.insert("a", make_pet("a"))
    pet = store.get("a")
    pet.name = "Changed"
    assert store.get("a").name == "Bella"


def test_remove_and_remove_missing(store):
    store.insert("a", make_pet("a"))
    store.remove("a")
    store.remove("a")
    assert store.get("a") is None
    assert store.size() == 0


def test_records_survive_reopening(db_path):
    PetStore(db_path).insert("a", make_pet("a"))
    reopened = PetStore(db_path)
    assert reopened.get("a").name == "Bella"


def test_oversized_key_is_rejected(db_path):
    store = PetStore(db_path, max_key_size=4)
    with pytest.raises(StorageError):
        store.insert("too-long", make_pet("too-long"))
    assert store.size() == 0


def test_oversized_value_is_rejected_without_truncation(db_path):
    store = PetStore(db_path, max_value_size=300)
    store.insert("a", make_pet("a"))
    with pytest.raises(StorageError):
        store.insert("a", make_pet("a", health_record="x" * 500))
    assert store.get("a").health_record == ""


def drop_pets_table(db_path: str) -> None:
    conn = sqlite3.connect(db_path)
    conn.execute("DROP TABLE pets")
    conn.commit()
    conn.close()


@pytest.mark.parametrize(
    "read",
    [
        lambda store: store.get("a"),
        lambda store: store.values(),
        lambda store: store.size(),
    ],
    ids=["get", "values", "size"],
)
def test_read_failures_raise_storage_error(db_path, read):
    store = PetStore(db_path)
    store.insert("a", make_pet("a"))
    drop_pets_table(db_path)
    with pytest.raises(StorageError):
        read(store)


def test_remove_many(store):
    for key in ["a", "b", "c"]:
        store.insert(key, make_pet(key))
    store.remove_many(["a", "c", "missing"])
    assert [pet.id for pet in store.values()] == ["b"]


def test_remove_many_is_all_or_nothing(db_path, store):
    for key in ["a", "b", "c"]:
        store.insert(key, make_pet(key))
    conn = sqlite3.connect(db_path)
    conn.execute(
        "CREATE TRIGGER refuse_b BEFORE DELETE ON pets WHEN OLD.id = 'b'"
        " BEGIN SELECT RAISE(ABORT, 'refused'); END;"
    )
    conn.commit()
    conn.close()
    with pytest.raises(StorageError):
        store.remove_many(["a", "b", "c"])
    assert [pet.id for pet in store.values()] == ["a", "b", "c"]
