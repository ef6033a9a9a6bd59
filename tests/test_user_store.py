"""Unit tests for the in-memory user store."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.core.errors import NotFoundAppError
from app.schemas.user import User, UserInput
from app.services.user_store import UserStore


def _input(name: str = "Alice", email: str = "a@x.com") -> UserInput:
    return UserInput(name=name, email=email)


def test_create_assigns_sequential_ids_starting_at_one(store: UserStore) -> None:
    first = store.create(_input("Alice", "a@x.com"))
    second = store.create(_input("Bob", "b@x.com"))

    assert first == User(id=1, name="Alice", email="a@x.com")
    assert second == User(id=2, name="Bob", email="b@x.com")


def test_create_ignores_client_supplied_id(store: UserStore) -> None:
    payload = UserInput.model_validate({"id": 42, "name": "Alice", "email": "a@x.com"})

    created = store.create(payload)

    assert created.id == 1


def test_get_by_id_returns_created_record(store: UserStore) -> None:
    created = store.create(_input())

    assert store.get_by_id(created.id) == created


def test_get_by_id_unknown_raises_not_found(store: UserStore) -> None:
    with pytest.raises(NotFoundAppError) as exc_info:
        store.get_by_id(7)

    assert exc_info.value.code == "user_not_found"
    assert exc_info.value.details == {"user_id": 7}


def test_update_replaces_all_fields(store: UserStore) -> None:
    created = store.create(_input("A", "a@x.com"))

    updated = store.update(created.id, UserInput(name="B"))

    assert updated == User(id=created.id, name="B", email="")
    assert store.get_by_id(created.id) == updated


def test_update_unknown_id_changes_nothing(store: UserStore) -> None:
    existing = store.create(_input())

    with pytest.raises(NotFoundAppError):
        store.update(99, _input("Mallory", "m@x.com"))

    assert store.get_all() == [existing]
    # next_id was not consumed by the failed update
    assert store.create(_input("Bob", "b@x.com")).id == 2


def test_delete_removes_record_and_never_reuses_id(store: UserStore) -> None:
    first = store.create(_input())
    store.delete(first.id)

    with pytest.raises(NotFoundAppError):
        store.get_by_id(first.id)

    assert store.create(_input("Bob", "b@x.com")).id == 2


def test_delete_unknown_id_raises_not_found(store: UserStore) -> None:
    with pytest.raises(NotFoundAppError):
        store.delete(1)


def test_delete_twice_raises_not_found(store: UserStore) -> None:
    created = store.create(_input())
    store.delete(created.id)

    with pytest.raises(NotFoundAppError):
        store.delete(created.id)


def test_scenario_create_create_delete_list(store: UserStore) -> None:
    store.create(_input("Alice", "a@x.com"))
    bob = store.create(_input("Bob", "b@x.com"))

    store.delete(1)

    assert store.get_all() == [bob]
    with pytest.raises(NotFoundAppError):
        store.get_by_id(1)


def test_get_all_returns_a_snapshot(store: UserStore) -> None:
    store.create(_input())
    snapshot = store.get_all()

    store.create(_input("Bob", "b@x.com"))
    snapshot.clear()

    assert len(store.get_all()) == 2
    assert store.count() == 2


def test_concurrent_creates_yield_unique_ids(store: UserStore) -> None:
    total = 500

    with ThreadPoolExecutor(max_workers=16) as pool:
        created = list(pool.map(lambda i: store.create(_input(f"u{i}", "")), range(total)))

    ids = sorted(user.id for user in created)
    assert ids == list(range(1, total + 1))
    assert store.count() == total


def test_concurrent_updates_last_writer_wins_whole_record(store: UserStore) -> None:
    created = store.create(_input("seed", "seed@x.com"))
    writers = [UserInput(name=f"n{i}", email=f"e{i}@x.com") for i in range(50)]
    start = threading.Barrier(len(writers))

    def _write(payload: UserInput) -> None:
        start.wait(timeout=5)
        store.update(created.id, payload)

    threads = [threading.Thread(target=_write, args=(p,)) for p in writers]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    final = store.get_by_id(created.id)
    # One write wins entirely, never a mix of two
    assert UserInput(name=final.name, email=final.email) in writers


def test_readers_never_observe_torn_records(store: UserStore) -> None:
    created = store.create(_input("n0", "n0@x.com"))
    stop = threading.Event()
    torn: list[User] = []

    def _reader() -> None:
        while not stop.is_set():
            user = store.get_by_id(created.id)
            if user.email != f"{user.name}@x.com":
                torn.append(user)

    readers = [threading.Thread(target=_reader) for _ in range(4)]
    for t in readers:
        t.start()
    for i in range(1, 300):
        store.update(created.id, UserInput(name=f"n{i}", email=f"n{i}@x.com"))
    stop.set()
    for t in readers:
        t.join()

    assert torn == []
