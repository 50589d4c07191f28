import pytest

from app.models.dto import FavoriteCreate, FavoriteKey, HistoryCreate
from app.repositories.sql_repository import SqlStore


def candidate(city="London", user_id="u1"):
    return FavoriteCreate(userId=user_id, city=city, coordinates={"lat": 51.5074, "lon": -0.1278})


@pytest.fixture
def sql_store():
    """인메모리 SQLite (StaticPool) 저장소"""
    store = SqlStore("sqlite:///:memory:").init()
    yield store
    store.shutdown()


def test_unique_constraint_returns_existing(sql_store):
    first, created = sql_store.favorites.create_if_absent(FavoriteKey.of("u1", "London"), candidate())
    second, created_again = sql_store.favorites.create_if_absent(
        FavoriteKey.of("u1", "LONDON"), candidate(city="LONDON")
    )

    assert created is True
    assert created_again is False
    assert second == first
    assert len(sql_store.favorites.list_all()) == 1


def test_create_returns_existing_row_and_warns_on_duplicate(sql_store, caplog):
    first = sql_store.favorites.create(candidate())

    with caplog.at_level("WARNING"):
        second = sql_store.favorites.create(candidate(city=" london"))

    assert second == first
    assert len(sql_store.favorites.list_all()) == 1
    assert any(first.id in record.getMessage() for record in caplog.records)


def test_list_all_keeps_insertion_order(sql_store):
    for city in ["Tokyo", "Berlin", "Austin"]:
        sql_store.favorites.create(candidate(city=city))

    assert [r.city for r in sql_store.favorites.list_all()] == ["Tokyo", "Berlin", "Austin"]


def test_delete_and_get(sql_store):
    record = sql_store.favorites.create(candidate())

    assert sql_store.favorites.get(record.id) == record
    assert sql_store.favorites.delete(record.id) is True
    assert sql_store.favorites.delete(record.id) is False
    assert sql_store.favorites.get(record.id) is None


def test_history_round_trip(sql_store):
    entry = sql_store.history.add(HistoryCreate(
        type="favorite", userId="u1", details={"action": "add", "location": "Tokyo"},
    ))

    stored = sql_store.history.list_all()
    assert stored == [entry]
    assert stored[0].details.action == "add"


def test_reset_for_test_clears_everything(sql_store):
    sql_store.favorites.create(candidate())
    sql_store.history.add(HistoryCreate(type="search", userId="u1"))

    sql_store.reset_for_test()

    assert sql_store.favorites.list_all() == []
    assert sql_store.history.list_all() == []
