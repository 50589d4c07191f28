import asyncio

import pytest
from httpx import ASGITransport, AsyncClient


def test_add_favorite_success(client, london):
    """신규 즐겨찾기 추가 시 201과 id가 부여된 레코드를 반환해야 한다."""
    response = client.post("/favorites", json=london)

    assert response.status_code == 201
    data = response.json()
    assert data["id"]
    assert data["userId"] == "u1"
    assert data["city"] == "London"
    assert data["coordinates"] == {"lat": 51.5074, "lon": -0.1278}


def test_add_duplicate_returns_conflict(client, london):
    """같은 요청을 다시 보내면 409와 기존 레코드를 반환해야 한다."""
    created = client.post("/favorites", json=london).json()

    response = client.post("/favorites", json=london)

    assert response.status_code == 409
    data = response.json()
    assert data["error"] == "Favorite already exists"
    assert data["code"] == "FAVORITE-002"
    assert data["existing"]["id"] == created["id"]
    assert data["existing"]["city"] == "London"
    assert data["requested"] == {"userId": "u1", "city": "london"}


def test_duplicate_check_ignores_case_and_whitespace(client, london):
    client.post("/favorites", json=london)

    response = client.post("/favorites", json={**london, "userId": " U1 ", "city": "LONDON "})

    assert response.status_code == 409
    assert len(client.get("/favorites").json()) == 1


def test_same_city_for_other_user_is_allowed(client, london):
    client.post("/favorites", json=london)

    response = client.post("/favorites", json={**london, "userId": "u2"})

    assert response.status_code == 201


def test_repeated_duplicates_do_not_change_collection(client, london):
    client.post("/favorites", json=london)

    for _ in range(5):
        assert client.post("/favorites", json=london).status_code == 409

    assert len(client.get("/favorites").json()) == 1


@pytest.mark.parametrize("payload", [
    {"city": "London", "coordinates": {"lat": 1, "lon": 2}},        # userId 누락
    {"userId": "u1", "coordinates": {"lat": 1, "lon": 2}},          # city 누락
    {"userId": "   ", "city": "London", "coordinates": {"lat": 1, "lon": 2}},
    {"userId": "u1", "city": "", "coordinates": {"lat": 1, "lon": 2}},
])
def test_missing_user_or_city_returns_400(client, payload):
    response = client.post("/favorites", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields: userId and city"


def test_missing_coordinates_returns_400(client):
    response = client.post("/favorites", json={"userId": "u1", "city": "London"})

    assert response.status_code == 400
    assert response.json()["code"] == "FAVORITE-001"


@pytest.mark.parametrize("coordinates", [
    {"lat": "north", "lon": 0},
    {"lat": 91, "lon": 0},
    {"lat": 0, "lon": -181},
    {"lat": 0},
])
def test_malformed_coordinates_return_400(client, coordinates):
    response = client.post("/favorites", json={"userId": "u1", "city": "London", "coordinates": coordinates})

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION-001"
    assert data["details"]


def test_numeric_user_id_is_accepted(client, london):
    """숫자 사용자 id도 문자열로 저장되어야 한다."""
    response = client.post("/favorites", json={**london, "userId": 42})

    assert response.status_code == 201
    assert response.json()["userId"] == "42"


def test_numeric_user_id_conflicts_with_string_record(client, london):
    client.post("/favorites", json={**london, "userId": "42", "city": "rome"})

    response = client.post("/favorites", json={**london, "userId": 42, "city": "Rome"})

    assert response.status_code == 409
    assert response.json()["requested"] == {"userId": "42", "city": "rome"}


def test_list_favorites_in_insertion_order(client, london):
    cities = ["London", "Tokyo", "New York"]
    for city in cities:
        client.post("/favorites", json={**london, "city": city})

    response = client.get("/favorites")

    assert response.status_code == 200
    assert [item["city"] for item in response.json()] == cities


def test_list_favorites_filtered_by_user(client, london):
    client.post("/favorites", json=london)
    client.post("/favorites", json={**london, "userId": "u2", "city": "Paris"})

    response = client.get("/favorites", params={"userId": "U2"})

    assert [item["city"] for item in response.json()] == ["Paris"]


def test_get_favorite_by_id(client, london):
    created = client.post("/favorites", json=london).json()

    response = client.get(f"/favorites/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_get_unknown_favorite_returns_404(client):
    response = client.get("/favorites/does-not-exist")

    assert response.status_code == 404
    assert response.json()["code"] == "FAVORITE-003"


def test_delete_favorite(client, london):
    created = client.post("/favorites", json=london).json()

    response = client.delete(f"/favorites/{created['id']}")

    assert response.status_code == 200
    assert client.get("/favorites").json() == []


def test_delete_unknown_favorite_returns_404(client):
    response = client.delete("/favorites/missing")

    assert response.status_code == 404
    assert response.json()["error"] == "Favorite not found: missing"


def test_city_can_be_added_again_after_delete(client, london):
    created = client.post("/favorites", json=london).json()
    client.delete(f"/favorites/{created['id']}")

    response = client.post("/favorites", json=london)

    assert response.status_code == 201
    assert response.json()["id"] != created["id"]


@pytest.mark.asyncio
async def test_concurrent_submissions_create_exactly_one(test_app, favorite_repo, london):
    """동시에 같은 도시를 추가하면 정확히 1건만 201, 나머지는 409여야 한다."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        responses = await asyncio.gather(*[ac.post("/favorites", json=london) for _ in range(8)])

    statuses = sorted(r.status_code for r in responses)
    assert statuses == [201] + [409] * 7
    assert len(favorite_repo.list_all()) == 1
