"""
JSON 파일 저장소를 실제로 사용하는 E2E 시나리오 (json-server 기반 테스트 스크립트와 동일한 흐름)
"""
import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_favorite_repository, get_history_repository
from app.main import create_app

CITIES = {
    "London": {"lat": 51.5074, "lon": -0.1278},
    "Tokyo": {"lat": 35.6762, "lon": 139.6503},
    "New York": {"lat": 40.7128, "lon": -74.0060},
}


@pytest.fixture
def e2e_client(json_store):
    app = create_app(enable_reset=True)
    app.dependency_overrides[get_favorite_repository] = lambda: json_store.favorites
    app.dependency_overrides[get_history_repository] = lambda: json_store.history
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def _add(client, city):
    return client.post("/favorites", json={"userId": "test-user", "city": city, "coordinates": CITIES[city]})


def test_ping(e2e_client):
    response = e2e_client.get("/ping")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_favorites_flow(e2e_client):
    e2e_client.post("/reset")
    assert e2e_client.get("/favorites").json() == []

    # 1. 도시 추가
    for city in CITIES:
        assert _add(e2e_client, city).status_code == 201

    # 2. 중복 방지
    for city in CITIES:
        response = _add(e2e_client, city)
        assert response.status_code == 409
        assert response.json()["existing"]["city"] == city

    assert [f["city"] for f in e2e_client.get("/favorites").json()] == list(CITIES)

    # 3. 초기화
    assert e2e_client.post("/reset").status_code == 200
    assert e2e_client.get("/favorites").json() == []


def test_store_failure_returns_500(e2e_client, json_store):
    json_store.path.write_text("garbage", encoding="utf-8")

    response = _add(e2e_client, "London")

    assert response.status_code == 500
    assert response.json()["code"] == "STORE-001"


def test_unexpected_error_returns_500(e2e_client, json_store):
    def broken_list_all():
        raise RuntimeError("boom")

    json_store.favorites.list_all = broken_list_all

    response = e2e_client.get("/favorites")

    assert response.status_code == 500
    assert response.json()["code"] == "COMMON-001"
