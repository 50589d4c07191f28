import os
import tempfile

# 앱 모듈 import 전에 환경변수를 설정해야 함 (config는 import 시점에 로드됨)
_TMP_DIR = tempfile.mkdtemp(prefix="favorites-tests-")
os.environ.setdefault("LOG_DIR", os.path.join(_TMP_DIR, "logs"))
os.environ.setdefault("FAVORITES_DB_PATH", os.path.join(_TMP_DIR, "db.json"))
os.environ["STORE_BACKEND"] = "json"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_PER_MINUTE"] = "5"

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import get_favorite_repository, get_history_repository
from app.main import create_app
from app.repositories.json_file import JsonFileStore
from app.repositories.memory import MockFavoriteRepository, MockHistoryRepository


@pytest.fixture
def favorite_repo():
    """각 테스트마다 독립적인 Mock Repository 인스턴스 생성"""
    return MockFavoriteRepository()


@pytest.fixture
def history_repo():
    return MockHistoryRepository()


@pytest.fixture
def test_app(favorite_repo, history_repo):
    """/reset 포함 + Dependency override가 적용된 앱"""
    app = create_app(enable_reset=True)
    app.dependency_overrides[get_favorite_repository] = lambda: favorite_repo
    app.dependency_overrides[get_history_repository] = lambda: history_repo
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as test_client:
        yield test_client


@pytest.fixture
def json_store(tmp_path):
    """tmp_path 아래 db.json을 사용하는 초기화된 JSON 저장소"""
    store = JsonFileStore(tmp_path / "db.json").init()
    yield store
    store.shutdown()


@pytest.fixture
def london():
    return {
        "userId": "u1",
        "city": "London",
        "coordinates": {"lat": 51.5074, "lon": -0.1278},
    }
