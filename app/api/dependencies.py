from __future__ import annotations
from functools import lru_cache
from fastapi import Depends

from app.core.config import DATABASE_URL, FAVORITES_DB_PATH, STORE_BACKEND
from app.repositories.base import IFavoriteRepository, IHistoryRepository
from app.repositories.json_file import JsonFileStore
from app.repositories.sql_repository import SqlStore
from app.services.favorite_service import FavoriteAdmissionService
from app.services.history_service import HistoryService


@lru_cache(maxsize=1)
def get_store() -> JsonFileStore | SqlStore:
    """
    저장소 인스턴스 (Singleton via lru_cache)

    Returns:
        STORE_BACKEND가 "sql"이면 SqlStore, 아니면 JsonFileStore (init 완료 상태)
    """
    if STORE_BACKEND == "sql":
        return SqlStore(DATABASE_URL).init()
    return JsonFileStore(FAVORITES_DB_PATH).init()


def get_favorite_repository() -> IFavoriteRepository:
    return get_store().favorites


def get_history_repository() -> IHistoryRepository:
    return get_store().history


def get_favorite_service(
    repo: IFavoriteRepository = Depends(get_favorite_repository),
) -> FavoriteAdmissionService:
    """FavoriteAdmissionService 인스턴스 반환 (DI용)."""
    return FavoriteAdmissionService(repo)


def get_history_service(
    repo: IHistoryRepository = Depends(get_history_repository),
) -> HistoryService:
    return HistoryService(repo)
