from app.repositories.base import IFavoriteRepository, IHistoryRepository
from app.repositories.json_file import JsonFileStore
from app.repositories.memory import MockFavoriteRepository, MockHistoryRepository
from app.repositories.sql_repository import SqlStore

__all__ = [
    "IFavoriteRepository",
    "IHistoryRepository",
    "JsonFileStore",
    "MockFavoriteRepository",
    "MockHistoryRepository",
    "SqlStore",
]
