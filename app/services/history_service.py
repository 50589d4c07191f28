import logging
from typing import List, Optional

from app.exception.favorite_exception import HistoryValidationError
from app.models.dto import HistoryCreate, HistoryEntry, normalize
from app.repositories.base import IHistoryRepository

logger = logging.getLogger("app")


class HistoryService:
    """검색/로그인/즐겨찾기 이력 기록 서비스 (append-only)"""

    def __init__(self, repository: IHistoryRepository):
        self.repository = repository

    def record(self, entry: HistoryCreate) -> HistoryEntry:
        if not entry.userId or not entry.userId.strip():
            raise HistoryValidationError(message="Missing required field: userId")
        stored = self.repository.add(entry)
        logger.info(f"Recorded {stored.type} history {stored.id} for user={normalize(stored.userId)}")
        return stored

    def list_history(self, user_id: Optional[str] = None) -> List[HistoryEntry]:
        entries = self.repository.list_all()
        if user_id is None:
            return entries
        user_key = normalize(user_id)
        return [entry for entry in entries if normalize(entry.userId) == user_key]
