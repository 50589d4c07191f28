import threading
from typing import Dict, List, Optional, Tuple
from app.models.dto import FavoriteCreate, FavoriteKey, FavoriteRecord, HistoryCreate, HistoryEntry
from app.repositories.base import IFavoriteRepository, IHistoryRepository
from app.utils.ids import new_record_id, utc_now_iso

class MockFavoriteRepository(IFavoriteRepository):
    """
    In-Memory Mock 저장소 구현체

    Note:
        서버 재시작 시 데이터가 초기화됩니다.
        dict는 삽입 순서를 유지하며, 정규화 키 인덱스로 중복을 판정합니다.
        모든 변경은 단일 Lock 안에서 수행됩니다.
    """

    def __init__(self):
        self._lock = threading.Lock()
        # Data Structure: {id: FavoriteRecord}, {FavoriteKey: id}
        self._data: Dict[str, FavoriteRecord] = {}
        self._index: Dict[FavoriteKey, str] = {}

    def list_all(self) -> List[FavoriteRecord]:
        with self._lock:
            return list(self._data.values())

    def get(self, favorite_id: str) -> Optional[FavoriteRecord]:
        with self._lock:
            return self._data.get(favorite_id)

    def create(self, candidate: FavoriteCreate) -> FavoriteRecord:
        with self._lock:
            return self._insert(candidate)

    def create_if_absent(self, key: FavoriteKey, candidate: FavoriteCreate) -> Tuple[FavoriteRecord, bool]:
        with self._lock:
            existing_id = self._index.get(key)
            if existing_id is not None:
                return self._data[existing_id], False
            return self._insert(candidate), True

    def delete(self, favorite_id: str) -> bool:
        with self._lock:
            record = self._data.pop(favorite_id, None)
            if record is None:
                return False
            if self._index.get(record.key) == favorite_id:
                del self._index[record.key]
            return True

    def reset(self) -> None:
        with self._lock:
            self._data.clear()
            self._index.clear()

    def _insert(self, candidate: FavoriteCreate) -> FavoriteRecord:
        record = FavoriteRecord(
            id=new_record_id(),
            userId=candidate.userId,
            city=candidate.city,
            coordinates=candidate.coordinates,
        )
        self._data[record.id] = record
        # create()로 중복이 들어온 경우 먼저 저장된 레코드를 기준으로 유지
        self._index.setdefault(record.key, record.id)
        return record


class MockHistoryRepository(IHistoryRepository):
    """In-Memory 이력 저장소"""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: List[HistoryEntry] = []

    def list_all(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def add(self, entry: HistoryCreate) -> HistoryEntry:
        stored = HistoryEntry(
            id=new_record_id(),
            type=entry.type,
            userId=entry.userId,
            timestamp=entry.timestamp or utc_now_iso(),
            details=entry.details,
        )
        with self._lock:
            self._entries.append(stored)
        return stored

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
