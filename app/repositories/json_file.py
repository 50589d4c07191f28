"""
단일 JSON 문서 기반 저장소

db.json 한 파일에 {"favorites": [...], "history": [...]} 컬렉션을 보관합니다.

설계 결정:
- 파일 전체를 읽고-수정하고-쓰는 구조이므로 저장소 인스턴스가 하나의 RLock을 소유하고,
  모든 read-modify-write를 그 안에서 수행합니다. (check-then-act 사이에 다른 쓰기가 끼어들 수 없음)
- 쓰기는 같은 디렉터리의 임시 파일에 기록한 뒤 os.replace로 교체합니다.
  쓰기 도중 실패해도 기존 문서는 그대로 남고 부분 레코드가 생기지 않습니다.
- 파일을 읽거나 쓸 수 없으면 StoreUnavailableError를 발생시킵니다.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from pydantic import ValidationError

from app.exception.store_exception import StoreUnavailableError
from app.models.dto import FavoriteCreate, FavoriteKey, FavoriteRecord, HistoryCreate, HistoryEntry
from app.repositories.base import IFavoriteRepository, IHistoryRepository
from app.utils.ids import new_record_id, utc_now_iso

logger = logging.getLogger(__name__)

COLLECTIONS = ("favorites", "history")


class JsonFileStore:
    """db.json 문서를 소유하는 저장소 (수명주기: init → reset_for_test → shutdown)

    Attributes:
        path (Path): JSON 문서 경로
        favorites (JsonFavoriteRepository): favorites 컬렉션 뷰
        history (JsonHistoryRepository): history 컬렉션 뷰
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.lock = threading.RLock()
        self._closed = False
        self.favorites = JsonFavoriteRepository(self)
        self.history = JsonHistoryRepository(self)

    def init(self) -> "JsonFileStore":
        """문서가 없으면 빈 컬렉션으로 생성하고, 있으면 누락된 컬렉션을 채웁니다."""
        with self.lock:
            self._closed = False
            if self.path.exists():
                doc = self._read()
                if all(name in doc for name in COLLECTIONS):
                    return self
            else:
                doc = {}
            for name in COLLECTIONS:
                doc.setdefault(name, [])
            self._write(doc)
            logger.info(f"Initialized JSON store at {self.path}")
        return self

    def reset_for_test(self) -> None:
        """모든 컬렉션을 비웁니다. (테스트/관리 전용)"""
        with self.transaction() as doc:
            for name in COLLECTIONS:
                doc[name] = []
        logger.warning(f"JSON store reset: {self.path}")

    def shutdown(self) -> None:
        with self.lock:
            self._closed = True

    def snapshot(self, collection: str) -> list:
        with self.lock:
            self._ensure_open()
            return list(self._read().get(collection, []))

    @contextmanager
    def transaction(self) -> Iterator[dict]:
        """
        배타적 read-modify-write 구간

        블록이 예외 없이 끝날 때만 문서를 기록합니다.
        """
        with self.lock:
            self._ensure_open()
            doc = self._read()
            yield doc
            self._write(doc)

    def _ensure_open(self) -> None:
        if self._closed:
            raise StoreUnavailableError(message="Favorites store has been shut down")

    def _read(self) -> dict:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                doc = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read JSON store {self.path}: {e}", exc_info=True)
            raise StoreUnavailableError() from e

        if not isinstance(doc, dict):
            logger.error(f"JSON store {self.path} does not contain an object")
            raise StoreUnavailableError(message="Favorites store document is malformed")
        return doc

    def _write(self, doc: dict) -> None:
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(doc, tmp, ensure_ascii=False, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to write JSON store {self.path}: {e}", exc_info=True)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailableError() from e


def _parse(model, items: list) -> list:
    try:
        return [model.model_validate(item) for item in items]
    except ValidationError as e:
        logger.error(f"Malformed {model.__name__} in JSON store: {e}")
        raise StoreUnavailableError(message="Favorites store document is malformed") from e


def _key_of(item: dict) -> FavoriteKey:
    # 이전 데이터는 userId가 숫자일 수 있으므로 문자열로 변환 후 비교
    return FavoriteKey.of(str(item.get("userId", "")), str(item.get("city", "")))


class JsonFavoriteRepository(IFavoriteRepository):
    """JsonFileStore의 favorites 컬렉션 뷰"""

    def __init__(self, store: JsonFileStore):
        self._store = store

    def list_all(self) -> List[FavoriteRecord]:
        return _parse(FavoriteRecord, self._store.snapshot("favorites"))

    def get(self, favorite_id: str) -> Optional[FavoriteRecord]:
        for item in self._store.snapshot("favorites"):
            if str(item.get("id")) == favorite_id:
                return _parse(FavoriteRecord, [item])[0]
        return None

    def create(self, candidate: FavoriteCreate) -> FavoriteRecord:
        with self._store.transaction() as doc:
            return self._append(doc, candidate)

    def create_if_absent(self, key: FavoriteKey, candidate: FavoriteCreate) -> Tuple[FavoriteRecord, bool]:
        # 검사와 추가를 같은 Lock 구간에서 수행 (RLock이므로 transaction 재진입 가능)
        with self._store.lock:
            for item in self._store.snapshot("favorites"):
                if _key_of(item) == key:
                    return _parse(FavoriteRecord, [item])[0], False
            with self._store.transaction() as doc:
                return self._append(doc, candidate), True

    def delete(self, favorite_id: str) -> bool:
        with self._store.transaction() as doc:
            items = doc.setdefault("favorites", [])
            remaining = [item for item in items if str(item.get("id")) != favorite_id]
            removed = len(remaining) != len(items)
            doc["favorites"] = remaining
        return removed

    def reset(self) -> None:
        with self._store.transaction() as doc:
            doc["favorites"] = []

    @staticmethod
    def _append(doc: dict, candidate: FavoriteCreate) -> FavoriteRecord:
        record = FavoriteRecord(
            id=new_record_id(),
            userId=candidate.userId,
            city=candidate.city,
            coordinates=candidate.coordinates,
        )
        doc.setdefault("favorites", []).append(record.model_dump(mode="json"))
        return record


class JsonHistoryRepository(IHistoryRepository):
    """JsonFileStore의 history 컬렉션 뷰"""

    def __init__(self, store: JsonFileStore):
        self._store = store

    def list_all(self) -> List[HistoryEntry]:
        return _parse(HistoryEntry, self._store.snapshot("history"))

    def add(self, entry: HistoryCreate) -> HistoryEntry:
        stored = HistoryEntry(
            id=new_record_id(),
            type=entry.type,
            userId=entry.userId,
            timestamp=entry.timestamp or utc_now_iso(),
            details=entry.details,
        )
        with self._store.transaction() as doc:
            doc.setdefault("history", []).append(stored.model_dump(mode="json", exclude_none=True))
        return stored

    def reset(self) -> None:
        with self._store.transaction() as doc:
            doc["history"] = []
