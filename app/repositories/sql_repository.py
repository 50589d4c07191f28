from contextlib import nullcontext
from typing import List, Optional, Tuple
import logging
import threading

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.database import Base, build_engine, build_session_factory
from app.exception.store_exception import StoreUnavailableError
from app.models.dto import Coordinates, FavoriteCreate, FavoriteKey, FavoriteRecord, HistoryCreate, HistoryEntry
from app.models.favorite import Favorite
from app.models.history import History
from app.repositories.base import IFavoriteRepository, IHistoryRepository
from app.utils.ids import new_record_id, utc_now_iso

logger = logging.getLogger(__name__)


def _to_record(row: Favorite) -> FavoriteRecord:
    return FavoriteRecord(
        id=row.id,
        userId=row.user_id,
        city=row.city,
        coordinates=Coordinates(lat=row.lat, lon=row.lon),
    )


class SqlFavoriteRepository(IFavoriteRepository):
    """
    SQLAlchemy 기반 즐겨찾기 저장소 구현체
    테이블: favorites, UniqueConstraint(user_key, city_key)

    Rationale:
        중복 방지를 DB 유니크 제약에 위임합니다. 동시에 같은 키로 insert가 들어오면
        하나만 커밋되고 나머지는 IntegrityError → 기존 레코드 조회로 처리됩니다.
    """

    def __init__(self, engine: Engine, lock: Optional[threading.Lock] = None):
        self.engine = engine
        self.session_factory = build_session_factory(engine)
        self._lock = lock

    def init(self) -> "SqlFavoriteRepository":
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create favorites table: {e}", exc_info=True)
            raise StoreUnavailableError() from e
        return self

    def list_all(self) -> List[FavoriteRecord]:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                rows = session.scalars(select(Favorite).order_by(Favorite.seq)).all()
                return [_to_record(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list favorites: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def get(self, favorite_id: str) -> Optional[FavoriteRecord]:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                row = session.scalars(select(Favorite).where(Favorite.id == favorite_id)).first()
                return _to_record(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to get favorite {favorite_id}: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def create(self, candidate: FavoriteCreate) -> FavoriteRecord:
        record, created = self.create_if_absent(FavoriteKey.of(candidate.userId, candidate.city), candidate)
        if not created:
            logger.warning(f"Unique constraint kept existing favorite {record.id}; create() returned it")
        return record

    def create_if_absent(self, key: FavoriteKey, candidate: FavoriteCreate) -> Tuple[FavoriteRecord, bool]:
        row = Favorite(
            id=new_record_id(),
            user_id=candidate.userId,
            city=candidate.city,
            user_key=key.user_key,
            city_key=key.city_key,
            lat=candidate.coordinates.lat,
            lon=candidate.coordinates.lon,
        )
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                session.add(row)
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    existing = session.scalars(
                        select(Favorite)
                        .where(Favorite.user_key == key.user_key, Favorite.city_key == key.city_key)
                        .limit(1)
                    ).first()
                    if existing is None:
                        # 유니크 제약 외의 무결성 위반
                        raise
                    return _to_record(existing), False
                return _to_record(row), True
        except SQLAlchemyError as e:
            logger.error(f"Failed to add favorite for user {candidate.userId}: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def delete(self, favorite_id: str) -> bool:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                result = session.execute(delete(Favorite).where(Favorite.id == favorite_id))
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete favorite {favorite_id}: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def reset(self) -> None:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                session.execute(delete(Favorite))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to reset favorites: {e}", exc_info=True)
            raise StoreUnavailableError() from e


class SqlHistoryRepository(IHistoryRepository):
    """SQLAlchemy 기반 이력 저장소 구현체 (테이블: history)"""

    def __init__(self, engine: Engine, lock: Optional[threading.Lock] = None):
        self.engine = engine
        self.session_factory = build_session_factory(engine)
        self._lock = lock

    def list_all(self) -> List[HistoryEntry]:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                rows = session.scalars(select(History).order_by(History.seq)).all()
                return [
                    HistoryEntry(
                        id=row.id,
                        type=row.type,
                        userId=row.user_id,
                        timestamp=row.timestamp,
                        details=row.details or {},
                    )
                    for row in rows
                ]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list history: {e}", exc_info=True)
            raise StoreUnavailableError() from e

    def add(self, entry: HistoryCreate) -> HistoryEntry:
        stored = HistoryEntry(
            id=new_record_id(),
            type=entry.type,
            userId=entry.userId,
            timestamp=entry.timestamp or utc_now_iso(),
            details=entry.details,
        )
        row = History(
            id=stored.id,
            type=stored.type,
            user_id=stored.userId,
            timestamp=stored.timestamp,
            details=stored.details.model_dump(mode="json", exclude_none=True),
        )
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to add history for user {entry.userId}: {e}", exc_info=True)
            raise StoreUnavailableError() from e
        return stored

    def reset(self) -> None:
        try:
            with self._lock or nullcontext(), self.session_factory() as session:
                session.execute(delete(History))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to reset history: {e}", exc_info=True)
            raise StoreUnavailableError() from e


class SqlStore:
    """DATABASE_URL 기반 저장소 (수명주기: init → reset_for_test → shutdown)

    CAUTION:
        SQLite는 쓰기 트랜잭션이 하나뿐이고, 인메모리 DB는 단일 연결(StaticPool)을 공유하므로
        SQLite 엔진에서는 두 테이블에 대한 모든 세션을 하나의 Lock으로 직렬화합니다.
    """

    def __init__(self, database_url: str):
        self.engine = build_engine(database_url)
        lock = threading.Lock() if self.engine.dialect.name == "sqlite" else None
        self.favorites = SqlFavoriteRepository(self.engine, lock=lock)
        self.history = SqlHistoryRepository(self.engine, lock=lock)

    def init(self) -> "SqlStore":
        self.favorites.init()
        return self

    def reset_for_test(self) -> None:
        self.favorites.reset()
        self.history.reset()
        logger.warning("SQL store reset")

    def shutdown(self) -> None:
        self.engine.dispose()
