from typing import Protocol, List, Optional, Tuple
from app.models.dto import FavoriteCreate, FavoriteKey, FavoriteRecord, HistoryCreate, HistoryEntry

class IFavoriteRepository(Protocol):
    """즐겨찾기 저장소 인터페이스 (Repository Pattern Protocol)

    모든 구현체는 저장 매체 I/O 실패 시 StoreUnavailableError를 발생시켜야 합니다.
    """

    def list_all(self) -> List[FavoriteRecord]:
        """
        전체 즐겨찾기 목록 조회

        Returns:
            List[FavoriteRecord]: 삽입 순서대로 정렬된 전체 레코드
        """
        ...

    def get(self, favorite_id: str) -> Optional[FavoriteRecord]:
        """
        ID로 단건 조회

        Returns:
            Optional[FavoriteRecord]: 없으면 None
        """
        ...

    def create(self, candidate: FavoriteCreate) -> FavoriteRecord:
        """
        중복 검사 없이 ID를 부여하여 저장 (일반 생성 경로)

        NOTE: SQL 저장소는 유니크 제약 때문에 같은 키가 이미 있으면 새로 저장하지 않고
        기존 레코드를 반환합니다 (warning 로그).
        """
        ...

    def create_if_absent(self, key: FavoriteKey, candidate: FavoriteCreate) -> Tuple[FavoriteRecord, bool]:
        """
        원자적 insert-if-absent

        Args:
            key (FavoriteKey): 정규화된 (userId, city) 키
            candidate (FavoriteCreate): 검증이 끝난 생성 요청

        Returns:
            Tuple[FavoriteRecord, bool]: (생성된 레코드, True) 또는 (기존 레코드, False)
        """
        ...

    def delete(self, favorite_id: str) -> bool:
        """
        즐겨찾기 삭제

        Returns:
            bool: 삭제했으면 True, 존재하지 않으면 False
        """
        ...

    def reset(self) -> None:
        """컬렉션 전체 삭제 (테스트/관리 전용)"""
        ...


class IHistoryRepository(Protocol):
    """이력 저장소 인터페이스 (append-only)"""

    def list_all(self) -> List[HistoryEntry]:
        ...

    def add(self, entry: HistoryCreate) -> HistoryEntry:
        ...

    def reset(self) -> None:
        ...
