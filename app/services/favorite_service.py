"""
즐겨찾기 승인(Admission) 서비스

새 즐겨찾기를 저장하기 전에 같은 사용자 + 같은 도시(대소문자/앞뒤 공백 무시)의
레코드가 이미 있는지 판정합니다.

비즈니스 맥락:
- 한 사용자는 같은 도시를 한 번만 즐겨찾기할 수 있음 (도시 이름 대소문자 무관)
- 저장 값은 사용자가 보낸 원래 표기를 그대로 유지하고, 비교에만 정규화 값을 사용
- 동시에 같은 도시를 여러 번 추가해도 정확히 하나만 생성되어야 함

설계 결정:
- 검사(check)와 저장(act)을 저장소의 create_if_absent 한 번으로 묶음
  (JSON/메모리 저장소는 Lock, SQL 저장소는 유니크 제약으로 원자성 보장)
- 저장소 장애(StoreUnavailableError)는 잡지 않고 그대로 전파하여 500으로 노출
"""

import logging
from typing import List, Optional

from app.exception.favorite_exception import (
    FavoriteConflictError,
    FavoriteNotFoundError,
    FavoriteValidationError,
)
from app.models.dto import FavoriteCreate, FavoriteKey, FavoriteRecord, normalize
from app.repositories.base import IFavoriteRepository

logger = logging.getLogger("app")


class FavoriteAdmissionService:
    """즐겨찾기 승인 게이트.

    사용 예시:
        >>> service = FavoriteAdmissionService(MockFavoriteRepository())
        >>> record = service.submit_favorite(FavoriteCreate(userId="u1", city="London",
        ...                                  coordinates={"lat": 51.5074, "lon": -0.1278}))
    """

    def __init__(self, repository: IFavoriteRepository):
        self.repository = repository

    def submit_favorite(self, candidate: FavoriteCreate) -> FavoriteRecord:
        """
        즐겨찾기 생성 요청을 승인하거나 거절합니다.

        Raises:
            FavoriteValidationError: userId/city 누락 또는 좌표 누락/비정상
            FavoriteConflictError: 같은 (userId, city) 키가 이미 존재 (저장 없음)
            StoreUnavailableError: 저장소 I/O 실패
        """
        key = self.validate(candidate)

        record, created = self.repository.create_if_absent(key, candidate)
        if not created:
            logger.info(
                f"Rejected duplicate favorite user={key.user_key} city={key.city_key} existing={record.id}"
            )
            raise FavoriteConflictError(
                existing=record.model_dump(mode="json"),
                requested=key.as_requested(),
            )

        logger.info(f"Created favorite {record.id} for user={key.user_key} city={record.city}")
        return record

    @staticmethod
    def validate(candidate: FavoriteCreate) -> FavoriteKey:
        """요청을 검증하고 정규화된 중복 판정 키를 반환합니다."""
        if not candidate.userId or not candidate.userId.strip() or not candidate.city or not candidate.city.strip():
            raise FavoriteValidationError()

        coordinates = candidate.coordinates
        if coordinates is None:
            raise FavoriteValidationError(message="Missing required field: coordinates")

        return FavoriteKey.of(candidate.userId, candidate.city)

    def list_favorites(self, user_id: Optional[str] = None) -> List[FavoriteRecord]:
        """전체(또는 특정 사용자, 대소문자 무시) 즐겨찾기를 삽입 순서대로 반환"""
        records = self.repository.list_all()
        if user_id is None:
            return records
        user_key = normalize(user_id)
        return [record for record in records if record.key.user_key == user_key]

    def get_favorite(self, favorite_id: str) -> FavoriteRecord:
        record = self.repository.get(favorite_id)
        if record is None:
            raise FavoriteNotFoundError(favorite_id)
        return record

    def remove_favorite(self, favorite_id: str) -> None:
        if not self.repository.delete(favorite_id):
            raise FavoriteNotFoundError(favorite_id)
        logger.info(f"Removed favorite {favorite_id}")
