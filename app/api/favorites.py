from fastapi import APIRouter, Depends, Query, Request, status
from typing import Dict, List, Optional
from app.api.dependencies import get_favorite_service
from app.core.limiter import FAVORITE_WRITE_LIMIT, limiter
from app.models.dto import FavoriteCreate, FavoriteRecord
from app.services.favorite_service import FavoriteAdmissionService

router = APIRouter(
    prefix="/favorites",
    tags=["Favorites"],
    responses={404: {"description": "Not found"}},
)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=FavoriteRecord)
@limiter.limit(FAVORITE_WRITE_LIMIT)
def add_favorite(
    request: Request,
    favorite: FavoriteCreate,
    service: FavoriteAdmissionService = Depends(get_favorite_service),
) -> FavoriteRecord:
    """
    즐겨찾기 추가

    - **Body**: {userId, city, coordinates: {lat, lon}}

    Returns:
        201 Created: 생성된 레코드 (id 포함)
        400 Bad Request: userId/city/coordinates 누락 또는 형식 오류
        409 Conflict: 같은 사용자 + 도시(대소문자 무시)가 이미 존재 {error, existing, requested}
    """
    return service.submit_favorite(favorite)


@router.get("", status_code=status.HTTP_200_OK, response_model=List[FavoriteRecord])
def list_favorites(
    user_id: Optional[str] = Query(None, alias="userId", description="사용자 필터 (대소문자 무시)"),
    service: FavoriteAdmissionService = Depends(get_favorite_service),
) -> List[FavoriteRecord]:
    """즐겨찾기 목록 조회 (삽입 순서)"""
    return service.list_favorites(user_id)


@router.get("/{favorite_id}", status_code=status.HTTP_200_OK, response_model=FavoriteRecord)
def get_favorite(
    favorite_id: str,
    service: FavoriteAdmissionService = Depends(get_favorite_service),
) -> FavoriteRecord:
    return service.get_favorite(favorite_id)


@router.delete("/{favorite_id}", status_code=status.HTTP_200_OK)
@limiter.limit(FAVORITE_WRITE_LIMIT)
def delete_favorite(
    request: Request,
    favorite_id: str,
    service: FavoriteAdmissionService = Depends(get_favorite_service),
) -> Dict:
    """
    즐겨찾기 삭제

    Returns:
        200 OK: {} (json-server와 동일)
        404 Not Found: 존재하지 않는 ID
    """
    service.remove_favorite(favorite_id)
    return {}
