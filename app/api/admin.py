"""
테스트/관리 전용 라우터

main.py에서 reset_route_enabled()가 참일 때만 포함됩니다. (production 미노출)
"""
import logging
from fastapi import APIRouter, Depends, status
from app.api.dependencies import get_favorite_repository, get_history_repository
from app.models.dto import MessageResponse
from app.repositories.base import IFavoriteRepository, IHistoryRepository

logger = logging.getLogger("app")

router = APIRouter(tags=["Admin"])


@router.post("/reset", status_code=status.HTTP_200_OK, response_model=MessageResponse)
def reset_database(
    favorites: IFavoriteRepository = Depends(get_favorite_repository),
    history: IHistoryRepository = Depends(get_history_repository),
) -> MessageResponse:
    """favorites, history 컬렉션 전체 초기화"""
    favorites.reset()
    history.reset()
    logger.warning("Database reset via /reset")
    return MessageResponse(message="Database reset successful")
