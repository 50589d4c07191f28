from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from app.api.dependencies import get_history_service
from app.models.dto import HistoryCreate, HistoryEntry
from app.services.history_service import HistoryService

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", status_code=status.HTTP_200_OK, response_model=List[HistoryEntry], response_model_exclude_none=True)
def list_history(
    user_id: Optional[str] = Query(None, alias="userId"),
    service: HistoryService = Depends(get_history_service),
) -> List[HistoryEntry]:
    """이력 목록 조회 (삽입 순서, userId 필터는 대소문자 무시)"""
    return service.list_history(user_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=HistoryEntry, response_model_exclude_none=True)
def add_history(
    entry: HistoryCreate,
    service: HistoryService = Depends(get_history_service),
) -> HistoryEntry:
    """검색/로그인/즐겨찾기 이력 추가 (timestamp 누락 시 서버 시각)"""
    return service.record(entry)
