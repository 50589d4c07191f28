from app.exception.base_exception import BaseCustomException, ErrorCode


class StoreUnavailableError(BaseCustomException):
    """
    저장 매체를 읽거나 쓸 수 없음 (디스크 I/O, 손상된 문서, DB 연결 실패 등)

    Rationale:
        호출자(승인 게이트)는 이 예외를 "중복 없음"으로 해석하지 않고 500으로 노출해야 합니다.
    """
    error_code = ErrorCode.STORE_UNAVAILABLE
    message = "Favorites store is unavailable"
    status_code = 500
