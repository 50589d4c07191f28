from enum import Enum

class ErrorCode(str, Enum):
    """
    애플리케이션 전반에서 사용하는 에러 코드 정의.
    형식: 카테고리(영문)-번호(3자리)
    """
    # 1. COMMON: 공통/일반 에러
    GENERIC_UNKNOWN = "GENERIC-000"
    COMMON_INTERNAL_ERROR = "COMMON-001"
    COMMON_BAD_REQUEST = "COMMON-002"
    VALIDATION_ERROR = "VALIDATION-001"

    # 2. FAVORITE: 즐겨찾기 승인/조회
    FAVORITE_INVALID = "FAVORITE-001"
    FAVORITE_CONFLICT = "FAVORITE-002"
    FAVORITE_NOT_FOUND = "FAVORITE-003"

    # 3. HISTORY: 검색/즐겨찾기 이력
    HISTORY_INVALID = "HISTORY-001"

    # 4. STORE: 저장소 I/O
    STORE_UNAVAILABLE = "STORE-001"

    # 5. RATE: 요청 제한
    RATE_LIMITED = "RATE-001"

    @staticmethod
    def http_error(status_code: int) -> str:
        return f"HTTP_{status_code}"


class BaseCustomException(Exception):
    """
    모든 커스텀 예외의 최상위 클래스.
    이 클래스를 상속받아 구체적인 예외를 정의해야 함.

    `extra()`가 반환하는 dict는 에러 응답 본문에 그대로 병합됩니다.
    """
    error_code: ErrorCode = ErrorCode.GENERIC_UNKNOWN
    message: str = "알 수 없는 오류가 발생했습니다."
    status_code: int = 500

    def __init__(self, message: str = None, error_code: ErrorCode = None, status_code: int = None):
        if message:
            self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(self.message)

    def extra(self) -> dict:
        return {}
