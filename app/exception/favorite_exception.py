from app.exception.base_exception import BaseCustomException, ErrorCode


class FavoriteValidationError(BaseCustomException):
    error_code = ErrorCode.FAVORITE_INVALID
    message = "Missing required fields: userId and city"
    status_code = 400


class FavoriteConflictError(BaseCustomException):
    """
    동일 사용자 + 도시(대소문자 무시) 즐겨찾기가 이미 존재함

    Attributes:
        existing (dict): 저장되어 있는 기존 레코드
        requested (dict): 정규화된 요청 키 {"userId", "city"}
    """
    error_code = ErrorCode.FAVORITE_CONFLICT
    message = "Favorite already exists"
    status_code = 409

    def __init__(self, existing: dict, requested: dict):
        super().__init__()
        self.existing = existing
        self.requested = requested

    def extra(self) -> dict:
        return {"existing": self.existing, "requested": self.requested}


class FavoriteNotFoundError(BaseCustomException):
    error_code = ErrorCode.FAVORITE_NOT_FOUND
    message = "Favorite not found"
    status_code = 404

    def __init__(self, favorite_id: str):
        super().__init__(message=f"Favorite not found: {favorite_id}")
        self.favorite_id = favorite_id


class HistoryValidationError(BaseCustomException):
    error_code = ErrorCode.HISTORY_INVALID
    message = "Invalid history entry"
    status_code = 400
