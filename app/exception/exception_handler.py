from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded
from datetime import datetime
import logging
import traceback

from app.core.config import IS_DEBUG
from app.exception.base_exception import BaseCustomException, ErrorCode

logger = logging.getLogger("app")


def error_body(message: str, code: str, **extra) -> dict:
    """
    에러 응답 본문 생성

    Rationale:
        기존 클라이언트는 json-server 스타일의 {"error": ...} 본문을 기대하므로
        envelope 대신 평탄한 구조에 code와 부가 정보를 병합합니다.
    """
    return {"error": message, "code": code, **extra}


def _code_value(code) -> str:
    return code.value if hasattr(code, "value") else code


async def custom_exception_handler(request: Request, exc: BaseCustomException):
    """
    비즈니스 로직 예외(BaseCustomException)를 에러 본문으로 변환
    """
    error_code_value = _code_value(exc.error_code)
    log_payload = {
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "status": exc.status_code,
        "errorCode": error_code_value,
        "message": exc.message,
        "path": request.url.path,
    }

    # 5xx(저장소 장애 등)는 에러 수준, 4xx는 경고 수준
    if exc.status_code >= 500:
        logger.error(log_payload)
    else:
        logger.warning(log_payload)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, error_code_value, **exc.extra()),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), ErrorCode.http_error(exc.status_code)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Pydantic Validation Error를 400 에러 본문으로 변환

    Rationale:
        잘못된 입력은 클라이언트 에러(400)로 통일하고, 필드별 상세 정보를 details에 담습니다.
    """
    details = {}
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        details[field] = {
            "message": error["msg"],
            "type": error["type"],
        }

    logger.warning({
        "status": status.HTTP_400_BAD_REQUEST,
        "errorCode": ErrorCode.VALIDATION_ERROR.value,
        "path": request.url.path,
        "fields": list(details),
    })

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Invalid request body",
            ErrorCode.VALIDATION_ERROR.value,
            details=details,
        ),
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """slowapi의 RateLimitExceeded를 429 에러 본문으로 변환"""
    logger.warning({
        "status": status.HTTP_429_TOO_MANY_REQUESTS,
        "errorCode": ErrorCode.RATE_LIMITED.value,
        "path": request.url.path,
        "limit": str(exc.detail),
    })
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_body(
            "Too many requests",
            ErrorCode.RATE_LIMITED.value,
        ),
    )


async def global_exception_handler(request: Request, exc: Exception):
    """
    전역 예외 처리 핸들러 (5xx, 미처리 예외)

    상세 스택 트레이스는 로그에만 기록하고, 개발 환경(IS_DEBUG)에서만 응답에 포함합니다.
    """
    logger.exception(
        f"Unhandled Exception: {exc}",
        extra={"path": request.url.path, "method": request.method},
    )

    content = error_body(
        "Internal server error",
        ErrorCode.COMMON_INTERNAL_ERROR.value,
    )
    if IS_DEBUG:
        content["detail"] = {
            "error_detail": str(exc),
            "stack_trace": traceback.format_exc(),
        }

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)
