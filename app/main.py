from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.admin import router as admin_router
from app.api.dependencies import get_store
from app.api.favorites import router as favorites_router
from app.api.history import router as history_router
from app.core.config import ALLOWED_ORIGINS, LOG_DIR, reset_route_enabled
from app.core.limiter import limiter
from app.core.logging_config import setup_logging
from app.core.middleware import CacheControlMiddleware, TraceIDMiddleware
from app.exception.base_exception import BaseCustomException
from app.exception.exception_handler import (
    custom_exception_handler,
    global_exception_handler,
    http_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # 저장소가 실제로 생성된 경우에만 정리
    if get_store.cache_info().currsize:
        get_store().shutdown()
        get_store.cache_clear()


def create_app(enable_reset: bool = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성

    Args:
        enable_reset (bool): /reset 라우트 포함 여부. None이면 환경변수 기반(reset_route_enabled).
    """
    app = FastAPI(title="Weather Favorites API", lifespan=lifespan)
    app.state.limiter = limiter

    # NOTE: 나중에 추가한 미들웨어가 바깥쪽에서 실행됨 (TraceID가 가장 먼저)
    app.add_middleware(CacheControlMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TraceIDMiddleware)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    app.include_router(favorites_router)
    app.include_router(history_router)

    if enable_reset is None:
        enable_reset = reset_route_enabled()
    if enable_reset:
        app.include_router(admin_router)
        logger.warning("Test-only /reset route is enabled")

    # 커스텀 예외 핸들러는 라우터 포함 이후에 추가
    app.add_exception_handler(BaseCustomException, custom_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


# 로깅 설정(콘솔 + 일자별 파일 로테이션, JSON 포맷)
setup_logging(LOG_DIR)

app = create_app()
