import os
from dotenv import load_dotenv

load_dotenv()

APP_ENV = os.getenv("APP_ENV", "production")
IS_DEBUG = APP_ENV == "development"


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# 저장소 백엔드: "json" (단일 JSON 문서) | "sql" (SQLAlchemy + UniqueConstraint)
STORE_BACKEND = os.getenv("STORE_BACKEND", "json").strip().lower()
FAVORITES_DB_PATH = os.getenv("FAVORITES_DB_PATH", "db.json")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./favorites.db")

# NOTE: /reset 은 테스트/관리 용도 전용. production 에서는 플래그와 무관하게 라우팅하지 않음.
ENABLE_TEST_RESET = _parse_bool(os.getenv("ENABLE_TEST_RESET"), default=False)

RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))
RATE_LIMIT_ENABLED = _parse_bool(os.getenv("RATE_LIMIT_ENABLED"), default=True)

LOG_DIR = os.getenv("LOG_DIR", "logs")

if STORE_BACKEND not in ("json", "sql"):
    raise ValueError(f"STORE_BACKEND must be 'json' or 'sql', got {STORE_BACKEND!r}")


def reset_route_enabled(app_env: str = None, flag: bool = None) -> bool:
    """
    /reset 라우트 노출 여부

    Rationale:
        초기화 엔드포인트는 컬렉션 전체를 지우므로 명시적 플래그가 켜져 있고
        production 환경이 아닐 때만 라우터에 포함합니다.
    """
    env = APP_ENV if app_env is None else app_env
    enabled = ENABLE_TEST_RESET if flag is None else flag
    return enabled and env != "production"


# CORS 허용 오리진 (환경변수 기반)
def _parse_origins(value: str | None) -> list[str]:
    if not value:
        return []
    normalized = value.replace("\n", ",").replace(";", ",")
    items = [item.strip() for item in normalized.split(",")]
    return [item for item in items if item]

_DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

_cors_allowed_origins = _parse_origins(os.getenv("CORS_ALLOWED_ORIGINS"))

# 중복 제거를 위해 dict 키 보존 방식 사용
ALLOWED_ORIGINS = list(dict.fromkeys(_DEFAULT_ALLOWED_ORIGINS + _cors_allowed_origins))
