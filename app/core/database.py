from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """SQLAlchemy 엔진 생성

    Rationale:
        FastAPI의 동기 엔드포인트는 스레드풀에서 실행되므로 SQLite는
        check_same_thread=False가 필요합니다. 인메모리 SQLite는 연결마다 DB가
        분리되므로 StaticPool로 단일 연결을 공유합니다.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    # NOTE: 요청마다 독립적인 세션을 생성하기 위해 sessionmaker 팩토리를 사용함.
    return sessionmaker(autoflush=False, bind=engine, expire_on_commit=False)
