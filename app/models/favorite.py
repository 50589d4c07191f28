from datetime import datetime
from sqlalchemy import Column, Float, Integer, String, UniqueConstraint, DateTime
from app.core.database import Base

class Favorite(Base):
    """사용자의 즐겨찾기 위치를 저장하는 테이블 모델입니다.

    Args:
        seq (int): 삽입 순서 (PK, Auto Increment).
        id (str): 외부에 노출되는 레코드 ID (uuid4 hex).
        user_id (str): 제출된 그대로의 사용자 식별값.
        city (str): 제출된 그대로의 위치 이름 (대소문자 보존).
        user_key (str): 중복 판정용 정규화 값 (trim + lowercase).
        city_key (str): 중복 판정용 정규화 값 (trim + lowercase).
        lat (float), lon (float): 좌표.
        created_at (datetime): 생성 일시.

    Rationale:
        (user_key, city_key) 유니크 제약으로 동시 요청에서도 사용자별 도시 중복을 DB가 보장합니다.
    """
    __tablename__ = "favorites"
    __table_args__ = (
        UniqueConstraint('user_key', 'city_key', name='uq_favorites_user_city'),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True, index=True)
    user_id = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)

    user_key = Column(String(255), nullable=False, index=True)
    city_key = Column(String(255), nullable=False)

    lat = Column(Float, nullable=False)
    lon = Column(Float, nullable=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
