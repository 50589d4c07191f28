from sqlalchemy import Column, Integer, String, JSON
from app.core.database import Base

class History(Base):
    """검색/로그인/즐겨찾기 이력 테이블 모델입니다. (append-only)

    Args:
        seq (int): 삽입 순서 (PK, Auto Increment).
        id (str): 외부에 노출되는 레코드 ID (uuid4 hex).
        type (str): search | login | favorite.
        user_id (str): 사용자 식별값.
        timestamp (str): 클라이언트가 보낸 ISO-8601 시각 (없으면 서버 시각).
        details (dict): 검색어, 좌표, 성공 여부 등 부가 정보.
    """
    __tablename__ = "history"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(32), nullable=False, unique=True, index=True)
    type = Column(String(16), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)
    timestamp = Column(String(64), nullable=False)
    details = Column(JSON, nullable=False, default=dict)
