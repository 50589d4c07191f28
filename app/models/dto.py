from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Literal, NamedTuple, Optional


class Coordinates(BaseModel):
    """위치 좌표 (위도/경도, 유한한 실수만 허용)"""
    lat: float = Field(..., ge=-90, le=90, allow_inf_nan=False, description="Latitude")
    lon: float = Field(..., ge=-180, le=180, allow_inf_nan=False, description="Longitude")


class FavoriteKey(NamedTuple):
    """
    중복 판정용 정규화 키 (trim + lowercase)

    Rationale:
        저장되는 값의 대소문자는 보존하고, 비교에만 정규화된 값을 사용합니다.
        좌표는 키에 포함하지 않습니다.
    """
    user_key: str
    city_key: str

    @classmethod
    def of(cls, user_id: str, city: str) -> "FavoriteKey":
        return cls(normalize(user_id), normalize(city))

    def as_requested(self) -> dict:
        return {"userId": self.user_key, "city": self.city_key}


def normalize(value: str) -> str:
    return value.strip().lower()


# Request DTO
class FavoriteCreate(BaseModel):
    """
    즐겨찾기 생성 요청

    userId/city/coordinates 누락은 승인 게이트에서 FavoriteValidationError로 처리하므로
    여기서는 Optional로 받습니다. 좌표 값 자체의 형식 오류는 Pydantic에서 걸러집니다.
    """
    model_config = ConfigDict(extra="ignore")

    userId: Optional[str] = Field(None, description="Owning user identifier")
    city: Optional[str] = Field(None, description="Location label (original casing preserved)")
    coordinates: Optional[Coordinates] = Field(None, description="Location coordinates")

    @field_validator("userId", mode="before")
    @classmethod
    def stringify_user_id(cls, v):
        """클라이언트가 숫자 사용자 id를 보내도 문자열로 받음"""
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


# Response DTO
class FavoriteRecord(BaseModel):
    """저장된 즐겨찾기 레코드"""
    id: str = Field(..., description="Store-assigned opaque identifier")
    userId: str
    city: str
    coordinates: Coordinates

    @field_validator("id", "userId", mode="before")
    @classmethod
    def stringify_id(cls, v):
        """json-server 시절의 정수 id/userId도 문자열로 통일"""
        return str(v) if isinstance(v, int) else v

    @property
    def key(self) -> FavoriteKey:
        return FavoriteKey.of(self.userId, self.city)


HistoryType = Literal["search", "login", "favorite"]


class HistoryDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    query: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    success: Optional[bool] = None
    action: Optional[Literal["add", "remove"]] = None
    location: Optional[str] = None


class HistoryCreate(BaseModel):
    """검색/로그인/즐겨찾기 이력 생성 요청"""
    model_config = ConfigDict(extra="ignore")

    type: HistoryType
    userId: Optional[str] = None
    timestamp: Optional[str] = Field(None, description="ISO-8601; defaults to now (UTC)")
    details: HistoryDetails = Field(default_factory=HistoryDetails)

    @field_validator("userId", mode="before")
    @classmethod
    def stringify_user_id(cls, v):
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("timestamp")
    @classmethod
    def check_iso_timestamp(cls, v):
        if v is None:
            return v
        # Python 3.10의 fromisoformat은 "Z" 접미사를 읽지 못함
        try:
            datetime.fromisoformat(v[:-1] + "+00:00" if v.endswith("Z") else v)
        except ValueError:
            raise ValueError("timestamp must be an ISO-8601 string")
        return v


class HistoryEntry(BaseModel):
    id: str
    type: HistoryType
    userId: str
    timestamp: str
    details: HistoryDetails = Field(default_factory=HistoryDetails)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v) if isinstance(v, int) else v


class MessageResponse(BaseModel):
    message: str
