import uuid
from datetime import datetime, timezone


def new_record_id() -> str:
    """저장소가 부여하는 불투명 레코드 ID (uuid4 hex)"""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
