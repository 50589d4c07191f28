import logging
import json
import os
from logging.handlers import TimedRotatingFileHandler

from app.core.context import get_trace_id

_HANDLER_MARKER = "_favorites_handler"


class TraceIdFilter(logging.Filter):
    """현재 요청의 Trace ID를 로그 레코드에 주입합니다."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = get_trace_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        # 메시지가 dict면 그대로 기반으로 삼고, 아니면 기본 구조 생성
        base_message = record.msg if isinstance(record.msg, dict) else {
            "message": record.getMessage()
        }

        log = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "trace_id": getattr(record, "trace_id", None),
            **base_message,
        }

        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(log_dir: str = "logs", level: int = logging.INFO):
    """
    콘솔 + 일자별 파일 로테이션(JSON 포맷) 로깅 설정

    여러 번 호출되어도 핸들러가 중복 등록되지 않습니다.
    """
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if any(getattr(h, _HANDLER_MARKER, False) for h in root_logger.handlers):
        return

    json_formatter = JsonFormatter()
    trace_filter = TraceIdFilter()

    # 콘솔 핸들러
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(json_formatter)
    console_handler.addFilter(trace_filter)

    # 일자별 파일 로테이션 핸들러 (자정 기준, 7일 보관)
    file_handler = TimedRotatingFileHandler(
        filename=os.path.join(log_dir, "app.log"),
        when="midnight",
        backupCount=7,
        encoding="utf-8",
        utc=False,
    )
    file_handler.setFormatter(json_formatter)
    file_handler.addFilter(trace_filter)

    for handler in (console_handler, file_handler):
        setattr(handler, _HANDLER_MARKER, True)
        root_logger.addHandler(handler)
