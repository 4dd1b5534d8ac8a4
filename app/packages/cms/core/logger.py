"""日志配置模块：统一格式、按业务通道划分日志器，并附带请求 ID。

所有日志器都挂在 ``app`` 之下，按业务划分通道：

- ``app.store``：记录文件读写与缓存；
- ``app.media``：媒体库、回收站与图片处理；
- ``app.content``：内容、配置与通知；
- ``app.auth``：登录与令牌校验。

各通道的级别可通过 ``LOG_CHANNEL_LEVELS``（如 ``store=DEBUG,media=WARNING``）单独调整。
"""

import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from .config import get_settings

ROOT_LOGGER_NAME = "app"
LOG_CHANNELS = ("store", "media", "content", "auth")

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s: %(message)s"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def set_request_id(request_id: Optional[str]) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def get_logger(channel: Optional[str] = None) -> logging.Logger:
    """返回 ``app`` 或 ``app.<channel>`` 日志器。"""
    if channel is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if channel not in LOG_CHANNELS:
        raise ValueError(f"Unknown log channel: {channel}")
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{channel}")


class RequestIdFilter(logging.Filter):
    """把当前请求 ID 写入每条日志记录，请求之外记为 ``-``。"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id_ctx.get() or "-"
        return True


class _LocalTimeFormatter(logging.Formatter):
    """按配置时区渲染时间戳，未指定 datefmt 时输出毫秒精度的 ISO-8601。"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created, get_settings().timezone_info)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(sep=" ", timespec="milliseconds")


class ColorFormatter(_LocalTimeFormatter):
    """终端彩色输出：只给级别名着色，消息正文保持原样便于复制。"""

    RESET = "\033[0m"
    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;41m",
    }

    def __init__(self, fmt: str = TEXT_FORMAT, datefmt: Optional[str] = None, use_colors: Optional[bool] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        if not color:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


class JsonFormatter(_LocalTimeFormatter):
    """单行 JSON 输出，``channel`` 为去掉 ``app.`` 前缀后的通道名。"""

    def format(self, record: logging.LogRecord) -> str:
        name = record.name
        channel = name[len(ROOT_LOGGER_NAME) + 1:] if name.startswith(f"{ROOT_LOGGER_NAME}.") else name
        payload = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "channel": channel,
            "request_id": getattr(record, "request_id", None),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging() -> None:
    """初始化日志：控制台 + 按时间轮转的文件，``app`` 及 uvicorn 日志统一输出。"""
    settings = get_settings()
    settings.log_directory.mkdir(parents=True, exist_ok=True)

    console_formatter = "json" if settings.log_json else "color"
    file_formatter = "json" if settings.log_json else "text"
    handlers = ["console", "file"]

    loggers: dict[str, dict] = {
        name: {"handlers": handlers, "level": settings.log_level, "propagate": False}
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access", ROOT_LOGGER_NAME)
    }
    for channel, level in settings.log_channel_levels.items():
        if channel in LOG_CHANNELS:
            loggers[f"{ROOT_LOGGER_NAME}.{channel}"] = {"level": level}

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_id": {"()": RequestIdFilter}},
            "formatters": {
                "color": {"()": ColorFormatter},
                "text": {"()": _LocalTimeFormatter, "fmt": TEXT_FORMAT},
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": console_formatter,
                    "filters": ["request_id"],
                },
                "file": {
                    "class": "logging.handlers.TimedRotatingFileHandler",
                    "formatter": file_formatter,
                    "filters": ["request_id"],
                    "filename": str(settings.log_file_path),
                    "when": settings.log_rotate_when,
                    "backupCount": settings.log_backup_count,
                    "encoding": "utf-8",
                    "delay": True,
                },
            },
            "loggers": loggers,
            "root": {"handlers": handlers, "level": settings.log_level},
        }
    )


logger = get_logger()
