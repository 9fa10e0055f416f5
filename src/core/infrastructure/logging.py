"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于抓取轮次、单个 feed 刷新等业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/photojournalism_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


def get_business_logger() -> structlog.BoundLogger:
    """获取业务事件日志记录器。

    Usage:
        from src.core.infrastructure.logging import get_business_logger

        log = get_business_logger()
        log.info("feed_refreshed", feed_id="https://example.com/rss", photos=12)
    """
    return structlog.get_logger("business")


class BusinessEvents:
    """业务事件日志助手类。

    保证刷新相关事件的字段名在各调用点一致。
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def refresh_round_dispatched(
        cls,
        round_no: int,
        feeds: int,
        in_flight: int,
        **extra: Any,
    ) -> None:
        """记录一轮抓取已派发。"""
        cls._log.info(
            "refresh_round_dispatched",
            event_type="refresh",
            round_no=round_no,
            feeds=feeds,
            in_flight=in_flight,
            **extra,
        )

    @classmethod
    def feed_refreshed(
        cls,
        feed_id: str,
        photos: int,
        items: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录单个 feed 刷新成功。"""
        cls._log.info(
            "feed_refreshed",
            event_type="refresh",
            feed_id=feed_id,
            photos=photos,
            items=items,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def feed_refresh_failed(
        cls,
        feed_id: str,
        error: str,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """记录单个 feed 刷新失败（缓存保留旧数据）。"""
        cls._log.warning(
            "feed_refresh_failed",
            event_type="refresh",
            feed_id=feed_id,
            error=error,
            duration_ms=duration_ms,
            **extra,
        )
