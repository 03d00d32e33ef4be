"""日志系统模块 - 结构化格式、日志轮换"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Optional, TextIO, Union

import structlog
from pythonjsonlogger import jsonlogger

DEFAULT_LOG_CONFIG: dict[str, Any] = {
    "level": "INFO",
    "format": "text",  # text or json
    "max_file_size": 50 * 1024 * 1024,  # 50MB
    "backup_count": 5,
}


class RouterLogging:
    """Bridge Router 日志配置"""

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        log_file: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.config = {**DEFAULT_LOG_CONFIG, **(config or {})}
        self.log_file = Path(log_file) if log_file else None
        self.stream = stream or sys.stdout
        self._setup_standard_logging()
        self._setup_structlog()

    def _build_file_handler(self) -> Optional[logging.Handler]:
        """创建轮换文件处理器"""
        if not self.log_file:
            return None

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.config["max_file_size"],
                backupCount=self.config["backup_count"],
                encoding="utf-8",
            )
        except OSError as e:
            print(f"Failed to setup file logging: {e}", file=sys.stderr)
            return None

        if self.config["format"] == "json":
            formatter: logging.Formatter = jsonlogger.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
        file_handler.setFormatter(formatter)
        return file_handler

    def _setup_standard_logging(self) -> None:
        """设置标准日志系统"""
        log_level = str(self.config["level"]).upper()

        handlers: list[logging.Handler] = [logging.StreamHandler(self.stream)]
        file_handler = self._build_file_handler()
        if file_handler is not None:
            handlers.append(file_handler)

        logging.basicConfig(
            level=getattr(logging, log_level, logging.INFO),
            format="%(message)s",
            handlers=handlers,
            force=True,  # 覆盖现有配置
        )

        # 禁用第三方库的噪音日志
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    def _setup_structlog(self) -> None:
        """配置structlog，最终输出交给标准日志处理器"""
        processors = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if self.config["format"] == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=False))

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )


# 全局日志实例
_global_logging: Optional[RouterLogging] = None


def setup_logging(
    config: Optional[dict[str, Any]] = None,
    log_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
) -> RouterLogging:
    """
    设置全局日志系统

    Args:
        config: 日志配置字典 (level / format / max_file_size / backup_count)
        log_file: 日志文件路径，为空时只输出到控制台
        stream: 控制台输出流，默认stdout

    Returns:
        RouterLogging实例
    """
    global _global_logging
    _global_logging = RouterLogging(config, log_file, stream)
    return _global_logging


def get_logger(name: Optional[str] = None):
    """
    获取日志记录器

    Args:
        name: 日志记录器名称

    Returns:
        structlog日志记录器
    """
    return structlog.get_logger(name)
