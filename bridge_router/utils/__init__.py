"""通用工具"""

from .logger import get_logger, setup_logging
from .request_interval import RequestIntervalGuard
from .ttl_cache import TTLCache

__all__ = ["get_logger", "setup_logging", "RequestIntervalGuard", "TTLCache"]
