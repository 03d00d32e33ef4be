"""
请求间隔控制 - 确保单个Provider遵守最小请求间隔
"""

import asyncio
import time
from typing import Optional

from .logger import get_logger

logger = get_logger(__name__)


class RequestIntervalGuard:
    """
    单个适配器私有的请求间隔控制器

    在发起新请求前等待足够的时间间隔，避免触发Provider的速率限制。
    min_interval为0表示不限制。
    """

    def __init__(self, name: str, min_interval: float = 0.0):
        self.name = name
        self.min_interval = max(0.0, float(min_interval))
        self._last_request_time: float = 0.0
        # 首次等待时在当前事件循环中创建
        self._lock: Optional[asyncio.Lock] = None

    async def wait_if_needed(self) -> bool:
        """
        如果需要，等待足够的时间间隔

        Returns:
            bool: True if waited, False if no wait was needed
        """
        if self.min_interval <= 0:
            return False

        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            time_since_last = time.monotonic() - self._last_request_time
            wait_time = self.min_interval - time_since_last

            if wait_time > 0:
                logger.info(
                    f"RATE LIMIT INTERVAL: provider '{self.name}' waiting {wait_time:.2f}s "
                    f"(min_interval={self.min_interval}s)"
                )
                await asyncio.sleep(wait_time)
                self._last_request_time = time.monotonic()
                return True

            self._last_request_time = time.monotonic()
            return False

    def get_remaining_wait_time(self) -> float:
        """获取剩余等待时间(秒)，0表示无需等待"""
        if self.min_interval <= 0:
            return 0.0
        return max(0.0, self.min_interval - (time.monotonic() - self._last_request_time))
