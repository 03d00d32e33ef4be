"""
统一错误处理器
记录Provider失败统计，供聚合器和状态查询使用
"""

import threading
from typing import Any, Optional

from ..utils.logger import get_logger
from .base_exceptions import BaseRouterException, ProviderException

logger = get_logger(__name__)


class ErrorHandler:
    """统一错误处理器"""

    def __init__(self):
        self._lock = threading.Lock()
        self.error_stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> dict[str, Any]:
        return {
            "total_errors": 0,
            "error_by_code": {},
            "error_by_type": {},
            "error_by_provider": {},
        }

    def record(
        self,
        exception: BaseException,
        provider_id: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        """记录一次异常（不会重新抛出）"""
        self._update_error_stats(exception, provider_id)
        self._log_error(exception, provider_id, context)

    def _update_error_stats(
        self, exception: BaseException, provider_id: Optional[str]
    ) -> None:
        """更新错误统计"""
        with self._lock:
            stats = self.error_stats
            stats["total_errors"] += 1

            if isinstance(exception, BaseRouterException):
                code = exception.error_code.value
                stats["error_by_code"][code] = stats["error_by_code"].get(code, 0) + 1

            exception_type = type(exception).__name__
            stats["error_by_type"][exception_type] = (
                stats["error_by_type"].get(exception_type, 0) + 1
            )

            if provider_id is None and isinstance(exception, ProviderException):
                provider_id = exception.provider_id
            if provider_id:
                stats["error_by_provider"][provider_id] = (
                    stats["error_by_provider"].get(provider_id, 0) + 1
                )

    def _log_error(
        self,
        exception: BaseException,
        provider_id: Optional[str],
        context: Optional[dict[str, Any]],
    ) -> None:
        """记录错误日志"""
        if isinstance(exception, BaseRouterException):
            error_dict = exception.to_dict()
            if context:
                error_dict["context"].update(context)
            logger.warning(
                f"Provider error [{exception.error_code.value}] "
                f"{provider_id or '-'}: {exception.message}",
                error_details=error_dict,
            )
        else:
            logger.warning(
                f"Provider error {provider_id or '-'}: "
                f"{type(exception).__name__}: {exception}",
                context=context or {},
            )

    def get_error_stats(self) -> dict[str, Any]:
        """获取错误统计"""
        with self._lock:
            return {
                key: (dict(value) if isinstance(value, dict) else value)
                for key, value in self.error_stats.items()
            }

    def reset_stats(self) -> None:
        """重置错误统计"""
        with self._lock:
            self.error_stats = self._empty_stats()


# 全局错误处理器实例
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """获取全局错误处理器实例"""
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler
