"""
报价聚合器
并发向所有支持该路由的Provider请求报价，单个Provider的失败或超时不影响其他Provider
"""

import asyncio
import time
from typing import Optional

from bridge_router.exceptions import (
    AllProvidersFailedError,
    ErrorCode,
    ErrorHandler,
    ProviderError,
    ProviderResponseError,
    ProviderTimeoutError,
    RouteNotSupportedError,
    get_error_handler,
)
from bridge_router.providers.base import BaseAdapter, RawProviderQuote
from bridge_router.providers.registry import ProviderRegistry
from bridge_router.types import ProviderStatus, RouteRequest
from bridge_router.utils.logger import get_logger

from .models import AggregationResult

logger = get_logger(__name__)

DEFAULT_PROVIDER_TIMEOUT = 10.0


class QuoteAggregator:
    """报价聚合器"""

    def __init__(
        self,
        registry: ProviderRegistry,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        global_timeout: Optional[float] = None,
        degraded_after: int = 3,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """
        Args:
            registry: Provider注册中心
            provider_timeout: 单个Provider报价超时(秒)
            global_timeout: 整轮聚合的超时(秒)，为空时只受单Provider超时约束
            degraded_after: 连续失败多少次后Provider标记为degraded
            error_handler: 错误统计处理器，默认使用全局实例
        """
        if provider_timeout <= 0:
            raise ValueError(f"provider_timeout must be positive, got {provider_timeout}")
        if global_timeout is not None and global_timeout <= 0:
            raise ValueError(f"global_timeout must be positive, got {global_timeout}")

        self.registry = registry
        self.provider_timeout = provider_timeout
        self.global_timeout = global_timeout
        self.degraded_after = degraded_after
        self.error_handler = error_handler or get_error_handler()
        # provider_id -> 连续失败次数
        self._consecutive_failures: dict[str, int] = {}

    def select_providers(self, request: RouteRequest) -> list[BaseAdapter]:
        """筛选支持该链对和代币的适配器（保持注册顺序）"""
        selected = []
        for adapter in self.registry.adapters():
            try:
                supported = adapter.supports_route(
                    request.source_chain, request.destination_chain, request.source_token
                )
            except Exception as e:
                logger.warning(
                    f"supports_route failed for {adapter.provider_id}, treating as unsupported: {e}"
                )
                supported = False
            if supported:
                selected.append(adapter)
        return selected

    async def _fetch_one(
        self, adapter: BaseAdapter, request: RouteRequest
    ) -> RawProviderQuote:
        try:
            return await asyncio.wait_for(
                adapter.fetch_quote(request), timeout=self.provider_timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"quote request exceeded {self.provider_timeout}s",
                provider_id=adapter.provider_id,
                cause=e,
            ) from e

    async def fetch_routes(self, request: RouteRequest) -> AggregationResult:
        """
        并发获取所有支持该路由的Provider报价

        Returns:
            成功报价（按注册顺序）与失败计数

        Raises:
            RouteNotSupportedError: 没有任何Provider支持该路由（不会发起请求）
            AllProvidersFailedError: 所有被选中的Provider都失败或超时
        """
        selected = self.select_providers(request)
        if not selected:
            raise RouteNotSupportedError(
                request.source_chain, request.destination_chain, request.source_token
            )

        logger.info(
            f"Fetching quotes from {len(selected)} providers for "
            f"{request.source_token} {request.source_chain} -> {request.destination_chain}"
        )
        start_time = time.monotonic()

        tasks = {
            asyncio.create_task(self._fetch_one(adapter, request)): adapter
            for adapter in selected
        }
        try:
            _, pending = await asyncio.wait(tasks.keys(), timeout=self.global_timeout)
        finally:
            # 超出整体预算或调用方被取消时，未完成的请求直接放弃
            for task in tasks:
                if not task.done():
                    task.cancel()

        quotes: list[RawProviderQuote] = []
        failures: dict[str, str] = {}
        for task, adapter in tasks.items():
            provider_id = adapter.provider_id
            error: Optional[BaseException] = None

            if task in pending or task.cancelled():
                error = ProviderTimeoutError(
                    f"abandoned after global timeout {self.global_timeout}s",
                    provider_id=provider_id,
                )
            elif task.exception() is not None:
                error = task.exception()
            else:
                result = task.result()
                if isinstance(result, RawProviderQuote):
                    quotes.append(result)
                else:
                    error = ProviderResponseError(
                        f"unexpected quote type {type(result).__name__}",
                        provider_id=provider_id,
                    )

            if error is None:
                self._consecutive_failures[provider_id] = 0
                continue

            failures[provider_id] = (
                error.message if isinstance(error, ProviderError) else repr(error)
            )
            self._consecutive_failures[provider_id] = (
                self._consecutive_failures.get(provider_id, 0) + 1
            )
            self.error_handler.record(
                error,
                provider_id=provider_id,
                context={
                    "source_chain": request.source_chain,
                    "destination_chain": request.destination_chain,
                },
            )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        if not quotes:
            logger.error(
                f"All {len(selected)} providers failed in {duration_ms}ms",
                failures=failures,
            )
            raise AllProvidersFailedError(len(selected), failures)

        if failures:
            logger.warning(
                f"[{ErrorCode.PARTIAL_FAILURE.value}] {len(failures)}/{len(selected)} "
                f"providers failed, continuing with {len(quotes)} quotes",
                failed_providers=sorted(failures),
            )
        else:
            logger.info(f"Collected {len(quotes)} quotes in {duration_ms}ms")

        return AggregationResult(
            quotes=quotes,
            failed_count=len(failures),
            total_providers=len(selected),
            failures=failures,
        )

    def get_all_providers(self) -> list[BaseAdapter]:
        """所有已注册的适配器，用于目录展示"""
        return self.registry.adapters()

    def get_provider_status(self, provider_id: str) -> ProviderStatus:
        """
        Provider当前状态

        未注册为offline；最近连续失败次数达到degraded_after为degraded；否则为active。
        """
        if not self.registry.has(provider_id):
            return ProviderStatus.OFFLINE
        if self._consecutive_failures.get(provider_id, 0) >= self.degraded_after:
            return ProviderStatus.DEGRADED
        return ProviderStatus.ACTIVE
