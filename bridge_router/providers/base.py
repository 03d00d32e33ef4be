"""
Provider基础适配器
所有桥接Provider适配器的基类，定义路由支持检查和报价接口
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import httpx

from bridge_router.config_models import ProviderConfig
from bridge_router.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderRequestError,
    ProviderServerError,
    ProviderTimeoutError,
)
from bridge_router.types import RouteRequest
from bridge_router.utils.logger import get_logger
from bridge_router.utils.request_interval import RequestIntervalGuard

logger = get_logger(__name__)

# 可重试的HTTP状态码
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

STEP_TYPES = ("swap", "bridge", "wrap")


@dataclass(frozen=True)
class ProviderCapability:
    """Provider声明的能力"""

    name: str
    version: str = "1.0.0"
    description: Optional[str] = None


@dataclass(frozen=True)
class RouteStep:
    """报价中的单个执行步骤"""

    protocol: str
    step_type: str
    input_amount: float
    output_amount: float
    fee_usd: float = 0.0

    def __post_init__(self):
        if self.step_type not in STEP_TYPES:
            raise ValueError(f"unknown step type: {self.step_type}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "protocol": self.protocol,
            "type": self.step_type,
            "inputAmount": self.input_amount,
            "outputAmount": self.output_amount,
            "feeUsd": self.fee_usd,
        }


@dataclass(frozen=True)
class RawProviderQuote:
    """单个Provider对单个请求的原始报价"""

    provider_id: str
    provider_name: str
    output_amount: float
    protocol_fee_usd: float
    gas_cost_usd: float
    estimated_time_seconds: int
    steps: List[RouteStep] = field(default_factory=list)


class BaseAdapter(ABC):
    """Provider适配器基类"""

    def __init__(
        self,
        provider_id: str,
        config: Union[ProviderConfig, Dict[str, Any], None] = None,
    ):
        """
        初始化适配器

        Args:
            provider_id: Provider唯一标识
            config: Provider配置（ProviderConfig或等价字典）
        """
        if config is None:
            config = ProviderConfig(id=provider_id)
        elif isinstance(config, dict):
            config = ProviderConfig(**{"id": provider_id, **config})

        self.provider_id = provider_id
        self.config = config
        self.display_name = config.display_name or provider_id
        self.version = config.version
        self.capabilities: List[ProviderCapability] = [
            ProviderCapability(name=name) for name in config.capabilities
        ]
        self.base_url = config.base_url
        self.default_headers = dict(config.default_headers)
        self.timeout = config.timeout
        self.max_retries = config.max_retries

        # HTTP客户端
        self._client: Optional[httpx.AsyncClient] = None
        self._interval_guard = RequestIntervalGuard(
            provider_id, config.min_request_interval
        )

        logger.debug(f"初始化{provider_id}适配器")

    @property
    def client(self) -> httpx.AsyncClient:
        """获取HTTP客户端（懒加载）"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.default_headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self):
        """关闭HTTP客户端"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def supports_route(
        self, source_chain: str, destination_chain: str, token: str
    ) -> bool:
        """
        检查是否支持该链对和代币

        默认按配置中的supported_chains / supported_tokens判断，
        子类可以覆盖为更精细的路由表。
        """
        chains = self.config.supported_chains
        tokens = self.config.supported_tokens
        return (
            source_chain.lower() in chains
            and destination_chain.lower() in chains
            and token.upper() in tokens
        )

    def has_capability(self, name: str) -> bool:
        return any(cap.name == name for cap in self.capabilities)

    @abstractmethod
    async def fetch_quote(self, request: RouteRequest) -> RawProviderQuote:
        """
        获取报价

        Args:
            request: 路由请求

        Returns:
            原始报价

        Raises:
            ProviderError: 网络或业务错误
        """
        pass

    def describe(self) -> Dict[str, Any]:
        """Provider目录信息"""
        return {
            "id": self.provider_id,
            "name": self.display_name,
            "version": self.version,
            "capabilities": [cap.name for cap in self.capabilities],
            "supportedChains": list(self.config.supported_chains),
            "supportedTokens": list(self.config.supported_tokens),
        }

    def get_auth_headers(self) -> Dict[str, str]:
        """
        获取认证头

        Returns:
            认证头字典，未配置api_key时为空
        """
        api_key = self.config.api_key
        if not api_key:
            return {}

        auth_type = self.config.auth_type
        if auth_type == "bearer":
            return {"Authorization": f"Bearer {api_key}"}
        elif auth_type == "x-api-key":
            return {"x-api-key": api_key}
        elif auth_type == "api-key":
            return {"api-key": api_key}
        else:
            logger.warning(f"未知的认证类型: {auth_type}")
            return {"Authorization": f"Bearer {api_key}"}

    def handle_error(self, response: httpx.Response) -> ProviderError:
        """
        处理HTTP错误响应

        Args:
            response: HTTP响应

        Returns:
            对应的异常
        """
        try:
            error_data = response.json()
            if isinstance(error_data, dict):
                error = error_data.get("error", error_data)
                error_msg = (
                    error.get("message", str(error_data))
                    if isinstance(error, dict)
                    else str(error)
                )
            else:
                error_msg = str(error_data)
        except ValueError:
            error_msg = response.text

        kwargs = {"provider_id": self.provider_id, "status_code": response.status_code}
        if response.status_code in (401, 403):
            return ProviderAuthError(f"认证失败: {error_msg}", **kwargs)
        elif response.status_code == 429:
            return ProviderRateLimitError(f"速率限制: {error_msg}", **kwargs)
        elif response.status_code == 400:
            return ProviderRequestError(f"请求错误: {error_msg}", **kwargs)
        elif response.status_code >= 500:
            return ProviderServerError(f"服务器错误: {error_msg}", **kwargs)
        else:
            return ProviderError(
                f"未知错误 ({response.status_code}): {error_msg}", **kwargs
            )

    def _backoff_delay(self, attempt: int) -> float:
        """指数退避时间，attempt从1开始"""
        return min(
            self.config.retry_backoff_base * 2 ** (attempt - 1),
            self.config.retry_backoff_cap,
        )

    async def _request_with_retry(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """
        发送HTTP请求，临时错误（超时、连接失败、429、5xx）按指数退避重试

        最多尝试max_retries次，最后一次的错误会被转换为ProviderError抛出。
        """
        headers = {**self.default_headers, **self.get_auth_headers()}
        headers.update(kwargs.pop("headers", None) or {})

        last_error: Optional[ProviderError] = None
        for attempt in range(1, self.max_retries + 1):
            await self._interval_guard.wait_if_needed()
            try:
                response = await self.client.request(
                    method, url, headers=headers, timeout=self.timeout, **kwargs
                )
            except httpx.TimeoutException as e:
                last_error = ProviderTimeoutError(
                    f"请求超时: {e}", provider_id=self.provider_id, cause=e
                )
            except httpx.TransportError as e:
                last_error = ProviderError(
                    f"网络请求失败: {e}", provider_id=self.provider_id, cause=e
                )
            else:
                if response.is_success:
                    return response
                error = self.handle_error(response)
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    raise error
                last_error = error

            if attempt < self.max_retries:
                delay = self._backoff_delay(attempt)
                logger.warning(
                    f"RETRY: provider '{self.provider_id}' attempt {attempt}/{self.max_retries} "
                    f"failed ({last_error.message}), retrying in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

        if last_error is None:
            raise ProviderError(
                f"max_retries must be at least 1, got {self.max_retries}",
                provider_id=self.provider_id,
            )
        raise last_error
