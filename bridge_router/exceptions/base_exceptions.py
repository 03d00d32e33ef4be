"""
统一异常基类
定义路由聚合系统所有异常的基础结构
"""

import traceback
from datetime import datetime
from typing import Any, Optional

from .error_codes import ErrorCode, get_error_message


class BaseRouterException(Exception):
    """路由器基础异常类"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.message = message or get_error_message(error_code)
        self.details = details or {}
        self.cause = cause
        self.context = context or {}
        self.timestamp = datetime.now()
        self.traceback_str = traceback.format_exc() if cause else None

        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式"""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(error_code={self.error_code.value}, message='{self.message}')"


class ConfigurationException(BaseRouterException):
    """配置相关异常"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        config_path: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if config_path:
            details["config_path"] = str(config_path)

        super().__init__(error_code, message, details, **kwargs)


class RegistryException(BaseRouterException):
    """注册中心相关异常"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        provider_id: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if provider_id:
            details["provider_id"] = provider_id

        super().__init__(error_code, message, details, **kwargs)


class RoutingException(BaseRouterException):
    """路由相关异常"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        source_chain: Optional[str] = None,
        destination_chain: Optional[str] = None,
        token: Optional[str] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if source_chain:
            details["source_chain"] = source_chain
        if destination_chain:
            details["destination_chain"] = destination_chain
        if token:
            details["token"] = token

        super().__init__(error_code, message, details, **kwargs)


class ProviderException(BaseRouterException):
    """Provider调用相关异常"""

    def __init__(
        self,
        error_code: ErrorCode,
        message: Optional[str] = None,
        provider_id: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any,
    ):
        details = kwargs.pop("details", None) or {}
        if provider_id:
            details["provider_id"] = provider_id
        if status_code:
            details["status_code"] = status_code

        super().__init__(error_code, message, details, **kwargs)
        self.provider_id = provider_id
        self.status_code = status_code


# ---------------------------------------------------------------------------
# 注册中心异常
# ---------------------------------------------------------------------------


class ProviderDuplicateError(RegistryException):
    """重复注册Provider"""

    def __init__(self, provider_id: str):
        super().__init__(
            ErrorCode.PROVIDER_DUPLICATE,
            f"Provider '{provider_id}' is already registered; "
            f"construct the registry with allow_overwrite=True to replace it",
            provider_id=provider_id,
        )
        self.provider_id = provider_id


class ProviderNotFoundError(RegistryException):
    """Provider未注册"""

    def __init__(self, provider_id: str):
        super().__init__(
            ErrorCode.PROVIDER_NOT_FOUND,
            f"Provider '{provider_id}' not found in registry",
            provider_id=provider_id,
        )
        self.provider_id = provider_id


class CapabilityNotFoundError(RegistryException):
    """没有Provider声明该能力"""

    def __init__(self, capability: str):
        super().__init__(
            ErrorCode.CAPABILITY_NOT_FOUND,
            f"No provider declares capability '{capability}'",
            details={"capability": capability},
        )
        self.capability = capability


# ---------------------------------------------------------------------------
# 路由异常
# ---------------------------------------------------------------------------


class RouteNotSupportedError(RoutingException):
    """没有任何Provider支持请求的链/代币组合"""

    def __init__(self, source_chain: str, destination_chain: str, token: str):
        super().__init__(
            ErrorCode.ROUTE_NOT_SUPPORTED,
            f"No bridge providers support the route {token} "
            f"from {source_chain} -> {destination_chain}",
            source_chain=source_chain,
            destination_chain=destination_chain,
            token=token,
        )


class AllProvidersFailedError(RoutingException):
    """至少一个Provider支持该路由，但所有报价请求都失败或超时"""

    def __init__(self, attempted: int, failures: Optional[dict[str, str]] = None):
        super().__init__(
            ErrorCode.ALL_PROVIDERS_FAILED,
            f"All {attempted} bridge providers failed to respond, please try again later",
            details={"attempted": attempted, "failures": dict(failures or {})},
        )
        self.attempted = attempted


# ---------------------------------------------------------------------------
# Provider调用异常（只在聚合器内部流转，不会传递给调用方）
# ---------------------------------------------------------------------------


class ProviderError(ProviderException):
    """Provider基础异常"""

    def __init__(
        self,
        message: Optional[str] = None,
        provider_id: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: ErrorCode = ErrorCode.PROVIDER_ERROR,
        **kwargs: Any,
    ):
        super().__init__(error_code, message, provider_id, status_code, **kwargs)


class ProviderTimeoutError(ProviderError):
    """超时错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_TIMEOUT, **kwargs)


class ProviderRateLimitError(ProviderError):
    """速率限制错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_RATE_LIMITED, **kwargs)


class ProviderServerError(ProviderError):
    """服务器错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_SERVER_ERROR, **kwargs)


class ProviderRequestError(ProviderError):
    """请求错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_BAD_REQUEST, **kwargs)


class ProviderAuthError(ProviderError):
    """认证错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_AUTH_FAILED, **kwargs)


class ProviderResponseError(ProviderError):
    """响应格式错误"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(message, error_code=ErrorCode.PROVIDER_BAD_RESPONSE, **kwargs)


class UnsupportedRouteError(ProviderError):
    """单个Provider在报价阶段声明不支持该路由"""

    def __init__(self, message: Optional[str] = None, **kwargs: Any):
        super().__init__(
            message, error_code=ErrorCode.ROUTE_UNSUPPORTED_BY_PROVIDER, **kwargs
        )
