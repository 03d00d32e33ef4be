"""
统一异常处理模块
"""

from .base_exceptions import (
    AllProvidersFailedError,
    BaseRouterException,
    CapabilityNotFoundError,
    ConfigurationException,
    ProviderAuthError,
    ProviderDuplicateError,
    ProviderError,
    ProviderException,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderRequestError,
    ProviderResponseError,
    ProviderServerError,
    ProviderTimeoutError,
    RegistryException,
    RouteNotSupportedError,
    RoutingException,
    UnsupportedRouteError,
)
from .error_codes import ErrorCode, get_error_message
from .error_handler import ErrorHandler, get_error_handler

__all__ = [
    # 错误码
    "ErrorCode",
    "get_error_message",
    # 异常基类
    "BaseRouterException",
    "ConfigurationException",
    "RegistryException",
    "RoutingException",
    "ProviderException",
    # 注册中心异常
    "ProviderDuplicateError",
    "ProviderNotFoundError",
    "CapabilityNotFoundError",
    # 路由异常
    "RouteNotSupportedError",
    "AllProvidersFailedError",
    # Provider异常
    "ProviderError",
    "ProviderTimeoutError",
    "ProviderRateLimitError",
    "ProviderServerError",
    "ProviderRequestError",
    "ProviderAuthError",
    "ProviderResponseError",
    "UnsupportedRouteError",
    # 错误处理器
    "ErrorHandler",
    "get_error_handler",
]
