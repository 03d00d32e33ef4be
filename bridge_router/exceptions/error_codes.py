"""
统一错误码体系
定义路由聚合系统的标准化错误码
"""

from enum import Enum


class ErrorCode(Enum):
    """系统错误码枚举"""

    # 通用错误 (1000-1099)
    UNKNOWN_ERROR = "E1000"
    INVALID_REQUEST = "E1001"
    INVALID_PARAMETER = "E1002"

    # 配置错误 (1100-1199)
    CONFIG_LOAD_FAILED = "E1100"
    CONFIG_INVALID = "E1101"
    CONFIG_MISSING_REQUIRED = "E1102"
    CONFIG_PARSE_ERROR = "E1103"

    # 路由错误 (1200-1299)
    ROUTE_NOT_SUPPORTED = "E1200"
    ALL_PROVIDERS_FAILED = "E1201"
    PARTIAL_FAILURE = "E1202"
    UNKNOWN_STRATEGY = "E1203"

    # 注册中心错误 (1300-1399)
    PROVIDER_DUPLICATE = "E1300"
    PROVIDER_NOT_FOUND = "E1301"
    CAPABILITY_NOT_FOUND = "E1302"
    INVALID_ADAPTER = "E1303"

    # Provider调用错误 (1400-1499)
    PROVIDER_ERROR = "E1400"
    PROVIDER_TIMEOUT = "E1401"
    PROVIDER_RATE_LIMITED = "E1402"
    PROVIDER_SERVER_ERROR = "E1403"
    PROVIDER_BAD_REQUEST = "E1404"
    PROVIDER_AUTH_FAILED = "E1405"
    PROVIDER_BAD_RESPONSE = "E1406"
    ROUTE_UNSUPPORTED_BY_PROVIDER = "E1407"


# 错误码到消息的映射
ERROR_MESSAGES = {
    ErrorCode.UNKNOWN_ERROR: "未知错误",
    ErrorCode.INVALID_REQUEST: "无效的请求",
    ErrorCode.INVALID_PARAMETER: "无效的参数",
    ErrorCode.CONFIG_LOAD_FAILED: "配置加载失败",
    ErrorCode.CONFIG_INVALID: "配置无效",
    ErrorCode.CONFIG_MISSING_REQUIRED: "缺少必需的配置项",
    ErrorCode.CONFIG_PARSE_ERROR: "配置解析错误",
    ErrorCode.ROUTE_NOT_SUPPORTED: "没有Provider支持该路由",
    ErrorCode.ALL_PROVIDERS_FAILED: "所有Provider均报价失败",
    ErrorCode.PARTIAL_FAILURE: "部分Provider报价失败",
    ErrorCode.UNKNOWN_STRATEGY: "未知的排序策略",
    ErrorCode.PROVIDER_DUPLICATE: "Provider已注册",
    ErrorCode.PROVIDER_NOT_FOUND: "Provider未找到",
    ErrorCode.CAPABILITY_NOT_FOUND: "没有Provider具备该能力",
    ErrorCode.INVALID_ADAPTER: "无效的适配器",
    ErrorCode.PROVIDER_ERROR: "Provider调用失败",
    ErrorCode.PROVIDER_TIMEOUT: "Provider响应超时",
    ErrorCode.PROVIDER_RATE_LIMITED: "Provider速率限制",
    ErrorCode.PROVIDER_SERVER_ERROR: "Provider服务器错误",
    ErrorCode.PROVIDER_BAD_REQUEST: "Provider请求错误",
    ErrorCode.PROVIDER_AUTH_FAILED: "Provider认证失败",
    ErrorCode.PROVIDER_BAD_RESPONSE: "Provider响应格式错误",
    ErrorCode.ROUTE_UNSUPPORTED_BY_PROVIDER: "Provider不支持该路由",
}


def get_error_message(error_code: ErrorCode, default: str = "未知错误") -> str:
    """获取错误码对应的消息"""
    return ERROR_MESSAGES.get(error_code, default)
