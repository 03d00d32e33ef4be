"""
Provider适配器模块
提供统一的桥接Provider接口与注册中心
"""

from .adapters import HttpQuoteAdapter, TemplateQuoteAdapter, builtin_provider_configs
from .base import BaseAdapter, ProviderCapability, RawProviderQuote, RouteStep
from .gas import GasPriceInfo, GasPriceOracle, calculate_gas_fee
from .registry import (
    ADAPTER_CLASSES,
    ProviderRegistry,
    RegistryEntry,
    create_adapter_from_config,
)

__all__ = [
    # 基础类
    "BaseAdapter",
    "ProviderCapability",
    "RawProviderQuote",
    "RouteStep",
    # 注册中心
    "ProviderRegistry",
    "RegistryEntry",
    "ADAPTER_CLASSES",
    "create_adapter_from_config",
    # 具体适配器
    "TemplateQuoteAdapter",
    "HttpQuoteAdapter",
    "builtin_provider_configs",
    # gas价格
    "GasPriceOracle",
    "GasPriceInfo",
    "calculate_gas_fee",
]
