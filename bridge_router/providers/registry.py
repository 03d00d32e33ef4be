"""
Provider适配器注册中心
管理所有已注册的桥接Provider适配器实例
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from bridge_router.config_models import ProviderConfig
from bridge_router.exceptions import (
    CapabilityNotFoundError,
    ErrorCode,
    ProviderDuplicateError,
    ProviderNotFoundError,
    RegistryException,
)
from bridge_router.utils.logger import get_logger

from .adapters.http_bridge import HttpQuoteAdapter
from .adapters.template import TemplateQuoteAdapter
from .base import BaseAdapter

logger = get_logger(__name__)

ADAPTER_CLASSES: dict[str, type[BaseAdapter]] = {
    "template": TemplateQuoteAdapter,
    "http": HttpQuoteAdapter,
}


@dataclass(frozen=True)
class RegistryEntry:
    """注册记录，注册时间一经写入不可修改"""

    adapter: BaseAdapter
    registered_at: datetime
    metadata: dict[str, Any] = field(default_factory=dict)


class ProviderRegistry:
    """Provider适配器注册中心"""

    def __init__(self, allow_overwrite: bool = False):
        """
        Args:
            allow_overwrite: 重复注册时是否覆盖旧适配器，构造后不可修改
        """
        self._allow_overwrite = allow_overwrite
        self._entries: dict[str, RegistryEntry] = {}
        self._lock = threading.RLock()

    @property
    def allow_overwrite(self) -> bool:
        return self._allow_overwrite

    def register(
        self, adapter: BaseAdapter, metadata: Optional[dict[str, Any]] = None
    ) -> RegistryEntry:
        """
        注册适配器

        Args:
            adapter: 适配器实例
            metadata: 附加元数据

        Returns:
            新的注册记录

        Raises:
            ProviderDuplicateError: 已存在且未开启覆盖模式
        """
        if not isinstance(adapter, BaseAdapter):
            raise RegistryException(
                ErrorCode.INVALID_ADAPTER,
                f"适配器必须继承BaseAdapter: {type(adapter).__name__}",
            )

        provider_id = adapter.provider_id
        with self._lock:
            if provider_id in self._entries:
                if not self._allow_overwrite:
                    raise ProviderDuplicateError(provider_id)
                logger.warning(f"覆盖已注册的Provider: {provider_id}")

            entry = RegistryEntry(
                adapter=adapter,
                registered_at=datetime.now(),
                metadata=dict(metadata or {}),
            )
            self._entries[provider_id] = entry

        logger.info(f"注册Provider: {provider_id} ({adapter.display_name})")
        return entry

    def get(self, provider_id: str) -> BaseAdapter:
        """获取适配器，不存在时抛出ProviderNotFoundError"""
        adapter = self.try_get(provider_id)
        if adapter is None:
            raise ProviderNotFoundError(provider_id)
        return adapter

    def try_get(self, provider_id: str) -> Optional[BaseAdapter]:
        with self._lock:
            entry = self._entries.get(provider_id)
        return entry.adapter if entry else None

    def get_entry(self, provider_id: str) -> Optional[RegistryEntry]:
        with self._lock:
            return self._entries.get(provider_id)

    def get_by_capability(self, capability: str) -> list[BaseAdapter]:
        """
        按能力查找适配器

        Raises:
            CapabilityNotFoundError: 没有任何适配器声明该能力
        """
        adapters = [
            adapter for adapter in self.adapters() if adapter.has_capability(capability)
        ]
        if not adapters:
            raise CapabilityNotFoundError(capability)
        return adapters

    def adapters(self) -> list[BaseAdapter]:
        """适配器快照（按注册顺序）"""
        with self._lock:
            return [entry.adapter for entry in self._entries.values()]

    def list(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def list_entries(self) -> list[RegistryEntry]:
        with self._lock:
            return list(self._entries.values())

    def has(self, provider_id: str) -> bool:
        with self._lock:
            return provider_id in self._entries

    def unregister(self, provider_id: str) -> bool:
        """注销适配器，返回是否确实移除了记录"""
        with self._lock:
            removed = self._entries.pop(provider_id, None)
        if removed:
            logger.info(f"注销Provider: {provider_id}")
        return removed is not None

    def clear(self):
        with self._lock:
            self._entries.clear()

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, provider_id: object) -> bool:
        return isinstance(provider_id, str) and self.has(provider_id)

    async def cleanup(self):
        """关闭所有适配器的HTTP客户端"""
        for adapter in self.adapters():
            try:
                await adapter.close()
            except Exception as e:
                logger.warning(f"关闭适配器失败 {adapter.provider_id}: {e}")

        logger.info("适配器实例清理完成")


def create_adapter_from_config(config: ProviderConfig) -> BaseAdapter:
    """
    从配置创建适配器实例

    Args:
        config: Provider配置，adapter_class取值见ADAPTER_CLASSES

    Returns:
        适配器实例
    """
    adapter_class = ADAPTER_CLASSES.get(config.adapter_class)
    if adapter_class is None:
        raise RegistryException(
            ErrorCode.INVALID_ADAPTER,
            f"未找到适配器类: {config.adapter_class}",
            provider_id=config.id,
        )
    return adapter_class(config.id, config)
