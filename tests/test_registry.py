"""Provider注册中心测试"""

import threading

import pytest

from conftest import FakeAdapter

from bridge_router.config_models import ProviderConfig
from bridge_router.exceptions import (
    CapabilityNotFoundError,
    ErrorCode,
    ProviderDuplicateError,
    ProviderNotFoundError,
    RegistryException,
)
from bridge_router.providers import (
    HttpQuoteAdapter,
    ProviderRegistry,
    TemplateQuoteAdapter,
    create_adapter_from_config,
)


class TestRegistration:
    """注册与查询"""

    def test_register_and_get(self):
        """测试注册后可以获取"""
        registry = ProviderRegistry()
        adapter = FakeAdapter("x")
        entry = registry.register(adapter, metadata={"region": "eu"})

        assert registry.get("x") is adapter
        assert registry.try_get("x") is adapter
        assert registry.has("x")
        assert "x" in registry
        assert entry.metadata == {"region": "eu"}
        assert registry.size == 1
        assert len(registry) == 1

    def test_duplicate_without_overwrite(self):
        """测试重复注册抛出Duplicate错误且数量不变"""
        registry = ProviderRegistry()
        registry.register(FakeAdapter("x"))

        with pytest.raises(ProviderDuplicateError) as exc_info:
            registry.register(FakeAdapter("x"))

        assert exc_info.value.error_code == ErrorCode.PROVIDER_DUPLICATE
        assert registry.size == 1

    def test_overwrite_mode_replaces_adapter(self):
        """测试覆盖模式替换旧适配器"""
        registry = ProviderRegistry(allow_overwrite=True)
        first = FakeAdapter("x")
        second = FakeAdapter("x")
        registry.register(first)
        registry.register(second)

        assert registry.get("x") is second
        assert registry.size == 1

    def test_registered_at_is_immutable(self):
        """测试注册时间不可修改"""
        registry = ProviderRegistry()
        entry = registry.register(FakeAdapter("x"))

        with pytest.raises(AttributeError):
            entry.registered_at = None

    def test_rejects_non_adapter(self):
        """测试拒绝非BaseAdapter对象"""
        registry = ProviderRegistry()
        with pytest.raises(RegistryException) as exc_info:
            registry.register(object())
        assert exc_info.value.error_code == ErrorCode.INVALID_ADAPTER


class TestLookup:
    """查找与生命周期"""

    def test_get_missing_raises_not_found(self):
        """测试获取不存在的Provider"""
        registry = ProviderRegistry()
        with pytest.raises(ProviderNotFoundError):
            registry.get("missing")
        assert registry.try_get("missing") is None

    def test_get_by_capability(self):
        """测试按能力查找"""
        registry = ProviderRegistry()
        registry.register(FakeAdapter("a", capabilities=("quote", "swap")))
        registry.register(FakeAdapter("b", capabilities=("quote",)))

        assert [a.provider_id for a in registry.get_by_capability("quote")] == ["a", "b"]
        assert [a.provider_id for a in registry.get_by_capability("swap")] == ["a"]

        with pytest.raises(CapabilityNotFoundError):
            registry.get_by_capability("execute")

    def test_list_preserves_insertion_order(self):
        """测试列表保持注册顺序"""
        registry = ProviderRegistry()
        for provider_id in ("c", "a", "b"):
            registry.register(FakeAdapter(provider_id))

        assert registry.list() == ["c", "a", "b"]
        assert [e.adapter.provider_id for e in registry.list_entries()] == ["c", "a", "b"]

    def test_unregister_and_clear_are_idempotent(self):
        """测试注销和清空是幂等的"""
        registry = ProviderRegistry()
        registry.register(FakeAdapter("x"))

        assert registry.unregister("x") is True
        assert registry.unregister("x") is False
        registry.clear()
        registry.clear()
        assert registry.size == 0

    def test_concurrent_registration(self):
        """测试并发注册时标识唯一"""
        registry = ProviderRegistry()
        errors = []

        def register(i):
            try:
                registry.register(FakeAdapter(f"p{i % 10}"))
            except ProviderDuplicateError as e:
                errors.append(e)

        threads = [threading.Thread(target=register, args=(i,)) for i in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert registry.size == 10
        assert len(errors) == 40


class TestAdapterFactory:
    """从配置创建适配器"""

    def test_create_template_adapter(self):
        """测试创建模板适配器"""
        adapter = create_adapter_from_config(ProviderConfig(id="t"))
        assert isinstance(adapter, TemplateQuoteAdapter)

    def test_create_http_adapter(self):
        """测试创建HTTP适配器"""
        adapter = create_adapter_from_config(
            ProviderConfig(id="h", adapter_class="http", base_url="https://example.test")
        )
        assert isinstance(adapter, HttpQuoteAdapter)

    def test_unknown_adapter_class(self):
        """测试未知适配器类型"""
        with pytest.raises(RegistryException) as exc_info:
            create_adapter_from_config(ProviderConfig(id="u", adapter_class="grpc"))
        assert exc_info.value.error_code == ErrorCode.INVALID_ADAPTER
