"""配置系统测试"""

import asyncio
from pathlib import Path

import pytest

from bridge_router import build_registry, build_service
from bridge_router.config_models import Config
from bridge_router.exceptions import ConfigurationException, ErrorCode
from bridge_router.yaml_config import load_config, load_config_async, parse_config

SAMPLE_CONFIG = """
system:
  name: Test Router
aggregator:
  provider_timeout: 3
  global_timeout: 8
  allow_overwrite: true
ranking:
  default_strategy: fastest
providers:
  - id: alpha
    display_name: Alpha Bridge
    supported_chains: [Ethereum, Polygon]
    supported_tokens: [usdc]
    fee_template:
      fees_usd: 0.5
      gas_cost_usd: 0.5
      estimated_time_seconds: 20
      output_ratio: 0.995
  - id: beta
    adapter_class: http
    base_url: ${BETA_URL:https://beta.example}
    api_key: ${BETA_API_KEY}
    supported_chains: [ethereum, polygon]
    supported_tokens: [USDC]
  - id: gamma
    enabled: false
reliability:
  default_score: 65
  metrics:
    alpha:
      uptime_24h: 99
      success_rate_7d: 99
      avg_delay_percent: 1
      incident_count_30d: 0
slippage:
  pools:
    - token: USDC
      chain: ethereum
      tvl_usd: 1000000
"""


class TestConfigLoading:
    """配置加载"""

    def test_default_config(self):
        """测试未指定文件时使用默认配置"""
        config = load_config(None)
        assert config.providers == []
        assert config.aggregator.provider_timeout == 10.0
        assert config.reliability.default_score == 70.0

    def test_load_yaml_file(self, tmp_path, monkeypatch):
        """测试从文件加载并替换环境变量"""
        monkeypatch.setenv("BETA_API_KEY", "k-123")
        monkeypatch.delenv("BETA_URL", raising=False)
        path = tmp_path / "router.yaml"
        path.write_text(SAMPLE_CONFIG, encoding="utf-8")

        config = load_config(path)

        assert config.system.name == "Test Router"
        alpha, beta, gamma = config.providers
        assert alpha.supported_chains == ["ethereum", "polygon"]
        assert alpha.supported_tokens == ["USDC"]
        assert beta.api_key == "k-123"
        assert beta.base_url == "https://beta.example"
        assert gamma.enabled is False

    def test_missing_file(self, tmp_path):
        """测试配置文件不存在"""
        with pytest.raises(ConfigurationException) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert exc_info.value.error_code == ErrorCode.CONFIG_LOAD_FAILED

    def test_invalid_yaml(self):
        """测试YAML格式错误"""
        with pytest.raises(ConfigurationException) as exc_info:
            parse_config("providers: [unclosed")
        assert exc_info.value.error_code == ErrorCode.CONFIG_PARSE_ERROR

    def test_validation_error(self):
        """测试字段校验失败"""
        with pytest.raises(ConfigurationException) as exc_info:
            parse_config("aggregator:\n  provider_timeout: -1\n")
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    def test_non_mapping_root(self):
        """测试顶层不是映射"""
        with pytest.raises(ConfigurationException) as exc_info:
            parse_config("- a\n- b\n")
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    def test_example_config_parses(self, monkeypatch):
        """测试仓库自带的示例配置可以加载"""
        for name in ("LOG_LEVEL", "ETHEREUM_RPC_URL", "REMOTE_BRIDGE_URL", "REMOTE_BRIDGE_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        path = Path(__file__).resolve().parent.parent / "config" / "router_config.example.yaml"

        config = load_config(path)

        ids = [p.id for p in config.providers]
        assert ids[:5] == ["stargate", "squid", "hop", "cbridge", "soroswap"]
        remote = config.providers[-1]
        assert remote.enabled is False
        assert remote.adapter_class == "http"
        assert remote.api_key == ""
        assert config.logging.level == "INFO"

    @pytest.mark.asyncio
    async def test_async_load(self, tmp_path):
        """测试异步加载"""
        path = tmp_path / "router.yaml"
        path.write_text("ranking:\n  default_strategy: lowest-cost\n", encoding="utf-8")

        config = await load_config_async(path)
        assert config.ranking.default_strategy == "lowest-cost"

    @pytest.mark.asyncio
    async def test_async_load_missing(self, tmp_path):
        """测试异步加载不存在的文件"""
        with pytest.raises(ConfigurationException):
            await load_config_async(tmp_path / "nope.yaml")


class TestFactory:
    """从配置装配组件"""

    def test_builtin_registry(self):
        """测试默认注册内置Provider"""
        registry = build_registry(Config())
        assert registry.list() == ["stargate", "squid", "hop", "cbridge", "soroswap"]
        assert registry.allow_overwrite is False

    def test_registry_from_config(self, monkeypatch):
        """测试按配置注册并跳过禁用的Provider"""
        monkeypatch.setenv("BETA_API_KEY", "k")
        config = parse_config(SAMPLE_CONFIG)
        registry = build_registry(config)

        assert registry.list() == ["alpha", "beta"]
        assert registry.allow_overwrite is True
        assert registry.get_entry("beta").metadata == {"adapter_class": "http"}

    def test_service_from_config(self, monkeypatch):
        """测试服务使用配置中的超时、评分和滑点数据"""
        monkeypatch.setenv("BETA_API_KEY", "k")
        service = build_service(parse_config(SAMPLE_CONFIG))

        assert service.aggregator.provider_timeout == 3
        assert service.aggregator.global_timeout == 8
        assert service.default_strategy.value == "fastest"
        assert service.reliability_scorer.default_score == 65
        assert service.reliability_scorer.calculate_reliability_score("alpha") > 95
        assert service.reliability_scorer.calculate_reliability_score("stargate") == 65
        assert service.slippage_estimator.find_pool("usdc", "ethereum").tvl_usd == 1_000_000
        asyncio.run(service.close())
