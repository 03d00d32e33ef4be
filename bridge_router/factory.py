"""
组件装配
启动时根据配置显式创建并注册适配器，构建路由比较服务
"""

from typing import Optional

from .config_models import Config, ProviderConfig
from .providers import ProviderRegistry, builtin_provider_configs, create_adapter_from_config
from .routing import (
    LiquidityPool,
    QuoteAggregator,
    QuoteRanker,
    ReliabilityMetrics,
    ReliabilityScorer,
    RouteComparisonService,
    SlippageEstimator,
    StaticMetricsSource,
)
from .utils.logger import get_logger

logger = get_logger(__name__)


def _provider_configs(config: Config) -> list[ProviderConfig]:
    return config.providers or builtin_provider_configs()


def build_registry(config: Optional[Config] = None) -> ProviderRegistry:
    """
    创建Provider注册中心并注册所有启用的Provider

    配置中没有providers时注册内置Provider。
    """
    config = config or Config()
    registry = ProviderRegistry(allow_overwrite=config.aggregator.allow_overwrite)

    for provider_config in _provider_configs(config):
        if not provider_config.enabled:
            logger.info(f"跳过已禁用的Provider: {provider_config.id}")
            continue
        adapter = create_adapter_from_config(provider_config)
        registry.register(adapter, metadata={"adapter_class": provider_config.adapter_class})

    logger.info(f"Provider注册完成: {registry.size} providers")
    return registry


def build_slippage_estimator(config: Config) -> SlippageEstimator:
    pools = config.slippage.pools
    if not pools:
        return SlippageEstimator()
    return SlippageEstimator(
        LiquidityPool(
            token=pool.token,
            chain=pool.chain,
            tvl_usd=pool.tvl_usd,
            daily_volume_usd=pool.daily_volume_usd,
        )
        for pool in pools
    )


def build_reliability_scorer(config: Config) -> ReliabilityScorer:
    settings = config.reliability
    source = None
    if settings.metrics:
        source = StaticMetricsSource(
            {
                provider_id: ReliabilityMetrics(**metrics.model_dump())
                for provider_id, metrics in settings.metrics.items()
            }
        )
    return ReliabilityScorer(source, default_score=settings.default_score)


def build_service(
    config: Optional[Config] = None, registry: Optional[ProviderRegistry] = None
) -> RouteComparisonService:
    """根据配置构建完整的路由比较服务"""
    config = config or Config()
    if registry is None:
        registry = build_registry(config)
    settings = config.aggregator

    aggregator = QuoteAggregator(
        registry,
        provider_timeout=settings.provider_timeout,
        global_timeout=settings.global_timeout,
        degraded_after=settings.degraded_after,
    )
    return RouteComparisonService(
        aggregator,
        slippage_estimator=build_slippage_estimator(config),
        reliability_scorer=build_reliability_scorer(config),
        ranker=QuoteRanker(),
        default_strategy=config.ranking.default_strategy,
    )
