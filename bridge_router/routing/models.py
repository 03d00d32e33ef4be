"""
路由相关的数据模型
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from bridge_router.providers.base import RawProviderQuote
from bridge_router.types import ConfidenceTier, ProviderStatus, RankingStrategy, RouteRequest


@dataclass(frozen=True)
class SlippageEstimate:
    """滑点估计（百分比）"""

    expected_slippage: float
    max_slippage: float
    confidence: ConfidenceTier

    def __post_init__(self):
        if self.max_slippage <= self.expected_slippage:
            raise ValueError(
                f"max_slippage ({self.max_slippage}) must exceed "
                f"expected_slippage ({self.expected_slippage})"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "expectedSlippage": self.expected_slippage,
            "maxSlippage": self.max_slippage,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True)
class ReliabilityMetrics:
    """Provider历史可靠性指标"""

    uptime_24h: float
    success_rate_7d: float
    avg_delay_percent: float
    incident_count_30d: int
    reliability_score: float = 0.0


@dataclass(frozen=True)
class NormalizedQuote:
    """与Provider无关的统一报价，composite_score和ranking_position只由排序器写入"""

    provider_id: str
    provider_name: str
    source_chain: str
    destination_chain: str
    source_token: str
    destination_token: str
    input_amount: float
    output_amount: float
    total_fee_usd: float
    estimated_time_seconds: int
    slippage_percent: float
    reliability_score: float
    composite_score: float = 0.0
    ranking_position: int = 0
    status: ProviderStatus = ProviderStatus.ACTIVE
    metadata: dict[str, Any] = field(default_factory=dict)
    fetched_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "providerId": self.provider_id,
            "providerName": self.provider_name,
            "sourceChain": self.source_chain,
            "destinationChain": self.destination_chain,
            "sourceToken": self.source_token,
            "destinationToken": self.destination_token,
            "inputAmount": self.input_amount,
            "outputAmount": self.output_amount,
            "totalFeeUsd": self.total_fee_usd,
            "estimatedTimeSeconds": self.estimated_time_seconds,
            "slippagePercent": self.slippage_percent,
            "reliabilityScore": self.reliability_score,
            "compositeScore": self.composite_score,
            "rankingPosition": self.ranking_position,
            "status": self.status.value,
            "metadata": self.metadata,
            "fetchedAt": self.fetched_at.isoformat(),
        }


@dataclass(frozen=True)
class RankingWeights:
    """排序权重，四项非负且和为1"""

    cost: float
    speed: float
    reliability: float
    slippage: float

    def __post_init__(self):
        values = (self.cost, self.speed, self.reliability, self.slippage)
        if any(v < 0 for v in values):
            raise ValueError(f"ranking weights must be non-negative: {values}")
        if not math.isclose(sum(values), 1.0, abs_tol=1e-9):
            raise ValueError(f"ranking weights must sum to 1.0, got {sum(values)}")

    def to_dict(self) -> dict[str, float]:
        return {
            "cost": self.cost,
            "speed": self.speed,
            "reliability": self.reliability,
            "slippage": self.slippage,
        }


@dataclass
class AggregationResult:
    """一次报价聚合的结果"""

    quotes: list[RawProviderQuote]
    failed_count: int
    total_providers: int
    # provider_id -> 失败原因，仅内部诊断使用
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def successful_providers(self) -> int:
        return len(self.quotes)

    @property
    def is_partial(self) -> bool:
        return self.failed_count > 0


@dataclass
class QuoteResponse:
    """返回给调用方的排序结果"""

    quotes: list[NormalizedQuote]
    best_route: Optional[NormalizedQuote]
    ranking_strategy: RankingStrategy
    request_params: RouteRequest
    total_providers: int
    successful_providers: int
    fetch_duration_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "quotes": [quote.to_dict() for quote in self.quotes],
            "bestRoute": self.best_route.to_dict() if self.best_route else None,
            "rankingStrategy": self.ranking_strategy.value,
            "requestParams": self.request_params.to_dict(),
            "totalProviders": self.total_providers,
            "successfulProviders": self.successful_providers,
            "fetchDurationMs": self.fetch_duration_ms,
        }
