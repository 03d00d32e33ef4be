"""
可靠性评分器
根据Provider的历史运行指标计算0-100的可靠性评分
"""

from enum import Enum
from typing import Iterable, Mapping, Optional, Protocol

from bridge_router.utils.logger import get_logger

from .models import ReliabilityMetrics

logger = get_logger(__name__)

# 综合评分权重
RELIABILITY_WEIGHTS = {
    "uptime": 0.35,
    "success_rate": 0.40,
    "delay_penalty": 0.15,
    "incident_penalty": 0.10,
}
DELAY_PENALTY_FACTOR = 2
INCIDENT_PENALTY_FACTOR = 5

DEFAULT_RELIABILITY_SCORE = 70.0

# 没有指标数据时get_metrics返回的悲观快照
UNKNOWN_PROVIDER_METRICS = ReliabilityMetrics(
    uptime_24h=0,
    success_rate_7d=0,
    avg_delay_percent=100,
    incident_count_30d=99,
    reliability_score=50,
)

BUILTIN_METRICS: dict[str, ReliabilityMetrics] = {
    "stargate": ReliabilityMetrics(99.8, 98.5, 5, 1),
    "squid": ReliabilityMetrics(99.5, 97.2, 12, 2),
    "hop": ReliabilityMetrics(98.9, 96.8, 8, 3),
    "cbridge": ReliabilityMetrics(99.1, 97.5, 10, 2),
    "soroswap": ReliabilityMetrics(97.5, 95.0, 15, 5),
}


class ReliabilityTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


HIGH_TIER_THRESHOLD = 95.0
MEDIUM_TIER_THRESHOLD = 85.0


class MetricsSource(Protocol):
    """只读的可靠性指标来源，由外部按自己的节奏刷新；查询时provider_id统一为小写"""

    def get(self, provider_id: str) -> Optional[ReliabilityMetrics]: ...


class StaticMetricsSource:
    """基于字典的指标来源，provider_id不区分大小写"""

    def __init__(self, metrics: Optional[Mapping[str, ReliabilityMetrics]] = None):
        metrics = BUILTIN_METRICS if metrics is None else metrics
        self._metrics = {key.lower(): value for key, value in metrics.items()}

    def get(self, provider_id: str) -> Optional[ReliabilityMetrics]:
        return self._metrics.get(provider_id.lower())

    def provider_ids(self) -> list[str]:
        return list(self._metrics)


def compute_score(metrics: ReliabilityMetrics) -> float:
    """按固定权重计算综合评分，结果限制在[0, 100]并保留两位小数"""
    delay_score = max(
        0.0, 100 - min(100.0, metrics.avg_delay_percent * DELAY_PENALTY_FACTOR)
    )
    incident_score = max(
        0.0, 100 - min(100.0, metrics.incident_count_30d * INCIDENT_PENALTY_FACTOR)
    )
    composite = (
        metrics.uptime_24h * RELIABILITY_WEIGHTS["uptime"]
        + metrics.success_rate_7d * RELIABILITY_WEIGHTS["success_rate"]
        + delay_score * RELIABILITY_WEIGHTS["delay_penalty"]
        + incident_score * RELIABILITY_WEIGHTS["incident_penalty"]
    )
    return round(min(100.0, max(0.0, composite)), 2)


class ReliabilityScorer:
    """可靠性评分器"""

    def __init__(
        self,
        metrics_source: Optional[MetricsSource] = None,
        default_score: float = DEFAULT_RELIABILITY_SCORE,
    ):
        if not 0 <= default_score <= 100:
            raise ValueError(f"default_score must be within [0, 100], got {default_score}")
        self.metrics_source = StaticMetricsSource() if metrics_source is None else metrics_source
        self.default_score = default_score

    def calculate_reliability_score(self, provider_id: str) -> float:
        """
        计算Provider可靠性评分

        未知Provider返回固定的默认评分，而不是抛出异常。
        """
        metrics = self.metrics_source.get(provider_id.lower())
        if metrics is None:
            logger.warning(
                f"No reliability metrics for provider: {provider_id}, using default score"
            )
            return self.default_score

        score = compute_score(metrics)
        logger.debug(f"Reliability score for {provider_id}: {score}")
        return score

    def get_metrics(self, provider_id: str) -> ReliabilityMetrics:
        metrics = self.metrics_source.get(provider_id.lower())
        if metrics is None:
            return UNKNOWN_PROVIDER_METRICS
        return ReliabilityMetrics(
            uptime_24h=metrics.uptime_24h,
            success_rate_7d=metrics.success_rate_7d,
            avg_delay_percent=metrics.avg_delay_percent,
            incident_count_30d=metrics.incident_count_30d,
            reliability_score=compute_score(metrics),
        )

    def batch_calculate_scores(self, provider_ids: Iterable[str]) -> dict[str, float]:
        return {
            provider_id: self.calculate_reliability_score(provider_id)
            for provider_id in provider_ids
        }

    def get_tier(self, provider_id: str) -> ReliabilityTier:
        score = self.calculate_reliability_score(provider_id)
        if score >= HIGH_TIER_THRESHOLD:
            return ReliabilityTier.HIGH
        if score >= MEDIUM_TIER_THRESHOLD:
            return ReliabilityTier.MEDIUM
        return ReliabilityTier.LOW
