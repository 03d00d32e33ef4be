"""
路由模块
报价聚合、滑点估计、可靠性评分、标准化与排序
"""

from .aggregator import QuoteAggregator
from .models import (
    AggregationResult,
    NormalizedQuote,
    QuoteResponse,
    RankingWeights,
    ReliabilityMetrics,
    SlippageEstimate,
)
from .normalizer import normalize_quote
from .ranker import RANKING_WEIGHTS, QuoteRanker
from .reliability import (
    MetricsSource,
    ReliabilityScorer,
    ReliabilityTier,
    StaticMetricsSource,
)
from .service import RouteComparisonService
from .slippage import LiquidityPool, SlippageEstimator

__all__ = [
    "QuoteAggregator",
    "AggregationResult",
    "NormalizedQuote",
    "QuoteResponse",
    "RankingWeights",
    "ReliabilityMetrics",
    "SlippageEstimate",
    "normalize_quote",
    "RANKING_WEIGHTS",
    "QuoteRanker",
    "MetricsSource",
    "ReliabilityScorer",
    "ReliabilityTier",
    "StaticMetricsSource",
    "RouteComparisonService",
    "LiquidityPool",
    "SlippageEstimator",
]
