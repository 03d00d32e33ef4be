"""可靠性评分器测试"""

import pytest

from bridge_router.routing import (
    ReliabilityMetrics,
    ReliabilityScorer,
    ReliabilityTier,
    StaticMetricsSource,
)
from bridge_router.routing.reliability import compute_score


class TestScore:
    """评分计算"""

    def test_builtin_provider_score(self):
        """测试内置Provider评分"""
        scorer = ReliabilityScorer()
        # 99.8*0.35 + 98.5*0.40 + 90*0.15 + 95*0.10
        assert scorer.calculate_reliability_score("stargate") == pytest.approx(97.33)

    def test_lookup_is_case_insensitive(self):
        """测试provider_id不区分大小写"""
        scorer = ReliabilityScorer()
        assert scorer.calculate_reliability_score("StarGate") == scorer.calculate_reliability_score("stargate")

    def test_unknown_provider_returns_default(self):
        """测试未知Provider返回默认评分"""
        assert ReliabilityScorer().calculate_reliability_score("unknown") == 70.0
        assert ReliabilityScorer(default_score=60).calculate_reliability_score("unknown") == 60

    def test_penalties_are_floored(self):
        """测试延迟和事故惩罚不会低于0"""
        metrics = ReliabilityMetrics(
            uptime_24h=0, success_rate_7d=0, avg_delay_percent=500, incident_count_30d=1000
        )
        assert compute_score(metrics) == 0.0

    def test_perfect_metrics(self):
        """测试满分指标"""
        metrics = ReliabilityMetrics(100, 100, 0, 0)
        assert compute_score(metrics) == 100.0

    @pytest.mark.parametrize("provider_id", ["stargate", "squid", "hop", "cbridge", "soroswap", "x"])
    def test_score_in_range(self, provider_id):
        """测试评分始终在[0, 100]"""
        score = ReliabilityScorer().calculate_reliability_score(provider_id)
        assert 0 <= score <= 100

    def test_invalid_default_score(self):
        """测试默认评分必须在范围内"""
        with pytest.raises(ValueError):
            ReliabilityScorer(default_score=120)


class TestMetrics:
    """指标查询"""

    def test_get_metrics_includes_score(self):
        """测试get_metrics附带计算后的评分"""
        scorer = ReliabilityScorer()
        metrics = scorer.get_metrics("hop")
        assert metrics.uptime_24h == 98.9
        assert metrics.reliability_score == scorer.calculate_reliability_score("hop")

    def test_get_metrics_unknown(self):
        """测试未知Provider返回悲观指标"""
        metrics = ReliabilityScorer().get_metrics("nobody")
        assert metrics.uptime_24h == 0
        assert metrics.incident_count_30d == 99
        assert metrics.reliability_score == 50

    def test_batch_scores(self):
        """测试批量评分"""
        scores = ReliabilityScorer().batch_calculate_scores(["stargate", "unknown"])
        assert set(scores) == {"stargate", "unknown"}
        assert scores["unknown"] == 70.0

    def test_custom_metrics_source(self):
        """测试注入指标来源"""
        source = StaticMetricsSource({"Alpha": ReliabilityMetrics(100, 100, 0, 0)})
        scorer = ReliabilityScorer(source)
        assert scorer.calculate_reliability_score("alpha") == 100.0
        assert scorer.calculate_reliability_score("stargate") == 70.0

    def test_plain_source_receives_lowercase_id(self):
        """测试自定义指标来源按小写provider_id查询"""

        class DictSource:
            def __init__(self, metrics):
                self.metrics = metrics

            def get(self, provider_id):
                return self.metrics.get(provider_id)

        source = DictSource({"stargate": ReliabilityMetrics(99.8, 98.5, 5, 1)})
        scorer = ReliabilityScorer(source)

        assert scorer.calculate_reliability_score("Stargate") == pytest.approx(97.33)
        assert scorer.get_metrics("STARGATE").uptime_24h == 99.8


class TestTier:
    """可靠性等级"""

    def test_tiers(self):
        """测试等级阈值"""
        source = StaticMetricsSource(
            {
                "high": ReliabilityMetrics(100, 100, 0, 0),
                "medium": ReliabilityMetrics(90, 90, 5, 2),
                "low": ReliabilityMetrics(50, 50, 20, 10),
            }
        )
        scorer = ReliabilityScorer(source)
        assert scorer.get_tier("high") == ReliabilityTier.HIGH
        assert scorer.get_tier("medium") == ReliabilityTier.MEDIUM
        assert scorer.get_tier("low") == ReliabilityTier.LOW
