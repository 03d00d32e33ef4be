"""滑点估计器测试"""

import pytest

from bridge_router.routing import LiquidityPool, SlippageEstimate, SlippageEstimator
from bridge_router.routing.slippage import calculate_price_impact
from bridge_router.types import ConfidenceTier


@pytest.fixture
def estimator() -> SlippageEstimator:
    return SlippageEstimator()


class TestKnownPools:
    """有流动性数据的代币/链"""

    def test_price_impact_formula(self, estimator):
        """测试恒定乘积价格冲击公式"""
        estimate = estimator.estimate_slippage(None, "USDC", "ethereum", 500_000)
        assert estimate.expected_slippage == pytest.approx(
            round(calculate_price_impact(0.01), 4)
        )

    @pytest.mark.parametrize("token,chain", [("USDC", "ethereum"), ("XLM", "stellar")])
    def test_monotonic_in_amount(self, estimator, token, chain):
        """测试滑点随金额单调不减"""
        amounts = [0, 1, 100, 10_000, 1_000_000, 50_000_000, 10**9]
        expected = [
            estimator.estimate_slippage(None, token, chain, a).expected_slippage
            for a in amounts
        ]
        assert expected == sorted(expected)

    def test_confidence_tiers(self, estimator):
        """测试置信度随金额/TVL比例下降"""
        # USDC/ethereum TVL = 50M
        assert estimator.estimate_slippage(None, "USDC", "ethereum", 10_000).confidence == ConfidenceTier.HIGH
        assert estimator.estimate_slippage(None, "USDC", "ethereum", 100_000).confidence == ConfidenceTier.MEDIUM
        assert estimator.estimate_slippage(None, "USDC", "ethereum", 1_000_000).confidence == ConfidenceTier.LOW

    def test_lookup_is_case_insensitive(self, estimator):
        """测试代币和链匹配不区分大小写"""
        a = estimator.estimate_slippage(None, "usdc", "Ethereum", 1000)
        b = estimator.estimate_slippage(None, "USDC", "ethereum", 1000)
        assert a == b

    def test_custom_pools(self):
        """测试注入自定义流动性数据"""
        estimator = SlippageEstimator([LiquidityPool("DAI", "gnosis", 1_000_000)])
        estimate = estimator.estimate_slippage(None, "DAI", "gnosis", 100)
        assert estimate.confidence == ConfidenceTier.HIGH
        # 默认池不再可用
        assert estimator.find_pool("USDC", "ethereum") is None


class TestConservativeEstimate:
    """没有流动性数据时的保守估计"""

    def test_unknown_pair_is_never_zero(self, estimator):
        """测试未知组合不返回0"""
        estimate = estimator.estimate_slippage(None, "DOGE", "fantom", 0)
        assert estimate.expected_slippage > 0
        assert estimate.confidence == ConfidenceTier.LOW

    def test_conservative_is_capped(self, estimator):
        """测试保守估计上限为5%"""
        estimate = estimator.estimate_slippage(None, "DOGE", "fantom", 10**12)
        assert estimate.expected_slippage == 5.0
        assert estimate.max_slippage > 10.0

    def test_conservative_monotonic(self, estimator):
        """测试保守估计同样单调不减"""
        values = [
            estimator.estimate_slippage(None, "DOGE", "fantom", a).expected_slippage
            for a in (0, 5_000, 50_000, 200_000, 1_000_000)
        ]
        assert values == sorted(values)


class TestMaxSlippage:
    """max_slippage必须严格大于expected_slippage"""

    @pytest.mark.parametrize(
        "token,chain,amount",
        [
            ("USDC", "ethereum", 0),
            ("USDC", "ethereum", 0.01),
            ("ETH", "ethereum", 1_000_000),
            ("XLM", "stellar", 10**10),
            ("DOGE", "fantom", 0),
            ("DOGE", "fantom", 10**9),
        ],
    )
    def test_max_exceeds_expected(self, estimator, token, chain, amount):
        estimate = estimator.estimate_slippage(None, token, chain, amount)
        assert estimate.max_slippage > estimate.expected_slippage

    def test_estimate_rejects_invalid_headroom(self):
        """测试直接构造时拒绝max <= expected"""
        with pytest.raises(ValueError):
            SlippageEstimate(1.0, 1.0, ConfidenceTier.LOW)


class TestBatch:
    """批量估计"""

    def test_batch_keys_by_provider(self, estimator):
        """测试批量结果按provider_id索引"""
        from bridge_router.providers import RawProviderQuote

        quotes = [
            RawProviderQuote("a", "A", 99.0, 1.0, 0.5, 60),
            RawProviderQuote("b", "B", 98.0, 2.0, 0.5, 30),
        ]
        result = estimator.batch_estimate_slippage(quotes, "USDC", "ethereum", 1000)
        assert set(result) == {"a", "b"}
        assert result["a"] == result["b"]
