"""
滑点估计器
根据交易金额与池子流动性的比例估算价格冲击
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from bridge_router.providers.base import RawProviderQuote
from bridge_router.types import ConfidenceTier
from bridge_router.utils.logger import get_logger

from .models import SlippageEstimate

logger = get_logger(__name__)

MAX_SLIPPAGE_MULTIPLIER = 2.5
CONSERVATIVE_MAX_MULTIPLIER = 2.0
# max_slippage至少比expected_slippage高出的百分点
MIN_HEADROOM = 0.01
# 无流动性数据时的最低估计（百分比）
MIN_CONSERVATIVE_SLIPPAGE = 0.1
MAX_CONSERVATIVE_SLIPPAGE = 5.0
CONSERVATIVE_AMOUNT_DIVISOR = 100_000

HIGH_CONFIDENCE_RATIO = 0.001
MEDIUM_CONFIDENCE_RATIO = 0.01

PRECISION = 4


@dataclass(frozen=True)
class LiquidityPool:
    token: str
    chain: str
    tvl_usd: float
    daily_volume_usd: float = 0.0


DEFAULT_POOLS: tuple[LiquidityPool, ...] = (
    LiquidityPool("USDC", "ethereum", 50_000_000, 10_000_000),
    LiquidityPool("USDC", "stellar", 5_000_000, 1_000_000),
    LiquidityPool("USDT", "ethereum", 40_000_000, 8_000_000),
    LiquidityPool("ETH", "ethereum", 200_000_000, 50_000_000),
    LiquidityPool("XLM", "stellar", 2_000_000, 500_000),
)


def calculate_price_impact(impact_ratio: float) -> float:
    """恒定乘积AMM的价格冲击近似: 1 - 1/sqrt(1 + x)，返回百分比"""
    return (1 - 1 / math.sqrt(1 + impact_ratio)) * 100


class SlippageEstimator:
    """滑点估计器"""

    def __init__(self, pools: Optional[Iterable[LiquidityPool]] = None):
        pools = DEFAULT_POOLS if pools is None else pools
        self._pools: dict[tuple[str, str], LiquidityPool] = {
            (pool.token.upper(), pool.chain.lower()): pool for pool in pools
        }

    def find_pool(self, token: str, chain: str) -> Optional[LiquidityPool]:
        return self._pools.get((token.upper(), chain.lower()))

    def estimate_slippage(
        self, quote: Optional[RawProviderQuote], token: str, chain: str, amount: float
    ) -> SlippageEstimate:
        """
        估算单个报价的滑点

        金额相同时结果与具体报价无关；金额越大滑点越大（单调不减）。
        没有该代币/链的流动性数据时返回保守估计，绝不返回0。

        Args:
            quote: 原始报价
            token: 源代币
            chain: 源链
            amount: 交易金额(USD)
        """
        amount = max(0.0, float(amount))
        pool = self.find_pool(token, chain)
        if pool is None:
            logger.warning(
                f"No liquidity data for {token} on {chain}, using conservative estimate"
            )
            return self.conservative_estimate(amount)

        impact_ratio = amount / pool.tvl_usd
        expected = round(calculate_price_impact(impact_ratio), PRECISION)
        return SlippageEstimate(
            expected_slippage=expected,
            max_slippage=self._max_slippage(expected, MAX_SLIPPAGE_MULTIPLIER),
            confidence=self.determine_confidence(impact_ratio),
        )

    def batch_estimate_slippage(
        self, quotes: Iterable[RawProviderQuote], token: str, chain: str, amount: float
    ) -> dict[str, SlippageEstimate]:
        return {
            quote.provider_id: self.estimate_slippage(quote, token, chain, amount)
            for quote in quotes
        }

    @staticmethod
    def determine_confidence(impact_ratio: float) -> ConfidenceTier:
        if impact_ratio < HIGH_CONFIDENCE_RATIO:
            return ConfidenceTier.HIGH
        if impact_ratio < MEDIUM_CONFIDENCE_RATIO:
            return ConfidenceTier.MEDIUM
        return ConfidenceTier.LOW

    def conservative_estimate(self, amount: float) -> SlippageEstimate:
        base = min(amount / CONSERVATIVE_AMOUNT_DIVISOR, MAX_CONSERVATIVE_SLIPPAGE)
        expected = round(max(MIN_CONSERVATIVE_SLIPPAGE, base), PRECISION)
        return SlippageEstimate(
            expected_slippage=expected,
            max_slippage=self._max_slippage(expected, CONSERVATIVE_MAX_MULTIPLIER),
            confidence=ConfidenceTier.LOW,
        )

    @staticmethod
    def _max_slippage(expected: float, multiplier: float) -> float:
        # expected已舍入，再加headroom保证舍入后仍严格大于expected
        return round(expected * multiplier + MIN_HEADROOM, PRECISION)
