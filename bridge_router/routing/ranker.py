"""
报价排序器
按策略权重计算综合评分并排序，评分越高越好
"""

from dataclasses import replace
from typing import Optional, Sequence, Union

from bridge_router.exceptions import ErrorCode, RoutingException
from bridge_router.types import RankingStrategy
from bridge_router.utils.logger import get_logger

from .models import NormalizedQuote, RankingWeights

logger = get_logger(__name__)

RANKING_WEIGHTS: dict[RankingStrategy, RankingWeights] = {
    RankingStrategy.BALANCED: RankingWeights(
        cost=0.30, speed=0.25, reliability=0.30, slippage=0.15
    ),
    RankingStrategy.LOWEST_COST: RankingWeights(
        cost=0.55, speed=0.15, reliability=0.20, slippage=0.10
    ),
    RankingStrategy.FASTEST: RankingWeights(
        cost=0.15, speed=0.55, reliability=0.20, slippage=0.10
    ),
}

SCORE_PRECISION = 2


def _inverted_score(value: float, max_value: float) -> float:
    """越小越好的指标转换为0-100评分，批次最大值为0时所有候选都得100"""
    if max_value > 0:
        return (1 - value / max_value) * 100
    return 100.0


class QuoteRanker:
    """报价排序器"""

    def get_weights(self, strategy: Union[RankingStrategy, str]) -> RankingWeights:
        try:
            return RANKING_WEIGHTS[RankingStrategy.parse(strategy)]
        except ValueError as e:
            raise RoutingException(
                ErrorCode.UNKNOWN_STRATEGY,
                f"Unknown ranking strategy: {strategy}",
                cause=e,
            ) from e

    def rank_quotes(
        self,
        quotes: Sequence[NormalizedQuote],
        strategy: Union[RankingStrategy, str] = RankingStrategy.BALANCED,
    ) -> list[NormalizedQuote]:
        """
        计算综合评分并排序

        成本、速度、滑点按本批次最大值归一化后取反；可靠性评分本身已在0-100，直接使用。
        综合评分相同的报价保持输入顺序（稳定排序），ranking_position从1开始。

        Returns:
            排序后的新报价列表，输入为空时返回空列表
        """
        if not quotes:
            return []

        weights = self.get_weights(strategy)
        max_fee = max(q.total_fee_usd for q in quotes)
        max_time = max(q.estimated_time_seconds for q in quotes)
        max_slippage = max(q.slippage_percent for q in quotes)

        logger.debug(f"Ranking {len(quotes)} quotes with strategy: {strategy}")

        scored = []
        for quote in quotes:
            cost_score = _inverted_score(quote.total_fee_usd, max_fee)
            speed_score = _inverted_score(quote.estimated_time_seconds, max_time)
            slippage_score = _inverted_score(quote.slippage_percent, max_slippage)

            composite = (
                cost_score * weights.cost
                + speed_score * weights.speed
                + quote.reliability_score * weights.reliability
                + slippage_score * weights.slippage
            )
            scored.append(
                replace(quote, composite_score=round(composite, SCORE_PRECISION))
            )

        # sorted是稳定排序，reverse=True不改变相同评分的相对顺序
        ranked = sorted(scored, key=lambda q: q.composite_score, reverse=True)
        return [
            replace(quote, ranking_position=index + 1)
            for index, quote in enumerate(ranked)
        ]

    def get_best_quote(
        self,
        quotes: Sequence[NormalizedQuote],
        strategy: Union[RankingStrategy, str] = RankingStrategy.BALANCED,
    ) -> Optional[NormalizedQuote]:
        ranked = self.rank_quotes(quotes, strategy)
        return ranked[0] if ranked else None
