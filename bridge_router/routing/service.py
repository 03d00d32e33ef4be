"""
路由比较服务
组合聚合器、滑点估计、可靠性评分、标准化和排序，处理一次完整的报价请求
"""

import time
from typing import Any, Optional, Union

from bridge_router.exceptions import ProviderNotFoundError
from bridge_router.types import RankingStrategy, RouteRequest
from bridge_router.utils.logger import get_logger

from .aggregator import QuoteAggregator
from .models import NormalizedQuote, QuoteResponse
from .normalizer import normalize_quote
from .ranker import QuoteRanker
from .reliability import ReliabilityScorer
from .slippage import SlippageEstimator

logger = get_logger(__name__)

_STRATEGY_KEYS = ("rankingStrategy", "rankingMode", "ranking_strategy")


class RouteComparisonService:
    """路由比较服务"""

    def __init__(
        self,
        aggregator: QuoteAggregator,
        slippage_estimator: Optional[SlippageEstimator] = None,
        reliability_scorer: Optional[ReliabilityScorer] = None,
        ranker: Optional[QuoteRanker] = None,
        default_strategy: Union[RankingStrategy, str] = RankingStrategy.BALANCED,
    ):
        self.aggregator = aggregator
        self.slippage_estimator = slippage_estimator or SlippageEstimator()
        self.reliability_scorer = reliability_scorer or ReliabilityScorer()
        self.ranker = ranker or QuoteRanker()
        self.default_strategy = RankingStrategy.parse(default_strategy)

    def _coerce_request(self, request: Union[RouteRequest, dict[str, Any]]) -> RouteRequest:
        if isinstance(request, RouteRequest):
            return request
        data = dict(request)
        if not any(data.get(key) for key in _STRATEGY_KEYS):
            data["ranking_strategy"] = self.default_strategy
        return RouteRequest.from_dict(data)

    async def get_quotes(
        self, request: Union[RouteRequest, dict[str, Any]]
    ) -> QuoteResponse:
        """
        获取排序后的所有报价

        Raises:
            RouteNotSupportedError: 没有Provider支持该路由
            AllProvidersFailedError: 所有Provider都失败
        """
        request = self._coerce_request(request)
        start_time = time.monotonic()
        logger.info(
            f"Getting quotes: {request.source_token} "
            f"{request.source_chain}->{request.destination_chain} "
            f"amount={request.amount} strategy={request.ranking_strategy.value}"
        )

        result = await self.aggregator.fetch_routes(request)

        amount = request.amount_float
        slippage_map = self.slippage_estimator.batch_estimate_slippage(
            result.quotes, request.source_token, request.source_chain, amount
        )
        reliability_map = self.reliability_scorer.batch_calculate_scores(
            quote.provider_id for quote in result.quotes
        )

        normalized = [
            normalize_quote(
                raw,
                request,
                slippage_map[raw.provider_id],
                reliability_map[raw.provider_id],
                status=self.aggregator.get_provider_status(raw.provider_id),
            )
            for raw in result.quotes
        ]
        ranked = self.ranker.rank_quotes(normalized, request.ranking_strategy)

        response = QuoteResponse(
            quotes=ranked,
            best_route=ranked[0],
            ranking_strategy=request.ranking_strategy,
            request_params=request,
            total_providers=result.total_providers,
            successful_providers=result.successful_providers,
            fetch_duration_ms=int((time.monotonic() - start_time) * 1000),
        )
        logger.info(
            f"Returned {len(ranked)} quotes in {response.fetch_duration_ms}ms. "
            f"Best: {ranked[0].provider_name} score={ranked[0].composite_score}"
        )
        return response

    async def get_route_details(
        self, request: Union[RouteRequest, dict[str, Any]], provider_id: str
    ) -> NormalizedQuote:
        """获取指定Provider的路由详情，该Provider没有报价时抛出ProviderNotFoundError"""
        response = await self.get_quotes(request)
        for quote in response.quotes:
            if quote.provider_id == provider_id:
                return quote
        raise ProviderNotFoundError(provider_id)

    def get_supported_providers(self) -> list[dict[str, Any]]:
        """Provider目录，附带当前状态和可靠性评分"""
        providers = []
        for adapter in self.aggregator.get_all_providers():
            info = adapter.describe()
            info["status"] = self.aggregator.get_provider_status(adapter.provider_id).value
            info["reliabilityScore"] = self.reliability_scorer.calculate_reliability_score(
                adapter.provider_id
            )
            providers.append(info)
        return providers

    async def close(self):
        await self.aggregator.registry.cleanup()
