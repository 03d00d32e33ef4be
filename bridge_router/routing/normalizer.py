"""
报价标准化
把原始报价、滑点估计和可靠性评分合并为统一的NormalizedQuote
"""

from datetime import datetime
from typing import Optional

from bridge_router.providers.base import RawProviderQuote
from bridge_router.types import ProviderStatus, RouteRequest

from .models import NormalizedQuote, SlippageEstimate

FEE_PRECISION = 4
AMOUNT_PRECISION = 6


def normalize_quote(
    raw: RawProviderQuote,
    request: RouteRequest,
    slippage: SlippageEstimate,
    reliability_score: float,
    status: ProviderStatus = ProviderStatus.ACTIVE,
    fetched_at: Optional[datetime] = None,
) -> NormalizedQuote:
    """
    标准化单个报价（纯函数）

    composite_score和ranking_position初始化为0，只由排序器赋值。
    """
    total_fee = raw.protocol_fee_usd + raw.gas_cost_usd
    return NormalizedQuote(
        provider_id=raw.provider_id,
        provider_name=raw.provider_name,
        source_chain=request.source_chain,
        destination_chain=request.destination_chain,
        source_token=request.source_token,
        destination_token=request.destination_token,
        input_amount=request.amount_float,
        output_amount=round(raw.output_amount, AMOUNT_PRECISION),
        total_fee_usd=round(total_fee, FEE_PRECISION),
        estimated_time_seconds=raw.estimated_time_seconds,
        slippage_percent=slippage.expected_slippage,
        reliability_score=reliability_score,
        composite_score=0.0,
        ranking_position=0,
        status=status,
        metadata={
            "fees_breakdown": {
                "protocol_fee": raw.protocol_fee_usd,
                "gas_fee": raw.gas_cost_usd,
            },
            "steps": [step.to_dict() for step in raw.steps],
        },
        fetched_at=fetched_at or datetime.now(),
    )
