"""测试公共夹具与伪造适配器"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import pytest

# 添加项目根目录到 Python 路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bridge_router.exceptions import ProviderServerError, get_error_handler  # noqa: E402
from bridge_router.providers.base import BaseAdapter, RawProviderQuote, RouteStep  # noqa: E402
from bridge_router.types import RouteRequest  # noqa: E402


class FakeAdapter(BaseAdapter):
    """可控的伪造适配器：固定报价、抛出异常或延迟返回"""

    def __init__(
        self,
        provider_id: str,
        fee: float = 1.0,
        gas: float = 0.5,
        time_seconds: int = 60,
        output_ratio: float = 0.99,
        chains=("ethereum", "polygon"),
        tokens=("USDC",),
        error: Optional[Exception] = None,
        delay: float = 0.0,
        capabilities=("quote",),
    ):
        super().__init__(
            provider_id,
            {
                "display_name": provider_id.upper(),
                "supported_chains": list(chains),
                "supported_tokens": list(tokens),
                "capabilities": list(capabilities),
            },
        )
        self.fee = fee
        self.gas = gas
        self.time_seconds = time_seconds
        self.output_ratio = output_ratio
        self.error = error
        self.delay = delay
        self.calls = 0

    async def fetch_quote(self, request: RouteRequest) -> RawProviderQuote:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        amount = request.amount_float
        output = amount * self.output_ratio
        return RawProviderQuote(
            provider_id=self.provider_id,
            provider_name=self.display_name,
            output_amount=output,
            protocol_fee_usd=self.fee,
            gas_cost_usd=self.gas,
            estimated_time_seconds=self.time_seconds,
            steps=[RouteStep(self.display_name, "bridge", amount, output, self.fee)],
        )


def failing_adapter(provider_id: str, **kwargs) -> FakeAdapter:
    return FakeAdapter(
        provider_id,
        error=ProviderServerError("upstream unavailable", provider_id=provider_id),
        **kwargs,
    )


@pytest.fixture
def route_request() -> RouteRequest:
    return RouteRequest(
        source_chain="ethereum",
        destination_chain="polygon",
        source_token="USDC",
        amount="1000",
    )


@pytest.fixture(autouse=True)
def reset_error_stats():
    """每个测试前后清空全局错误统计"""
    get_error_handler().reset_stats()
    yield
    get_error_handler().reset_stats()
