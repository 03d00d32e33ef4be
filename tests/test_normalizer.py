"""报价标准化测试"""

from datetime import datetime

from bridge_router.providers import RawProviderQuote, RouteStep
from bridge_router.routing import SlippageEstimate, normalize_quote
from bridge_router.types import ConfidenceTier, ProviderStatus, RouteRequest


class TestNormalizeQuote:
    """标准化"""

    def setup_method(self):
        self.request = RouteRequest("ethereum", "stellar", "USDC", "250.5", destination_token="XLM")
        self.raw = RawProviderQuote(
            provider_id="squid",
            provider_name="Squid Router",
            output_amount=248.1234567891,
            protocol_fee_usd=1.23456,
            gas_cost_usd=0.9,
            estimated_time_seconds=30,
            steps=[RouteStep("Squid Router", "bridge", 250.5, 248.1234567891, 1.23456)],
        )
        self.slippage = SlippageEstimate(0.012, 0.04, ConfidenceTier.HIGH)

    def test_fields(self):
        """测试字段映射与舍入"""
        quote = normalize_quote(self.raw, self.request, self.slippage, 94.1)

        assert quote.provider_id == "squid"
        assert quote.source_chain == "ethereum"
        assert quote.destination_token == "XLM"
        assert quote.input_amount == 250.5
        assert quote.output_amount == 248.123457
        assert quote.total_fee_usd == 2.1346
        assert quote.slippage_percent == 0.012
        assert quote.reliability_score == 94.1
        assert quote.status == ProviderStatus.ACTIVE

    def test_rank_fields_unset(self):
        """测试综合评分与名次初始为0"""
        quote = normalize_quote(self.raw, self.request, self.slippage, 90)
        assert quote.composite_score == 0
        assert quote.ranking_position == 0

    def test_metadata(self):
        """测试元数据包含费用明细和步骤"""
        fetched_at = datetime(2024, 1, 1)
        quote = normalize_quote(
            self.raw, self.request, self.slippage, 90,
            status=ProviderStatus.DEGRADED, fetched_at=fetched_at,
        )

        assert quote.metadata["fees_breakdown"] == {"protocol_fee": 1.23456, "gas_fee": 0.9}
        assert quote.metadata["steps"][0]["type"] == "bridge"
        assert quote.status == ProviderStatus.DEGRADED
        assert quote.fetched_at == fetched_at
        assert quote.to_dict()["fetchedAt"] == "2024-01-01T00:00:00"

    def test_destination_token_defaults_to_source(self):
        """测试目标代币默认与源代币相同"""
        request = RouteRequest("ethereum", "polygon", "USDC", 100)
        quote = normalize_quote(self.raw, request, self.slippage, 90)
        assert quote.destination_token == "USDC"
