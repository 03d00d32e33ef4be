"""
费用模板适配器
不访问远端报价接口，按Provider的费用模板离线计算报价
"""

import math
from typing import Any, Dict, Optional, Union

from bridge_router.config_models import FeeTemplate, ProviderConfig
from bridge_router.exceptions import UnsupportedRouteError
from bridge_router.types import RouteRequest
from bridge_router.utils.logger import get_logger

from ..base import BaseAdapter, RawProviderQuote, RouteStep
from ..gas import GasPriceOracle, calculate_gas_fee

logger = get_logger(__name__)

# 费用按金额的对数缩放，金额低于该值时不放大
FEE_SCALE_BASE_AMOUNT = 100.0


class TemplateQuoteAdapter(BaseAdapter):
    """费用模板适配器"""

    def __init__(
        self,
        provider_id: str,
        config: Union[ProviderConfig, Dict[str, Any], None] = None,
        gas_oracle: Optional[GasPriceOracle] = None,
    ):
        super().__init__(provider_id, config)
        self.fee_template = self.config.fee_template or FeeTemplate()

        # 配置了gas设置时按实时gas价格计算gas成本
        gas = self.config.gas
        if gas_oracle is None and gas is not None and gas.rpc_urls:
            gas_oracle = GasPriceOracle(
                rpc_urls=gas.rpc_urls,
                cache_ttl=gas.cache_ttl,
                request_timeout=gas.request_timeout,
            )
        self.gas_oracle = gas_oracle

    async def close(self):
        await super().close()
        if self.gas_oracle:
            await self.gas_oracle.close()

    def scale_fee(self, amount: float) -> float:
        return self.fee_template.fees_usd * (
            1 + math.log10(max(1.0, amount / FEE_SCALE_BASE_AMOUNT))
        )

    async def estimate_gas_cost(self, chain: str) -> float:
        """
        估算源链上的gas成本（USD）

        没有gas查询器或缺少原生代币价格时使用模板中的固定值。
        """
        gas = self.config.gas
        if self.gas_oracle is None or gas is None:
            return self.fee_template.gas_cost_usd

        native_price = gas.native_token_price_usd.get(chain.lower())
        if native_price is None:
            return self.fee_template.gas_cost_usd

        info = await self.gas_oracle.get_gas_price(chain)
        return calculate_gas_fee(info.gas_price_gwei, gas.gas_limit) * native_price

    async def fetch_quote(self, request: RouteRequest) -> RawProviderQuote:
        if not self.supports_route(
            request.source_chain, request.destination_chain, request.source_token
        ):
            raise UnsupportedRouteError(
                f"{self.display_name} does not support {request.source_token} "
                f"{request.source_chain} -> {request.destination_chain}",
                provider_id=self.provider_id,
            )

        amount = request.amount_float
        fees = self.scale_fee(amount)
        gas_cost = await self.estimate_gas_cost(request.source_chain)
        output_amount = amount * self.fee_template.output_ratio

        return RawProviderQuote(
            provider_id=self.provider_id,
            provider_name=self.display_name,
            output_amount=output_amount,
            protocol_fee_usd=round(fees, 4),
            gas_cost_usd=round(gas_cost, 4),
            estimated_time_seconds=self.fee_template.estimated_time_seconds,
            steps=[
                RouteStep(
                    protocol=self.display_name,
                    step_type="bridge",
                    input_amount=amount,
                    output_amount=output_amount,
                    fee_usd=fees,
                )
            ],
        )
