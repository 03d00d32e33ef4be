"""
HTTP报价适配器
调用Provider的REST报价接口，并把响应转换为统一的RawProviderQuote
"""

from typing import Any, Dict, List

from bridge_router.exceptions import ProviderResponseError, UnsupportedRouteError
from bridge_router.types import RouteRequest
from bridge_router.utils.logger import get_logger

from ..base import STEP_TYPES, BaseAdapter, RawProviderQuote, RouteStep

logger = get_logger(__name__)


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class HttpQuoteAdapter(BaseAdapter):
    """REST报价接口适配器"""

    def transform_request(self, request: RouteRequest) -> Dict[str, Any]:
        """转换请求格式为查询参数"""
        params: Dict[str, Any] = {
            "fromChain": request.source_chain,
            "toChain": request.destination_chain,
            "fromToken": request.source_token,
            "toToken": request.destination_token,
            "amount": str(request.amount),
        }
        if request.slippage_tolerance is not None:
            params["slippage"] = request.slippage_tolerance
        return params

    def transform_response(self, data: Any) -> RawProviderQuote:
        """
        转换响应格式

        兼容 {"quote": {...}} 包装和平铺结构，字段同时接受camelCase和snake_case。
        """
        if not isinstance(data, dict):
            raise ProviderResponseError(
                f"报价响应格式错误: {type(data).__name__}",
                provider_id=self.provider_id,
            )
        if data.get("supported") is False:
            raise UnsupportedRouteError(
                data.get("message") or "route not supported",
                provider_id=self.provider_id,
            )

        quote = data.get("quote", data)
        if not isinstance(quote, dict):
            raise ProviderResponseError(
                "报价响应缺少quote对象", provider_id=self.provider_id
            )
        output_amount = _pick(quote, "outputAmount", "output_amount", "toAmount")
        if output_amount is None:
            raise ProviderResponseError(
                "报价响应缺少outputAmount", provider_id=self.provider_id
            )

        try:
            return RawProviderQuote(
                provider_id=self.provider_id,
                provider_name=self.display_name,
                output_amount=float(output_amount),
                protocol_fee_usd=float(
                    _pick(quote, "feesUsd", "fees_usd", "protocolFeeUsd") or 0
                ),
                gas_cost_usd=float(_pick(quote, "gasCostUsd", "gas_cost_usd") or 0),
                estimated_time_seconds=int(
                    _pick(quote, "estimatedTimeSeconds", "estimated_time_seconds") or 0
                ),
                steps=self._parse_steps(quote.get("steps") or []),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise ProviderResponseError(
                f"报价响应字段无效: {e}", provider_id=self.provider_id, cause=e
            ) from e

    def _parse_steps(self, steps: List[Dict[str, Any]]) -> List[RouteStep]:
        parsed = []
        for step in steps:
            step_type = str(step.get("type", "bridge")).lower()
            if step_type not in STEP_TYPES:
                logger.debug(f"{self.provider_id}: 未知步骤类型 {step_type}，按bridge处理")
                step_type = "bridge"
            parsed.append(
                RouteStep(
                    protocol=str(step.get("protocol") or self.display_name),
                    step_type=step_type,
                    input_amount=float(_pick(step, "inputAmount", "input_amount") or 0),
                    output_amount=float(
                        _pick(step, "outputAmount", "output_amount") or 0
                    ),
                    fee_usd=float(_pick(step, "feeUsd", "fee_usd") or 0),
                )
            )
        return parsed

    async def fetch_quote(self, request: RouteRequest) -> RawProviderQuote:
        response = await self._request_with_retry(
            "GET", self.config.quote_path, params=self.transform_request(request)
        )
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderResponseError(
                f"报价响应不是有效JSON: {e}", provider_id=self.provider_id, cause=e
            ) from e
        return self.transform_response(data)
