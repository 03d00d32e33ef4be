"""
Gas价格查询
通过JSON-RPC eth_gasPrice获取EVM链的实时gas价格，失败时回退到静态估计值
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import httpx

from bridge_router.utils.logger import get_logger
from bridge_router.utils.ttl_cache import TTLCache

logger = get_logger(__name__)

GAS_PRICE_CACHE_TTL = 30.0

# 静态gas价格（Gwei），RPC不可用时使用
FALLBACK_GAS_PRICES_GWEI: dict[str, float] = {
    "ethereum": 30,
    "polygon": 100,
    "arbitrum": 0.5,
    "optimism": 0.001,
    "base": 0.1,
    "bsc": 5,
    "binance": 5,
    "avalanche": 25,
    "fantom": 35,
    "gnosis": 3,
    "scroll": 0.5,
    "linea": 0.5,
    "zksync": 0.25,
    "zkevm": 0.5,
}
DEFAULT_GAS_PRICE_GWEI = 10.0

GAS_LIMITS: dict[str, int] = {
    "bridge_transfer": 200000,
    "token_approval": 65000,
    "swap": 150000,
    "wrap": 50000,
}


@dataclass(frozen=True)
class GasPriceInfo:
    chain: str
    gas_price_gwei: float
    recommended_gas_limit: int
    source: str
    fetched_at: datetime = field(default_factory=datetime.now)


def calculate_gas_fee(
    gas_price_gwei: float, gas_limit: int = GAS_LIMITS["bridge_transfer"]
) -> float:
    """Gas费用（原生代币单位）"""
    return gas_price_gwei * gas_limit / 1e9


class GasPriceOracle:
    """
    单个适配器私有的gas价格查询器

    RPC结果按链缓存30秒；未配置RPC地址或查询失败时返回静态回退价格（不缓存）。
    """

    def __init__(
        self,
        rpc_urls: Optional[dict[str, str]] = None,
        cache_ttl: float = GAS_PRICE_CACHE_TTL,
        request_timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.rpc_urls = {chain.lower(): url for chain, url in (rpc_urls or {}).items()}
        self.request_timeout = request_timeout
        self._cache: TTLCache[GasPriceInfo] = TTLCache(cache_ttl)
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.request_timeout)
        return self._client

    async def close(self):
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_gas_price(self, chain: str) -> GasPriceInfo:
        """获取指定链的gas价格"""
        chain = chain.lower()
        cached = self._cache.get(chain)
        if cached is not None:
            return cached

        rpc_url = self.rpc_urls.get(chain)
        if not rpc_url:
            return self.get_fallback_gas_price(chain)

        try:
            gas_price = await self._fetch_from_rpc(rpc_url)
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to fetch gas price for {chain}: {e}")
            return self.get_fallback_gas_price(chain)

        info = GasPriceInfo(
            chain=chain,
            gas_price_gwei=gas_price,
            recommended_gas_limit=GAS_LIMITS["bridge_transfer"],
            source="rpc",
        )
        self._cache.set(chain, info)
        return info

    def get_fallback_gas_price(self, chain: str) -> GasPriceInfo:
        chain = chain.lower()
        return GasPriceInfo(
            chain=chain,
            gas_price_gwei=FALLBACK_GAS_PRICES_GWEI.get(chain, DEFAULT_GAS_PRICE_GWEI),
            recommended_gas_limit=GAS_LIMITS["bridge_transfer"],
            source="fallback",
        )

    async def _fetch_from_rpc(self, rpc_url: str) -> float:
        response = await self.client.post(
            rpc_url,
            json={"jsonrpc": "2.0", "method": "eth_gasPrice", "params": [], "id": 1},
            timeout=self.request_timeout,
        )
        response.raise_for_status()
        result = response.json()["result"]
        # 返回值为十六进制wei
        return int(result, 16) / 1e9
