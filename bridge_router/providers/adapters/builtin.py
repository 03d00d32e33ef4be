"""
内置桥接Provider
未提供配置文件时注册的默认Provider集合
"""

from bridge_router.config_models import ProviderConfig

BUILTIN_PROVIDERS: list[dict] = [
    {
        "id": "stargate",
        "display_name": "Stargate Finance",
        "supported_chains": [
            "ethereum", "polygon", "arbitrum", "optimism", "binance", "avalanche",
        ],
        "supported_tokens": ["USDC", "USDT", "ETH", "WBTC"],
        "fee_template": {
            "fees_usd": 0.80,
            "gas_cost_usd": 1.20,
            "estimated_time_seconds": 45,
            "output_ratio": 0.989,
        },
    },
    {
        "id": "squid",
        "display_name": "Squid Router",
        "supported_chains": ["ethereum", "polygon", "arbitrum", "avalanche", "stellar"],
        "supported_tokens": ["USDC", "USDT", "ETH", "XLM"],
        "fee_template": {
            "fees_usd": 1.10,
            "gas_cost_usd": 0.90,
            "estimated_time_seconds": 30,
            "output_ratio": 0.992,
        },
    },
    {
        "id": "hop",
        "display_name": "Hop Protocol",
        "supported_chains": ["ethereum", "polygon", "arbitrum", "optimism"],
        "supported_tokens": ["USDC", "USDT", "ETH", "MATIC"],
        "fee_template": {
            "fees_usd": 0.60,
            "gas_cost_usd": 1.50,
            "estimated_time_seconds": 120,
            "output_ratio": 0.985,
        },
    },
    {
        "id": "cbridge",
        "display_name": "cBridge",
        "supported_chains": ["ethereum", "polygon", "arbitrum", "binance", "avalanche"],
        "supported_tokens": ["USDC", "USDT", "ETH", "BNB"],
        "fee_template": {
            "fees_usd": 0.70,
            "gas_cost_usd": 1.30,
            "estimated_time_seconds": 90,
            "output_ratio": 0.987,
        },
    },
    {
        "id": "soroswap",
        "display_name": "Soroswap Bridge",
        "supported_chains": ["stellar", "ethereum"],
        "supported_tokens": ["USDC", "XLM", "yXLM"],
        "fee_template": {
            "fees_usd": 0.30,
            "gas_cost_usd": 0.20,
            "estimated_time_seconds": 15,
            "output_ratio": 0.997,
        },
    },
]


def builtin_provider_configs() -> list[ProviderConfig]:
    """内置Provider配置（每次返回新对象）"""
    return [ProviderConfig(adapter_class="template", **data) for data in BUILTIN_PROVIDERS]
