"""Shared request types for Smart Bridge Router."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Union


class RankingStrategy(str, Enum):
    """路由排序策略"""

    BALANCED = "balanced"
    LOWEST_COST = "lowest-cost"
    FASTEST = "fastest"

    @classmethod
    def parse(cls, value: Union[str, "RankingStrategy", None]) -> "RankingStrategy":
        """解析策略名，接受 lowest-cost / lowest_cost 两种写法"""
        if value is None:
            return cls.BALANCED
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("_", "-")
        return cls(normalized)


class ProviderStatus(str, Enum):
    """Provider状态"""

    ACTIVE = "active"
    DEGRADED = "degraded"
    OFFLINE = "offline"


class ConfidenceTier(str, Enum):
    """滑点估计置信度"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def _to_decimal(value: Union[int, float, str, Decimal]) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        # float先转str，避免二进制精度噪音
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"invalid amount: {value!r}") from e


@dataclass(frozen=True)
class RouteRequest:
    """
    一次路由请求（已由外部API层校验）

    destination_token为空时默认与source_token相同；构造后不可变。
    """

    source_chain: str
    destination_chain: str
    source_token: str
    amount: Decimal
    destination_token: Optional[str] = None
    slippage_tolerance: Optional[float] = None
    ranking_strategy: RankingStrategy = RankingStrategy.BALANCED

    def __post_init__(self):
        amount = _to_decimal(self.amount)
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")
        # frozen dataclass只能通过object.__setattr__初始化派生字段
        object.__setattr__(self, "amount", amount)
        object.__setattr__(
            self, "destination_token", self.destination_token or self.source_token
        )
        object.__setattr__(
            self, "ranking_strategy", RankingStrategy.parse(self.ranking_strategy)
        )

    @property
    def amount_float(self) -> float:
        return float(self.amount)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RouteRequest":
        """从入站请求字典构造，兼容camelCase和snake_case"""

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        return cls(
            source_chain=pick("sourceChain", "source_chain"),
            destination_chain=pick("destinationChain", "destination_chain"),
            source_token=pick("sourceToken", "source_token"),
            destination_token=pick("destinationToken", "destination_token"),
            amount=pick("amount", default=0),
            slippage_tolerance=pick("slippageTolerance", "slippage_tolerance"),
            ranking_strategy=pick(
                "rankingStrategy", "rankingMode", "ranking_strategy",
                default=RankingStrategy.BALANCED,
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """回显请求参数"""
        return {
            "sourceChain": self.source_chain,
            "destinationChain": self.destination_chain,
            "sourceToken": self.source_token,
            "destinationToken": self.destination_token,
            "amount": str(self.amount),
            "slippageTolerance": self.slippage_tolerance,
            "rankingStrategy": self.ranking_strategy.value,
        }
