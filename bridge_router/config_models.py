"""
Pydantic models for configuration validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class FeeTemplate(BaseModel):
    """离线报价模型使用的费用模板"""

    fees_usd: float = 1.0
    gas_cost_usd: float = 1.0
    estimated_time_seconds: int = 60
    output_ratio: float = Field(default=0.99, gt=0, le=1)


class GasSettings(BaseModel):
    """适配器私有的gas价格查询配置"""

    rpc_urls: dict[str, str] = Field(default_factory=dict)
    native_token_price_usd: dict[str, float] = Field(default_factory=dict)
    gas_limit: int = 200000
    cache_ttl: float = 30.0
    request_timeout: float = 5.0


class ProviderConfig(BaseModel):
    model_config = {"extra": "allow"}

    id: str
    display_name: str = ""
    # template: 基于费用模板的离线报价; http: 调用REST报价接口
    adapter_class: str = "template"
    enabled: bool = True
    version: str = "1.0.0"

    base_url: str = ""
    quote_path: str = "/quote"
    default_headers: dict[str, str] = Field(default_factory=dict)
    auth_type: str = "bearer"
    api_key: Optional[str] = None

    timeout: float = 10.0
    max_retries: int = Field(default=3, ge=1)
    retry_backoff_base: float = 1.0
    retry_backoff_cap: float = 16.0
    # Minimum seconds between requests (0 = no limit)
    min_request_interval: float = 0.0

    supported_chains: list[str] = Field(default_factory=list)
    supported_tokens: list[str] = Field(default_factory=list)
    capabilities: list[str] = Field(default_factory=lambda: ["quote"])

    fee_template: Optional[FeeTemplate] = None
    gas: Optional[GasSettings] = None

    @field_validator("supported_chains")
    @classmethod
    def _lower_chains(cls, value: list[str]) -> list[str]:
        return [chain.lower() for chain in value]

    @field_validator("supported_tokens")
    @classmethod
    def _upper_tokens(cls, value: list[str]) -> list[str]:
        return [token.upper() for token in value]


class AggregatorSettings(BaseModel):
    provider_timeout: float = Field(default=10.0, gt=0)
    # 整体超时，为空时只受单Provider超时约束
    global_timeout: Optional[float] = Field(default=None, gt=0)
    allow_overwrite: bool = False
    # 连续失败多少次后Provider状态标记为degraded
    degraded_after: int = Field(default=3, ge=1)


class RankingSettings(BaseModel):
    default_strategy: str = "balanced"


class LiquidityPoolConfig(BaseModel):
    token: str
    chain: str
    tvl_usd: float = Field(gt=0)
    daily_volume_usd: float = 0.0


class SlippageSettings(BaseModel):
    # 为空时使用内置流动性数据
    pools: list[LiquidityPoolConfig] = Field(default_factory=list)


class ReliabilityMetricsConfig(BaseModel):
    uptime_24h: float = Field(ge=0, le=100)
    success_rate_7d: float = Field(ge=0, le=100)
    avg_delay_percent: float = Field(default=0.0, ge=0)
    incident_count_30d: int = Field(default=0, ge=0)


class ReliabilitySettings(BaseModel):
    default_score: float = Field(default=70.0, ge=0, le=100)
    # 为空时使用内置历史指标
    metrics: dict[str, ReliabilityMetricsConfig] = Field(default_factory=dict)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "text"
    log_file: Optional[str] = None
    max_file_size: int = 50 * 1024 * 1024
    backup_count: int = 5


class System(BaseModel):
    name: str = "Smart Bridge Router"
    version: str = "0.1.0"


class Config(BaseModel):
    model_config = {"extra": "allow"}

    system: System = Field(default_factory=System)
    # 为空时注册内置Provider
    providers: list[ProviderConfig] = Field(default_factory=list)
    aggregator: AggregatorSettings = Field(default_factory=AggregatorSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    slippage: SlippageSettings = Field(default_factory=SlippageSettings)
    reliability: ReliabilitySettings = Field(default_factory=ReliabilitySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def logging_dict(self) -> dict[str, Any]:
        """转换为setup_logging使用的配置字典"""
        return self.logging.model_dump(exclude={"log_file"})
