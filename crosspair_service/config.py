"""
交叉币对服务配置模块
支持从环境变量 / .env 读取配置
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CrossPairSettings(BaseSettings):
    """交叉币对服务配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── 基础配置 ──────────────────────────────────────────
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8002)
    DEBUG: bool = Field(default=False)
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"]
    )

    # ── 数据源配置（Binance 公共接口） ─────────────────────
    BINANCE_API_BASE: str = Field(default="https://api.binance.com")
    QUOTE_ASSET: str = Field(default="USDT")
    KLINE_MAX_LIMIT: int = Field(default=1000)      # Binance 单次最多返回 1000 根
    DEFAULT_INTERVAL: str = Field(default="1h")
    DEFAULT_LIMIT: int = Field(default=500)
    HTTP_TIMEOUT: Optional[float] = Field(default=None)  # None 表示沿用 aiohttp 默认超时

    # ── 缓存配置 ──────────────────────────────────────────
    CACHE_DEFAULT_TTL: int = Field(default=300)     # 未知周期的 TTL（秒）
    CACHE_CHECK_PERIOD: int = Field(default=60)     # 过期键清理间隔（秒）

    # ── 日志配置 ──────────────────────────────────────────
    LOG_LEVEL: str = Field(default="INFO")

    @property
    def KLINES_URL(self) -> str:
        return f"{self.BINANCE_API_BASE.rstrip('/')}/api/v3/klines"

    @property
    def EXCHANGE_INFO_URL(self) -> str:
        return f"{self.BINANCE_API_BASE.rstrip('/')}/api/v3/exchangeInfo"


@lru_cache
def get_settings() -> CrossPairSettings:
    """获取全局配置（单例）"""
    return CrossPairSettings()


settings = get_settings()
