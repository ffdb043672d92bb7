"""
交叉币对数据服务
整合数据获取、缓存、合成三层，对外提供统一的合成行情访问接口
"""

import logging
from typing import Any, Dict, List

from fastapi import Request

from crosspair_service.layers.acquisition import BinanceClient
from crosspair_service.layers.cache import TTLCache, make_key
from crosspair_service.layers.processing import get_processing_layer
from crosspair_service.layers.synthetic import SyntheticEngine
from crosspair_service.models.kline import Series
from crosspair_service.validation import validate_interval, validate_limit, validate_pair

logger = logging.getLogger(__name__)


class PairService:
    """合成行情业务服务"""

    def __init__(self, client: BinanceClient, cache: TTLCache):
        self._client = client
        self._cache = cache
        self._engine = SyntheticEngine(client.fetch_bars, quote_asset=client.quote_asset)
        self._proc = get_processing_layer()

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def quote_asset(self) -> str:
        return self._client.quote_asset

    # ── 合成 K 线 ─────────────────────────────────────────

    async def get_synthetic_series(
        self,
        symbol_a: str,
        symbol_b: str,
        interval: str,
        limit: int,
        force_refresh: bool = False,
    ) -> Series:
        """
        获取合成交叉币对 K 线（带 TTL 缓存）

        Args:
            symbol_a: 分子币种，如 BTC
            symbol_b: 分母币种，如 ETH
            interval: K 线周期
            limit: K 线数量（不参与缓存键）
            force_refresh: 是否跳过缓存重新计算
        """
        a, b = validate_pair(symbol_a, symbol_b)
        interval = validate_interval(interval)
        limit = validate_limit(limit)
        key = make_key(a, b, interval)

        if force_refresh:
            self._cache.delete(key)
        else:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        series = await self._engine.compute(a, b, interval, limit)
        self._cache.set(key, series)
        return series

    async def refresh(self, symbol_a: str, symbol_b: str, interval: str, limit: int) -> Series:
        """强制刷新：先删除缓存，再按未命中流程重新计算"""
        return await self.get_synthetic_series(
            symbol_a, symbol_b, interval, limit, force_refresh=True
        )

    def summarize(self, series: Series) -> Dict[str, Any]:
        return self._proc.summarize(series)

    # ── 币种列表 ──────────────────────────────────────────

    async def list_symbols(self) -> List[str]:
        """可选币种：所有以报价币种计价的交易对的基础币种"""
        pairs = await self._client.get_exchange_symbols()
        return self._proc.base_assets(pairs)

    # ── 缓存管理 ──────────────────────────────────────────

    def cache_stats(self) -> dict:
        return self._cache.stats()

    def flush_cache(self) -> None:
        self._cache.flush_all()


# ── 依赖注入：服务实例由应用生命周期创建并挂在 app.state 上 ──

def get_pair_service(request: Request) -> PairService:
    return request.app.state.pair_service
