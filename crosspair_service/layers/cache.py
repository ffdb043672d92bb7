"""
Layer 2 – 缓存层
进程内 TTL 缓存：键为 (coinA, coinB, interval)，TTL 由 K 线周期决定，
周期越短缓存越短。过期键在读取时惰性删除，并由后台清理任务定期清扫。

缓存对象由应用生命周期创建并注入，不使用模块级全局实例。
返回值为共享引用（不做拷贝），调用方不得修改。
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from crosspair_service.config import settings

logger = logging.getLogger(__name__)

# K 线周期 → 缓存时长（秒）
_TTL_TABLE: Dict[str, int] = {
    "1m": 60,         # 1 分钟
    "3m": 180,        # 3 分钟
    "5m": 300,        # 5 分钟
    "15m": 600,       # 10 分钟
    "30m": 900,       # 15 分钟
    "1h": 1800,       # 30 分钟
    "2h": 3600,       # 1 小时
    "4h": 7200,       # 2 小时
    "6h": 10800,      # 3 小时
    "8h": 14400,      # 4 小时
    "12h": 21600,     # 6 小时
    "1d": 43200,      # 12 小时
    "3d": 86400,      # 24 小时
    "1w": 172800,     # 48 小时
    "1M": 259200,     # 72 小时
}

CacheKey = Tuple[str, str, str]


def ttl_for(interval: str, default: Optional[int] = None) -> int:
    """根据 K 线周期返回 TTL，未知周期使用默认值"""
    if default is None:
        default = settings.CACHE_DEFAULT_TTL
    return _TTL_TABLE.get(interval, default)


def make_key(symbol_a: str, symbol_b: str, interval: str) -> CacheKey:
    """生成缓存键；A/B 顺序有意义，A/B 与 B/A 为不同条目"""
    return (symbol_a, symbol_b, interval)


def _format_key(key: Hashable) -> str:
    if isinstance(key, tuple):
        return "_".join(str(p) for p in key)
    return str(key)


class TTLCache:
    """按周期设置 TTL 的内存缓存"""

    def __init__(
        self,
        default_ttl: Optional[int] = None,
        check_period: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = settings.CACHE_DEFAULT_TTL if default_ttl is None else default_ttl
        self.check_period = settings.CACHE_CHECK_PERIOD if check_period is None else check_period
        self._clock = clock
        self._data: Dict[Hashable, Tuple[Any, float]] = {}
        self._hits = 0
        self._misses = 0
        self._expired = 0
        self._sweeper: Optional[asyncio.Task] = None

    # ── 基本读写 ──────────────────────────────────────────

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is not None:
            value, expires_at = entry
            if expires_at > self._clock():
                self._hits += 1
                logger.debug(f"缓存命中: {_format_key(key)}")
                return value
            del self._data[key]
            self._expired += 1

        self._misses += 1
        logger.debug(f"缓存未命中: {_format_key(key)}")
        return None

    def set(self, key: Hashable, value: Any, ttl: Optional[int] = None) -> bool:
        """写入缓存；未指定 ttl 时按键中的周期查表"""
        if ttl is None:
            interval = key[-1] if isinstance(key, tuple) and key else ""
            ttl = ttl_for(interval, self.default_ttl)
        self._data[key] = (value, self._clock() + ttl)
        logger.debug(f"缓存写入: {_format_key(key)} (TTL: {ttl}s)")
        return True

    def delete(self, key: Hashable) -> int:
        """删除指定键，返回实际删除的条目数"""
        if self._data.pop(key, None) is None:
            return 0
        logger.debug(f"缓存删除: {_format_key(key)}")
        return 1

    def flush_all(self) -> None:
        self._data.clear()
        self._hits = 0
        self._misses = 0
        self._expired = 0
        logger.info("缓存已清空")

    def get_ttl(self, key: Hashable) -> Optional[float]:
        """返回条目的过期时刻（与 clock 同一时间基准），不存在返回 None"""
        entry = self._data.get(key)
        return entry[1] if entry is not None else None

    def __contains__(self, key: Hashable) -> bool:
        entry = self._data.get(key)
        return entry is not None and entry[1] > self._clock()

    def __len__(self) -> int:
        return len(self._data)

    # ── 过期清理 ──────────────────────────────────────────

    def purge_expired(self) -> int:
        now = self._clock()
        stale = [k for k, (_, expires_at) in self._data.items() if expires_at <= now]
        for key in stale:
            del self._data[key]
        self._expired += len(stale)
        if stale:
            logger.debug(f"清理过期缓存 {len(stale)} 条")
        return len(stale)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.check_period)
            self.purge_expired()

    def start_sweeper(self) -> None:
        """在当前事件循环中启动定期清理任务；check_period <= 0 表示不做定期清理"""
        if self.check_period <= 0:
            logger.info("缓存定期清理已关闭，仅在读取时惰性删除过期键")
            return
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    # ── 统计 ──────────────────────────────────────────────

    def stats(self) -> dict:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "keys": len(self._data),
            "expired": self._expired,
            "default_ttl": self.default_ttl,
            "check_period": self.check_period,
        }
