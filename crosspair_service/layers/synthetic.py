"""
Layer 4 – 合成层
由两条 USDT 报价序列生成交叉币对序列：A/USDT ÷ B/USDT = A/B。

两条序列并发拉取，按 time 做内连接，仅保留两边都存在的时间点，
OHLC 四个字段分别相除，成交量沿用 A 的成交量（仅供参考）。
"""

import asyncio
from typing import Awaitable, Callable, Optional

from crosspair_service.config import settings
from crosspair_service.errors import InvalidUpstreamData
from crosspair_service.models.kline import PRICE_FIELDS, Bar, Series
from crosspair_service.validation import (
    pair_symbol,
    validate_interval,
    validate_limit,
    validate_pair,
)

FetchBars = Callable[[str, str, int], Awaitable[Series]]


def derive_synthetic(series_a: Series, series_b: Series, symbol_b: str = "B") -> Series:
    """按时间对齐两条序列并逐字段求比值，结果保持 A 的顺序"""
    by_time = {bar.time: bar for bar in series_b}
    result = []
    for bar_a in series_a:
        bar_b = by_time.get(bar_a.time)
        if bar_b is None:
            continue
        for field in PRICE_FIELDS:
            if getattr(bar_b, field) == 0:
                raise InvalidUpstreamData(
                    f"{symbol_b} 在 {bar_a.time} 的 {field} 为 0，无法计算比值"
                )
        result.append(Bar(
            time=bar_a.time,
            open=bar_a.open / bar_b.open,
            high=bar_a.high / bar_b.high,
            low=bar_a.low / bar_b.low,
            close=bar_a.close / bar_b.close,
            volume=bar_a.volume,
        ))
    return tuple(result)


class SyntheticEngine:
    """合成序列计算入口，依赖一个 fetch_bars(symbol, interval, limit) 协程函数"""

    def __init__(self, fetch_bars: FetchBars, quote_asset: Optional[str] = None):
        self._fetch_bars = fetch_bars
        self.quote_asset = (quote_asset or settings.QUOTE_ASSET).upper()

    async def compute(self, symbol_a: str, symbol_b: str, interval: str, limit: int) -> Series:
        a, b = validate_pair(symbol_a, symbol_b)
        interval = validate_interval(interval)
        limit = validate_limit(limit)

        # 任一请求失败即整体失败，错误原样向上抛出
        series_a, series_b = await asyncio.gather(
            self._fetch_bars(pair_symbol(a, self.quote_asset), interval, limit),
            self._fetch_bars(pair_symbol(b, self.quote_asset), interval, limit),
        )
        return derive_synthetic(series_a, series_b, symbol_b=pair_symbol(b, self.quote_asset))
