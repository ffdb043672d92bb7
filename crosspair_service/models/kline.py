"""K 线数据结构"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Bar:
    """单根 OHLCV K 线，time 为开盘时间（秒级时间戳）"""
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# 同一交易对、同一周期的 K 线序列，time 严格递增；返回后不可修改
Series = Tuple[Bar, ...]

PRICE_FIELDS = ("open", "high", "low", "close")


def series_to_records(series: Iterable[Bar]) -> List[Dict[str, Any]]:
    return [bar.to_dict() for bar in series]
