"""
请求参数校验：币种规范化、K 线周期枚举、数量检查
所有校验在发起任何上游请求之前完成，失败抛出 InvalidInput。
"""

import re
from typing import Optional, Tuple

from crosspair_service.errors import InvalidInput

# Binance 支持的 15 个 K 线周期，由细到粗
INTERVALS = (
    "1m", "3m", "5m", "15m", "30m",
    "1h", "2h", "4h", "6h", "8h", "12h",
    "1d", "3d", "1w", "1M",
)

_SYMBOL_RE = re.compile(r"^[A-Z0-9]{1,20}$")


def normalize_symbol(symbol: Optional[str], name: str = "symbol") -> str:
    """去除空白并转大写，空值或非法字符视为参数错误"""
    if symbol is None or not str(symbol).strip():
        raise InvalidInput(f"缺少必填参数: {name}")
    normalized = str(symbol).strip().upper()
    if not _SYMBOL_RE.match(normalized):
        raise InvalidInput(f"非法币种代码: {symbol}")
    return normalized


def validate_pair(symbol_a: Optional[str], symbol_b: Optional[str]) -> Tuple[str, str]:
    a = normalize_symbol(symbol_a, "coinA")
    b = normalize_symbol(symbol_b, "coinB")
    if a == b:
        raise InvalidInput("coinA 与 coinB 不能相同")
    return a, b


def validate_interval(interval: Optional[str]) -> str:
    # 区分大小写："1m" 为 1 分钟，"1M" 为 1 个月
    value = (interval or "").strip()
    if value not in INTERVALS:
        raise InvalidInput(f"不支持的 K 线周期: {interval!r}，可选: {', '.join(INTERVALS)}")
    return value


def validate_limit(limit) -> int:
    try:
        value = int(limit)
    except (TypeError, ValueError):
        raise InvalidInput(f"limit 必须为正整数: {limit!r}")
    if value < 1:
        raise InvalidInput(f"limit 必须为正整数: {limit!r}")
    return value


def pair_symbol(asset: str, quote: str) -> str:
    """BTC + USDT → BTCUSDT"""
    return f"{asset}{quote}"
