"""
Layer 3 – 数据处理层
将 Binance 原始 K 线清洗为标准 Bar 序列，并为合成序列生成统计摘要。
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from crosspair_service.errors import InvalidUpstreamData
from crosspair_service.models.kline import Bar, Series

logger = logging.getLogger(__name__)

# Binance kline 行格式: [openTime, open, high, low, close, volume, closeTime, ...]
_KLINE_COLUMNS = ["open_time", "open", "high", "low", "close", "volume"]
_NUMERIC_COLUMNS = ["open", "high", "low", "close", "volume"]


class ProcessingLayer:
    """数据处理层：清洗 + 标准化 + 摘要"""

    def klines_to_frame(self, rows: Sequence[Sequence[Any]], symbol: str = "") -> pd.DataFrame:
        """
        将 Binance 原始 kline 行转换为标准 DataFrame

        标准列：time, open, high, low, close, volume
        time 为秒级时间戳，按升序排列且唯一
        """
        if not rows:
            return pd.DataFrame(columns=["time"] + _NUMERIC_COLUMNS)

        try:
            df = pd.DataFrame([list(row[:6]) for row in rows], columns=_KLINE_COLUMNS)
        except (TypeError, ValueError) as exc:
            raise InvalidUpstreamData(f"{symbol} K 线格式无法解析: {exc}") from exc

        for col in _KLINE_COLUMNS:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        if df[_KLINE_COLUMNS].isna().any().any():
            raise InvalidUpstreamData(f"{symbol} K 线包含非数值字段")

        # 毫秒 → 秒
        df["time"] = (df["open_time"] // 1000).astype("int64")
        df = df.drop(columns=["open_time"])

        # 重复时间保留最后一根，保证 time 严格递增
        df = df.drop_duplicates(subset=["time"], keep="last")
        df = df.sort_values("time").reset_index(drop=True)
        return df[["time"] + _NUMERIC_COLUMNS]

    def frame_to_series(self, df: pd.DataFrame) -> Series:
        if df.empty:
            return ()
        return tuple(
            Bar(
                time=int(row.time),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=float(row.volume),
            )
            for row in df.itertuples(index=False)
        )

    def normalize_klines(self, rows: Sequence[Sequence[Any]], symbol: str = "") -> Series:
        return self.frame_to_series(self.klines_to_frame(rows, symbol))

    def summarize(self, series: Series) -> Optional[Dict[str, Any]]:
        """
        合成序列统计摘要

        Returns:
            {
                "current_price": 最新收盘价,
                "open_price": 首根开盘价,
                "high_price" / "low_price": 区间最高 / 最低,
                "price_change": 收盘价变动,
                "price_change_percent": 变动百分比（保留两位小数）,
                "timestamp": 最新 K 线时间
            }
            空序列返回 None
        """
        if not series:
            return None
        df = pd.DataFrame([bar.to_dict() for bar in series])
        first, last = df.iloc[0], df.iloc[-1]
        change = float(last["close"] - first["close"])
        base = float(first["close"])
        return {
            "current_price": float(last["close"]),
            "open_price": float(first["open"]),
            "high_price": float(df["high"].max()),
            "low_price": float(df["low"].min()),
            "price_change": change,
            "price_change_percent": round(change / base * 100, 2) if base else None,
            "timestamp": int(last["time"]),
        }

    def base_assets(self, symbols: List[Dict[str, Any]]) -> List[str]:
        """从交易对列表提取去重、排序后的基础币种"""
        return sorted({s["baseAsset"] for s in symbols if s.get("baseAsset")})


# ── 模块级别单例（无状态） ────────────────────────────────
_processor: Optional[ProcessingLayer] = None


def get_processing_layer() -> ProcessingLayer:
    global _processor
    if _processor is None:
        _processor = ProcessingLayer()
    return _processor
