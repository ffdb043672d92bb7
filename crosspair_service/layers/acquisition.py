"""
Layer 1 – 数据获取层
通过 Binance 公共 REST 接口拉取 K 线与交易对信息，
并将数据源特有的错误翻译为统一的错误类型。
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from crosspair_service.config import settings
from crosspair_service.errors import (
    InvalidUpstreamData,
    RateLimited,
    UnknownSymbol,
    UpstreamUnavailable,
)
from crosspair_service.layers.processing import get_processing_layer
from crosspair_service.models.kline import Series

logger = logging.getLogger(__name__)

# Binance 错误码：-1121 Invalid symbol
_BINANCE_INVALID_SYMBOL = -1121
# 418 为多次 429 后的 IP 封禁
_RATE_LIMIT_STATUSES = (418, 429)


def raise_for_binance_error(status: int, payload: Any, symbol: str = "") -> None:
    """根据 HTTP 状态码和 Binance 错误体抛出对应错误，2xx 直接返回"""
    if 200 <= status < 300:
        return

    if status in _RATE_LIMIT_STATUSES:
        raise RateLimited()

    code: Optional[int] = None
    msg = ""
    if isinstance(payload, dict):
        code = payload.get("code")
        msg = payload.get("msg") or ""

    if code == _BINANCE_INVALID_SYMBOL:
        raise UnknownSymbol(symbol, f"交易对不存在: {symbol}（Binance: {msg}）")
    if msg:
        raise UpstreamUnavailable(f"Binance API 错误: {msg}")
    raise UpstreamUnavailable(f"Binance API 返回 HTTP {status}")


class BinanceClient:
    """Binance 公共接口客户端，持有一个 aiohttp 会话"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        quote_asset: Optional[str] = None,
        max_limit: Optional[int] = None,
    ):
        self._session = session
        self._owns_session = session is None
        self.quote_asset = (quote_asset or settings.QUOTE_ASSET).upper()
        self.max_limit = max_limit or settings.KLINE_MAX_LIMIT
        self._proc = get_processing_layer()

    async def open(self) -> None:
        if self._session is None or self._session.closed:
            if settings.HTTP_TIMEOUT:
                timeout = aiohttp.ClientTimeout(total=settings.HTTP_TIMEOUT)
                self._session = aiohttp.ClientSession(timeout=timeout)
            else:
                self._session = aiohttp.ClientSession()
            self._owns_session = True

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get_json(self, url: str, params: Optional[dict] = None, symbol: str = "") -> Any:
        if self._session is None or self._session.closed:
            await self.open()
        try:
            async with self._session.get(url, params=params) as response:
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    payload = None
                if response.status >= 300:
                    logger.warning(f"Binance API 错误 {response.status} ({symbol or url}): {payload}")
                raise_for_binance_error(response.status, payload, symbol)
                return payload
        except aiohttp.ClientError as exc:
            logger.warning(f"Binance 网络错误 ({symbol or url}): {exc}")
            raise UpstreamUnavailable(f"无法连接 Binance: {exc}") from exc
        except asyncio.TimeoutError as exc:
            logger.warning(f"Binance 请求超时 ({symbol or url})")
            raise UpstreamUnavailable("Binance 请求超时") from exc

    # ── K 线 ──────────────────────────────────────────────

    async def fetch_bars(self, symbol: str, interval: str, limit: int) -> Series:
        """
        获取交易对 K 线

        Args:
            symbol: 交易对，如 BTCUSDT
            interval: K 线周期，如 1h
            limit: 数量，超过上限时按上限截断
        """
        params = {
            "symbol": symbol,
            "interval": interval,
            "limit": min(int(limit), self.max_limit),
        }
        rows = await self._get_json(settings.KLINES_URL, params=params, symbol=symbol)
        if not isinstance(rows, list):
            raise UpstreamUnavailable(f"{symbol} K 线响应格式异常")
        return self._proc.normalize_klines(rows, symbol)

    # ── 交易对 ────────────────────────────────────────────

    async def get_exchange_symbols(self) -> List[Dict[str, Any]]:
        """获取以报价币种计价且处于交易状态的交易对"""
        payload = await self._get_json(settings.EXCHANGE_INFO_URL)
        symbols = payload.get("symbols") if isinstance(payload, dict) else None
        if not isinstance(symbols, list):
            raise InvalidUpstreamData("exchangeInfo 响应缺少 symbols 列表")

        pairs = []
        skipped = 0
        for s in symbols:
            if not isinstance(s, dict) or not (s.get("symbol") and s.get("baseAsset")):
                skipped += 1
                continue
            if s.get("quoteAsset") == self.quote_asset and s.get("status") == "TRADING":
                pairs.append({
                    "symbol": s["symbol"],
                    "baseAsset": s["baseAsset"],
                    "quoteAsset": s["quoteAsset"],
                })
        if skipped:
            logger.warning(f"exchangeInfo 中有 {skipped} 条交易对信息不完整，已忽略")
        logger.info(f"交易对列表获取成功，共 {len(pairs)} 个 {self.quote_asset} 交易对")
        return pairs
