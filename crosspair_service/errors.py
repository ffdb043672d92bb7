"""
错误类型定义

合成计算只向调用方抛出以下几类错误，由传输层统一映射为 HTTP 状态码：
  InvalidInput         – 参数缺失 / 两个币种相同 / 周期非法，在任何请求之前检测
  UnknownSymbol        – 数据源不存在该交易对
  RateLimited          – 数据源限流
  UpstreamUnavailable  – 网络错误或数据源返回非 2xx
"""


class CrossPairError(Exception):
    """所有业务错误的基类"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(CrossPairError):
    status_code = 400


class UnknownSymbol(CrossPairError):
    status_code = 404

    def __init__(self, symbol: str, message: str = ""):
        super().__init__(message or f"交易对不存在: {symbol}")
        self.symbol = symbol


class RateLimited(CrossPairError):
    status_code = 429

    def __init__(self, message: str = "请求过于频繁，已被数据源限流，请稍后再试"):
        super().__init__(message)


class UpstreamUnavailable(CrossPairError):
    status_code = 502


class InvalidUpstreamData(UpstreamUnavailable):
    """数据源返回了无法解析或无法参与计算的数据（如价格为 0）"""
