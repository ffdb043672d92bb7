"""
合成 K 线路由
GET  /api/klines    - 获取合成交叉币对 K 线（带缓存）
POST /api/refresh   - 强制刷新指定币对缓存
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from crosspair_service.config import settings
from crosspair_service.models.kline import series_to_records
from crosspair_service.models.response import ApiResponse
from crosspair_service.services.pair_service import PairService, get_pair_service
from crosspair_service.validation import validate_interval

router = APIRouter(prefix="/api", tags=["合成行情"])


class RefreshRequest(BaseModel):
    coinA: Optional[str] = None
    coinB: Optional[str] = None
    interval: Optional[str] = Field(default_factory=lambda: settings.DEFAULT_INTERVAL)
    # 不在模型层做类型转换，交给 validate_limit 统一返回 InvalidInput
    limit: Any = Field(default_factory=lambda: settings.DEFAULT_LIMIT)


@router.get("/klines", response_model=ApiResponse)
async def get_klines(
    coin_a: Optional[str] = Query(default=None, alias="coinA", description="分子币种，如 BTC"),
    coin_b: Optional[str] = Query(default=None, alias="coinB", description="分母币种，如 ETH"),
    interval: str = Query(default=settings.DEFAULT_INTERVAL, description="K 线周期"),
    limit: Optional[str] = Query(default=str(settings.DEFAULT_LIMIT), description="K 线数量，上限 1000"),
    svc: PairService = Depends(get_pair_service),
):
    """获取合成交叉币对 K 线及统计摘要"""
    series = await svc.get_synthetic_series(coin_a, coin_b, interval, limit)
    a, b = coin_a.strip().upper(), coin_b.strip().upper()
    return ApiResponse.ok(
        data={
            "pair": f"{a}/{b}",
            "interval": validate_interval(interval),
            "count": len(series),
            "data": series_to_records(series),
            "stats": svc.summarize(series),
        },
    )


@router.post("/refresh", response_model=ApiResponse)
async def refresh_klines(
    body: RefreshRequest,
    svc: PairService = Depends(get_pair_service),
):
    """删除缓存后重新计算合成 K 线"""
    series = await svc.refresh(body.coinA, body.coinB, body.interval, body.limit)
    a, b = body.coinA.strip().upper(), body.coinB.strip().upper()
    return ApiResponse.ok(
        data={"pair": f"{a}/{b}", "interval": validate_interval(body.interval), "count": len(series)},
        message="缓存已刷新",
    )
