"""
币种列表路由
GET /api/symbols   - 可用于组合交叉币对的币种
"""

from fastapi import APIRouter, Depends

from crosspair_service.models.response import ApiResponse
from crosspair_service.services.pair_service import PairService, get_pair_service

router = APIRouter(prefix="/api", tags=["币种"])


@router.get("/symbols", response_model=ApiResponse)
async def list_symbols(svc: PairService = Depends(get_pair_service)):
    """获取所有以报价币种计价、处于交易状态的基础币种"""
    coins = await svc.list_symbols()
    return ApiResponse.ok(
        data={"quote_asset": svc.quote_asset, "count": len(coins), "coins": coins},
    )
