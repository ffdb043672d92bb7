"""
缓存管理路由
GET  /api/cache/stats     - 缓存统计
POST /api/cache/flush     - 清空缓存
"""

from fastapi import APIRouter, Depends

from crosspair_service.models.response import ApiResponse
from crosspair_service.services.pair_service import PairService, get_pair_service

router = APIRouter(prefix="/api/cache", tags=["缓存管理"])


@router.get("/stats", response_model=ApiResponse)
async def cache_stats(svc: PairService = Depends(get_pair_service)):
    """获取缓存统计信息（命中 / 未命中 / 键数量）"""
    return ApiResponse.ok(data=svc.cache_stats())


@router.post("/flush", response_model=ApiResponse)
async def flush_cache(svc: PairService = Depends(get_pair_service)):
    """清空全部缓存条目"""
    svc.flush_cache()
    return ApiResponse.ok(message="缓存已清空")
