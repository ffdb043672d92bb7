"""健康检查路由"""

import time

from fastapi import APIRouter, Depends

from crosspair_service import __version__
from crosspair_service.services.pair_service import PairService, get_pair_service

router = APIRouter(tags=["健康检查"])


@router.get("/health")
async def health(svc: PairService = Depends(get_pair_service)):
    """服务健康检查"""
    return {
        "success": True,
        "data": {
            "status": "ok",
            "version": __version__,
            "timestamp": int(time.time()),
            "service": "CrossPair Chart Service",
            "cache": svc.cache_stats(),
        },
        "message": "服务运行正常",
    }


@router.get("/healthz")
async def healthz():
    """Kubernetes liveness probe"""
    return {"status": "ok"}


@router.get("/readyz")
async def readyz():
    """Kubernetes readiness probe"""
    return {"ready": True}
