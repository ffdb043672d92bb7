"""
Binance 交叉币对合成行情服务
独立 FastAPI 应用程序入口

启动方式:
    uvicorn crosspair_service.main:app --host 0.0.0.0 --port 8002
    python -m crosspair_service.main
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crosspair_service import __version__
from crosspair_service.config import settings
from crosspair_service.errors import CrossPairError, InvalidInput
from crosspair_service.layers.acquisition import BinanceClient
from crosspair_service.layers.cache import TTLCache
from crosspair_service.models.response import ApiResponse
from crosspair_service.routers import cache, health, klines, symbols
from crosspair_service.services.pair_service import PairService

# ── 日志配置 ──────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── 生命周期管理 ──────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动/关闭生命周期钩子：创建缓存与数据源客户端并注入服务"""
    logger.info("=" * 60)
    logger.info(f"🚀 CrossPair Chart Service v{__version__} 启动中")
    logger.info(f"   数据源    : {settings.BINANCE_API_BASE}（报价币种 {settings.QUOTE_ASSET}）")
    logger.info(f"   缓存      : 默认 TTL {settings.CACHE_DEFAULT_TTL}s，清理间隔 {settings.CACHE_CHECK_PERIOD}s")
    logger.info("   接口:")
    logger.info("     GET  /api/symbols       - 可用币种")
    logger.info("     GET  /api/klines        - 合成币对 K 线")
    logger.info("     POST /api/refresh       - 强制刷新缓存")
    logger.info("     GET  /api/cache/stats   - 缓存统计")
    logger.info("     GET  /health            - 健康检查")
    logger.info("=" * 60)

    client = BinanceClient()
    await client.open()
    ttl_cache = TTLCache()
    ttl_cache.start_sweeper()
    app.state.pair_service = PairService(client, ttl_cache)

    yield

    logger.info("🔄 服务正在关闭...")
    await ttl_cache.stop_sweeper()
    await client.close()
    logger.info("✅ 服务已关闭")


# ── 应用实例 ──────────────────────────────────────────────
app = FastAPI(
    title="CrossPair Chart Service",
    description=(
        "基于 Binance 公共行情的交叉币对合成服务：\n"
        "- 📊 以 USDT 交易对为基础，按时间对齐后相除得到任意两币种的合成 K 线\n"
        "- 🗄️ 内存缓存，TTL 随 K 线周期变化（1m → 60s … 1M → 72h）\n\n"
        "**分层架构**\n"
        "```\n"
        "Acquisition Layer  ← 从 Binance 拉取原始 K 线\n"
        "Cache Layer        ← 按周期设置 TTL 的内存缓存\n"
        "Processing Layer   ← K 线清洗、统计摘要\n"
        "Synthetic Layer    ← 内连接 + 逐字段求比值\n"
        "```"
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS 中间件 ───────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── 请求计时中间件 ─────────────────────────────────────────
@app.middleware("http")
async def add_process_time(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{(time.time() - start) * 1000:.1f}ms"
    return response


# ── 异常处理 ──────────────────────────────────────────────
@app.exception_handler(CrossPairError)
async def cross_pair_error_handler(request: Request, exc: CrossPairError):
    if exc.status_code >= 500:
        logger.warning(f"上游错误 [{type(exc).__name__}] {request.url.path}: {exc.message}")
    else:
        logger.info(f"请求错误 [{type(exc).__name__}] {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.from_error(exc).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """请求参数无法解析时同样按 InvalidInput 返回 400"""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in errors
    )
    logger.info(f"请求错误 [InvalidInput] {request.url.path}: {detail}")
    return JSONResponse(
        status_code=InvalidInput.status_code,
        content=ApiResponse.from_error(InvalidInput(f"请求参数错误: {detail}")).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"未处理的异常: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "内部服务错误", "message": str(exc)},
    )


# ── 注册路由 ──────────────────────────────────────────────
app.include_router(health.router)
app.include_router(symbols.router)
app.include_router(klines.router)
app.include_router(cache.router)


# ── 根路由 ───────────────────────────────────────────────
@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": "CrossPair Chart Service",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# ── 直接运行入口 ──────────────────────────────────────────
if __name__ == "__main__":
    uvicorn.run(
        "crosspair_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
