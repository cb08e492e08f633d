from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app.core.config import settings
from app.core.database import init_database, close_database
from app.core.scheduler import status_sync_scheduler
from app.services.common_cache import SimpleCache
from app.api.health import router as health_router
from app.api.store_discounts import router as store_discounts_router
from app.api.exceptions import (
    validation_exception_handler,
    http_exception_handler,
    database_exception_handler,
    general_exception_handler
)

# 简化日志配置
import logging

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("正在启动折扣服务")

    try:
        # 初始化数据库连接
        await init_database()
        logger.info("数据库初始化成功")
    except Exception as e:
        logger.error(f"应用启动失败: {e}")
        raise

    # 设置缓存不可用时直接读库
    settings_cache = SimpleCache(key_prefix="store:", default_ttl=settings.coupon_settings_cache_ttl)
    try:
        await settings_cache.init_redis()
        app.state.settings_cache = settings_cache
    except Exception as e:
        logger.warning(f"Redis不可用，店铺设置不使用缓存: {e}")
        await settings_cache.close_redis()
        app.state.settings_cache = None

    if settings.status_sync_enabled:
        await status_sync_scheduler.start()

    logger.info("应用启动完成")

    yield

    logger.info("正在关闭应用")
    await status_sync_scheduler.stop()
    if app.state.settings_cache is not None:
        await app.state.settings_cache.close_redis()
    await close_database()
    logger.info("应用关闭完成")


# 创建FastAPI应用
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="结账折扣引擎 - 优惠码校验、可用优惠推荐、商品折扣角标",
    debug=settings.debug,
    lifespan=lifespan
)

# CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 注册路由
app.include_router(health_router)
app.include_router(store_discounts_router)

# 注册异常处理器
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


@app.get("/")
async def root():
    """根路径"""
    return {
        "message": f"欢迎使用 {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
