from fastapi import APIRouter, HTTPException, Request
import logging

from app.core.config import settings
from app.core.database import database_service
from app.core.scheduler import status_sync_scheduler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["健康检查"])


@router.get("")
async def health_check():
    """基础健康检查接口"""
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment
    }


@router.get("/database")
async def database_health(request: Request):
    """依赖连接健康检查，数据库不可用时返回503"""
    health_status = {
        "database": False,
        "redis": False,
        "status_sync": status_sync_scheduler.is_running,
        "details": {}
    }

    pg_status = await database_service.health_check()
    health_status["database"] = pg_status["status"] == "healthy"
    health_status["details"]["database"] = pg_status["message"]

    # Redis只用于设置缓存，不可用时服务降级为直接读库
    cache = getattr(request.app.state, "settings_cache", None)
    if cache is not None:
        health_status["redis"] = await cache.ping()
    health_status["details"]["redis"] = "连接正常" if health_status["redis"] else "不可用"

    if not health_status["database"]:
        logger.warning("数据库连接检查失败", extra={"details": health_status["details"]})
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
