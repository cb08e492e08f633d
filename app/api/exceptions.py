"""
接口异常处理
业务上的不可用不走异常；这里只处理输入错误和依赖故障
"""

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求参数校验失败"""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid input", "details": jsonable_encoder(exc.errors())}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """存储不可用，返回503"""
    logger.error(f"数据库访问失败 {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "Service temporarily unavailable"})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"未处理的异常 {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
