"""
FastAPI 应用工厂和配置
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from rpbands import __version__, create_service
from rpbands.core.config import ConfigManager
from rpbands.core.exceptions import ErrorCode, get_error_handler
from rpbands.core.logging import configure_logging
from rpbands.core.services.bands import BandsService
from rpbands.web.metrics import router as metrics_router
from rpbands.web.routes import bands_router, health_router


def create_app(service: BandsService | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        service: pre-built bands service; built from configuration when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """应用生命周期管理"""
        bands_service = service
        if bands_service is None:
            config = ConfigManager().get_config()
            configure_logging(level=config.logging.level, file_output=bool(config.logging.file), file_path=config.logging.file)
            bands_service = create_service(config)

        app.state.bands_service = bands_service
        app.state.start_time = time.time()
        logger.info("rpbands web service started")

        yield

        await bands_service.close()

    app = FastAPI(
        title="rpbands - Bitcoin realized price bands",
        description="Realized price valuation bands merged from on-chain, historical and live price feeds",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    _setup_middleware(app)
    _setup_routes(app)
    _setup_exception_handlers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    """配置中间件"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)


def _setup_routes(app: FastAPI) -> None:
    """注册路由"""
    app.include_router(bands_router, prefix="/api/v1", tags=["bands"])
    app.include_router(health_router, prefix="/api/v1", tags=["health"])
    app.include_router(metrics_router)


def _setup_exception_handlers(app: FastAPI) -> None:
    """配置异常处理器"""

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """处理未捕获的异常"""
        handler = get_error_handler()
        handler.log_error(exc, {"path": request.url.path})
        content = handler.create_error_response(exc, ErrorCode.INTERNAL_ERROR)
        content["request_id"] = str(uuid.uuid4())
        return JSONResponse(status_code=500, content=content)
