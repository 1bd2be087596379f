"""
健康检查路由
"""

import time

from fastapi import APIRouter, Request

from rpbands import __version__
from rpbands.web.models import APIResponse
from rpbands.web.utils import request_trace

router = APIRouter()


@router.get("/health", response_model=APIResponse)
async def health_check(request: Request) -> APIResponse:
    """
    基础健康检查

    Reports uptime and the active merge thresholds; does not touch the feeds.
    """
    config = request.app.state.bands_service.config
    with request_trace(request) as trace_id:
        return APIResponse(
            success=True,
            data={
                "status": "healthy",
                "version": __version__,
                "uptime_seconds": time.time() - getattr(request.app.state, "start_time", time.time()),
                "merge": config.to_dict(),
            },
            message="系统健康检查完成",
            request_id=trace_id,
        )


@router.get("/health/live", response_model=APIResponse)
async def liveness_check(request: Request) -> APIResponse:
    """
    存活检查（Kubernetes 使用）
    """
    return APIResponse(success=True, data={"alive": True}, message="应用存活")
