"""
Web API 模块 - FastAPI 网络服务实现
"""

from rpbands.web.app import create_app
from rpbands.web.models import APIResponse
from rpbands.web.routes import bands_router, health_router

__all__ = ["create_app", "bands_router", "health_router", "APIResponse"]
