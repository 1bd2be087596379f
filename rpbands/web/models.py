"""
Web API 数据模型
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """标准 API 响应格式"""

    success: bool = Field(..., description="请求是否成功")
    data: Any | None = Field(None, description="响应数据")
    message: str | None = Field(None, description="响应消息")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC), description="响应时间戳")
    request_id: str | None = Field(None, description="请求ID，用于追踪")


class PositionData(BaseModel):
    """Current price position within the realized price bands."""

    price: int
    rp: int
    rp_date: datetime
    ratio: float
    zone: str
    sentiment: str
    above_decision_line: bool
    band_levels: dict[str, int]
    sth_rp: int | None = None
    lth_rp: int | None = None
