"""
Web 服务启动脚本
"""

import os

import uvicorn


def rpbands_main() -> None:
    """启动 FastAPI Web 服务"""

    rpbands_host = os.getenv("RPBANDS_HOST", "0.0.0.0")
    rpbands_port = int(os.getenv("RPBANDS_PORT", "8000"))
    rpbands_reload = os.getenv("RPBANDS_RELOAD", "false").lower() == "true"

    uvicorn.run(
        "rpbands.web.app:create_app",
        factory=True,
        host=rpbands_host,
        port=rpbands_port,
        reload=rpbands_reload,
        log_level="info",
    )


if __name__ == "__main__":
    rpbands_main()
