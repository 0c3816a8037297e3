"""
SMAW Technique Advisor - 服务入口
焊接知识库与工艺参数推荐服务
"""

import logging
import sys
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from prometheus_client import make_asgi_app

from src.api import api_router
from src.core.config import get_settings
from src.core.knowledge.welding import ELECTRODE_DATABASE, POSITION_DATABASE
from src.utils.logging import setup_logging

# 加载配置
settings = get_settings()

# 设置日志
setup_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"

# 创建FastAPI应用
app = FastAPI(
    title="SMAW Technique Advisor",
    description="Stick welding knowledge base and technique recommendations",
    version=APP_VERSION,
    debug=settings.DEBUG,
)

# 配置CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 配置信任主机
app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)

# 注册路由
app.include_router(api_router, prefix="/api")

if settings.METRICS_ENABLED:
    app.mount("/metrics", make_asgi_app())


@app.get("/")
async def root():
    """根路径"""
    return {
        "name": "SMAW Technique Advisor",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
async def health_check():
    """健康检查"""
    current_settings = get_settings()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {"api": "up", "knowledge": "up"},
        "knowledge": {
            "electrodes": len(ELECTRODE_DATABASE),
            "positions": len(POSITION_DATABASE),
        },
        "runtime": {
            "python_version": sys.version.split(" ")[0],
            "metrics_enabled": current_settings.METRICS_ENABLED,
        },
        "config": {
            "debug_mode": current_settings.DEBUG,
            "log_level": current_settings.LOG_LEVEL,
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=settings.WORKERS,
        log_level=settings.LOG_LEVEL.lower(),
    )
