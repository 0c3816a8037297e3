"""API路由聚合"""
from fastapi import APIRouter

from src.api.v1 import welding

api_router = APIRouter()

# 注册v1版本API
v1_router = APIRouter(prefix="/v1")

# 焊接知识与工艺推荐
v1_router.include_router(welding.router, prefix="/welding", tags=["焊接"])

api_router.include_router(v1_router)

__all__ = ["api_router"]
