"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from app.packages.cms.api.v1.endpoints import auth, configs, content, media, notifications, settings

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(content.router)
api_router.include_router(configs.router)
api_router.include_router(settings.router)
api_router.include_router(media.router)
api_router.include_router(notifications.router)
