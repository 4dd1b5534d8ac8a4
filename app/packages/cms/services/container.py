"""服务装配：按配置构建记录存储、媒体库与各业务服务，进程内单例。

接口层通过 ``Depends(get_services)`` 获取实例，测试中以
``app.dependency_overrides[get_services]`` 替换为指向临时目录的实例。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from app.packages.cms.core.config import Settings, get_settings
from app.packages.cms.services.content_service import ContentService
from app.packages.cms.services.image_service import ImageService
from app.packages.cms.services.media_library import MediaLibrary
from app.packages.cms.services.notification_service import NotificationService
from app.packages.cms.store.cache import RecordCache
from app.packages.cms.store.record_store import RecordStore


@dataclass(frozen=True)
class Services:
    store: RecordStore
    media: MediaLibrary
    content: ContentService
    notifications: NotificationService


def build_services(settings: Settings) -> Services:
    store = RecordStore(settings.data_directory, RecordCache())
    media = MediaLibrary(
        settings.media_directory,
        trash_dirname=settings.trash_dirname,
        max_upload_bytes=settings.max_upload_bytes,
        allowed_mime_types=settings.allowed_upload_types,
        image_service=ImageService(),
    )
    return Services(
        store=store,
        media=media,
        content=ContentService(store),
        notifications=NotificationService(store),
    )


@lru_cache
def get_services() -> Services:
    """返回按当前配置构建的服务集合。"""
    return build_services(get_settings())
