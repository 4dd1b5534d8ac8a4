"""通知服务：通知列表保存在 ``system/notifications.toml``，最新的在前。

通知可以是全局的（没有 ``user_id``），也可以只针对某个用户。
TOML 无法表达空值，因此全局通知直接省略 ``user_id`` 字段。
"""

from __future__ import annotations

import uuid
from copy import deepcopy
from typing import Any, Optional

from app.packages.cms.core.constants import SYSTEM_COLLECTION
from app.packages.cms.core.exceptions import NotFoundError, StorageIOError, ValidationError
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.timezone import isoformat, now as tz_now

logger = get_logger("content")

NOTIFICATIONS_RECORD = "notifications"
NOTIFICATION_TYPES = ("success", "info", "warning", "error")


def _visible_to(notification: dict[str, Any], user_id: Optional[str]) -> bool:
    owner = notification.get("user_id")
    return user_id is None or owner is None or owner == user_id


class NotificationService:
    # 超出上限时丢弃最旧的通知，避免记录文件无限增长
    MAX_ITEMS = 500

    def __init__(self, store) -> None:
        self.store = store

    def _load(self) -> list[dict[str, Any]]:
        record = self.store.read_record(SYSTEM_COLLECTION, NOTIFICATIONS_RECORD)
        items = record.get("notifications")
        if not isinstance(items, list):
            return []
        return [deepcopy(item) for item in items if isinstance(item, dict)]

    def _save(self, items: list[dict[str, Any]]) -> None:
        if not self.store.write_record(SYSTEM_COLLECTION, NOTIFICATIONS_RECORD, {"notifications": items}):
            raise StorageIOError("通知保存失败")

    def add(
        self,
        title: str,
        message: str,
        type: str = "info",
        user_id: Optional[str] = None,
    ) -> dict[str, Any]:
        if type not in NOTIFICATION_TYPES:
            raise ValidationError(f"不支持的通知类型: {type}")
        notification: dict[str, Any] = {
            "id": uuid.uuid4().hex,
            "title": title,
            "message": message,
            "type": type,
            "time": isoformat(tz_now()),
            "read": False,
        }
        if user_id is not None:
            notification["user_id"] = user_id

        items = [notification, *self._load()][: self.MAX_ITEMS]
        self._save(items)
        return notification

    def list(self, user_id: Optional[str] = None) -> list[dict[str, Any]]:
        return [item for item in self._load() if _visible_to(item, user_id)]

    def mark_read(self, notification_id: str) -> dict[str, Any]:
        items = self._load()
        for item in items:
            if item.get("id") == notification_id:
                item["read"] = True
                self._save(items)
                return item
        raise NotFoundError("通知不存在")

    def mark_all_read(self, user_id: Optional[str] = None) -> int:
        items = self._load()
        changed = 0
        for item in items:
            if _visible_to(item, user_id) and not item.get("read"):
                item["read"] = True
                changed += 1
        if changed:
            self._save(items)
        return changed

    def delete(self, notification_id: str) -> None:
        items = self._load()
        remaining = [item for item in items if item.get("id") != notification_id]
        if len(remaining) == len(items):
            raise NotFoundError("通知不存在")
        self._save(remaining)

    def delete_all(self, user_id: Optional[str] = None) -> int:
        items = self._load()
        remaining = [item for item in items if not _visible_to(item, user_id)]
        removed = len(items) - len(remaining)
        if removed:
            self._save(remaining)
        return removed

    def notify(
        self,
        title: str,
        message: str,
        type: str = "info",
        user_id: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """供业务接口调用：写入失败只记录日志，不影响主流程。"""
        try:
            return self.add(title, message, type, user_id)
        except (StorageIOError, ValidationError) as exc:
            logger.warning("Failed to record notification %r: %s", title, exc.detail)
            return None
