"""内容与配置服务：在记录存储之上提供带默认值回退的类型化读写接口。"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any, Optional

import tomli_w

from app.packages.cms.core.constants import CONFIG_COLLECTION, CONTENT_COLLECTION, SYSTEM_COLLECTION
from app.packages.cms.core.exceptions import NotFoundError, StorageIOError, ValidationError
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.timezone import isoformat, now as tz_now
from app.packages.cms.services.defaults import (
    CONFIG_DEFAULTS,
    config_defaults,
    content_defaults,
    system_settings_defaults,
)
from app.packages.cms.store.record_store import RecordStore
from app.packages.cms.store.values import merge_sections, set_path
from app.packages.cms.utils.path_utils import validate_entry_name

logger = get_logger("content")

CONFIG_KINDS = tuple(CONFIG_DEFAULTS)
SYSTEM_SETTINGS_RECORD = "system-settings"
DEFAULT_UPDATED_BY = "system"


class ContentService:
    """封装配置、系统设置与页面内容的读写逻辑。"""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # 内部工具
    # ------------------------------------------------------------------

    @staticmethod
    def _with_defaults(defaults: dict[str, Any], record: Mapping[str, Any]) -> dict[str, Any]:
        if not record:
            return defaults
        return merge_sections(defaults, record)

    @staticmethod
    def _stamp(data: Any, updated_by: Optional[str]) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            raise ValidationError("提交的数据必须为对象")
        stamped = deepcopy(dict(data))
        meta = stamped.get("meta")
        meta = dict(meta) if isinstance(meta, Mapping) else {}
        meta["updated"] = isoformat(tz_now())
        meta["updated_by"] = updated_by or DEFAULT_UPDATED_BY
        stamped["meta"] = meta
        return stamped

    def _save(self, collection: str, name: str, data: dict[str, Any]) -> dict[str, Any]:
        # 先校验可序列化，区分“数据非法”与“磁盘写入失败”
        try:
            tomli_w.dumps(data)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"数据包含无法保存的值: {exc}") from exc
        if not self.store.write_record(collection, name, data):
            raise StorageIOError("保存失败，请稍后重试")
        return deepcopy(data)

    @staticmethod
    def _check_kind(kind: str) -> str:
        if kind not in CONFIG_DEFAULTS:
            raise NotFoundError(f"未知的配置类型: {kind}")
        return kind

    @staticmethod
    def _section_collection(section: str) -> str:
        return f"{CONTENT_COLLECTION}/{validate_entry_name(section)}"

    # ------------------------------------------------------------------
    # 站点配置
    # ------------------------------------------------------------------

    def get_config(self, kind: str) -> dict[str, Any]:
        self._check_kind(kind)
        return self._with_defaults(config_defaults(kind), self.store.read_record(CONFIG_COLLECTION, kind))

    def update_config(self, kind: str, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        self._check_kind(kind)
        saved = self._save(CONFIG_COLLECTION, kind, self._stamp(data, updated_by))
        logger.info("Config %s updated by %s", kind, saved["meta"]["updated_by"])
        return saved

    def get_site_config(self) -> dict[str, Any]:
        return self.get_config("site")

    def get_seo_config(self) -> dict[str, Any]:
        return self.get_config("seo")

    def get_theme_config(self) -> dict[str, Any]:
        return self.get_config("theme")

    def get_navigation_config(self) -> dict[str, Any]:
        return self.get_config("navigation")

    def update_site_config(self, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        return self.update_config("site", data, updated_by)

    def update_seo_config(self, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        return self.update_config("seo", data, updated_by)

    def update_theme_config(self, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        return self.update_config("theme", data, updated_by)

    def update_navigation_config(self, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        return self.update_config("navigation", data, updated_by)

    # ------------------------------------------------------------------
    # 系统设置
    # ------------------------------------------------------------------

    def get_system_settings(self) -> dict[str, Any]:
        """读取系统设置；缺失的分节用默认值补齐，分节内只合并一层。"""
        record = self.store.read_record(SYSTEM_COLLECTION, SYSTEM_SETTINGS_RECORD)
        return self._with_defaults(system_settings_defaults(), record)

    def save_system_settings(self, data: Any, updated_by: Optional[str] = None) -> dict[str, Any]:
        saved = self._save(SYSTEM_COLLECTION, SYSTEM_SETTINGS_RECORD, self._stamp(data, updated_by))
        logger.info("System settings updated by %s", saved["meta"]["updated_by"])
        return saved

    # ------------------------------------------------------------------
    # 页面与组件内容
    # ------------------------------------------------------------------

    def get_all_sections(self) -> dict[str, Any]:
        sections: dict[str, Any] = {}
        for name in self.store.list_collections(CONTENT_COLLECTION):
            items = self.store.list_record_names(f"{CONTENT_COLLECTION}/{name}")
            sections[name] = {"name": name, "items": items, "count": len(items)}
        return {"sections": sections, "totalSections": len(sections)}

    def get_content_section(self, section: str) -> dict[str, Any]:
        collection = self._section_collection(section)
        data = {
            item: deepcopy(self.store.read_record(collection, item))
            for item in self.store.list_record_names(collection)
        }
        return {"section": section, "data": data, "itemCount": len(data)}

    def get_content_item(self, section: str, item: str) -> dict[str, Any]:
        """读取单个内容条目；文件缺失或无法解析时返回该条目的默认结构。"""
        collection = self._section_collection(section)
        record = self.store.read_record(collection, item)
        if record:
            data = deepcopy(record)
            last_modified = self.store.record_modified_time(collection, item) or tz_now()
        else:
            data = content_defaults(section, item)
            last_modified = tz_now()
        return {
            "section": section,
            "item": item,
            "data": data,
            "lastModified": isoformat(last_modified),
        }

    def update_content_item(
        self, section: str, item: str, data: Any, updated_by: Optional[str] = None
    ) -> dict[str, Any]:
        collection = self._section_collection(section)
        saved = self._save(collection, item, self._stamp(data, updated_by))
        logger.info("Content %s/%s updated by %s", section, item, saved["meta"]["updated_by"])
        return saved

    def update_content_field(
        self,
        section: str,
        item: str,
        path: str,
        value: Any,
        updated_by: Optional[str] = None,
    ) -> dict[str, Any]:
        """按点分路径（如 ``hero.items.0.title``）更新单个字段后整体保存。"""
        current = self.get_content_item(section, item)["data"]
        try:
            updated = set_path(current, path, value)
        except (TypeError, ValueError, IndexError) as exc:
            raise ValidationError(f"字段路径无效: {exc}") from exc
        return self.update_content_item(section, item, updated, updated_by)

    def delete_content_item(self, section: str, item: str) -> None:
        collection = self._section_collection(section)
        if not self.store.record_exists(collection, item):
            raise NotFoundError(f"内容不存在: {section}/{item}")
        if not self.store.delete_record(collection, item):
            raise StorageIOError("删除失败，请稍后重试")
        logger.info("Content %s/%s deleted", section, item)
