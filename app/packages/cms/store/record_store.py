"""结构化文件存储：每条记录对应一个 TOML 文件，并带进程内读缓存。

目录布局（相对数据根目录）：

- ``config/<name>.toml``：站点、SEO、主题、导航等配置；
- ``content/<section>/<item>.toml``：页面与组件内容；
- ``system/<name>.toml``：系统设置与通知列表。

读取缺失或解析失败的记录返回空字典，由上层套用默认值；写入失败返回 ``False``，
原文件与缓存保持不变。同一进程内对同一记录的写入/删除通过按键加锁串行化，
跨进程不做任何保护（最后写入者生效）。
"""

from __future__ import annotations

import contextlib
import os
import tempfile
import threading
import tomllib
from collections.abc import Mapping
from copy import deepcopy
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import tomli_w

from app.packages.cms.core.constants import RECORD_EXTENSION
from app.packages.cms.core.exceptions import PathTraversalError, ValidationError
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.timezone import from_timestamp
from app.packages.cms.store.cache import RecordCache

logger = get_logger("store")


def _check_segment(segment: str, label: str) -> str:
    if not segment:
        raise ValidationError(f"{label}不能为空")
    if segment in {".", ".."} or "/" in segment or "\\" in segment or "\x00" in segment:
        raise PathTraversalError(f"非法{label}: {segment}")
    return segment


class RecordStore:
    """按“集合 + 名称”读写结构化记录。"""

    def __init__(self, root: str | Path, cache: RecordCache, *, extension: str = RECORD_EXTENSION) -> None:
        self.root = Path(root).resolve()
        self.cache = cache
        self.extension = extension
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # ----------------------------
    # 路径
    # ----------------------------
    def _collection_dir(self, collection: str) -> Path:
        raw = (collection or "").replace("\\", "/").strip()
        if raw.startswith("/"):
            raise PathTraversalError(f"非法集合路径: {collection}")
        parts = [_check_segment(part, "集合名称") for part in raw.split("/") if part]
        if not parts:
            raise ValidationError("集合名称不能为空")
        candidate = self.root.joinpath(*parts).resolve()
        try:
            candidate.relative_to(self.root)
        except ValueError as exc:
            raise PathTraversalError(f"非法集合路径: {collection}") from exc
        return candidate

    def _record_path(self, collection: str, name: str) -> Path:
        _check_segment(name or "", "记录名称")
        return self._collection_dir(collection) / f"{name}{self.extension}"

    def _locate(self, collection: str, name: str) -> tuple[str, Path]:
        """返回 (缓存键, 文件路径)；缓存键取自规范化后的集合路径，``content/pages/`` 与 ``content/pages`` 共用一项。"""
        path = self._record_path(collection, name)
        return self.cache.key(path.parent.relative_to(self.root).as_posix(), name), path

    def _lock_for(self, key: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    # ----------------------------
    # 读写
    # ----------------------------
    def read_record(self, collection: str, name: str) -> dict[str, Any]:
        """读取记录；命中缓存时直接返回缓存对象，缺失或损坏时返回 ``{}``。"""
        key, path = self._locate(collection, name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        try:
            with path.open("rb") as fh:
                parsed = tomllib.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Failed to read record %s: %s", key, exc)
            return {}

        self.cache.set(key, parsed)
        return parsed

    def write_record(self, collection: str, name: str, value: Mapping[str, Any]) -> bool:
        """整体替换记录文件；成功后用写入值刷新缓存。"""
        key, path = self._locate(collection, name)
        if not isinstance(value, Mapping):
            logger.error("Refusing to write record %s: value is %s, not a mapping", key, type(value).__name__)
            return False
        try:
            payload = tomli_w.dumps(value)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to serialize record %s: %s", key, exc)
            return False

        with self._lock_for(key):
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as fh:
                        fh.write(payload)
                    os.replace(tmp_name, path)
                except BaseException:
                    with contextlib.suppress(OSError):
                        os.unlink(tmp_name)
                    raise
            except OSError as exc:
                logger.error("Failed to write record %s: %s", key, exc)
                return False
            self.cache.set(key, deepcopy(dict(value)))
        return True

    def delete_record(self, collection: str, name: str) -> bool:
        key, path = self._locate(collection, name)
        with self._lock_for(key):
            try:
                path.unlink()
            except FileNotFoundError:
                self.cache.pop(key)
                return False
            except OSError as exc:
                logger.error("Failed to delete record %s: %s", key, exc)
                return False
            self.cache.pop(key)
        return True

    def clear_cache(self) -> None:
        """清空全部缓存；文件被外部修改（例如从备份恢复）后必须调用。"""
        size = len(self.cache)
        self.cache.clear()
        logger.info("Record cache cleared (%s entries)", size)

    # ----------------------------
    # 枚举与元信息
    # ----------------------------
    def list_record_names(self, collection: str) -> list[str]:
        """列出集合中的记录名（去掉扩展名）；目录不存在时返回空列表且不创建目录。"""
        directory = self._collection_dir(collection)
        if not directory.is_dir():
            return []
        names = [
            entry.name[: -len(self.extension)]
            for entry in directory.iterdir()
            if entry.is_file() and entry.name.endswith(self.extension) and not entry.name.startswith(".")
        ]
        return sorted(names)

    def list_collections(self, parent: str) -> list[str]:
        """列出 ``parent`` 下的子集合（非隐藏子目录）。"""
        directory = self._collection_dir(parent)
        if not directory.is_dir():
            return []
        return sorted(entry.name for entry in directory.iterdir() if entry.is_dir() and not entry.name.startswith("."))

    def record_exists(self, collection: str, name: str) -> bool:
        return self._record_path(collection, name).is_file()

    def record_modified_time(self, collection: str, name: str) -> Optional[datetime]:
        try:
            stat = self._record_path(collection, name).stat()
        except OSError:
            return None
        return from_timestamp(stat.st_mtime)
