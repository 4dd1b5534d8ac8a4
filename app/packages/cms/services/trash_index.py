"""回收站索引：以旁路 JSON 文件记录每个被删除条目的原始路径与删除时间。

文件位于 ``<trash>/.index.json``，结构：``{"version": 1, "items": [TrashRecord, ...]}``。
不依赖文件系统的创建时间推断元数据（不同文件系统上 birthtime 并不可靠）。
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from app.packages.cms.core.constants import TRASH_INDEX_FILENAME
from app.packages.cms.core.exceptions import StorageIOError
from app.packages.cms.core.logger import get_logger
from app.packages.cms.models.media import TrashRecord

logger = get_logger("media")

INDEX_VERSION = 1


class TrashIndex:
    def __init__(self, trash_dir: Path) -> None:
        self.trash_dir = trash_dir
        self.index_path = trash_dir / TRASH_INDEX_FILENAME
        self._lock = threading.RLock()

    def _load(self) -> dict[str, TrashRecord]:
        if not self.index_path.exists():
            return {}
        try:
            raw = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Trash index unreadable, treating as empty: %s", exc)
            return {}

        records: dict[str, TrashRecord] = {}
        for item in raw.get("items", []) if isinstance(raw, dict) else []:
            try:
                record = TrashRecord.model_validate(item)
            except PydanticValidationError as exc:
                logger.warning("Skipping malformed trash index record: %s", exc)
                continue
            records[record.trash_name] = record
        return records

    def _save(self, records: dict[str, TrashRecord]) -> None:
        payload = {
            "version": INDEX_VERSION,
            "items": [record.model_dump(mode="json") for record in records.values()],
        }
        try:
            self.trash_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".index.", suffix=".tmp", dir=self.trash_dir)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(payload, fh, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.index_path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageIOError(f"回收站索引写入失败: {exc}") from exc

    def all(self) -> list[TrashRecord]:
        with self._lock:
            return list(self._load().values())

    def get(self, trash_name: str) -> Optional[TrashRecord]:
        with self._lock:
            return self._load().get(trash_name)

    def add(self, record: TrashRecord) -> None:
        with self._lock:
            records = self._load()
            records[record.trash_name] = record
            self._save(records)

    def remove(self, trash_name: str) -> Optional[TrashRecord]:
        with self._lock:
            records = self._load()
            removed = records.pop(trash_name, None)
            if removed is not None:
                self._save(records)
            return removed

    def clear(self) -> None:
        with self._lock:
            self._save({})
