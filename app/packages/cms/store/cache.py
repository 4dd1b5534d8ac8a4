"""记录读缓存：进程内、无上限、不过期，只能显式清空。"""

from __future__ import annotations

import threading
from typing import Any, Optional


class RecordCache:
    """记录标识 -> 最近一次读取/写入的解析结果。

    由 ``RecordStore`` 在构造时持有；测试中每个存储实例使用独立缓存。
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key(collection: str, name: str) -> str:
        return f"{collection}:{name}"

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        with self._lock:
            self._entries[key] = value

    def pop(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
