"""媒体库实体：媒体条目、回收站条目与回收站索引记录。"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from app.packages.cms.core.timezone import isoformat


@dataclass
class MediaEntry:
    """媒体库中的一个文件或文件夹；``path`` 为相对媒体根目录的路径，唯一标识条目。"""

    path: str
    name: str
    is_directory: bool
    size: int
    created: datetime
    modified: datetime
    mime_type: Optional[str] = None
    media_type: Optional[str] = None  # image | video | audio | document | other
    extension: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "isDirectory": self.is_directory,
            "size": self.size,
            "created": isoformat(self.created),
            "modified": isoformat(self.modified),
        }
        if not self.is_directory:
            payload.update(
                {
                    "mimeType": self.mime_type,
                    "type": self.media_type,
                    "extension": self.extension,
                    "url": f"/media/{self.path}",
                }
            )
            if self.width is not None and self.height is not None:
                payload["dimensions"] = {"width": self.width, "height": self.height}
        return payload


@dataclass
class TrashEntry:
    """回收站中的条目；``original_path`` 为空表示缺少索引元数据，只能彻底删除。"""

    trash_name: str
    original_path: Optional[str]
    deleted_at: Optional[datetime]
    is_directory: bool
    size: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.trash_name,
            "originalPath": self.original_path,
            "deletedAt": isoformat(self.deleted_at),
            "isDirectory": self.is_directory,
            "size": self.size,
        }


class TrashRecord(BaseModel):
    """回收站索引文件中的一条记录。"""

    trash_name: str
    original_path: str
    deleted_at: datetime
    is_directory: bool = False
    size: int = 0
