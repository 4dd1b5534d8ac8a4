"""媒体库服务：媒体根目录下的文件/文件夹增删改查，以及基于回收站的软删除。

- 所有路径参数均相对媒体根目录，归一化后必须仍位于根目录内，否则抛出
  ``PathTraversalError``；回收站目录（默认 ``.trash``）不能通过普通接口访问。
- 列表只返回直接子项，隐藏条目（以 ``.`` 开头，包括回收站本身）不返回。
- 上传重名时自动追加 ``-1``、``-2`` 后缀；重命名/移动/复制遇到重名一律拒绝。
- 删除只是移入回收站，原始路径与删除时间写入回收站索引，恢复时据此回到原位置；
  原位置已被占用时拒绝恢复，由调用方先行处理。
"""

from __future__ import annotations

import mimetypes
import os
import shutil
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from app.packages.cms.core.constants import TRASH_INDEX_FILENAME
from app.packages.cms.core.exceptions import (
    ConflictError,
    NotFoundError,
    PathTraversalError,
    StorageIOError,
    ValidationError,
)
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.timezone import from_timestamp, now as tz_now, to_local
from app.packages.cms.models.media import MediaEntry, TrashEntry, TrashRecord
from app.packages.cms.services.image_service import ImageService
from app.packages.cms.services.trash_index import TrashIndex
from app.packages.cms.utils.path_utils import norm_rel_path, sanitize_filename, validate_entry_name

logger = get_logger("media")

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

MEDIA_TYPE_EXTENSIONS = (
    ("image", {".jpg", ".jpeg", ".png", ".gif", ".svg", ".webp", ".avif"}),
    ("video", {".mp4", ".webm", ".ogg", ".mov", ".avi"}),
    ("audio", {".mp3", ".wav", ".ogg", ".m4a"}),
    ("document", {".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".txt", ".md"}),
)


def media_type_for(extension: str) -> str:
    ext = (extension or "").lower()
    for media_type, extensions in MEDIA_TYPE_EXTENSIONS:
        if ext in extensions:
            return media_type
    return "other"


def _norm_mime(name: str) -> str:
    mime, _ = mimetypes.guess_type(name)
    return mime or "application/octet-stream"


@dataclass
class UploadOptions:
    optimize: bool = False
    max_width: Optional[int] = None
    max_height: Optional[int] = None
    quality: Optional[int] = None


class MediaLibrary:
    MAX_NAME_ATTEMPTS = 1000

    def __init__(
        self,
        root: str | Path,
        *,
        trash_dirname: str = ".trash",
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_mime_types: Optional[Iterable[str]] = None,
        image_service: Optional[ImageService] = None,
    ) -> None:
        if not trash_dirname.startswith("."):
            raise ValueError("trash_dirname must be a hidden directory name")
        self.root = Path(root).resolve()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            self.trash_dir = self.root / trash_dirname
            self.trash_dir.mkdir(exist_ok=True)
        except OSError as exc:  # pragma: no cover - 极端情况下可能失败
            raise StorageIOError(f"无法创建媒体库目录: {exc}") from exc
        self.trash_index = TrashIndex(self.trash_dir)
        self.max_upload_bytes = max_upload_bytes
        self.allowed_mime_types = {m.lower() for m in (allowed_mime_types or [])}
        self.image_service = image_service or ImageService()

    # ----------------------------
    # 路径与元信息
    # ----------------------------
    # 统一的安全路径拼接，防止路径遍历
    def _resolve(self, rel: Optional[str]) -> Path:
        candidate = (self.root / norm_rel_path(rel)).resolve()
        try:
            candidate.relative_to(self.root)
        except ValueError as exc:
            raise PathTraversalError("非法路径: 越权访问") from exc
        if candidate == self.trash_dir or self.trash_dir in candidate.parents:
            raise ValidationError("不能直接访问回收站目录")
        return candidate

    def _rel(self, path: Path) -> str:
        rel = path.relative_to(self.root).as_posix()
        return "" if rel == "." else rel

    def _trash_path(self, trash_name: str) -> Path:
        return self.trash_dir / validate_entry_name(trash_name)

    @staticmethod
    def _dir_size(path: Path) -> int:
        total = 0
        for dirpath, _dirnames, filenames in os.walk(path):
            for filename in filenames:
                try:
                    total += os.path.getsize(os.path.join(dirpath, filename))
                except OSError:
                    continue
        return total

    def _size_of(self, path: Path) -> int:
        return self._dir_size(path) if path.is_dir() else path.stat().st_size

    def _entry(self, path: Path) -> MediaEntry:
        st = path.stat()
        is_dir = path.is_dir()
        created = from_timestamp(getattr(st, "st_birthtime", st.st_ctime))
        modified = from_timestamp(st.st_mtime)
        if is_dir:
            return MediaEntry(
                path=self._rel(path),
                name=path.name,
                is_directory=True,
                size=self._dir_size(path),
                created=created,
                modified=modified,
            )

        extension = path.suffix.lower()
        media_type = media_type_for(extension)
        entry = MediaEntry(
            path=self._rel(path),
            name=path.name,
            is_directory=False,
            size=int(st.st_size),
            created=created,
            modified=modified,
            mime_type=_norm_mime(path.name),
            media_type=media_type,
            extension=extension,
        )
        if media_type == "image":
            dimensions = self.image_service.read_dimensions(path)
            if dimensions:
                entry.width, entry.height = dimensions
        return entry

    @staticmethod
    def _remove_path(path: Path) -> None:
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as exc:
            raise StorageIOError(f"删除失败: {exc}") from exc

    # ----------------------------
    # 查询
    # ----------------------------
    def get(self, path: str) -> MediaEntry:
        target = self._resolve(path)
        if not target.exists():
            raise NotFoundError("路径不存在")
        return self._entry(target)

    def list(self, directory: str = "") -> list[MediaEntry]:
        base = self._resolve(directory)
        if not base.exists():
            raise NotFoundError("路径不存在")
        if not base.is_dir():
            raise ValidationError("目标不是文件夹")

        items: list[MediaEntry] = []
        try:
            children = sorted(base.iterdir(), key=lambda p: (p.is_file(), p.name.lower()))
        except PermissionError as exc:
            raise StorageIOError("无法读取目录内容：权限不足") from exc
        for child in children:
            if child.name.startswith("."):
                continue
            try:
                items.append(self._entry(child))
            except FileNotFoundError:
                # 枚举与 stat 之间被删除
                continue
        return items

    # ----------------------------
    # 新建与上传
    # ----------------------------
    def create_directory(self, parent: str, name: str) -> MediaEntry:
        safe_name = validate_entry_name(name)
        parent_dir = self._resolve(parent)
        if not parent_dir.exists() or not parent_dir.is_dir():
            raise NotFoundError("父目录不存在")
        new_dir = parent_dir / safe_name
        if new_dir.exists():
            raise ConflictError("同名文件或文件夹已存在")
        try:
            new_dir.mkdir(parents=False, exist_ok=False)
        except FileExistsError as exc:
            raise ConflictError("同名文件或文件夹已存在") from exc
        except OSError as exc:
            raise StorageIOError(f"文件夹创建失败: {exc}") from exc
        logger.info("Media directory created: %s", self._rel(new_dir))
        return self._entry(new_dir)

    def upload(
        self,
        parent: str,
        data: bytes,
        original_name: str,
        mime_type: str,
        options: Optional[UploadOptions] = None,
    ) -> MediaEntry:
        """校验大小与类型后写入文件；重名时自动改名，返回最终条目。"""
        options = options or UploadOptions()
        if len(data) > self.max_upload_bytes:
            raise ValidationError(
                f"文件大小超过上限（{self.max_upload_bytes // (1024 * 1024)}MB）",
                data={"maxBytes": self.max_upload_bytes},
            )
        mime = (mime_type or "").split(";", 1)[0].strip().lower()
        if mime not in self.allowed_mime_types:
            raise ValidationError("不允许的文件类型", data={"allowedTypes": sorted(self.allowed_mime_types)})

        target_dir = self._resolve(parent)
        if target_dir.exists() and not target_dir.is_dir():
            raise ValidationError("上传目标不是文件夹")

        payload = data
        if options.optimize and self.image_service.can_optimize(mime):
            payload = self.image_service.optimize(
                data,
                mime_type=mime,
                max_width=options.max_width,
                max_height=options.max_height,
                quality=options.quality,
            )

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(f"无法创建上传目录: {exc}") from exc

        dst = self._write_unique(target_dir, sanitize_filename(original_name), payload)
        logger.info("Media uploaded: %s (%s bytes)", self._rel(dst), len(payload))
        return self._entry(dst)

    def _write_unique(self, directory: Path, filename: str, payload: bytes) -> Path:
        stem, suffix = Path(filename).stem, Path(filename).suffix
        for attempt in range(self.MAX_NAME_ATTEMPTS):
            candidate = directory / (filename if attempt == 0 else f"{stem}-{attempt}{suffix}")
            try:
                fh = open(candidate, "xb")
            except FileExistsError:
                continue
            except OSError as exc:
                raise StorageIOError(f"上传失败：{exc}") from exc
            try:
                with fh:
                    fh.write(payload)
            except OSError as exc:
                candidate.unlink(missing_ok=True)
                raise StorageIOError(f"上传失败：{exc}") from exc
            return candidate
        raise ConflictError("无法生成不冲突的文件名")

    # ----------------------------
    # 重命名 / 移动 / 复制
    # ----------------------------
    def rename(self, path: str, new_name: str) -> MediaEntry:
        src = self._resolve(path)
        if src == self.root:
            raise ValidationError("不能重命名根目录")
        if not src.exists():
            raise NotFoundError("源路径不存在")
        dst = src.parent / validate_entry_name(new_name)
        if dst == src:
            return self._entry(src)
        if dst.exists():
            raise ConflictError("目标名称已存在")
        try:
            src.rename(dst)
        except OSError as exc:
            raise StorageIOError(f"重命名失败: {exc}") from exc
        logger.info("Media renamed: %s -> %s", self._rel(src), self._rel(dst))
        return self._entry(dst)

    def _check_transfer(self, source: str, destination_dir: str) -> tuple[Path, Path, Path]:
        src = self._resolve(source)
        if src == self.root:
            raise ValidationError("不能移动或复制根目录")
        if not src.exists():
            raise NotFoundError(f"源路径不存在: {source}")
        dst_dir = self._resolve(destination_dir)
        if src.is_dir() and (dst_dir == src or src in dst_dir.parents):
            raise ConflictError("不能将目录移动或复制到其自身或子目录中")
        if dst_dir.exists() and not dst_dir.is_dir():
            raise ValidationError("目标路径必须为文件夹")
        target = dst_dir / src.name
        if target.exists():
            raise ConflictError(f"目标已存在: {src.name}")
        return src, dst_dir, target

    def move(self, source: str, destination_dir: str) -> MediaEntry:
        src, dst_dir, target = self._check_transfer(source, destination_dir)
        try:
            dst_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(src), str(target))
        except OSError as exc:
            raise StorageIOError(f"移动失败: {exc}") from exc
        logger.info("Media moved: %s -> %s", self._rel(src), self._rel(target))
        return self._entry(target)

    def copy(self, source: str, destination_dir: str) -> MediaEntry:
        src, dst_dir, target = self._check_transfer(source, destination_dir)
        try:
            dst_dir.mkdir(parents=True, exist_ok=True)
            if src.is_dir():
                shutil.copytree(src, target, symlinks=True)
            else:
                shutil.copy2(src, target)
        except (OSError, shutil.Error) as exc:
            raise StorageIOError(f"复制失败: {exc}") from exc
        logger.info("Media copied: %s -> %s", self._rel(src), self._rel(target))
        return self._entry(target)

    # ----------------------------
    # 回收站
    # ----------------------------
    def _new_trash_name(self, name: str) -> str:
        while True:
            candidate = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{name}"
            if not (self.trash_dir / candidate).exists():
                return candidate

    @staticmethod
    def _trash_entry(record: TrashRecord) -> TrashEntry:
        return TrashEntry(
            trash_name=record.trash_name,
            original_path=record.original_path,
            deleted_at=to_local(record.deleted_at),
            is_directory=record.is_directory,
            size=record.size,
        )

    def move_to_trash(self, path: str) -> TrashEntry:
        src = self._resolve(path)
        if src == self.root:
            raise ValidationError("不能删除根目录")
        if not src.exists():
            raise NotFoundError("源路径不存在")

        record = TrashRecord(
            trash_name=self._new_trash_name(src.name),
            original_path=self._rel(src),
            deleted_at=tz_now(),
            is_directory=src.is_dir(),
            size=self._size_of(src),
        )
        dst = self.trash_dir / record.trash_name
        try:
            self.trash_dir.mkdir(parents=True, exist_ok=True)
            os.rename(src, dst)
        except OSError as exc:
            raise StorageIOError(f"移入回收站失败: {exc}") from exc

        try:
            self.trash_index.add(record)
        except StorageIOError:
            # 索引写不进去就撤回移动，避免条目失去原始路径
            try:
                os.rename(dst, src)
            except OSError:
                logger.error("Failed to roll back trash move for %s", record.original_path, exc_info=True)
            raise

        logger.info("Media moved to trash: %s -> %s", record.original_path, record.trash_name)
        return self._trash_entry(record)

    def list_trash(self) -> list[TrashEntry]:
        """列出回收站条目，最近删除的在前；缺少索引记录的条目 ``original_path`` 为空。"""
        records = {record.trash_name: record for record in self.trash_index.all()}
        entries: list[TrashEntry] = []
        if self.trash_dir.is_dir():
            for child in self.trash_dir.iterdir():
                if child.name.startswith("."):
                    continue
                record = records.pop(child.name, None)
                if record is not None:
                    entries.append(self._trash_entry(record))
                    continue
                try:
                    size = self._size_of(child)
                except OSError:
                    size = 0
                entries.append(
                    TrashEntry(
                        trash_name=child.name,
                        original_path=None,
                        deleted_at=None,
                        is_directory=child.is_dir(),
                        size=size,
                    )
                )

        for stale_name in records:
            logger.warning("Dropping trash index record without file: %s", stale_name)
            self.trash_index.remove(stale_name)

        entries.sort(
            key=lambda e: (
                e.deleted_at is None,
                -e.deleted_at.timestamp() if e.deleted_at else 0.0,
                e.trash_name,
            )
        )
        return entries

    def restore_from_trash(self, trash_name: str) -> MediaEntry:
        src = self._trash_path(trash_name)
        if not src.exists():
            raise NotFoundError("回收站中不存在该条目")
        record = self.trash_index.get(src.name)
        if record is None:
            raise NotFoundError("缺少回收站元数据，无法确定原始位置")

        target = self._resolve(record.original_path)
        if target == self.root:
            raise ValidationError("回收站元数据中的原始路径无效")
        if target.exists():
            raise ConflictError("原始位置已被占用，请先处理同名条目", data={"originalPath": record.original_path})
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as exc:
            raise ConflictError("原始位置的上级路径已被文件占用") from exc
        except OSError as exc:
            raise StorageIOError(f"恢复失败: {exc}") from exc
        try:
            os.rename(src, target)
        except OSError as exc:
            raise StorageIOError(f"恢复失败: {exc}") from exc

        self.trash_index.remove(src.name)
        logger.info("Media restored from trash: %s -> %s", src.name, record.original_path)
        return self._entry(target)

    def delete_from_trash(self, trash_name: str) -> None:
        target = self._trash_path(trash_name)
        if not target.exists() and not target.is_symlink():
            if self.trash_index.remove(target.name) is None:
                raise NotFoundError("回收站中不存在该条目")
            return
        self._remove_path(target)
        self.trash_index.remove(target.name)
        logger.info("Media permanently deleted from trash: %s", target.name)

    def empty_trash(self) -> int:
        """彻底删除回收站中的全部条目，返回删除的条目数。"""
        removed = 0
        if self.trash_dir.is_dir():
            for child in list(self.trash_dir.iterdir()):
                if child.name == TRASH_INDEX_FILENAME:
                    continue
                self._remove_path(child)
                if not child.name.startswith("."):
                    removed += 1
        self.trash_index.clear()
        logger.info("Trash emptied (%s items)", removed)
        return removed
