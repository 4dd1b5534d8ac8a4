"""媒体库路由：文件/文件夹操作与回收站。

删除一律进入回收站；恢复、彻底删除与清空回收站会写入一条通知，通知失败不影响请求结果。
"""

from __future__ import annotations

import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.packages.cms.api.v1.schemas.common import DictResponse
from app.packages.cms.api.v1.schemas.media import (
    FolderCreateBody,
    MediaEntryResponse,
    MediaListResponse,
    MoveCopyBody,
    RenameBody,
    TrashBody,
    TrashListResponse,
    UploadBatchResponse,
)
from app.packages.cms.core.constants import HTTP_STATUS_OK
from app.packages.cms.core.dependencies import get_current_account
from app.packages.cms.core.exceptions import AppException
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account
from app.packages.cms.services.container import Services, get_services
from app.packages.cms.services.media_library import MediaLibrary, UploadOptions
from app.packages.cms.utils.path_utils import norm_rel_path

logger = get_logger("media")

router = APIRouter(prefix="/media", tags=["media"])


def _content_type(up: UploadFile) -> str:
    content_type = (up.content_type or "").strip()
    if content_type and content_type != "application/octet-stream":
        return content_type
    guessed, _ = mimetypes.guess_type(up.filename or "")
    return guessed or content_type


async def _read_bounded(up: UploadFile, media: MediaLibrary) -> bytes:
    # 多读 1 字节即可判断是否超限，避免把超大文件整体读入内存
    return await up.read(media.max_upload_bytes + 1)


@router.get("", response_model=MediaListResponse)
def list_media(
    directory: str = Query(""),
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaListResponse:
    entries = services.media.list(directory)
    data = {
        "directory": norm_rel_path(directory),
        "items": [entry.to_payload() for entry in entries],
        "total": len(entries),
    }
    return create_response("获取媒体列表成功", data, HTTP_STATUS_OK)


@router.post("/folders", response_model=MediaEntryResponse)
def create_folder(
    payload: FolderCreateBody,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.create_directory(payload.parent, payload.name)
    return create_response("文件夹创建成功", entry.to_payload(), HTTP_STATUS_OK)


@router.post("/upload", response_model=MediaEntryResponse)
async def upload_file(
    file: UploadFile = File(...),
    directory: str = Form(""),
    optimize: bool = Form(False),
    max_width: Optional[int] = Form(None, alias="maxWidth"),
    max_height: Optional[int] = Form(None, alias="maxHeight"),
    quality: Optional[int] = Form(None),
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    data = await _read_bounded(file, services.media)
    options = UploadOptions(optimize=optimize, max_width=max_width, max_height=max_height, quality=quality)
    entry = services.media.upload(directory, data, file.filename or "", _content_type(file), options)
    return create_response("上传成功", entry.to_payload(), HTTP_STATUS_OK)


@router.put("/upload", response_model=UploadBatchResponse)
async def upload_files(
    files: list[UploadFile] = File(...),
    directory: str = Form(""),
    optimize: bool = Form(False),
    max_width: Optional[int] = Form(None, alias="maxWidth"),
    max_height: Optional[int] = Form(None, alias="maxHeight"),
    quality: Optional[int] = Form(None),
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> UploadBatchResponse:
    """批量上传：逐个处理，单个文件失败只体现在该文件的结果里。"""
    options = UploadOptions(optimize=optimize, max_width=max_width, max_height=max_height, quality=quality)
    results = []
    for up in files:
        data = await _read_bounded(up, services.media)
        try:
            entry = services.media.upload(directory, data, up.filename or "", _content_type(up), options)
        except AppException as exc:
            logger.info("Upload of %s rejected: %s", up.filename, exc.msg)
            results.append({"filename": up.filename, "status": "error", "msg": exc.msg, "code": exc.status_code})
            continue
        results.append({"filename": up.filename, "status": "success", "item": entry.to_payload()})
    succeeded = sum(1 for result in results if result["status"] == "success")
    return create_response(f"上传完成（成功 {succeeded}/{len(results)}）", results, HTTP_STATUS_OK)


@router.post("/rename", response_model=MediaEntryResponse)
def rename_item(
    payload: RenameBody,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.rename(payload.path, payload.newName)
    return create_response("重命名成功", entry.to_payload(), HTTP_STATUS_OK)


@router.post("/move", response_model=MediaEntryResponse)
def move_item(
    payload: MoveCopyBody,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.move(payload.sourcePath, payload.destinationDir)
    return create_response("移动成功", entry.to_payload(), HTTP_STATUS_OK)


@router.post("/copy", response_model=MediaEntryResponse)
def copy_item(
    payload: MoveCopyBody,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.copy(payload.sourcePath, payload.destinationDir)
    return create_response("复制成功", entry.to_payload(), HTTP_STATUS_OK)


# ----------------------------
# 回收站
# ----------------------------
@router.get("/trash", response_model=TrashListResponse)
def list_trash(
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> TrashListResponse:
    entries = services.media.list_trash()
    return create_response("获取回收站列表成功", [entry.to_payload() for entry in entries], HTTP_STATUS_OK)


@router.post("/trash", response_model=MediaEntryResponse)
def move_to_trash(
    payload: TrashBody,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.move_to_trash(payload.path)
    services.notifications.notify("已移入回收站", f"{entry.original_path} 已由 {current_account.name} 删除", "warning")
    return create_response("已移入回收站", entry.to_payload(), HTTP_STATUS_OK)


@router.post("/trash/{name}/restore", response_model=MediaEntryResponse)
def restore_from_trash(
    name: str,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> MediaEntryResponse:
    entry = services.media.restore_from_trash(name)
    services.notifications.notify("已从回收站恢复", f"{entry.path} 已由 {current_account.name} 恢复", "success")
    return create_response("恢复成功", entry.to_payload(), HTTP_STATUS_OK)


@router.delete("/trash/{name}", response_model=DictResponse)
def delete_from_trash(
    name: str,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    services.media.delete_from_trash(name)
    services.notifications.notify("已彻底删除", f"{name} 已由 {current_account.name} 彻底删除", "warning")
    return create_response("彻底删除成功", {"name": name}, HTTP_STATUS_OK)


@router.delete("/trash", response_model=DictResponse)
def empty_trash(
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    removed = services.media.empty_trash()
    services.notifications.notify("回收站已清空", f"{current_account.name} 清空了回收站（{removed} 项）", "warning")
    return create_response("回收站已清空", {"removed": removed}, HTTP_STATUS_OK)
