"""媒体库 - 文件/文件夹与回收站操作的请求/响应模型。"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from app.packages.cms.api.v1.schemas.common import ResponseEnvelope


class FolderCreateBody(BaseModel):
    parent: str = ""
    name: str = Field(..., min_length=1)


class RenameBody(BaseModel):
    path: str = Field(..., min_length=1)
    newName: str = Field(..., min_length=1)


class MoveCopyBody(BaseModel):
    sourcePath: str = Field(..., min_length=1)
    destinationDir: str = ""


class TrashBody(BaseModel):
    path: str = Field(..., min_length=1)


class MediaListData(BaseModel):
    directory: str
    items: list[dict[str, Any]]
    total: int


class UploadResult(BaseModel):
    """批量上传中单个文件的结果；失败时 ``item`` 为空并给出错误信息。"""

    filename: Optional[str]
    status: str
    item: Optional[dict[str, Any]] = None
    msg: Optional[str] = None
    code: Optional[int] = None


MediaListResponse = ResponseEnvelope[MediaListData]
MediaEntryResponse = ResponseEnvelope[dict[str, Any]]
UploadBatchResponse = ResponseEnvelope[list[UploadResult]]
TrashListResponse = ResponseEnvelope[list[dict[str, Any]]]
