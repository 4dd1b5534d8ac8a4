"""异常处理模块：定义统一的业务异常与响应格式。

业务异常均继承自 ``AppException``，由全局处理器转换为 ``{msg, data, code}``：

- ``NotFoundError``：记录或文件不存在；
- ``ValidationError``：文件类型/大小不合法、名称非法等；
- ``ConflictError``：目标已被占用（重名、恢复位置已存在、移动到自身子目录）；
- ``StorageIOError``：磁盘读写失败；
- ``PathTraversalError``：路径越出允许的根目录，属于安全错误。
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from .logger import logger


class AppException(HTTPException):
    """携带统一响应结构的业务异常，方便在全局处理中转换响应体。"""

    default_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, msg: str, code: int | None = None, data=None) -> None:
        super().__init__(status_code=code or self.default_code, detail=msg)
        self.data = data

    @property
    def msg(self) -> str:
        return str(self.detail)


class NotFoundError(AppException):
    default_code = status.HTTP_404_NOT_FOUND


class ValidationError(AppException):
    default_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AppException):
    default_code = status.HTTP_409_CONFLICT


class StorageIOError(AppException):
    default_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PathTraversalError(AppException):
    default_code = status.HTTP_403_FORBIDDEN


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:  # pragma: no cover - framework glue
    """将 FastAPI 的 ``HTTPException`` 转换为统一响应格式。"""
    if isinstance(exc, PathTraversalError):
        logger.warning("Rejected path traversal attempt on %s: %s", request.url.path, exc.detail)
    payload = {"msg": exc.detail, "data": getattr(exc, "data", None), "code": exc.status_code}
    return JSONResponse(status_code=exc.status_code, content=payload, headers=getattr(exc, "headers", None))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # pragma: no cover - framework glue
    """兜底处理：将未捕获异常转换为标准的 500 响应结构。"""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    payload = {
        "msg": "服务器内部错误",
        "data": None,
        "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=payload)
