"""常量定义：HTTP 状态码、角色与存储布局相关的固定值。"""

from fastapi import status

HTTP_STATUS_OK = status.HTTP_200_OK
HTTP_STATUS_BAD_REQUEST = status.HTTP_400_BAD_REQUEST
HTTP_STATUS_UNAUTHORIZED = status.HTTP_401_UNAUTHORIZED
HTTP_STATUS_FORBIDDEN = status.HTTP_403_FORBIDDEN
HTTP_STATUS_NOT_FOUND = status.HTTP_404_NOT_FOUND
HTTP_STATUS_CONFLICT = status.HTTP_409_CONFLICT
HTTP_STATUS_INTERNAL_ERROR = status.HTTP_500_INTERNAL_SERVER_ERROR

ACCESS_TOKEN_TYPE = "bearer"

ADMIN_ROLE = "admin"
CONTENT_MANAGER_ROLE = "content_manager"

# 记录存储布局
RECORD_EXTENSION = ".toml"
CONFIG_COLLECTION = "config"
CONTENT_COLLECTION = "content"
SYSTEM_COLLECTION = "system"

TRASH_INDEX_FILENAME = ".index.json"
