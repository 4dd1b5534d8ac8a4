"""内容、配置与系统设置的请求模型。"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class ContentUpdateBody(BaseModel):
    """整体替换一个内容条目。"""

    item: str = Field(..., min_length=1)
    data: Dict[str, Any]


class ContentFieldBody(BaseModel):
    """按点分路径更新单个字段，例如 ``hero.title`` 或 ``features.0.title``。"""

    path: str = Field(..., min_length=1)
    value: Any
