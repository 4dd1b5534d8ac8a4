"""认证相关的请求与响应模型。"""

from typing import Literal

from pydantic import BaseModel, Field

from app.packages.cms.api.v1.schemas.common import ResponseEnvelope


class LoginRequest(BaseModel):
    """登录请求的字段校验规则。"""

    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponseData(BaseModel):
    """登录成功后签发的令牌信息。"""

    access_token: str
    token_type: Literal["bearer"]
    role: str


class AccountData(BaseModel):
    id: str
    email: str
    name: str
    role: str


TokenResponse = ResponseEnvelope[TokenResponseData]
AccountResponse = ResponseEnvelope[AccountData]
