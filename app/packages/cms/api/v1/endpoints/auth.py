"""认证相关路由定义。"""

from fastapi import APIRouter, Depends

from app.packages.cms.api.v1.schemas.auth import AccountResponse, LoginRequest, TokenResponse
from app.packages.cms.core.constants import ACCESS_TOKEN_TYPE, HTTP_STATUS_OK, HTTP_STATUS_UNAUTHORIZED
from app.packages.cms.core.dependencies import get_current_account
from app.packages.cms.core.exceptions import AppException
from app.packages.cms.core.logger import get_logger
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account, authenticate, create_account_token

logger = get_logger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest) -> TokenResponse:
    """校验凭证并签发访问令牌。"""
    account = authenticate(payload.email, payload.password)
    if account is None:
        logger.warning("Login failed for %s", payload.email)
        raise AppException("邮箱或密码错误", HTTP_STATUS_UNAUTHORIZED)
    logger.info("Login succeeded for %s (%s)", account.email, account.role)
    data = {
        "access_token": create_account_token(account),
        "token_type": ACCESS_TOKEN_TYPE,
        "role": account.role,
    }
    return create_response("登录成功", data, HTTP_STATUS_OK)


@router.get("/me", response_model=AccountResponse)
def read_me(current_account: Account = Depends(get_current_account)) -> AccountResponse:
    data = {
        "id": current_account.id,
        "email": current_account.email,
        "name": current_account.name,
        "role": current_account.role,
    }
    return create_response("获取当前账号成功", data, HTTP_STATUS_OK)
