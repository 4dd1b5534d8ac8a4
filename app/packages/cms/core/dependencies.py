"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.packages.cms.core.constants import ACCESS_TOKEN_TYPE
from app.packages.cms.core.security import Account, account_from_payload, decode_and_verify_token

security_scheme = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> Account:
    """解析 ``Authorization`` 头部并返回当前账号，不存在或非法时抛出 401。"""
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="缺少认证信息")

    if credentials.scheme.lower() != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="认证类型无效")

    payload = decode_and_verify_token(credentials.credentials)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token 无效或已过期")

    account = account_from_payload(payload)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token 无效")
    return account


def require_admin(current_account: Account = Depends(get_current_account)) -> Account:
    """仅允许管理员访问。"""
    if not current_account.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="需要管理员权限")
    return current_account
