"""安全模块：内置账号校验以及 JWT 令牌的生成/解析能力。

系统只有两个由环境变量配置的账号（管理员与内容编辑），不落库。
"""

import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from .config import get_settings
from .constants import ADMIN_ROLE, CONTENT_MANAGER_ROLE
from .logger import get_logger

logger = get_logger("auth")


@dataclass(frozen=True)
class Account:
    """已认证的调用方身份。"""

    id: str
    email: str
    name: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def verify_password(plain_password: str, configured_password: str) -> bool:
    """校验明文密码；配置值为 bcrypt 哈希时走哈希比对，否则做常量时间比较。"""
    if not configured_password:
        return False
    if configured_password.startswith("$2"):
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), configured_password.encode("utf-8"))
        except ValueError:
            logger.warning("Configured password hash is malformed")
            return False
    return hmac.compare_digest(plain_password.encode("utf-8"), configured_password.encode("utf-8"))


def _configured_accounts() -> list[tuple[Account, str]]:
    settings = get_settings()
    return [
        (Account(id="1", email=settings.admin_email, name="Admin", role=ADMIN_ROLE), settings.admin_password),
        (
            Account(id="2", email=settings.content_manager_email, name="Content Manager", role=CONTENT_MANAGER_ROLE),
            settings.content_manager_password,
        ),
    ]


def authenticate(email: str, password: str) -> Optional[Account]:
    """按邮箱与密码匹配内置账号，失败返回 ``None``。"""
    for account, configured_password in _configured_accounts():
        if account.email and email.strip().lower() == account.email.lower():
            if verify_password(password, configured_password):
                return account
            return None
    return None


def create_access_token(subject: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """根据传入载荷生成带有过期时间的签名 JWT。"""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = subject.copy()
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_account_token(account: Account) -> str:
    return create_access_token({"sub": account.id, "email": account.email, "name": account.name, "role": account.role})


def decode_and_verify_token(token: str, *, verify_exp: bool = True) -> Optional[Dict[str, Any]]:
    """解码并校验 JWT，默认校验过期时间；非法时返回 ``None``。"""
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": verify_exp},
        )
    except JWTError as exc:  # pragma: no cover - logging side effect
        logger.warning("Failed to verify JWT: %s", exc)
        return None


def account_from_payload(payload: Dict[str, Any]) -> Optional[Account]:
    """将令牌载荷还原为账号，角色必须是已知的两种之一。"""
    role = payload.get("role")
    sub = payload.get("sub")
    if role not in (ADMIN_ROLE, CONTENT_MANAGER_ROLE) or not sub:
        return None
    return Account(id=str(sub), email=payload.get("email") or "", name=payload.get("name") or "", role=role)
