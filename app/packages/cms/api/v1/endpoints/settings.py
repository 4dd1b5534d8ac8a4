"""系统设置路由：读取对所有账号开放，修改仅限管理员。"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from app.packages.cms.api.v1.schemas.common import DictResponse
from app.packages.cms.core.constants import HTTP_STATUS_OK
from app.packages.cms.core.dependencies import get_current_account, require_admin
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account
from app.packages.cms.services.container import Services, get_services

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=DictResponse)
def read_settings(
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    return create_response("获取系统设置成功", services.content.get_system_settings(), HTTP_STATUS_OK)


@router.put("", response_model=DictResponse)
def update_settings(
    payload: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
    current_account: Account = Depends(require_admin),
) -> DictResponse:
    saved = services.content.save_system_settings(payload, current_account.email)
    services.notifications.notify("系统设置已更新", f"系统设置已由 {current_account.name} 更新", "info")
    return create_response("系统设置保存成功", saved, HTTP_STATUS_OK)
