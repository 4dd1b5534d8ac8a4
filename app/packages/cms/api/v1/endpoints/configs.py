"""站点配置路由：site / seo / theme / navigation。"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from app.packages.cms.api.v1.schemas.common import DictResponse
from app.packages.cms.core.constants import HTTP_STATUS_OK
from app.packages.cms.core.dependencies import get_current_account
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account
from app.packages.cms.services.container import Services, get_services

router = APIRouter(prefix="/configs", tags=["configs"])


@router.get("/{kind}", response_model=DictResponse)
def read_config(
    kind: str,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    return create_response("获取配置成功", services.content.get_config(kind), HTTP_STATUS_OK)


@router.put("/{kind}", response_model=DictResponse)
def update_config(
    kind: str,
    payload: Dict[str, Any] = Body(...),
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    saved = services.content.update_config(kind, payload, current_account.email)
    services.notifications.notify("配置已更新", f"{kind} 配置已由 {current_account.name} 更新", "success")
    return create_response("配置保存成功", saved, HTTP_STATUS_OK)
