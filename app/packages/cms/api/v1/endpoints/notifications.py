"""通知路由：每个账号看到全局通知与发给自己的通知。"""

from fastapi import APIRouter, Depends

from app.packages.cms.api.v1.schemas.common import DictResponse
from app.packages.cms.core.constants import HTTP_STATUS_OK
from app.packages.cms.core.dependencies import get_current_account
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account
from app.packages.cms.services.container import Services, get_services

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=DictResponse)
def list_notifications(
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    items = services.notifications.list(current_account.email)
    unread = sum(1 for item in items if not item.get("read"))
    return create_response("获取通知成功", {"items": items, "unread": unread}, HTTP_STATUS_OK)


@router.post("/read-all", response_model=DictResponse)
def mark_all_read(
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    updated = services.notifications.mark_all_read(current_account.email)
    return create_response("已全部标记为已读", {"updated": updated}, HTTP_STATUS_OK)


@router.post("/{notification_id}/read", response_model=DictResponse)
def mark_read(
    notification_id: str,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    item = services.notifications.mark_read(notification_id)
    return create_response("已标记为已读", item, HTTP_STATUS_OK)


@router.delete("/{notification_id}", response_model=DictResponse)
def delete_notification(
    notification_id: str,
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    services.notifications.delete(notification_id)
    return create_response("通知已删除", {"id": notification_id}, HTTP_STATUS_OK)


@router.delete("", response_model=DictResponse)
def delete_all_notifications(
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    removed = services.notifications.delete_all(current_account.email)
    return create_response("通知已清空", {"removed": removed}, HTTP_STATUS_OK)
