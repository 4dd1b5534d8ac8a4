"""页面与组件内容路由。"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.packages.cms.api.v1.schemas.common import DictResponse
from app.packages.cms.api.v1.schemas.content import ContentFieldBody, ContentUpdateBody
from app.packages.cms.core.constants import HTTP_STATUS_OK
from app.packages.cms.core.dependencies import get_current_account
from app.packages.cms.core.responses import create_response
from app.packages.cms.core.security import Account
from app.packages.cms.services.container import Services, get_services

router = APIRouter(prefix="/content", tags=["content"])


@router.get("", response_model=DictResponse)
def list_sections(
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    return create_response("获取内容分区成功", services.content.get_all_sections(), HTTP_STATUS_OK)


@router.get("/{section}", response_model=DictResponse)
def read_section(
    section: str,
    item: Optional[str] = Query(None),
    services: Services = Depends(get_services),
    _: Account = Depends(get_current_account),
) -> DictResponse:
    """不带 ``item`` 时返回整个分区，带 ``item`` 时返回单个条目（缺失时为默认结构）。"""
    if item:
        return create_response("获取内容成功", services.content.get_content_item(section, item), HTTP_STATUS_OK)
    return create_response("获取内容分区成功", services.content.get_content_section(section), HTTP_STATUS_OK)


@router.put("/{section}", response_model=DictResponse)
def update_item(
    section: str,
    payload: ContentUpdateBody,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    saved = services.content.update_content_item(section, payload.item, payload.data, current_account.email)
    services.notifications.notify(
        "内容已更新",
        f"{section}/{payload.item} 已由 {current_account.name} 更新",
        "success",
    )
    return create_response("内容保存成功", {"section": section, "item": payload.item, "data": saved}, HTTP_STATUS_OK)


@router.patch("/{section}/{item}", response_model=DictResponse)
def update_field(
    section: str,
    item: str,
    payload: ContentFieldBody,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    saved = services.content.update_content_field(section, item, payload.path, payload.value, current_account.email)
    services.notifications.notify(
        "内容已更新",
        f"{section}/{item} 的 {payload.path} 已由 {current_account.name} 更新",
        "success",
    )
    return create_response("字段更新成功", {"section": section, "item": item, "data": saved}, HTTP_STATUS_OK)


@router.delete("/{section}/{item}", response_model=DictResponse)
def delete_item(
    section: str,
    item: str,
    services: Services = Depends(get_services),
    current_account: Account = Depends(get_current_account),
) -> DictResponse:
    services.content.delete_content_item(section, item)
    services.notifications.notify("内容已删除", f"{section}/{item} 已由 {current_account.name} 删除", "warning")
    return create_response("内容删除成功", {"section": section, "item": item}, HTTP_STATUS_OK)
