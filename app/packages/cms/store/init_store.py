"""Storage bootstrapping utilities."""

from __future__ import annotations

from fastapi import Depends

from app.packages.cms.core.constants import CONFIG_COLLECTION, CONTENT_COLLECTION, SYSTEM_COLLECTION
from app.packages.cms.core.logger import get_logger
from app.packages.cms.services.container import Services, get_services

logger = get_logger("store")


def init_storage() -> None:
    """Create the record collections and media root if they do not exist."""
    services = get_services()
    for collection in (CONFIG_COLLECTION, CONTENT_COLLECTION, SYSTEM_COLLECTION):
        (services.store.root / collection).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Storage ready: data=%s media=%s",
        services.store.root,
        services.media.root,
    )


def storage_status(services: Services = Depends(get_services)) -> dict[str, bool]:
    """Report whether the record root and media root in use exist."""
    return {
        "data": services.store.root.is_dir(),
        "media": services.media.root.is_dir(),
    }
