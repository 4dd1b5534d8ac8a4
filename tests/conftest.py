"""测试夹具：为 pytest 提供隔离的数据目录、媒体库与客户端。"""

import os
import shutil
import tempfile
from typing import Generator

# 必须在导入应用之前设置，确保配置、日志与启动时的目录初始化都落在临时目录中
_TEST_ROOT = tempfile.mkdtemp(prefix="cms_tests_")
os.environ["DATA_DIR"] = os.path.join(_TEST_ROOT, "data")
os.environ["MEDIA_DIR"] = os.path.join(_TEST_ROOT, "media")
os.environ["LOG_DIR"] = os.path.join(_TEST_ROOT, "log")
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = "admin@example.com"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["CONTENT_MANAGER_EMAIL"] = "editor@example.com"
os.environ["CONTENT_MANAGER_PASSWORD"] = "editor123"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.packages.cms.core.config import get_settings
from app.packages.cms.services.container import Services, get_services
from app.packages.cms.services.content_service import ContentService
from app.packages.cms.services.media_library import MediaLibrary
from app.packages.cms.services.notification_service import NotificationService
from app.packages.cms.store.cache import RecordCache
from app.packages.cms.store.record_store import RecordStore

TEST_MAX_UPLOAD_BYTES = 64 * 1024


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_root() -> Generator[None, None, None]:
    """会话结束后删除临时根目录。"""
    yield
    shutil.rmtree(_TEST_ROOT, ignore_errors=True)


@pytest.fixture()
def store(tmp_path) -> RecordStore:
    return RecordStore(tmp_path / "data", RecordCache())


@pytest.fixture()
def media(tmp_path) -> MediaLibrary:
    return MediaLibrary(
        tmp_path / "media",
        max_upload_bytes=TEST_MAX_UPLOAD_BYTES,
        allowed_mime_types=get_settings().allowed_upload_types,
    )


@pytest.fixture()
def services(store: RecordStore, media: MediaLibrary) -> Services:
    return Services(
        store=store,
        media=media,
        content=ContentService(store),
        notifications=NotificationService(store),
    )


@pytest.fixture()
def client(services: Services) -> Generator[TestClient, None, None]:
    """构建 FastAPI TestClient，并注入指向临时目录的服务实例。"""
    app.dependency_overrides[get_services] = lambda: services

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _login(client: TestClient, email: str, password: str) -> dict[str, str]:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}


@pytest.fixture()
def admin_headers(client: TestClient) -> dict[str, str]:
    return _login(client, "admin@example.com", "admin123")


@pytest.fixture()
def editor_headers(client: TestClient) -> dict[str, str]:
    return _login(client, "editor@example.com", "editor123")
