"""通知服务测试。"""

import pytest

from app.packages.cms.core.exceptions import NotFoundError, ValidationError
from app.packages.cms.services.notification_service import NotificationService
from app.packages.cms.store.record_store import RecordStore


@pytest.fixture()
def notifications(store: RecordStore) -> NotificationService:
    return NotificationService(store)


def test_add_and_list_newest_first(notifications: NotificationService, store: RecordStore):
    first = notifications.add("First", "one")
    second = notifications.add("Second", "two", "success")

    items = notifications.list()
    assert [item["id"] for item in items] == [second["id"], first["id"]]
    assert items[0]["read"] is False
    assert "user_id" not in items[1]
    assert store.read_record("system", "notifications")["notifications"][0]["title"] == "Second"


def test_user_scoped_visibility(notifications: NotificationService):
    notifications.add("Global", "all")
    notifications.add("Mine", "me", user_id="a@example.com")
    notifications.add("Theirs", "them", user_id="b@example.com")

    titles = [item["title"] for item in notifications.list("a@example.com")]
    assert titles == ["Mine", "Global"]
    assert len(notifications.list()) == 3


def test_mark_read(notifications: NotificationService):
    created = notifications.add("Hello", "world")
    updated = notifications.mark_read(created["id"])
    assert updated["read"] is True
    assert notifications.list()[0]["read"] is True

    with pytest.raises(NotFoundError):
        notifications.mark_read("missing")


def test_mark_all_read_for_user(notifications: NotificationService):
    notifications.add("Global", "all")
    notifications.add("Theirs", "them", user_id="b@example.com")

    assert notifications.mark_all_read("a@example.com") == 1
    theirs = next(item for item in notifications.list() if item["title"] == "Theirs")
    assert theirs["read"] is False


def test_delete_and_delete_all(notifications: NotificationService):
    keep = notifications.add("Theirs", "them", user_id="b@example.com")
    drop = notifications.add("Global", "all")

    notifications.delete(drop["id"])
    with pytest.raises(NotFoundError):
        notifications.delete(drop["id"])

    notifications.add("Mine", "me", user_id="a@example.com")
    assert notifications.delete_all("a@example.com") == 1
    assert [item["id"] for item in notifications.list()] == [keep["id"]]


def test_invalid_type_rejected(notifications: NotificationService):
    with pytest.raises(ValidationError):
        notifications.add("Bad", "type", "fatal")


def test_notify_swallows_storage_failures(notifications: NotificationService, monkeypatch):
    monkeypatch.setattr(notifications.store, "write_record", lambda *args, **kwargs: False)
    assert notifications.notify("Title", "message") is None
