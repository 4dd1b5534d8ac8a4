"""记录存储测试：读写、缓存语义、原子替换与路径校验。"""

import os

import pytest

from app.packages.cms.core.exceptions import PathTraversalError, ValidationError
from app.packages.cms.store.cache import RecordCache
from app.packages.cms.store.record_store import RecordStore


def test_read_missing_record_returns_empty(store: RecordStore):
    assert store.read_record("config", "site") == {}
    # 读取不会创建目录
    assert not (store.root / "config").exists()


def test_write_then_read_roundtrip(store: RecordStore):
    value = {"site": {"name": "Demo", "tags": ["a", "b"], "count": 3}}
    assert store.write_record("config", "site", value) is True

    assert (store.root / "config" / "site.toml").is_file()
    assert store.read_record("config", "site") == value


def test_write_creates_nested_collection(store: RecordStore):
    assert store.write_record("content/pages", "home", {"hero": {"title": "Hi"}})
    assert (store.root / "content" / "pages" / "home.toml").is_file()
    assert store.list_record_names("content/pages") == ["home"]
    assert store.list_collections("content") == ["pages"]


def test_repeated_reads_return_cached_object(store: RecordStore):
    store.write_record("config", "site", {"site": {"name": "Demo"}})
    store.clear_cache()

    first = store.read_record("config", "site")
    assert store.read_record("config", "site") is first


def test_collection_spelling_shares_one_cache_entry(store: RecordStore):
    store.write_record("content/pages", "home", {"hero": {"title": "Old"}})
    assert store.read_record("content/pages/", "home")["hero"]["title"] == "Old"

    store.write_record("content/pages/", "home", {"hero": {"title": "New"}})
    assert store.read_record("content/pages", "home")["hero"]["title"] == "New"
    assert len(store.cache) == 1


def test_cache_serves_stale_value_until_cleared(store: RecordStore):
    store.write_record("config", "theme", {"colors": {"primary": "#000"}})
    path = store.root / "config" / "theme.toml"
    path.write_text('[colors]\nprimary = "#fff"\n', encoding="utf-8")

    assert store.read_record("config", "theme")["colors"]["primary"] == "#000"
    store.clear_cache()
    assert store.read_record("config", "theme")["colors"]["primary"] == "#fff"


def test_fresh_store_reads_from_disk(tmp_path):
    first = RecordStore(tmp_path, RecordCache())
    first.write_record("system", "notifications", {"notifications": []})
    second = RecordStore(tmp_path, RecordCache())
    assert second.read_record("system", "notifications") == {"notifications": []}


def test_unserializable_value_leaves_file_and_cache_untouched(store: RecordStore):
    store.write_record("config", "site", {"site": {"name": "Keep"}})
    before = (store.root / "config" / "site.toml").read_bytes()

    assert store.write_record("config", "site", {"site": {"name": None}}) is False
    assert store.write_record("config", "site", ["not", "a", "mapping"]) is False

    assert (store.root / "config" / "site.toml").read_bytes() == before
    assert store.read_record("config", "site") == {"site": {"name": "Keep"}}
    assert not [name for name in os.listdir(store.root / "config") if name.endswith(".tmp")]


def test_corrupt_file_reads_as_empty(store: RecordStore):
    (store.root / "config").mkdir(parents=True)
    (store.root / "config" / "broken.toml").write_text("this is = = not toml", encoding="utf-8")
    assert store.read_record("config", "broken") == {}


def test_list_record_names_sorted_and_filtered(store: RecordStore):
    for name in ("b", "a", "c"):
        store.write_record("content/pages", name, {"meta": {"title": name}})
    (store.root / "content" / "pages" / "notes.txt").write_text("x", encoding="utf-8")
    assert store.list_record_names("content/pages") == ["a", "b", "c"]
    assert store.list_record_names("content/missing") == []


def test_delete_record(store: RecordStore):
    store.write_record("config", "seo", {"global": {"site_title": "x"}})
    assert store.delete_record("config", "seo") is True
    assert store.read_record("config", "seo") == {}
    assert store.delete_record("config", "seo") is False


def test_record_metadata(store: RecordStore):
    assert store.record_exists("config", "site") is False
    assert store.record_modified_time("config", "site") is None
    store.write_record("config", "site", {"site": {"name": "x"}})
    assert store.record_exists("config", "site") is True
    assert store.record_modified_time("config", "site") is not None


@pytest.mark.parametrize(
    "collection,name",
    [
        ("config", "../escape"),
        ("../outside", "site"),
        ("content/../../etc", "passwd"),
        ("/etc", "passwd"),
        ("config", "a/b"),
    ],
)
def test_traversal_names_are_rejected(store: RecordStore, collection, name):
    with pytest.raises(PathTraversalError):
        store.read_record(collection, name)
    with pytest.raises(PathTraversalError):
        store.write_record(collection, name, {"x": 1})


def test_empty_names_are_rejected(store: RecordStore):
    with pytest.raises(ValidationError):
        store.read_record("config", "")
    with pytest.raises(ValidationError):
        store.read_record("", "site")
