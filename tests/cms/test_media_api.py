"""媒体库接口集成测试。"""

import io

from fastapi.testclient import TestClient

from app.packages.cms.services.container import Services


def _upload(client: TestClient, headers, name: str, content: bytes, mime: str = "text/plain", directory: str = ""):
    return client.post(
        "/api/media/upload",
        data={"directory": directory},
        files={"file": (name, io.BytesIO(content), mime)},
        headers=headers,
    )


def test_media_file_flow(client: TestClient, editor_headers, services: Services):
    resp = client.post("/api/media/folders", json={"parent": "", "name": "docs"}, headers=editor_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["isDirectory"] is True

    resp = _upload(client, editor_headers, "a.txt", b"hello", directory="docs")
    assert resp.status_code == 200
    assert resp.json()["data"]["path"] == "docs/a.txt"

    resp = _upload(client, editor_headers, "a.txt", b"again", directory="docs")
    assert resp.json()["data"]["name"] == "a-1.txt"

    resp = client.get("/api/media", params={"directory": "docs"}, headers=editor_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 2
    assert [item["name"] for item in data["items"]] == ["a-1.txt", "a.txt"]

    resp = client.post("/api/media/rename", json={"path": "docs/a-1.txt", "newName": "b.txt"}, headers=editor_headers)
    assert resp.json()["data"]["path"] == "docs/b.txt"

    resp = client.post("/api/media/copy", json={"sourcePath": "docs/b.txt", "destinationDir": "backup"}, headers=editor_headers)
    assert resp.status_code == 200
    assert (services.media.root / "backup" / "b.txt").read_bytes() == b"again"

    resp = client.post("/api/media/move", json={"sourcePath": "docs", "destinationDir": "docs/inner"}, headers=editor_headers)
    assert resp.status_code == 409
    assert resp.json()["code"] == 409


def test_upload_validation_errors(client: TestClient, editor_headers, services: Services):
    too_big = b"x" * (services.media.max_upload_bytes + 10)
    resp = _upload(client, editor_headers, "big.txt", too_big)
    assert resp.status_code == 400
    assert resp.json()["data"]["maxBytes"] == services.media.max_upload_bytes

    resp = _upload(client, editor_headers, "run.exe", b"MZ", mime="application/x-msdownload")
    assert resp.status_code == 400
    assert list(services.media.root.iterdir()) == [services.media.trash_dir]


def test_batch_upload_reports_per_file_errors(client: TestClient, editor_headers):
    resp = client.put(
        "/api/media/upload",
        data={"directory": "batch"},
        files=[
            ("files", ("ok.txt", io.BytesIO(b"ok"), "text/plain")),
            ("files", ("bad.exe", io.BytesIO(b"MZ"), "application/x-msdownload")),
        ],
        headers=editor_headers,
    )
    assert resp.status_code == 200
    results = resp.json()["data"]
    assert results[0]["status"] == "success"
    assert results[0]["item"]["path"] == "batch/ok.txt"
    assert results[1]["status"] == "error"
    assert results[1]["code"] == 400


def test_traversal_is_forbidden(client: TestClient, editor_headers):
    resp = client.get("/api/media", params={"directory": "../.."}, headers=editor_headers)
    assert resp.status_code == 403

    resp = client.post("/api/media/folders", json={"parent": "", "name": "../escape"}, headers=editor_headers)
    assert resp.status_code == 403


def test_trash_flow(client: TestClient, editor_headers, admin_headers):
    _upload(client, editor_headers, "a.txt", b"one")
    resp = client.post("/api/media/trash", json={"path": "a.txt"}, headers=editor_headers)
    assert resp.status_code == 200
    trash_name = resp.json()["data"]["name"]
    assert resp.json()["data"]["originalPath"] == "a.txt"

    resp = client.get("/api/media/trash", headers=editor_headers)
    assert [item["name"] for item in resp.json()["data"]] == [trash_name]

    _upload(client, editor_headers, "a.txt", b"two")
    resp = client.post(f"/api/media/trash/{trash_name}/restore", headers=editor_headers)
    assert resp.status_code == 409

    client.post("/api/media/trash", json={"path": "a.txt"}, headers=editor_headers)
    resp = client.post(f"/api/media/trash/{trash_name}/restore", headers=editor_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["path"] == "a.txt"

    resp = client.get("/api/media/trash", headers=editor_headers)
    remaining = resp.json()["data"]
    assert len(remaining) == 1

    resp = client.delete(f"/api/media/trash/{remaining[0]['name']}", headers=editor_headers)
    assert resp.status_code == 200
    resp = client.delete(f"/api/media/trash/{remaining[0]['name']}", headers=editor_headers)
    assert resp.status_code == 404

    _upload(client, editor_headers, "c.txt", b"three")
    client.post("/api/media/trash", json={"path": "c.txt"}, headers=editor_headers)
    resp = client.delete("/api/media/trash", headers=editor_headers)
    assert resp.json()["data"]["removed"] == 1

    titles = [item["title"] for item in client.get("/api/notifications", headers=admin_headers).json()["data"]["items"]]
    assert "回收站已清空" in titles
    assert "已从回收站恢复" in titles
