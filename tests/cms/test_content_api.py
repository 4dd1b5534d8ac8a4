"""内容、配置与通知接口测试。"""

from fastapi.testclient import TestClient


def test_content_item_default_then_update(client: TestClient, editor_headers):
    resp = client.get("/api/content/pages", params={"item": "home"}, headers=editor_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["data"]["hero"]["title"] == "Transform Your Business"

    resp = client.put(
        "/api/content/pages",
        json={"item": "home", "data": {"hero": {"title": "Hello"}}},
        headers=editor_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["data"]["meta"]["updated_by"] == "editor@example.com"

    resp = client.get("/api/content/pages", params={"item": "home"}, headers=editor_headers)
    assert resp.json()["data"]["data"]["hero"] == {"title": "Hello"}

    resp = client.get("/api/content/pages", headers=editor_headers)
    assert resp.json()["data"]["itemCount"] == 1

    resp = client.get("/api/content", headers=editor_headers)
    assert resp.json()["data"]["sections"]["pages"]["items"] == ["home"]


def test_content_field_patch_and_delete(client: TestClient, editor_headers):
    resp = client.patch(
        "/api/content/pages/about",
        json={"path": "hero.subtitle", "value": "Since 1999"},
        headers=editor_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]["data"]
    assert data["hero"] == {"title": "About Our Company", "subtitle": "Since 1999"}

    resp = client.patch(
        "/api/content/pages/about",
        json={"path": "hero.subtitle.deeper", "value": 1},
        headers=editor_headers,
    )
    assert resp.status_code == 400

    resp = client.delete("/api/content/pages/about", headers=editor_headers)
    assert resp.status_code == 200
    resp = client.delete("/api/content/pages/about", headers=editor_headers)
    assert resp.status_code == 404


def test_content_rejects_null_values(client: TestClient, editor_headers):
    resp = client.put(
        "/api/content/pages",
        json={"item": "home", "data": {"hero": {"title": None}}},
        headers=editor_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == 400


def test_configs(client: TestClient, editor_headers):
    resp = client.get("/api/configs/navigation", headers=editor_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["main"]["items"][0]["label"] == "Home"

    resp = client.put("/api/configs/theme", json={"colors": {"primary": "#111111"}}, headers=editor_headers)
    assert resp.status_code == 200

    resp = client.get("/api/configs/theme", headers=editor_headers)
    theme = resp.json()["data"]
    assert theme["colors"] == {"primary": "#111111", "secondary": "#10b981"}

    resp = client.get("/api/configs/unknown", headers=editor_headers)
    assert resp.status_code == 404


def test_updates_emit_notifications(client: TestClient, editor_headers, admin_headers):
    client.put("/api/configs/site", json={"site": {"name": "Acme"}}, headers=editor_headers)

    resp = client.get("/api/notifications", headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["unread"] == 1
    notification = data["items"][0]
    assert notification["type"] == "success"

    resp = client.post(f"/api/notifications/{notification['id']}/read", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["read"] is True

    client.put("/api/configs/seo", json={"global": {"site_title": "T"}}, headers=editor_headers)
    resp = client.post("/api/notifications/read-all", headers=admin_headers)
    assert resp.json()["data"]["updated"] == 1

    resp = client.delete(f"/api/notifications/{notification['id']}", headers=admin_headers)
    assert resp.status_code == 200
    resp = client.delete("/api/notifications", headers=admin_headers)
    assert resp.json()["data"]["removed"] == 1

    resp = client.get("/api/notifications", headers=admin_headers)
    assert resp.json()["data"] == {"items": [], "unread": 0}


def test_item_traversal_is_forbidden(client: TestClient, editor_headers):
    resp = client.get("/api/content/pages", params={"item": ".."}, headers=editor_headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == 403
