from fastapi.testclient import TestClient


def test_no_pending_notification(client: TestClient):
    r = client.get("/api/v1/notifications/next")
    assert r.status_code == 204
    assert r.content == b""


def test_notification_is_consumed_once(client: TestClient, create_mesocycle):
    create_mesocycle()

    r = client.get("/api/v1/notifications/next")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["kind"] == "success"
    assert body["text"] == 'Mesocycle "Hypertrophy block" created successfully.'

    r = client.get("/api/v1/notifications/next")
    assert r.status_code == 204


def test_newer_notification_replaces_pending_one(client: TestClient, create_mesocycle):
    mesocycle = create_mesocycle()
    client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")

    r = client.get("/api/v1/notifications/next")
    assert r.json()["text"] == 'Mesocycle "Hypertrophy block" started successfully.'
    assert client.get("/api/v1/notifications/next").status_code == 204


def test_notifications_are_per_user(client: TestClient, create_mesocycle):
    create_mesocycle()

    r = client.get("/api/v1/notifications/next", headers={"X-User-Id": "user-2"})
    assert r.status_code == 204

    r = client.get("/api/v1/notifications/next")
    assert r.status_code == 200
