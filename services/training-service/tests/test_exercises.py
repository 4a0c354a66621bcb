from fastapi.testclient import TestClient

OTHER_USER = {"X-User-Id": "user-2"}


def _create_exercise(client: TestClient, muscle_groups: dict[str, int], name: str, **kwargs):
    payload = {
        "name": name,
        "primary_muscle_group_id": muscle_groups["Chest"],
        "other_muscle_group_ids": [muscle_groups["Triceps"]],
    }
    payload.update(kwargs)
    return client.post("/api/v1/exercises", json=payload)


def test_health(client: TestClient):
    r = client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_user_header_is_required(client: TestClient):
    r = client.get("/api/v1/exercises", headers={"X-User-Id": ""})
    assert r.status_code == 401
    assert r.json()["detail"] == "X-User-Id header required"


def test_seeded_catalog_is_listed(client: TestClient, muscle_groups: dict[str, int]):
    assert "Chest" in muscle_groups

    r = client.get("/api/v1/exercises")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["query"] is None
    assert body["no_results"] is False
    names = [e["name"] for e in body["exercises"]]
    assert names == sorted(names)
    assert "Barbell Bench Press" in names
    assert all(e["shared"] for e in body["exercises"])


def test_search_normalizes_query(client: TestClient):
    r = client.get("/api/v1/exercises", params={"query": "Bench  Press"})
    assert r.status_code == 200, r.text
    assert [e["name"] for e in r.json()["exercises"]] == ["Barbell Bench Press"]

    r = client.get("/api/v1/exercises", params={"query": "benchpress"})
    assert [e["name"] for e in r.json()["exercises"]] == ["Barbell Bench Press"]


def test_search_words_match_in_any_order(client: TestClient):
    for query in ("press bench", "barbell press", "BARB  pre"):
        r = client.get("/api/v1/exercises", params={"query": query})
        assert r.status_code == 200, r.text
        assert [e["name"] for e in r.json()["exercises"]] == ["Barbell Bench Press"], query

    r = client.get("/api/v1/exercises", params={"query": "press chest"})
    assert [e["name"] for e in r.json()["exercises"]] == ["Barbell Bench Press", "Incline Dumbbell Press"]

    r = client.get("/api/v1/exercises", params={"query": "barbell curl"})
    assert r.json()["no_results"] is True


def test_search_matches_muscle_groups(client: TestClient):
    r = client.get("/api/v1/exercises", params={"query": "calves"})
    assert r.status_code == 200, r.text
    assert [e["name"] for e in r.json()["exercises"]] == ["Standing Calf Raise"]


def test_search_without_matches(client: TestClient):
    r = client.get("/api/v1/exercises", params={"query": "zzz"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["no_results"] is True
    assert body["exercises"] == []


def test_search_rejects_invalid_query(client: TestClient):
    r = client.get("/api/v1/exercises", params={"query": "bench;press"})
    assert r.status_code == 422
    assert r.json()["errors"] == {"query": "The query is not valid."}


def test_create_exercise_and_notification(client: TestClient, muscle_groups: dict[str, int]):
    r = _create_exercise(client, muscle_groups, "  Close   Grip Bench ")
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["name"] == "Close Grip Bench"
    assert created["user_id"] == "user-1"
    assert created["shared"] is False
    assert [g["name"] for g in created["muscle_groups"]] == ["Chest", "Triceps"]

    r = client.get(f"/api/v1/exercises/{created['id']}")
    assert r.status_code == 200
    assert r.json()["name"] == "Close Grip Bench"

    r = client.get("/api/v1/notifications/next")
    assert r.status_code == 200
    assert r.json()["text"] == 'Exercise "Close Grip Bench" created successfully.'

    # Private exercises are invisible to other users
    r = client.get(f"/api/v1/exercises/{created['id']}", headers=OTHER_USER)
    assert r.status_code == 404


def test_create_exercise_rejects_duplicate_names(client: TestClient, muscle_groups: dict[str, int]):
    r = _create_exercise(client, muscle_groups, "barbell bench press")
    assert r.status_code == 422
    assert r.json()["errors"]["name"] == "An exercise with that name already exists."


def test_create_exercise_rejects_unknown_muscle_groups(client: TestClient, muscle_groups: dict[str, int]):
    r = _create_exercise(
        client,
        muscle_groups,
        "Cable Fly",
        primary_muscle_group_id=999999,
        other_muscle_group_ids=[999998],
    )
    assert r.status_code == 422
    errors = r.json()["errors"]
    assert errors["primary_muscle_group_id"] == "Select a valid muscle group."
    assert errors["other_muscle_group_ids"] == "Select valid muscle groups."


def test_create_exercise_requires_name(client: TestClient, muscle_groups: dict[str, int]):
    r = _create_exercise(client, muscle_groups, "")
    assert r.status_code == 422
    assert "name" in r.json()["errors"]


def test_delete_own_exercises(client: TestClient, muscle_groups: dict[str, int]):
    first = _create_exercise(client, muscle_groups, "Cable Fly").json()
    second = _create_exercise(client, muscle_groups, "Pec Deck").json()

    r = client.post("/api/v1/exercises/delete", json={"exercise_ids": [first["id"], second["id"]]})
    assert r.status_code == 200, r.text
    assert r.json() == {"deleted": 2}

    r = client.get("/api/v1/notifications/next")
    assert r.json()["text"] == "Exercises deleted successfully."

    r = client.get(f"/api/v1/exercises/{first['id']}")
    assert r.status_code == 404


def test_shared_exercises_cannot_be_deleted(client: TestClient, catalog: dict[str, int]):
    r = client.post("/api/v1/exercises/delete", json={"exercise_ids": [catalog["Pull Up"]]})
    assert r.status_code == 422
    assert r.json()["errors"] == {"exercise_ids": "Only your own exercises can be deleted."}


def test_exercise_in_use_cannot_be_deleted(client: TestClient, muscle_groups: dict[str, int]):
    exercise = _create_exercise(client, muscle_groups, "Cable Fly").json()
    r = client.post(
        "/api/v1/mesocycles",
        json={
            "name": "Chest focus",
            "duration_in_weeks": 1,
            "training_days_per_week": 1,
            "training_days": [{"label": "Push", "exercises": [{"exercise_id": exercise["id"]}]}],
        },
    )
    assert r.status_code == 201, r.text

    r = client.post("/api/v1/exercises/delete", json={"exercise_ids": [exercise["id"]]})
    assert r.status_code == 422
    assert "linked to one or more of your mesocycles" in r.json()["errors"]["exercise_ids"]

    r = client.get(f"/api/v1/exercises/{exercise['id']}")
    assert r.status_code == 200
