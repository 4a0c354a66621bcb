from datetime import date

from fastapi.testclient import TestClient


def test_create_mesocycle(client: TestClient, create_mesocycle):
    mesocycle = create_mesocycle()
    assert mesocycle["status"] == "draft"
    assert mesocycle["microcycle_length"] == 7
    assert mesocycle["rest_days"] == [3, 4, 5, 6]
    assert mesocycle["runs"] == []
    assert [d["number"] for d in mesocycle["training_days"]] == [1, 2, 3]

    bench, pull_up = mesocycle["training_days"][0]["exercises"]
    assert bench["exercise"]["name"] == "Barbell Bench Press"
    assert [s["number"] for s in bench["sets"]] == [1, 2]
    # Exercises without explicit sets get one default set
    assert len(pull_up["sets"]) == 1
    assert pull_up["sets"][0]["rep_range_lower_bound"] == 5
    assert pull_up["sets"][0]["rep_range_upper_bound"] == 8

    r = client.get("/api/v1/notifications/next")
    assert r.json()["text"] == 'Mesocycle "Hypertrophy block" created successfully.'

    r = client.get("/api/v1/mesocycles")
    assert r.status_code == 200
    assert [m["name"] for m in r.json()] == ["Hypertrophy block"]


def test_create_mesocycle_with_custom_rest_days(client: TestClient, create_mesocycle):
    mesocycle = create_mesocycle(training_days_per_week=2, rest_days=[1, 3])
    assert mesocycle["microcycle_length"] == 4
    assert mesocycle["rest_days"] == [1, 3]


def test_create_mesocycle_validation(client: TestClient, create_mesocycle, catalog):
    create_mesocycle()

    r = client.post(
        "/api/v1/mesocycles",
        json={
            "name": "hypertrophy block",
            "duration_in_weeks": 4,
            "training_days_per_week": 2,
            "rest_days": [0, 0],
            "training_days": [{"label": "Only", "exercises": [{"exercise_id": 999999}]}],
        },
    )
    assert r.status_code == 422
    errors = r.json()["errors"]
    assert errors["name"] == "A mesocycle with that name already exists."
    assert errors["training_days"] == "Add exactly 2 training day(s)."
    assert errors["rest_days"] == "Rest days must be distinct positions inside the microcycle."
    assert errors["training_days.0.exercises.0.exercise_id"] == "Select a valid exercise."


def test_create_mesocycle_rejects_bad_rep_range(client: TestClient, catalog):
    r = client.post(
        "/api/v1/mesocycles",
        json={
            "name": "Strength",
            "duration_in_weeks": 4,
            "training_days_per_week": 1,
            "training_days": [
                {
                    "label": "Heavy",
                    "exercises": [
                        {
                            "exercise_id": catalog["Barbell Back Squat"],
                            "sets": [{"rep_range_lower_bound": 8, "rep_range_upper_bound": 5}],
                        }
                    ],
                }
            ],
        },
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {
        "training_days.0.exercises.0.sets.0.rep_range_upper_bound": (
            "The upper bound must be greater than or equal to the lower bound."
        )
    }


def test_mesocycles_are_private(client: TestClient, create_mesocycle):
    mesocycle = create_mesocycle()
    r = client.get(f"/api/v1/mesocycles/{mesocycle['id']}", headers={"X-User-Id": "user-2"})
    assert r.status_code == 404
    assert r.json() == {"detail": "Not found"}


def test_start_and_stop(client: TestClient, create_mesocycle, set_today):
    mesocycle = create_mesocycle()

    r = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")
    assert r.status_code == 200, r.text
    started = r.json()
    assert started["status"] == "active"
    assert started["start_date"] == "2024-01-01"
    assert len(started["runs"]) == 1
    assert started["runs"][0]["end_date"] is None

    r = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")
    assert r.status_code == 409
    assert r.json()["detail"] == "The mesocycle is already active"

    other = create_mesocycle(name="Second block")
    r = client.post(f"/api/v1/mesocycles/{other['id']}/start")
    assert r.status_code == 409
    assert r.json()["detail"] == "Another mesocycle is already active"

    set_today(date(2024, 1, 5))
    r = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/stop")
    assert r.status_code == 200, r.text
    stopped = r.json()
    assert stopped["status"] == "completed"
    assert stopped["runs"][0]["end_date"] == "2024-01-05"

    r = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/stop")
    assert r.status_code == 409

    # A new run may not start before the previous one ended
    r = client.post(f"/api/v1/mesocycles/{other['id']}/start", json={"start_date": "2024-01-03"})
    assert r.status_code == 422
    assert "start_date" in r.json()["errors"]

    r = client.post(f"/api/v1/mesocycles/{other['id']}/start", json={"start_date": "2024-01-08"})
    assert r.status_code == 200, r.text
    assert r.json()["start_date"] == "2024-01-08"


def test_restart_creates_a_new_run(client: TestClient, create_mesocycle, set_today):
    mesocycle = create_mesocycle()
    client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")
    set_today(date(2024, 1, 3))
    client.post(f"/api/v1/mesocycles/{mesocycle['id']}/stop")

    set_today(date(2024, 2, 1))
    r = client.post(f"/api/v1/mesocycles/{mesocycle['id']}/start")
    assert r.status_code == 200, r.text

    r = client.get(f"/api/v1/mesocycles/{mesocycle['id']}/runs")
    assert r.status_code == 200
    runs = r.json()
    assert [run["start_date"] for run in runs] == ["2024-02-01", "2024-01-01"]
    assert runs[1]["end_date"] == "2024-01-03"

    r = client.get(f"/api/v1/mesocycles/{mesocycle['id']}/runs/{runs[1]['id']}")
    assert r.status_code == 200, r.text
    detail = r.json()
    assert detail["mesocycle_name"] == "Hypertrophy block"
    assert detail["sessions"] == []


def test_delete_mesocycle(client: TestClient, active_mesocycle):
    r = client.delete(f"/api/v1/mesocycles/{active_mesocycle['id']}")
    assert r.status_code == 204

    r = client.get(f"/api/v1/mesocycles/{active_mesocycle['id']}")
    assert r.status_code == 404

    r = client.get("/api/v1/notifications/next")
    assert r.json()["text"] == 'Mesocycle "Hypertrophy block" deleted successfully.'


def test_edit_training_day_template(client: TestClient, create_mesocycle, catalog):
    mesocycle = create_mesocycle()
    day = mesocycle["training_days"][0]
    base = f"/api/v1/mesocycles/{mesocycle['id']}/training-days/{day['id']}"

    r = client.patch(base, json={"label": "Upper A"})
    assert r.status_code == 200, r.text
    assert r.json()["label"] == "Upper A"

    r = client.post(f"{base}/exercises", json={"exercise_id": catalog["Lateral Raise"], "notes": "Slow"})
    assert r.status_code == 201, r.text
    exercises = r.json()["exercises"]
    assert [e["number"] for e in exercises] == [1, 2, 3]
    lateral = exercises[2]
    assert lateral["exercise"]["name"] == "Lateral Raise"
    assert lateral["notes"] == "Slow"

    bench = exercises[0]
    r = client.post(f"{base}/exercises/{bench['id']}/sets")
    assert r.status_code == 201, r.text
    bench_sets = r.json()["exercises"][0]["sets"]
    assert [s["number"] for s in bench_sets] == [1, 2, 3]
    assert bench_sets[2]["rir"] == 1
    assert bench_sets[2]["weight"] == 60

    r = client.patch(
        f"{base}/exercises/{bench['id']}/sets/{bench_sets[0]['id']}",
        json={"rep_range_lower_bound": 12},
    )
    assert r.status_code == 422
    assert r.json()["errors"] == {
        "rep_range_upper_bound": "The upper bound must be greater than or equal to the lower bound."
    }

    r = client.patch(
        f"{base}/exercises/{bench['id']}/sets/{bench_sets[0]['id']}",
        json={"rep_range_upper_bound": 12, "weight": 62.5},
    )
    assert r.status_code == 200, r.text
    first = r.json()["exercises"][0]["sets"][0]
    assert first["rep_range_upper_bound"] == 12
    assert first["weight"] == 62.5

    r = client.delete(f"{base}/exercises/{bench['id']}/sets/{bench_sets[1]['id']}")
    assert r.status_code == 200, r.text
    remaining = r.json()["exercises"][0]["sets"]
    assert [s["number"] for s in remaining] == [1, 2]
    assert remaining[1]["id"] == bench_sets[2]["id"]

    order = [lateral["id"], bench["id"], exercises[1]["id"]]
    r = client.put(f"{base}/exercises/order", json={"exercise_ids": order})
    assert r.status_code == 200, r.text
    assert [e["id"] for e in r.json()["exercises"]] == order

    r = client.put(f"{base}/exercises/order", json={"exercise_ids": [lateral["id"]]})
    assert r.status_code == 422
    assert "exercise_ids" in r.json()["errors"]

    r = client.delete(f"{base}/exercises/{lateral['id']}")
    assert r.status_code == 200, r.text
    assert [e["number"] for e in r.json()["exercises"]] == [1, 2]


def test_completed_mesocycle_is_read_only(client: TestClient, active_mesocycle):
    client.post(f"/api/v1/mesocycles/{active_mesocycle['id']}/stop")
    day = active_mesocycle["training_days"][0]

    r = client.patch(
        f"/api/v1/mesocycles/{active_mesocycle['id']}/training-days/{day['id']}",
        json={"label": "Renamed"},
    )
    assert r.status_code == 409
    assert r.json()["detail"] == "Completed mesocycles cannot be edited"
