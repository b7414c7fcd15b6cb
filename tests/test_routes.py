from __future__ import annotations


def _create_hospital(client, name="서울치과", base_due_day=3, **extra):
  resp = client.post("/api/hospitals", json={"name": name, "base_due_day": base_due_day, **extra})
  assert resp.status_code == 200, resp.text
  return resp.json()


def _upsert_quota(client, hospital_id, **counts):
  payload = {"hospital_id": hospital_id, "year": 2026, "month": 4,
             "eonron_bodo": 0, "jisikin": 0}
  payload.update(counts)
  resp = client.post("/api/monthly-tasks", json=payload)
  assert resp.status_code == 200, resp.text


def test_hospital_crud(client):
  hospital = _create_hospital(client, sanwi_nosul_days=[17, 3, 3], color="#AABBCC")
  assert hospital["sanwi_nosul_days"] == [3, 17]
  assert hospital["color"] == "#aabbcc"

  duplicate = client.post("/api/hospitals", json={"name": "서울치과", "base_due_day": 5})
  assert duplicate.status_code == 400

  resp = client.put(f"/api/hospitals/{hospital['id']}", json={"base_due_day": 25})
  assert resp.json()["base_due_day"] == 25
  assert [h["name"] for h in client.get("/api/hospitals").json()] == ["서울치과"]

  assert client.delete(f"/api/hospitals/{hospital['id']}").status_code == 200
  assert client.delete(f"/api/hospitals/{hospital['id']}").status_code == 404


def test_hospital_validation(client):
  bad_day = client.post("/api/hospitals", json={"name": "A", "base_due_day": 32})
  assert bad_day.status_code == 400
  too_many = client.post("/api/hospitals",
                         json={"name": "B", "base_due_day": 10,
                               "sanwi_nosul_days": [1, 2, 3, 4, 5, 6]})
  assert too_many.status_code == 400


def test_generate_and_list(client):
  hospital = _create_hospital(client)
  _upsert_quota(client, hospital["id"], brand=1, trend=1)

  resp = client.post("/api/schedules/generate",
                     json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  assert resp.status_code == 200, resp.text
  body = resp.json()
  assert body["success"] is True
  assert body["schedules"][0]["task_date"] == "2026-04-01"
  assert body["schedules"][-1]["is_report"] is True

  listed = client.get("/api/schedules/2026/4").json()
  assert len(listed) == len(body["schedules"])
  assert listed[0]["hospital_name"] == "서울치과"


def test_generate_shortage_returns_error_payload(client):
  hospital = _create_hospital(client)
  _upsert_quota(client, hospital["id"], brand=10)
  resp = client.post("/api/schedules/generate",
                     json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  assert resp.status_code == 400
  error = resp.json()["error"]
  assert error["hospital_name"] == "서울치과"
  assert error["shortage_hours"] == 11.5
  assert client.get("/api/schedules/2026/4").json() == []


def test_generate_unknown_hospital(client):
  resp = client.post("/api/schedules/generate",
                     json={"hospital_id": 999, "year": 2026, "month": 4})
  assert resp.status_code == 404


def test_generate_without_quota(client):
  hospital = _create_hospital(client)
  resp = client.post("/api/schedules/generate",
                     json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  assert resp.status_code == 400


def test_monthly_task_work_period_validation(client):
  hospital = _create_hospital(client)
  resp = client.post("/api/monthly-tasks",
                     json={"hospital_id": hospital["id"], "year": 2026, "month": 4,
                           "work_start_date": "2026-04-10"})
  assert resp.status_code == 400
  resp = client.post("/api/monthly-tasks",
                     json={"hospital_id": hospital["id"], "year": 2026, "month": 4,
                           "work_start_date": "2026-04-06", "work_end_date": "2026-04-10"})
  assert resp.status_code == 200
  items = client.get("/api/monthly-tasks/2026/4").json()
  assert items[0]["work_end_date"] == "2026-04-10"
  assert items[0]["hospital_name"] == "서울치과"


def test_vacations(client):
  resp = client.post("/api/vacations", json={"vacation_date": "2026-04-15", "description": "연차"})
  assert resp.status_code == 200
  vacation = resp.json()
  assert client.post("/api/vacations", json={"vacation_date": "2026-04-15"}).status_code == 400
  assert client.get("/api/vacations/2026/4").json() == [vacation]
  assert client.delete(f"/api/vacations/{vacation['id']}").status_code == 200
  assert client.get("/api/vacations/2026/4").json() == []


def test_holidays_endpoint(client):
  days = client.get("/api/holidays/2026").json()
  assert "2026-10-09" in days
  assert days == sorted(days)


def test_patch_schedule_row(client):
  hospital = _create_hospital(client)
  _upsert_quota(client, hospital["id"], trend=1)
  client.post("/api/schedules/generate",
              json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  row = client.get("/api/schedules/2026/4").json()[0]

  resp = client.patch(f"/api/schedules/{row['id']}",
                      json={"task_date": "2026-04-02", "start_time": "14:00",
                            "end_time": "16:30", "is_completed": True})
  assert resp.status_code == 200, resp.text
  moved = resp.json()
  assert moved["task_date"] == "2026-04-02"
  assert moved["duration_hours"] == 2.5
  assert moved["is_completed"] is True

  bad = client.patch(f"/api/schedules/{row['id']}",
                     json={"start_time": "18:00", "end_time": "17:00"})
  assert bad.status_code == 400


def test_delete_schedule(client):
  hospital = _create_hospital(client)
  _upsert_quota(client, hospital["id"], trend=1)
  client.post("/api/schedules/generate",
              json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  resp = client.delete(f"/api/schedules/2026/4/{hospital['id']}")
  assert resp.json() == {"ok": True, "count": 2}
  assert client.get("/api/schedules/2026/4").json() == []


def test_patch_moves_row_to_next_month(client):
  hospital = _create_hospital(client)
  _upsert_quota(client, hospital["id"], trend=1)
  client.post("/api/schedules/generate",
              json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  row = client.get("/api/schedules/2026/4").json()[0]

  resp = client.patch(f"/api/schedules/{row['id']}", json={"task_date": "2026-05-04"})
  assert resp.status_code == 200, resp.text
  moved = resp.json()
  assert (moved["year"], moved["month"]) == (2026, 5)

  may = client.get("/api/schedules/2026/5").json()
  assert [r["id"] for r in may] == [row["id"]]
  assert row["id"] not in [r["id"] for r in client.get("/api/schedules/2026/4").json()]

  # 4월을 다시 생성해도 옮긴 작업은 남는다
  client.post("/api/schedules/generate",
              json={"hospital_id": hospital["id"], "year": 2026, "month": 4})
  assert [r["id"] for r in client.get("/api/schedules/2026/5").json()] == [row["id"]]
