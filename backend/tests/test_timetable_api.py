def base_payload():
    return {
        "startDate": "2025-03-03",
        "endDate": "2025-03-04",
        "subjects": [
            {"id": "s1", "name": "Intro to Welding", "totalHours": 2, "professorId": "p1", "prerequisiteIds": []},
            {"id": "s2", "name": "Advanced Welding", "totalHours": 1, "professorId": "p1", "prerequisiteIds": ["s1"]},
        ],
        "professors": [
            {"id": "p1", "name": "Prof Kim", "vacations": []},
        ],
        "holidays": [],
    }


def test_list_time_slots(client):
    response = client.get("/api/timetable/slots")
    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 8
    assert slots[0] == {"start": "09:00", "end": "09:50"}
    assert slots[3] == {"start": "13:00", "end": "13:50"}


def test_generate_timetable(client):
    response = client.post("/api/timetable/generate", json=base_payload())
    assert response.status_code == 200
    payload = response.json()
    assert payload["slotCount"] == 3
    assert payload["entries"][0] == {
        "id": "2025-03-03-09:00-p1",
        "subjectId": "s1",
        "professorId": "p1",
        "date": "2025-03-03",
        "startTime": "09:00",
        "endTime": "09:50",
    }
    assert [entry["subjectId"] for entry in payload["entries"]] == ["s1", "s1", "s2"]


def test_generate_accepts_partial_holidays_and_vacations(client):
    payload = base_payload()
    payload["holidays"] = [
        {"id": "h1", "name": "Safety Briefing", "date": "2025-03-03", "startTime": "09:00", "endTime": "11:00"},
    ]
    payload["professors"][0]["vacations"] = [
        {"id": "v1", "startDate": "2025-03-04", "endDate": "2025-03-04"},
    ]
    payload["endDate"] = "2025-03-05"

    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 200
    entries = response.json()["entries"]
    assert [(entry["date"], entry["startTime"]) for entry in entries] == [
        ("2025-03-03", "11:00"),
        ("2025-03-03", "13:00"),
        ("2025-03-03", "14:00"),
    ]


def test_generate_rejects_prerequisite_cycle(client):
    payload = base_payload()
    payload["subjects"][0]["prerequisiteIds"] = ["s2"]

    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert "cycle" in body["message"]
    assert body["details"] == {"error": "cyclic_prerequisite", "cyclic_subject_ids": ["s1", "s2"]}


def test_generate_reports_insufficient_window(client):
    payload = base_payload()
    payload["subjects"][0]["totalHours"] = 10

    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["details"]["error"] == "insufficient_scheduling_window"
    assert body["details"]["unscheduled_hours"] == {"s1": 4, "s2": 1}
    assert "Extend the period" in body["message"]


def test_generate_requires_end_after_start(client):
    payload = base_payload()
    payload["endDate"] = payload["startDate"]
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 422
    assert "endDate must be after startDate" in response.text


def test_generate_rejects_duplicate_ids(client):
    payload = base_payload()
    payload["subjects"][1]["id"] = "s1"
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 422
    assert "Duplicate subject ids: s1" in response.text


def test_generate_rejects_overlong_range(client):
    payload = base_payload()
    payload["startDate"] = "2025-01-01"
    payload["endDate"] = "2026-12-31"
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 400
    assert "maximum is" in response.json()["detail"]


def test_generate_rejects_non_positive_hours(client):
    payload = base_payload()
    payload["subjects"][0]["totalHours"] = 0
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 422


def test_validate_generated_timetable_round_trip(client):
    payload = base_payload()
    generated = client.post("/api/timetable/generate", json=payload).json()

    response = client.post(
        "/api/timetable/validate",
        json={
            "subjects": payload["subjects"],
            "professors": payload["professors"],
            "holidays": payload["holidays"],
            "entries": generated["entries"],
        },
    )
    assert response.status_code == 200
    assert response.json() == {"conflicts": [], "suggested_resolutions": []}


def test_validate_flags_externally_built_timetable(client):
    payload = base_payload()
    entries = [
        {"id": "x1", "subjectId": "s2", "professorId": "p1", "date": "2025-03-03", "startTime": "09:00", "endTime": "09:50"},
        {"id": "x2", "subjectId": "s1", "professorId": "p1", "date": "2025-03-03", "startTime": "09:00", "endTime": "09:50"},
        {"id": "x3", "subjectId": "s1", "professorId": "p1", "date": "2025-03-08", "startTime": "10:00", "endTime": "10:50"},
    ]
    response = client.post(
        "/api/timetable/validate",
        json={"subjects": payload["subjects"], "professors": payload["professors"], "entries": entries},
    )
    assert response.status_code == 200
    types = sorted(conflict["conflict_type"] for conflict in response.json()["conflicts"])
    assert types == ["prerequisite_order", "professor_conflict", "weekend"]


def test_generate_rejects_non_string_holiday_time(client):
    payload = base_payload()
    payload["holidays"] = [
        {"id": "h1", "name": "Safety Briefing", "date": "2025-03-03", "startTime": 900, "endTime": "10:00"},
    ]
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 422

    validate_response = client.post(
        "/api/timetable/validate",
        json={"subjects": payload["subjects"], "professors": payload["professors"], "holidays": payload["holidays"]},
    )
    assert validate_response.status_code == 422


def test_generate_treats_blank_holiday_times_as_full_day(client):
    payload = base_payload()
    payload["holidays"] = [
        {"id": "h1", "name": "Founding Day", "date": "2025-03-03", "startTime": "", "endTime": ""},
    ]
    response = client.post("/api/timetable/generate", json=payload)
    assert response.status_code == 200
    assert {entry["date"] for entry in response.json()["entries"]} == {"2025-03-04"}
