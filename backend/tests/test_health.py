def test_health_endpoints(client):
    basic = client.get("/api/health")
    assert basic.status_code == 200
    assert basic.json() == {"status": "ok"}

    live = client.get("/api/health/live")
    assert live.status_code == 200
    payload = live.json()
    assert payload["status"] == "ok"
    assert payload["scheduler"]["daily_subject_hour_cap"] >= 1
    assert payload["scheduler"]["max_generation_days"] >= 1
