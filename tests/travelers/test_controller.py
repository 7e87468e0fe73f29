from __future__ import annotations

import itertools
from datetime import datetime

import pytest

from src.travel_checkin.travel_checkin.container import build_services
from src.travel_checkin.travel_checkin.main import create_app
from tests.travelers.fakes import FixedClock, InMemoryTravelers


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    repo = InMemoryTravelers()
    counter = itertools.count(1)
    container = build_services(repo, now=FixedClock(datetime(2024, 8, 10, 9, 30)), id_factory=lambda: f"s{next(counter)}")
    app = create_app(container)
    app.config["TESTING"] = True
    with app.test_client() as c:
        c.repo = repo
        yield c


def _add_ana(client):
    return client.post(
        "/api/individuals",
        json={
            "name": "Ana Lee",
            "arrival_flight": "AL66",
            "arrival_date": "2024-08-10",
            "arrival_clock": "09:15",
            "departure_flight": "CA21",
            "departure_time": "2024-08-11 18:40",
        },
    )


def test_add_individual_and_check_in_flow(client):
    resp = _add_ana(client)
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["person_key"] == "person-ana-lee"
    assert body["segments"][0]["time_label"] == "2024-08-10 09:15"
    assert body["segments"][0]["kind"] == "arrival"

    view = client.get("/api/travelers").get_json()
    assert len(view["persons"]) == 1
    assert view["departures"] == []

    view = client.post("/api/segments/s1/check-in").get_json()
    assert view["arrivals"][0]["checked_in"] is True
    assert view["arrivals"][0]["check_in_time"] == "2024-08-10T09:30:00"
    assert [d["id"] for d in view["departures"]] == ["s2"]

    view = client.delete("/api/segments/s1/check-in").get_json()
    assert view["arrivals"][0]["check_in_time"] is None
    assert view["departures"] == []

    all_departures = client.get("/api/departures/all").get_json()
    assert [d["id"] for d in all_departures["departures"]] == ["s2"]


def test_validation_and_storage_errors_map_to_status_codes(client):
    resp = client.post("/api/individuals", json={"name": "A"})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    assert client.post("/api/segments/s1/teleport").status_code == 400

    client.repo.fail_reads = True
    assert client.get("/api/travelers").status_code == 503


def test_person_endpoints(client):
    _add_ana(client)

    resp = client.patch("/api/persons/person-ana-lee", json={"notes": "VIP"})
    assert resp.get_json() == {"success": True, "rows": 2}

    assert client.patch("/api/persons/person-nobody", json={"notes": "x"}).status_code == 404

    stats = client.get("/api/stats").get_json()
    assert stats["total"] == 1 and stats["pending"] == 1

    assert client.delete("/api/persons/person-ana-lee").get_json()["rows"] == 2
    assert client.get("/api/travelers").get_json()["persons"] == []
