from __future__ import annotations

import copy

from fastapi.testclient import TestClient

from sortie_sim.web.main import create_app

PAYLOAD = {
    "seed": 1917,
    "day": 3,
    "sortieSeq": 0,
    "date": "1917-04-12",
    "base": {"fuel": 1000, "ammo": 100, "runwayRating": 3, "maintenanceRating": 3},
    "aircraftTypes": [
        {
            "id": "se5a",
            "name": "S.E.5a",
            "nation": "Britain",
            "speed": 7,
            "climb": 6,
            "turn": 6,
            "fighterRole": 8,
            "firepower": 6,
            "accuracy": 6,
            "ammo": 5,
            "fuelConsumption": 5,
        }
    ],
    "aircraft": [{"tailNumber": "B4863", "typeId": "se5a"}],
    "crew": [{"id": "p1", "name": "Arthur Rhys", "stats": {"CTL": 60, "GUN": 55}}],
    "sortie": {
        "missionType": "patrol",
        "targetDistance": 20,
        "assignments": [{"aircraft": "B4863", "pilot": "p1"}],
        "waypoints": [{"x": 0, "y": 0}, {"x": 100, "y": 0}],
    },
    "directive": "patrol",
    "captain": {"merit": 0},
    "locations": [{"id": "depot", "name": "Fuel Depot", "position": {"x": 50, "y": 5}}],
}


def _payload(**changes):
    payload = copy.deepcopy(PAYLOAD)
    payload.update(changes)
    return payload


def test_health():
    client = TestClient(create_app())
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_rules_contract():
    client = TestClient(create_app())
    res = client.get("/api/rules")
    assert res.status_code == 200
    data = res.json()
    assert data["bandThresholds"]["DecisiveSuccess"] == 2.0
    assert data["lossChance"]["Disaster"] == 80
    assert data["riskRatio"]["aggressive"] == 1.15
    assert data["contactBase"]["patrol"] == 40


def test_resolve_contract_smoke():
    client = TestClient(create_app())
    res = client.post("/api/sorties/resolve", json=_payload())
    assert res.status_code == 200
    data = res.json()

    assert data["ok"] is True
    assert data["messageKind"] == "info"
    report = data["result"]["report"]
    assert report["status"] == "resolved"
    assert report["resultBand"] in {
        "DecisiveSuccess",
        "Success",
        "MarginalSuccess",
        "Stalemate",
        "MarginalFailure",
        "Failure",
        "Disaster",
    }
    assert data["message"] == f"Mission complete. Result: {report['resultBand']}"
    assert report["fuelConsumed"] == 500
    assert report["ammoConsumed"] == 25
    assert report["followedOrders"] is True
    assert report["orderBonus"] == 10
    assert report["log"][0]["message"] == "Mission matches today's priority: Patrol"
    assert len(report["topFactors"]) <= 5
    assert [p["crewId"] for p in report["pilots"]] == ["p1"]

    result = data["result"]
    assert result["base"] == {"name": "Home Airfield", "fuel": 500, "ammo": 75}
    assert result["aircraft"][0]["tailNumber"] == "B4863"
    assert result["crew"][0]["missionsFlown"] == 1
    assert result["crew"][0]["stats"]["CTL"] >= 60
    assert result["captain"]["merit"] >= 2
    assert result["locations"][0]["id"] == "depot"


def test_resolve_is_reproducible_for_a_seed():
    client = TestClient(create_app())
    first = client.post("/api/sorties/resolve", json=_payload()).json()
    second = client.post("/api/sorties/resolve", json=_payload()).json()
    assert first == second


def test_readiness_abort_is_reported_as_error():
    client = TestClient(create_app())
    res = client.post("/api/sorties/resolve", json=_payload(base={"fuel": 10, "ammo": 100}))
    assert res.status_code == 200
    data = res.json()
    assert data["ok"] is False
    assert data["messageKind"] == "error"
    assert data["message"] == "ABORT: Insufficient fuel. Need 500, have 10."
    assert data["result"]["report"]["status"] == "aborted"
    assert data["result"]["report"]["resultBand"] is None
    assert data["result"]["base"]["fuel"] == 10


def test_unknown_references_are_rejected():
    client = TestClient(create_app())

    payload = _payload()
    payload["sortie"]["missionType"] = "dogfight"
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data == {"ok": False, "message": "Unknown mission type: dogfight", "messageKind": "error", "result": None}

    payload = _payload()
    payload["sortie"]["assignments"] = [{"aircraft": "A0000", "pilot": "p1"}]
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data["ok"] is False
    assert data["message"] == "Unknown aircraft: A0000"

    payload = _payload()
    payload["sortie"]["assignments"] = []
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data["ok"] is False


def test_malformed_payload_is_a_validation_error():
    client = TestClient(create_app())
    payload = _payload()
    del payload["base"]
    res = client.post("/api/sorties/resolve", json=payload)
    assert res.status_code == 422


def test_crew_and_aircraft_fill_one_slot_per_sortie():
    client = TestClient(create_app())
    aircraft = PAYLOAD["aircraft"] + [{"tailNumber": "B4864", "typeId": "se5a"}]

    payload = _payload(aircraft=aircraft)
    payload["sortie"]["assignments"] = [
        {"aircraft": "B4863", "pilot": "p1"},
        {"aircraft": "B4864", "pilot": "p1"},
    ]
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data["ok"] is False
    assert data["message"] == "Arthur Rhys is already assigned to this sortie"
    assert data["result"] is None

    payload = _payload()
    payload["sortie"]["assignments"] = [{"aircraft": "B4863", "pilot": "p1", "gunner": "p1"}]
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data["ok"] is False
    assert data["message"] == "A crew member can only fill one seat"

    crew = PAYLOAD["crew"] + [{"id": "p2", "name": "Tom Hale"}]
    payload = _payload(crew=crew)
    payload["sortie"]["assignments"] = [
        {"aircraft": "B4863", "pilot": "p1"},
        {"aircraft": "B4863", "pilot": "p2"},
    ]
    data = client.post("/api/sorties/resolve", json=payload).json()
    assert data["ok"] is False
    assert data["message"] == "Aircraft B4863 is already assigned to this sortie"
