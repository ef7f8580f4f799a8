from fastapi.testclient import TestClient

import backend.app.main as api

client = TestClient(api.app)


def test_equilibrium_endpoint() -> None:
    resp = client.post("/api/equilibrium", json={
        "demand_equation": "-P + 16",
        "supply_equation": "P + 4",
        "demand_shift": 4,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["original_equilibrium"] == {"price": 6.0, "quantity": 10.0}
    assert data["shifted_equilibrium"] == {"price": 8.0, "quantity": 12.0}
    assert data["shifts_active"] is True
    assert data["error"] == ""
    assert len(data["series"]) == 51


def test_equilibrium_endpoint_reports_input_errors_in_body() -> None:
    resp = client.post("/api/equilibrium", json={
        "demand_equation": "abc",
        "supply_equation": "P + 4",
    })
    assert resp.status_code == 200
    assert resp.json()["error"].startswith("Demand equation error:")


def test_equilibrium_endpoint_validation() -> None:
    resp = client.post("/api/equilibrium", json={"demand_equation": "-P + 16"})
    assert resp.status_code == 422

    resp = client.post("/api/equilibrium", json={
        "demand_equation": "-P + 16",
        "supply_equation": "P + 4",
        "demand_shift": "lots",
    })
    assert resp.status_code == 422


def test_equilibrium_endpoint_error_mapping(monkeypatch) -> None:
    def _bad_value(*args):
        raise ValueError("bad input")

    def _boom(*args):
        raise RuntimeError("boom")

    body = {"demand_equation": "-P + 16", "supply_equation": "P + 4"}

    monkeypatch.setattr(api, "compute_market", _bad_value)
    resp = client.post("/api/equilibrium", json=body)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "bad input"

    monkeypatch.setattr(api, "compute_market", _boom)
    resp = client.post("/api/equilibrium", json=body)
    assert resp.status_code == 500
    assert "boom" in resp.json()["detail"]


def test_explain_endpoint(monkeypatch) -> None:
    monkeypatch.setattr(api, "request_explanation", lambda result: "Because.")
    resp = client.post("/api/explain", json={
        "demand_equation": "-P + 16",
        "supply_equation": "P + 4",
    })
    assert resp.status_code == 200
    assert resp.json() == {"explanation": "Because."}


def test_explain_endpoint_without_anything_to_explain() -> None:
    resp = client.post("/api/explain", json={
        "demand_equation": "-P + 2",
        "supply_equation": "P + 10",
    })
    assert resp.status_code == 400
