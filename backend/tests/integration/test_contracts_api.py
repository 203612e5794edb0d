from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from contract_engine.api.deps import get_contract_service
from contract_engine.main import app
from contract_engine.services.contract_service import UnifiedContractService
from tests.fixtures.synthetic_workers import TODAY, add_contract, add_worker, days_ago, days_ahead


@pytest.fixture
def client(session_factory):
    def _service():
        db = session_factory()
        try:
            yield UnifiedContractService(db, today=TODAY, session_factory=session_factory)
        finally:
            db.close()

    app.dependency_overrides[get_contract_service] = _service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_create_contract_and_read_journey(client, db):
    worker = add_worker(db)
    response = client.post(
        "/api/v1/contracts",
        json={
            "workerId": worker.id,
            "startDate": days_ago(10).isoformat(),
            "endDate": days_ahead(200).isoformat(),
            "status": "active",
            "monthlyWage": 3100.0,
            "hoursPerWeek": 36,
        },
    )
    assert response.status_code == 201
    created = response.json()
    assert created["workerId"] == worker.id
    assert created["employmentKind"] == "fixedTerm"
    assert created["isActive"] is True

    response = client.get(f"/api/v1/workers/{worker.id}/journey")
    assert response.status_code == 200
    journey = response.json()
    assert journey["totalContracts"] == 1
    assert journey["chainRuleStatus"]["warningLevel"] == "safe"
    assert journey["currentContract"]["id"] == created["id"]


def test_unknown_worker_returns_404(client):
    response = client.get("/api/v1/workers/missing/journey")
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "NOT_FOUND"


def test_invalid_transition_returns_409_with_allowed_states(client, db):
    worker = add_worker(db)
    contract = add_contract(db, worker, days_ago(100), days_ahead(100), status="draft")
    response = client.patch(
        f"/api/v1/contracts/{contract.id}/status",
        json={"newStatus": "terminated", "actorId": "hr-1"},
    )
    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["attempted"] == "terminated"
    assert detail["allowed"] == ["active"]


def test_end_date_before_start_date_is_rejected(client, db):
    worker = add_worker(db)
    response = client.post(
        "/api/v1/contracts",
        json={"workerId": worker.id, "startDate": "2026-05-01", "endDate": "2026-04-01"},
    )
    assert response.status_code == 422


def test_link_and_integrity_endpoints(client, db):
    worker = add_worker(db)
    orphan = add_contract(db, None, days_ago(100), worker_name=worker.full_name, with_dependents=False)

    report = client.get(f"/api/v1/workers/{worker.id}/integrity").json()
    assert report["isClean"] is False
    assert report["defects"][0]["kind"] == "orphaned_contract"

    response = client.post(f"/api/v1/contracts/{orphan.id}/link", json={"workerId": worker.id})
    assert response.status_code == 200
    assert response.json()["linked"] is True

    report = client.get(f"/api/v1/workers/{worker.id}/integrity").json()
    assert report["isClean"] is True


def test_worker_contracts_and_alerts(client, db):
    worker = add_worker(db)
    add_contract(db, worker, days_ago(300), days_ahead(10))

    body = client.get(f"/api/v1/workers/{worker.id}/contracts").json()
    assert body["summary"]["expiringSoon"] == 1
    assert body["timeline"]["terminationNotice"]["notificationStatus"] == "overdue"

    alerts = client.get("/api/v1/alerts", params={"worker_id": worker.id}).json()
    assert [a["type"] for a in alerts] == ["terminationNotice"]
    assert alerts[0]["severity"] == "critical"
    assert alerts[0]["daysRemaining"] == -20
