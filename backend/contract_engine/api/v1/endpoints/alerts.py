"""Compliance alert endpoints."""

from __future__ import annotations

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, HTTPException, Query

from contract_engine.api.deps import get_contract_service
from contract_engine.celery_app import celery_app
from contract_engine.schemas.timeline import ComplianceAlert
from contract_engine.services.contract_service import UnifiedContractService
from contract_engine.tasks import generate_compliance_alerts as generate_compliance_alerts_task

router = APIRouter(tags=["alerts"])


@router.get("/alerts", response_model=list[ComplianceAlert])
def list_compliance_alerts(
    worker_id: list[str] | None = Query(default=None),
    service: UnifiedContractService = Depends(get_contract_service),
) -> list[ComplianceAlert]:
    return service.generate_compliance_alerts(worker_id)


@router.post("/alerts/sweep")
def queue_alert_sweep(worker_id: list[str] | None = Query(default=None)):
    try:
        task = generate_compliance_alerts_task.delay(worker_id)
        return {"status": "queued", "task_id": task.id}
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/tasks/{task_id}")
def get_task_status(task_id: str):
    result = AsyncResult(task_id, app=celery_app)
    return {
        "task_id": task_id,
        "status": result.status,
        "result": result.result,
        "traceback": result.traceback,
    }
