from __future__ import annotations

import logging

from contract_engine.celery_app import celery_app
from contract_engine.core.config import EngineSettings
from contract_engine.db.session import SessionLocal
from contract_engine.services.contract_service import UnifiedContractService

logger = logging.getLogger(__name__)


def _get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@celery_app.task(name="contract_engine.tasks.generate_compliance_alerts", bind=True)
def generate_compliance_alerts(self, worker_ids: list[str] | None = None):
    for db in _get_db():
        task_id = getattr(self.request, "id", None)
        logger.info("task_start name=generate_compliance_alerts task_id=%s workers=%s", task_id, len(worker_ids or []) or "all")
        service = UnifiedContractService(db, settings=EngineSettings.from_env())
        alerts = service.generate_compliance_alerts(worker_ids)
        logger.info("task_done name=generate_compliance_alerts task_id=%s alerts=%s", task_id, len(alerts))
        return [alert.model_dump(mode="json", by_alias=True) for alert in alerts]


@celery_app.task(name="contract_engine.tasks.build_employment_journey", bind=True)
def build_employment_journey(self, worker_id: str):
    for db in _get_db():
        task_id = getattr(self.request, "id", None)
        logger.info("task_start name=build_employment_journey task_id=%s worker_id=%s", task_id, worker_id)
        journey = UnifiedContractService(db, settings=EngineSettings.from_env()).build_employment_journey(worker_id)
        return journey.model_dump(mode="json", by_alias=True)
