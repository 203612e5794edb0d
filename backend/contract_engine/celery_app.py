from __future__ import annotations

import os

from celery import Celery

BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")
COMPLIANCE_QUEUE = os.getenv("CELERY_QUEUE", "compliance")

celery_app = Celery(
    "contract_engine",
    broker=BROKER_URL,
    backend=RESULT_BACKEND,
    include=["contract_engine.tasks"],
)

# Alert sweeps and journeys are recomputed on demand; stored results are only
# kept long enough for the status endpoint to hand them out.
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    result_expires=int(os.getenv("CELERY_RESULT_EXPIRES_SECONDS", "3600")),
    task_default_queue=COMPLIANCE_QUEUE,
)
