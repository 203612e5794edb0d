from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import date
from typing import Callable, Iterable

from contract_engine.core.config import EngineSettings
from contract_engine.core.errors import NotFound
from contract_engine.schemas.timeline import ComplianceAlert, EmploymentJourney

logger = logging.getLogger(__name__)

SEVERITY_ORDER = {"critical": 0, "warning": 1, "info": 2}

NOTICE_SEVERITY = {
    "overdue": "critical",
    "critical": "critical",
    "urgent": "warning",
    "ideal": "info",
}

JourneyProvider = Callable[[str], EmploymentJourney]


def alert_sort_key(alert: ComplianceAlert) -> tuple:
    missing = alert.days_remaining is None
    return (SEVERITY_ORDER[alert.severity], missing, alert.days_remaining or 0)


def sort_alerts(alerts: Iterable[ComplianceAlert]) -> list[ComplianceAlert]:
    return sorted(alerts, key=alert_sort_key)


def _notice_text(journey: EmploymentJourney) -> tuple[str, str]:
    notice = journey.termination_notice
    status = notice.notification_status
    if status == "overdue":
        per_day = notice.penalty_amount / notice.penalty_days if notice.penalty_days else 0.0
        return (
            f"Termination deadline passed {notice.penalty_days} days ago",
            f"Penalty: EUR {notice.penalty_amount:.2f} (EUR {per_day:.2f}/day)",
        )
    if status == "critical":
        return (
            "Legal deadline TODAY - must notify employee",
            "Send termination or renewal notice immediately",
        )
    if status == "urgent":
        return (
            f"{notice.days_until_deadline} days until legal deadline",
            "Decide on contract renewal/termination",
        )
    return (
        f"{notice.days_until_deadline} days until termination deadline",
        "Ideal time to start renewal discussions",
    )


def alerts_for_journey(journey: EmploymentJourney, *, today: date) -> list[ComplianceAlert]:
    """At most one alert per type for one worker."""
    alerts: list[ComplianceAlert] = []
    chain = journey.chain_rule_status
    current = journey.current_contract
    end_date = current.end_date if current else None
    days_to_end = (end_date - today).days if end_date else None

    if chain.warning_level == "permanentRequired":
        alerts.append(
            ComplianceAlert(
                id=f"chain-{journey.worker_id}",
                worker_id=journey.worker_id,
                worker_name=journey.worker_name,
                type="permanentRequired",
                severity="critical",
                message=chain.recommendation,
                action_required="Next contract MUST be permanent",
                deadline=end_date,
                days_remaining=days_to_end,
                contract_end_date=end_date,
            )
        )
    elif chain.warning_level == "critical":
        alerts.append(
            ComplianceAlert(
                id=f"chain-warning-{journey.worker_id}",
                worker_id=journey.worker_id,
                worker_name=journey.worker_name,
                type="chainRule",
                severity="warning",
                message=chain.recommendation,
                action_required="Monitor contract count and duration",
                deadline=end_date,
                days_remaining=days_to_end,
                contract_end_date=end_date,
            )
        )

    notice = journey.termination_notice
    if notice is not None and notice.should_notify:
        message, action = _notice_text(journey)
        alerts.append(
            ComplianceAlert(
                id=f"termination-{journey.worker_id}",
                worker_id=journey.worker_id,
                worker_name=journey.worker_name,
                type="terminationNotice",
                severity=NOTICE_SEVERITY[notice.notification_status],
                message=message,
                action_required=action,
                deadline=notice.deadline_date,
                days_remaining=notice.days_until_deadline,
                contract_end_date=end_date,
            )
        )
    return alerts


class ComplianceAlertGenerator:
    """Fans journey builds out over a bounded pool and merges their alerts.

    A failing worker is logged and skipped. With a timeout, workers whose
    journey is not ready in time are dropped from this sweep.
    """

    def __init__(
        self,
        journey_provider: JourneyProvider,
        settings: EngineSettings | None = None,
        *,
        today: date | None = None,
    ):
        self.journey_provider = journey_provider
        self.settings = settings or EngineSettings()
        self.today = today

    def _alerts_for(self, worker_id: str, today: date) -> list[ComplianceAlert]:
        return alerts_for_journey(self.journey_provider(worker_id), today=today)

    def generate_all(self, worker_ids: Iterable[str], *, timeout: float | None = None) -> list[ComplianceAlert]:
        today = self.today or date.today()
        worker_ids = list(dict.fromkeys(worker_ids))
        if not worker_ids:
            return []
        if timeout is None:
            timeout = self.settings.sweep_timeout_seconds

        max_workers = max(1, min(self.settings.sweep_max_workers, len(worker_ids)))
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="alert-sweep")
        try:
            futures: dict[Future, str] = {
                executor.submit(self._alerts_for, worker_id, today): worker_id for worker_id in worker_ids
            }
            done, not_done = wait(futures, timeout=timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            logger.warning(
                "alert_sweep_timeout timeout=%s completed=%s skipped=%s",
                timeout,
                len(done),
                len(not_done),
            )

        alerts: list[ComplianceAlert] = []
        failed = 0
        # Submission order keeps ties in the final sort deterministic.
        for future, worker_id in futures.items():
            if future not in done:
                continue
            try:
                alerts.extend(future.result())
            except NotFound:
                failed += 1
                logger.warning("alert_sweep_worker_missing worker_id=%s", worker_id)
            except Exception:
                failed += 1
                logger.exception("alert_sweep_worker_failed worker_id=%s", worker_id)

        logger.info("alert_sweep_done workers=%s alerts=%s failed=%s", len(worker_ids), len(alerts), failed)
        return sort_alerts(alerts)
