"""Reconciles employment facts into one ordered timeline and enriches it.

The builder walks its resolvers in order and stops at the first one that
yields periods. ``enrich_timeline`` is the single pass that derives chain rule
status, salary progression, termination notice and score from that timeline.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from sqlalchemy.orm import Session

from contract_engine.core.config import ChainRuleConfig
from contract_engine.core.errors import NotFound, SourceUnavailable
from contract_engine.core.legal_constants import DEFAULT_DAYS_PER_WEEK
from contract_engine.db.models import Worker
from contract_engine.schemas.sources import WorkerProfile
from contract_engine.schemas.timeline import ContractPeriod, EmploymentJourney, IntegrityDefect
from contract_engine.services.chain_rule import ChainRuleEvaluator
from contract_engine.services.salary_progression import SalaryProgressionTracker
from contract_engine.services.scoring_engine import ComplianceScorer
from contract_engine.services.termination_notice import TerminationNoticeCalculator
from contract_engine.services.timeline_sources import (
    ContractLedgerResolver,
    EmploymentFactsProvider,
    PayrollSnapshotResolver,
    ResolvedTimeline,
    SnapshotFactsProvider,
    TimelineResolver,
    WorkerProfileResolver,
)

logger = logging.getLogger(__name__)


def daily_wage(period: ContractPeriod) -> float:
    days = period.days_per_week or DEFAULT_DAYS_PER_WEEK
    if period.hourly_wage and period.hours_per_week:
        return period.hourly_wage * period.hours_per_week / days
    if period.monthly_wage:
        return period.monthly_wage * 12 / 52 / days
    return 0.0


def order_periods(periods: Sequence[ContractPeriod]) -> list[ContractPeriod]:
    """Sort by start date (undated periods last) and renumber from 1."""
    ordered = sorted(periods, key=lambda p: (p.start_date is None, p.start_date or date.max, p.id))
    return [p.model_copy(update={"sequence_number": i}) for i, p in enumerate(ordered, start=1)]


def periods_overlap(start_a: date, end_a: date | None, start_b: date, end_b: date | None) -> bool:
    """Open ends run forever; a period ending on the day the next one starts does not overlap it."""
    return start_a < (end_b or date.max) and start_b < (end_a or date.max)


def _ends_after(period: ContractPeriod, other: ContractPeriod) -> bool:
    if other.end_date is None:
        return False
    return period.end_date is None or period.end_date > other.end_date


def find_overlaps(periods: Sequence[ContractPeriod]) -> list[IntegrityDefect]:
    """Report every period that starts before some earlier period has ended.

    Periods must be ordered by start date. The sweep keeps the period reaching
    furthest so far, so one long period overlapping several later ones yields a
    defect for each of them.
    """
    defects = []
    reach: ContractPeriod | None = None
    for current in (p for p in periods if p.start_date is not None):
        if reach is not None and periods_overlap(
            reach.start_date, reach.end_date, current.start_date, current.end_date
        ):
            defects.append(
                IntegrityDefect(
                    kind="overlapping_periods",
                    message=(
                        f"Contract {current.id} starts {current.start_date.isoformat()} before "
                        f"contract {reach.id} has ended."
                    ),
                    records=[reach.id, current.id],
                )
            )
        if reach is None or _ends_after(current, reach):
            reach = current
    return defects


def pick_current(periods: Sequence[ContractPeriod]) -> ContractPeriod | None:
    active = [p for p in periods if p.is_active]
    if active:
        return max(active, key=lambda p: p.start_date or date.min)
    return periods[-1] if periods else None


def enrich_timeline(
    worker: WorkerProfile,
    resolved: ResolvedTimeline,
    *,
    config: ChainRuleConfig,
    today: date,
) -> EmploymentJourney:
    periods = order_periods(resolved.periods)
    defects = list(resolved.defects) + find_overlaps(periods)
    current = pick_current(periods)

    # Drafts are not concluded contracts and do not count toward the chain.
    concluded = [p for p in periods if p.status != "draft"]
    chain_start = next((p.start_date for p in concluded if p.start_date), None)
    first_start = next((p.start_date for p in periods if p.start_date), None)
    chain_status = ChainRuleEvaluator(config).evaluate(concluded, chain_start, today=today)

    if resolved.salary_records:
        progression = SalaryProgressionTracker.track(resolved.salary_records)
    else:
        progression = SalaryProgressionTracker.track_periods(p for p in periods if p.start_date)

    # Only a running contract carries a notice obligation.
    notice = None
    if current is not None and current.is_active and current.end_date is not None:
        notice = TerminationNoticeCalculator(config).calculate(current.end_date, daily_wage(current), today=today)

    score = ComplianceScorer.score(periods, chain_status, defects, today=today)

    return EmploymentJourney(
        worker_id=worker.id,
        worker_name=worker.full_name,
        email=worker.email or "",
        total_contracts=len(periods),
        total_employment_months=chain_status.total_employment_months,
        first_start_date=first_start,
        current_contract=current,
        contracts=periods,
        chain_rule_status=chain_status,
        termination_notice=notice,
        salary_progression=progression,
        compliance_score=score,
        source=resolved.source,
        defects=defects,
    )


class ContractTimelineBuilder:
    def __init__(
        self,
        db: Session,
        *,
        config: ChainRuleConfig | None = None,
        today: date | None = None,
        facts_provider: EmploymentFactsProvider | None = None,
        resolvers: Sequence[TimelineResolver] | None = None,
    ):
        self.db = db
        self.config = config or ChainRuleConfig()
        self.today = today
        if resolvers is None:
            provider = facts_provider or SnapshotFactsProvider(db)
            resolvers = (
                PayrollSnapshotResolver(provider),
                ContractLedgerResolver(db),
                WorkerProfileResolver(),
            )
        self.resolvers = list(resolvers)

    def load_worker(self, worker_id: str) -> WorkerProfile:
        worker = self.db.get(Worker, worker_id)
        if worker is None:
            raise NotFound("worker", worker_id)
        return WorkerProfile.model_validate(worker)

    def resolve(self, worker: WorkerProfile, today: date) -> ResolvedTimeline:
        for resolver in self.resolvers:
            try:
                resolved = resolver.resolve(worker, today=today)
            except SourceUnavailable as exc:
                logger.warning("source_unavailable worker_id=%s source=%s reason=%s", worker.id, exc.source, exc.message)
                continue
            if resolved is not None and resolved.periods:
                return resolved
            logger.debug("source_empty worker_id=%s source=%s", worker.id, resolver.source)
        return ResolvedTimeline(source=None, periods=[])

    def build_timeline(self, worker_id: str) -> EmploymentJourney:
        today = self.today or date.today()
        worker = self.load_worker(worker_id)
        resolved = self.resolve(worker, today)
        journey = enrich_timeline(worker, resolved, config=self.config, today=today)

        for defect in journey.defects:
            logger.warning("integrity_defect worker_id=%s kind=%s records=%s", worker_id, defect.kind, defect.records)
        logger.info(
            "timeline_built worker_id=%s source=%s contracts=%s warning_level=%s score=%s",
            worker_id,
            journey.source,
            journey.total_contracts,
            journey.chain_rule_status.warning_level,
            journey.compliance_score,
        )
        return journey
