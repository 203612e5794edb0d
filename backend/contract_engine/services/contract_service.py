from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Iterator

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from contract_engine.core.config import EngineSettings
from contract_engine.core.errors import DataIntegrityDefect, NotFound
from contract_engine.db.models import (
    Contract,
    ContractSalaryInfo,
    ContractWorkflow,
    ContractWorkingHours,
    Worker,
)
from contract_engine.db.session import SessionLocal
from contract_engine.schemas.contracts import (
    ContractCreate,
    ContractSummary,
    IntegrityReport,
    LinkResult,
    StatusChangeResult,
    UpcomingDeadline,
    WorkerContractsResponse,
)
from contract_engine.schemas.timeline import ComplianceAlert, ContractPeriod, EmploymentJourney, IntegrityDefect
from contract_engine.services.alert_generator import ComplianceAlertGenerator
from contract_engine.services.contract_lifecycle import WORKFLOW_STEP_FOR_STATUS, ContractLifecycle
from contract_engine.services.locks import worker_write_lock
from contract_engine.services.salary_progression import SalaryProgressionTracker
from contract_engine.services.scoring_engine import ComplianceScorer
from contract_engine.services.timeline_builder import (
    ContractTimelineBuilder,
    find_overlaps,
    order_periods,
    periods_overlap,
)
from contract_engine.services.timeline_sources import (
    EmploymentFactsProvider,
    ledger_row_from_contract,
    missing_dependents,
    period_from_ledger_row,
)

logger = logging.getLogger(__name__)


def termination_end_date(start: date | None, end: date | None, today: date) -> date | None:
    """Early termination moves the end date back to today, never before the start."""
    if end is not None and end <= today:
        return end
    if start is not None and start > today:
        return start
    return today


def upcoming_deadlines(journey: EmploymentJourney, *, settings: EngineSettings, today: date) -> list[UpcomingDeadline]:
    notice_days = settings.chain_rule.notice_window_days
    deadlines: list[UpcomingDeadline] = []
    for period in journey.contracts:
        if not period.is_active or period.end_date is None:
            continue
        days_to_end = (period.end_date - today).days
        if 0 <= days_to_end <= settings.upcoming_contract_end_days:
            deadlines.append(
                UpcomingDeadline(
                    type="contractEnd",
                    contract_id=period.id,
                    date=period.end_date,
                    days_remaining=days_to_end,
                    severity="critical" if days_to_end <= settings.chain_rule.notice_urgent_days else "warning",
                    action_required="Decide on contract renewal",
                )
            )
        notice_deadline = period.end_date - timedelta(days=notice_days)
        days_to_notice = (notice_deadline - today).days
        if days_to_notice <= settings.expiring_soon_days:
            deadlines.append(
                UpcomingDeadline(
                    type="terminationDeadline",
                    contract_id=period.id,
                    date=notice_deadline,
                    days_remaining=days_to_notice,
                    severity="critical" if days_to_notice <= 0 else "warning",
                    action_required="Send termination or renewal notice",
                )
            )
    return sorted(deadlines, key=lambda d: d.days_remaining)


def next_recommended_action(journey: EmploymentJourney, *, settings: EngineSettings, today: date) -> str:
    if journey.chain_rule_status.requires_permanent_next:
        return "Create permanent contract (required by the chain rule)"
    for period in journey.contracts:
        if period.is_active and period.end_date is not None:
            if (period.end_date - today).days <= settings.upcoming_contract_end_days:
                return "Plan contract renewal or termination"
    if any(p.status == "draft" for p in journey.contracts):
        return "Finalize pending draft contract"
    return "No immediate action required"


def summarize(journey: EmploymentJourney, *, settings: EngineSettings, today: date) -> ContractSummary:
    periods = journey.contracts
    active = [p for p in periods if p.is_active]
    expiring = [
        p for p in active
        if p.end_date is not None and 0 <= (p.end_date - today).days <= settings.expiring_soon_days
    ]
    finished = [
        p for p in periods
        if p.start_date and p.end_date and (p.status == "expired" or (p.status is None and not p.is_active))
    ]
    average_days = 0
    if finished:
        average_days = round(sum((p.end_date - p.start_date).days for p in finished) / len(finished))

    return ContractSummary(
        total=len(periods),
        active=len(active),
        draft=sum(1 for p in periods if p.status == "draft"),
        expiring_soon=len(expiring),
        current_monthly_cost=round(sum(p.monthly_wage for p in active), 2),
        salary_growth_rate=SalaryProgressionTracker.growth_rate(journey.salary_progression),
        average_contract_duration_days=average_days,
        compliance_score=journey.compliance_score,
        risk_level=ComplianceScorer.risk_level(journey.compliance_score),
        next_recommended_action=next_recommended_action(journey, settings=settings, today=today),
        upcoming_deadlines=upcoming_deadlines(journey, settings=settings, today=today),
    )


class UnifiedContractService:
    """Facade over timeline reconstruction, compliance evaluation and contract writes.

    Reads are recomputed on every call. Writes for one worker are serialized
    and commit as one unit: a failure anywhere rolls back the contract and
    all of its dependent records.
    """

    def __init__(
        self,
        db: Session,
        *,
        settings: EngineSettings | None = None,
        today: date | None = None,
        facts_provider: EmploymentFactsProvider | None = None,
        session_factory: Callable[[], Session] | None = None,
    ):
        self.db = db
        self.settings = settings or EngineSettings()
        self.today = today
        self.facts_provider = facts_provider
        self.session_factory = session_factory or SessionLocal

    def _today(self) -> date:
        return self.today or date.today()

    def _builder(self, db: Session | None = None) -> ContractTimelineBuilder:
        return ContractTimelineBuilder(
            db if db is not None else self.db,
            config=self.settings.chain_rule,
            today=self._today(),
            facts_provider=self.facts_provider,
        )

    @contextmanager
    def _write_unit(self, lock_key: str, operation: str) -> Iterator[None]:
        with worker_write_lock(self.db, lock_key):
            try:
                yield
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                logger.warning("write_rolled_back operation=%s worker_id=%s reason=constraint", operation, lock_key)
                raise DataIntegrityDefect(
                    "write_conflict",
                    f"{operation} conflicts with existing data: {exc.orig}",
                ) from exc
            except Exception:
                self.db.rollback()
                logger.warning("write_rolled_back operation=%s worker_id=%s", operation, lock_key)
                raise

    def _get_worker(self, worker_id: str) -> Worker:
        worker = self.db.get(Worker, worker_id)
        if worker is None:
            raise NotFound("worker", worker_id)
        return worker

    def _get_contract(self, contract_id: str) -> Contract:
        contract = self.db.get(Contract, contract_id)
        if contract is None:
            raise NotFound("contract", contract_id)
        return contract

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def build_employment_journey(self, worker_id: str) -> EmploymentJourney:
        return self._builder().build_timeline(worker_id)

    def get_worker_contracts(self, worker_id: str) -> WorkerContractsResponse:
        journey = self.build_employment_journey(worker_id)
        return WorkerContractsResponse(
            contracts=journey.contracts,
            timeline=journey,
            summary=summarize(journey, settings=self.settings, today=self._today()),
        )

    def _journey_in_own_session(self, worker_id: str) -> EmploymentJourney:
        with self.session_factory() as db:
            return self._builder(db).build_timeline(worker_id)

    def generate_compliance_alerts(
        self,
        worker_ids: Iterable[str] | None = None,
        *,
        timeout: float | None = None,
    ) -> list[ComplianceAlert]:
        if worker_ids is None:
            worker_ids = self.db.scalars(select(Worker.id).where(Worker.status == "active").order_by(Worker.id)).all()
        generator = ComplianceAlertGenerator(self._journey_in_own_session, self.settings, today=self._today())
        return generator.generate_all(worker_ids, timeout=timeout)

    def check_worker_integrity(self, worker_id: str) -> IntegrityReport:
        worker = self._get_worker(worker_id)
        contracts = self.db.scalars(
            select(Contract)
            .where(Contract.worker_id == worker.id)
            .options(
                selectinload(Contract.salary_info),
                selectinload(Contract.working_hours),
                selectinload(Contract.workflow),
            )
        ).all()
        defects: list[IntegrityDefect] = []

        orphans = self.db.scalars(
            select(Contract.id).where(
                Contract.worker_id.is_(None),
                func.lower(Contract.worker_name) == worker.full_name.lower(),
            )
        ).all()
        if orphans:
            defects.append(
                IntegrityDefect(
                    kind="orphaned_contract",
                    message=f"{len(orphans)} unlinked contract(s) carry the name {worker.full_name}.",
                    records=list(orphans),
                )
            )

        active_ids = [c.id for c in contracts if c.status == "active"]
        if len(active_ids) > 1:
            defects.append(
                IntegrityDefect(
                    kind="multiple_active_contracts",
                    message=f"Worker has {len(active_ids)} active contracts.",
                    records=active_ids,
                )
            )

        mismatched = [c.id for c in contracts if c.worker_name != worker.full_name]
        if mismatched:
            defects.append(
                IntegrityDefect(
                    kind="name_mismatch",
                    message=f"{len(mismatched)} contract(s) do not carry the worker name {worker.full_name}.",
                    records=mismatched,
                )
            )

        today = self._today()
        periods = []
        for contract in contracts:
            row = ledger_row_from_contract(contract)
            missing = missing_dependents(row)
            if missing:
                defects.append(
                    IntegrityDefect(
                        kind="missing_dependent",
                        message=f"Contract {row.id} has no {', '.join(missing)} record.",
                        records=[row.id],
                    )
                )
            periods.append(period_from_ledger_row(row, today))
        defects.extend(find_overlaps(order_periods(periods)))

        for defect in defects:
            logger.warning("integrity_defect worker_id=%s kind=%s records=%s", worker_id, defect.kind, defect.records)
        return IntegrityReport(worker_id=worker_id, is_clean=not defects, defects=defects)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def _assert_no_overlap(self, worker_id: str, start: date, end: date | None) -> None:
        existing = self.db.scalars(
            select(Contract).where(
                Contract.worker_id == worker_id,
                Contract.start_date.is_not(None),
            )
        ).all()
        # Terminated contracts end on their termination date, so they only block what they still cover.
        clashes = [c.id for c in existing if periods_overlap(c.start_date, c.end_date, start, end)]
        if clashes:
            raise DataIntegrityDefect(
                "overlapping_periods",
                f"New contract starting {start.isoformat()} overlaps existing contract(s).",
                records=clashes,
            )

    def create_contract(self, payload: ContractCreate) -> ContractPeriod:
        worker = self._get_worker(payload.worker_id)
        ContractLifecycle.assert_initial(payload.status)
        step = WORKFLOW_STEP_FOR_STATUS[payload.status]
        now = datetime.now(timezone.utc)

        with self._write_unit(worker.id, "create_contract"):
            self._assert_no_overlap(worker.id, payload.start_date, payload.end_date)
            contract = Contract(
                worker_id=worker.id,
                worker_name=worker.full_name,
                employment_kind=payload.employment_kind,
                status=payload.status,
                start_date=payload.start_date,
                end_date=payload.end_date,
                template_version=payload.template_version,
                created_by=payload.created_by,
                last_modified_by=payload.created_by,
                last_modified_at=now,
            )
            contract.salary_info = ContractSalaryInfo(
                scale=payload.scale,
                step=payload.step,
                hourly_wage=payload.hourly_wage,
                monthly_wage=payload.monthly_wage,
                yearly_wage=payload.yearly_wage,
            )
            contract.working_hours = ContractWorkingHours(
                hours_per_week=payload.hours_per_week,
                days_per_week=payload.days_per_week,
            )
            contract.workflow = ContractWorkflow(
                current_step=step,
                steps_completed=[] if step == "draft_creation" else ["draft_creation"],
                revision=0,
            )
            self.db.add(contract)
            self.db.flush()

        self.db.refresh(contract)
        logger.info(
            "contract_created contract_id=%s worker_id=%s status=%s start=%s",
            contract.id,
            worker.id,
            contract.status,
            contract.start_date,
        )
        return period_from_ledger_row(ledger_row_from_contract(contract), self._today())

    def update_contract_status(self, contract_id: str, new_status: str, actor_id: str) -> StatusChangeResult:
        contract = self._get_contract(contract_id)
        lock_key = contract.worker_id or f"contract:{contract.id}"

        with self._write_unit(lock_key, "update_contract_status"):
            # Re-read under the lock so the transition is checked against committed state.
            self.db.refresh(contract)
            previous = contract.status
            ContractLifecycle.assert_transition(previous, new_status)

            contract.status = new_status
            if new_status == "terminated":
                contract.end_date = termination_end_date(contract.start_date, contract.end_date, self._today())
            contract.last_modified_by = actor_id
            contract.last_modified_at = datetime.now(timezone.utc)

            workflow = contract.workflow
            if workflow is None:
                workflow = ContractWorkflow(current_step=WORKFLOW_STEP_FOR_STATUS[previous], steps_completed=[])
                contract.workflow = workflow
            completed = list(workflow.steps_completed or [])
            if workflow.current_step not in completed:
                completed.append(workflow.current_step)
            workflow.steps_completed = completed
            workflow.current_step = WORKFLOW_STEP_FOR_STATUS[new_status]
            workflow.revision = (workflow.revision or 0) + 1

        self.db.refresh(contract)
        logger.info(
            "contract_status_changed contract_id=%s from=%s to=%s actor=%s",
            contract.id,
            previous,
            new_status,
            actor_id,
        )
        compliance = self.build_employment_journey(contract.worker_id) if contract.worker_id else None
        return StatusChangeResult(
            contract=period_from_ledger_row(ledger_row_from_contract(contract), self._today()),
            previous_status=previous,
            compliance=compliance,
        )

    def _ensure_dependents(self, contract_id: str) -> list[str]:
        created = []
        checks = (
            ("salary_info", ContractSalaryInfo),
            ("working_hours", ContractWorkingHours),
            ("workflow", ContractWorkflow),
        )
        for name, model in checks:
            exists = self.db.scalar(select(model.id).where(model.contract_id == contract_id))
            if exists is None:
                self.db.add(model(contract_id=contract_id))
                created.append(name)
        self.db.flush()
        return created

    def link_orphan_contract(self, contract_id: str, worker_id: str) -> LinkResult:
        worker = self._get_worker(worker_id)
        self._get_contract(contract_id)

        with self._write_unit(worker.id, "link_orphan_contract"):
            result = self.db.execute(
                update(Contract)
                .where(Contract.id == contract_id, Contract.worker_id.is_(None))
                .values(
                    worker_id=worker.id,
                    worker_name=worker.full_name,
                    last_modified_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                owner = self.db.scalar(select(Contract.worker_id).where(Contract.id == contract_id))
                if owner != worker.id:
                    raise DataIntegrityDefect(
                        "contract_owned_by_other_worker",
                        f"Contract {contract_id} is already linked to another worker.",
                        records=[contract_id],
                    )
                logger.info("contract_link_noop contract_id=%s worker_id=%s", contract_id, worker.id)
                created = None
            else:
                created = self._ensure_dependents(contract_id)

        self.db.expire_all()
        if created is None:
            return LinkResult(contract_id=contract_id, worker_id=worker.id, linked=False)
        logger.info(
            "contract_linked contract_id=%s worker_id=%s created_dependents=%s",
            contract_id,
            worker.id,
            created,
        )
        return LinkResult(contract_id=contract_id, worker_id=worker.id, linked=True, created_dependents=created)
