"""Resolver strategies that turn one source of employment facts into periods.

Resolvers are tried in fidelity order by the timeline builder; each returns
``None`` when its source has nothing usable for the worker and raises
``SourceUnavailable`` when the source itself cannot be read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from contract_engine.core.errors import SourceUnavailable
from contract_engine.core.legal_constants import WEEKS_PER_MONTH
from contract_engine.db.models import Contract, PayrollSnapshot
from contract_engine.schemas.sources import (
    LedgerContractRow,
    PayrollEmployment,
    PayrollHoursRecord,
    PayrollSalaryRecord,
    WorkerProfile,
)
from contract_engine.schemas.timeline import ContractPeriod, IntegrityDefect, SalaryRecord

logger = logging.getLogger(__name__)

REVIEW_KEYWORDS = ("review", "evaluat", "beoordel")


@dataclass
class ResolvedTimeline:
    source: str | None
    periods: list[ContractPeriod]
    salary_records: list[SalaryRecord] | None = None
    defects: list[IntegrityDefect] = field(default_factory=list)


def derive_wages(
    hourly: float | None,
    monthly: float | None,
    yearly: float | None,
    hours_per_week: float | None,
) -> tuple[float, float, float]:
    hourly = float(hourly or 0.0)
    monthly = float(monthly or 0.0)
    if not monthly and hourly and hours_per_week:
        monthly = round(hourly * float(hours_per_week) * WEEKS_PER_MONTH, 2)
    yearly = float(yearly or 0.0)
    if not yearly and monthly:
        yearly = round(monthly * 12, 2)
    return hourly, monthly, yearly


def is_period_active(end_date: date | None, today: date) -> bool:
    return end_date is None or end_date > today


class TimelineResolver(Protocol):
    source: str

    def resolve(self, worker: WorkerProfile, *, today: date) -> ResolvedTimeline | None: ...


# ---------------------------------------------------------------------------
# Source 1: payroll snapshot
# ---------------------------------------------------------------------------
class EmploymentFactsProvider(Protocol):
    def fetch_employments(self, worker_id: str) -> list[dict[str, Any]] | None: ...


class SnapshotFactsProvider:
    """Reads the latest payroll snapshot stored by the ingestion connector."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_employments(self, worker_id: str) -> list[dict[str, Any]] | None:
        try:
            snapshot = self.db.scalar(
                select(PayrollSnapshot)
                .where(PayrollSnapshot.worker_id == worker_id)
                .order_by(PayrollSnapshot.fetched_at.desc())
                .limit(1)
            )
        except SQLAlchemyError as exc:
            raise SourceUnavailable("payroll", str(exc)) from exc
        if snapshot is None:
            return None
        payload = snapshot.payload
        # Raw API envelopes keep the employment list under "data".
        if isinstance(payload, dict):
            payload = payload.get("data") or []
        return list(payload or [])


def _hours_at(hours: list[PayrollHoursRecord], on: date | None) -> PayrollHoursRecord | None:
    if on is not None:
        started = [h for h in hours if h.start_date is not None and h.start_date <= on]
        if started:
            return max(started, key=lambda h: h.start_date)
    return None


def _salary_reason(record: PayrollSalaryRecord) -> str:
    text = (record.wage_reason or "").lower()
    if any(k in text for k in REVIEW_KEYWORDS):
        return "review"
    return "raise"


class PayrollSnapshotResolver:
    source = "payroll"

    def __init__(self, provider: EmploymentFactsProvider):
        self.provider = provider

    def resolve(self, worker: WorkerProfile, *, today: date) -> ResolvedTimeline | None:
        raw_blocks = self.provider.fetch_employments(worker.id)
        if not raw_blocks:
            return None

        defects: list[IntegrityDefect] = []
        blocks: list[PayrollEmployment] = []
        for index, raw in enumerate(raw_blocks):
            try:
                block = PayrollEmployment.model_validate(raw)
            except ValidationError as exc:
                logger.warning("payroll_block_invalid worker_id=%s index=%s errors=%s", worker.id, index, exc.error_count())
                defects.append(
                    IntegrityDefect(kind="malformed_source_record", message=f"Payroll employment #{index} could not be parsed.")
                )
                continue
            if block.start_date is None:
                defects.append(
                    IntegrityDefect(kind="malformed_source_record", message=f"Payroll employment #{index} has no start date.")
                )
                continue
            blocks.append(block)

        if not blocks:
            return None
        blocks.sort(key=lambda b: b.start_date)

        periods = [self._to_period(worker, block, today) for block in blocks]
        return ResolvedTimeline(
            source=self.source,
            periods=periods,
            salary_records=self._salary_history(blocks),
            defects=defects,
        )

    @staticmethod
    def _to_period(worker: WorkerProfile, block: PayrollEmployment, today: date) -> ContractPeriod:
        salary = block.active_salary() or PayrollSalaryRecord()
        hours = block.active_hours() or PayrollHoursRecord()
        hourly, monthly, yearly = derive_wages(salary.hour_wage, salary.month_wage, salary.yearly_wage, hours.hours_per_week)
        kind = block.contract_type or ("fixedTerm" if block.end_date else "permanent")
        period_id = f"payroll-{block.id}" if block.id else f"payroll-{worker.id}-{block.start_date.isoformat()}"
        return ContractPeriod(
            id=period_id,
            worker_id=worker.id,
            worker_name=worker.full_name,
            start_date=block.start_date,
            end_date=block.end_date,
            hours_per_week=float(hours.hours_per_week or 0.0),
            days_per_week=hours.days_per_week,
            employment_kind=kind,
            hourly_wage=hourly,
            monthly_wage=monthly,
            yearly_wage=yearly,
            is_active=is_period_active(block.end_date, today),
            source="payroll",
        )

    @staticmethod
    def _salary_history(blocks: list[PayrollEmployment]) -> list[SalaryRecord] | None:
        records: list[SalaryRecord] = []
        for block in blocks:
            ordered = sorted(block.salary, key=lambda s: s.start_date or block.start_date)
            fallback_hours = block.active_hours()
            for position, salary in enumerate(ordered):
                hours = _hours_at(block.hours, salary.start_date) or fallback_hours
                hourly, monthly, yearly = derive_wages(
                    salary.hour_wage,
                    salary.month_wage,
                    salary.yearly_wage,
                    hours.hours_per_week if hours else None,
                )
                records.append(
                    SalaryRecord(
                        date=salary.start_date or block.start_date,
                        hourly_wage=hourly,
                        monthly_wage=monthly,
                        yearly_wage=yearly,
                        # First record of a block is a renewal; the tracker marks the very first as start.
                        reason=None if position == 0 else _salary_reason(salary),
                    )
                )
        return records or None


# ---------------------------------------------------------------------------
# Source 2: internal contract ledger
# ---------------------------------------------------------------------------
def ledger_row_from_contract(contract: Contract) -> LedgerContractRow:
    salary = contract.salary_info
    hours = contract.working_hours
    return LedgerContractRow(
        id=contract.id,
        worker_id=contract.worker_id or "",
        worker_name=contract.worker_name,
        employment_kind=contract.employment_kind,
        status=contract.status,
        start_date=contract.start_date,
        end_date=contract.end_date,
        created_at=contract.created_at,
        hourly_wage=salary.hourly_wage if salary else None,
        monthly_wage=salary.monthly_wage if salary else None,
        yearly_wage=salary.yearly_wage if salary else None,
        hours_per_week=hours.hours_per_week if hours else None,
        days_per_week=hours.days_per_week if hours else None,
        has_salary_info=salary is not None,
        has_working_hours=hours is not None,
        has_workflow=contract.workflow is not None,
    )


def period_from_ledger_row(row: LedgerContractRow, today: date) -> ContractPeriod:
    hourly, monthly, yearly = derive_wages(row.hourly_wage, row.monthly_wage, row.yearly_wage, row.hours_per_week)
    if row.status in {"draft", "expired", "terminated"}:
        active = False
    else:
        active = is_period_active(row.end_date, today)
    return ContractPeriod(
        id=row.id,
        worker_id=row.worker_id,
        worker_name=row.worker_name,
        start_date=row.start_date,
        end_date=row.end_date,
        hours_per_week=float(row.hours_per_week or 0.0),
        days_per_week=row.days_per_week,
        employment_kind=row.employment_kind,
        hourly_wage=hourly,
        monthly_wage=monthly,
        yearly_wage=yearly,
        is_active=active,
        source="ledger",
        status=row.status,
        created_at=row.created_at,
    )


def missing_dependents(row: LedgerContractRow) -> list[str]:
    missing = []
    if not row.has_salary_info:
        missing.append("salary_info")
    if not row.has_working_hours:
        missing.append("working_hours")
    if not row.has_workflow:
        missing.append("workflow")
    return missing


class ContractLedgerResolver:
    source = "ledger"

    def __init__(self, db: Session):
        self.db = db

    def resolve(self, worker: WorkerProfile, *, today: date) -> ResolvedTimeline | None:
        try:
            contracts = self.db.scalars(
                select(Contract)
                .where(Contract.worker_id == worker.id)
                .options(
                    selectinload(Contract.salary_info),
                    selectinload(Contract.working_hours),
                    selectinload(Contract.workflow),
                )
            ).all()
        except SQLAlchemyError as exc:
            raise SourceUnavailable("ledger", str(exc)) from exc
        if not contracts:
            return None

        defects: list[IntegrityDefect] = []
        periods: list[ContractPeriod] = []
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
        return ResolvedTimeline(source=self.source, periods=periods, defects=defects)


# ---------------------------------------------------------------------------
# Source 3: worker profile fallback
# ---------------------------------------------------------------------------
PROFILE_PERIOD_PREFIX = "profile-"


class WorkerProfileResolver:
    """Synthesizes a single low-confidence period from the worker profile."""

    source = "profile"

    def resolve(self, worker: WorkerProfile, *, today: date) -> ResolvedTimeline | None:
        if worker.employment_start_date is None:
            return None
        end = worker.employment_end_date
        hourly, monthly, yearly = derive_wages(worker.hourly_wage, worker.salary_amount, None, worker.hours_per_week)
        period = ContractPeriod(
            id=f"{PROFILE_PERIOD_PREFIX}{worker.id}",
            worker_id=worker.id,
            worker_name=worker.full_name,
            start_date=worker.employment_start_date,
            end_date=end,
            hours_per_week=float(worker.hours_per_week or 0.0),
            employment_kind="fixedTerm" if end else "permanent",
            hourly_wage=hourly,
            monthly_wage=monthly,
            yearly_wage=yearly,
            is_active=is_period_active(end, today),
            source="profile",
        )
        return ResolvedTimeline(source=self.source, periods=[period])
