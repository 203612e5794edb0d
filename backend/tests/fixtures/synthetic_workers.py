from __future__ import annotations

from datetime import date, datetime, timedelta

from contract_engine.db.models import (
    Contract,
    ContractSalaryInfo,
    ContractWorkflow,
    ContractWorkingHours,
    PayrollSnapshot,
    Worker,
)
from contract_engine.schemas.sources import WorkerProfile
from contract_engine.schemas.timeline import ChainRuleStatus, ContractPeriod


TODAY = date(2026, 10, 16)


def days_ago(days: int) -> date:
    return TODAY - timedelta(days=days)


def days_ahead(days: int) -> date:
    return TODAY + timedelta(days=days)


def make_period(
    period_id: str,
    start: date | None,
    end: date | None = None,
    *,
    kind: str = "fixedTerm",
    monthly: float = 3000.0,
    hourly: float = 0.0,
    hours: float = 0.0,
    status: str | None = None,
    created_at: datetime | None = None,
    worker_id: str = "w-anna",
    is_active: bool | None = None,
) -> ContractPeriod:
    if is_active is None:
        is_active = end is None or end > TODAY
    return ContractPeriod(
        id=period_id,
        worker_id=worker_id,
        worker_name="Anna de Vries",
        start_date=start,
        end_date=end,
        employment_kind=kind,
        monthly_wage=monthly,
        hourly_wage=hourly,
        hours_per_week=hours,
        status=status,
        created_at=created_at,
        is_active=is_active,
    )


def make_profile(worker_id: str = "w-anna", **kwargs) -> WorkerProfile:
    return WorkerProfile(id=worker_id, full_name=kwargs.pop("full_name", "Anna de Vries"), **kwargs)


def chain_status(level: str = "safe", *, fixed: int = 1, months: int = 6) -> ChainRuleStatus:
    return ChainRuleStatus(
        total_fixed_term_contracts=fixed,
        total_employment_months=months,
        requires_permanent_next=level == "permanentRequired",
        warning_level=level,
        recommendation="",
        max_allowed_contracts=3,
        max_allowed_months=36,
    )


# Three consecutive fixed-term contracts, the first one started 40 months ago.
THREE_FIXED_TERM_40_MONTHS = [
    make_period("c-1", days_ago(1205), days_ago(840)),
    make_period("c-2", days_ago(839), days_ago(475)),
    make_period("c-3", days_ago(474), days_ahead(10)),
]

SALARY_SERIES_MONTHLY = [2539.0, 2709.0, 2777.0, 2846.0]

# Payroll provider payload: two employments, four wage records.
PAYROLL_TWO_EMPLOYMENTS = [
    {
        "id": 9001,
        "start_date": "2023-01-01",
        "end_date": "2023-12-31",
        "contract_type": "tijdelijk",
        "salary": [
            {"start_date": "2023-01-01", "month_wage": 2539.0, "hour_wage": 16.29},
            {"start_date": "2023-07-01", "month_wage": 2709.0, "hour_wage": 17.38, "wage_reason": "Annual review"},
        ],
        "hours": [{"start_date": "2023-01-01", "hours_per_week": 36, "days_per_week": 4.5}],
    },
    {
        "id": 9002,
        "start_date": "2024-01-01T00:00:00",
        "end_date": "9999-12-31T00:00:00",
        "salary": [
            {"start_date": "2024-01-01", "month_wage": 2777.0, "hour_wage": 17.82},
            {"start_date": "2025-01-01", "month_wage": 2846.0, "hour_wage": 18.26, "wage_reason": "CAO increase", "is_active": True},
        ],
        "hours": {"start_date": "2024-01-01", "hours_per_week": 36, "days_per_week": 4.5, "is_active": True},
    },
]

# Hourly-only payroll block; monthly and yearly wages must be derived.
PAYROLL_HOURLY_ONLY = [
    {
        "id": "emp-77",
        "start_date": "2026-03-01",
        "end_date": "0001-01-01T00:00:00",
        "salary": [{"start_date": "2026-03-01", "hour_wage": 20.0, "is_active": True}],
        "hours": [{"start_date": "2026-03-01", "hours_per_week": 36, "is_active": True}],
    },
]


# ---------------------------------------------------------------------------
# Database seeding helpers
# ---------------------------------------------------------------------------
def add_worker(db, full_name: str = "Anna de Vries", **kwargs) -> Worker:
    worker = Worker(full_name=full_name, **kwargs)
    db.add(worker)
    db.commit()
    db.refresh(worker)
    return worker


def add_contract(
    db,
    worker: Worker | None,
    start: date,
    end: date | None = None,
    *,
    status: str = "active",
    kind: str = "fixedTerm",
    monthly: float | None = 3000.0,
    hourly: float | None = 19.0,
    hours: float | None = 36.0,
    worker_name: str | None = None,
    with_dependents: bool = True,
    created_at: datetime | None = None,
) -> Contract:
    contract = Contract(
        worker_id=worker.id if worker else None,
        worker_name=worker_name or (worker.full_name if worker else "Unknown"),
        employment_kind=kind,
        status=status,
        start_date=start,
        end_date=end,
    )
    if created_at is not None:
        contract.created_at = created_at
    if with_dependents:
        contract.salary_info = ContractSalaryInfo(hourly_wage=hourly, monthly_wage=monthly)
        contract.working_hours = ContractWorkingHours(hours_per_week=hours, days_per_week=5)
        contract.workflow = ContractWorkflow(current_step="contract_activation", steps_completed=["draft_creation"])
    db.add(contract)
    db.commit()
    db.refresh(contract)
    return contract


def add_payroll_snapshot(db, worker: Worker, payload) -> PayrollSnapshot:
    snapshot = PayrollSnapshot(worker_id=worker.id, external_employee_id="ext-1", payload=payload)
    db.add(snapshot)
    db.commit()
    return snapshot
