"""Read models consumed by presentation and reporting collaborators.

Field names serialize as camelCase and the enumerations below are part of the
public contract; changing either requires a version bump of the API.
"""

from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from contract_engine.schemas.sources import ContractStatus, EmploymentKind

WarningLevel = Literal["safe", "warning", "critical", "permanentRequired"]
NotificationStatus = Literal["early", "ideal", "urgent", "critical", "overdue"]
SalaryChangeReason = Literal["contractStart", "contractRenewal", "raise", "review"]
AlertType = Literal["chainRule", "terminationNotice", "permanentRequired", "renewalDecision"]
AlertSeverity = Literal["info", "warning", "critical"]
PeriodSource = Literal["payroll", "ledger", "profile"]


class ReadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ContractPeriod(ReadModel):
    id: str
    worker_id: str
    worker_name: str
    sequence_number: int = 0
    start_date: date | None = None
    end_date: date | None = None
    hours_per_week: float = 0.0
    days_per_week: float | None = None
    employment_kind: EmploymentKind = "fixedTerm"
    hourly_wage: float = 0.0
    monthly_wage: float = 0.0
    yearly_wage: float = 0.0
    is_active: bool = False
    source: PeriodSource = "ledger"
    status: ContractStatus | None = None
    created_at: datetime | None = None


class SalaryRecord(BaseModel):
    """Input row for the salary progression tracker."""

    model_config = ConfigDict(frozen=True)

    date: dt.date | None
    hourly_wage: float = 0.0
    monthly_wage: float = 0.0
    yearly_wage: float = 0.0
    reason: SalaryChangeReason | None = None


class SalaryChange(ReadModel):
    date: dt.date | None
    hourly_wage: float
    monthly_wage: float
    yearly_wage: float
    increase_percent: float
    reason: SalaryChangeReason


class ChainRuleStatus(ReadModel):
    total_fixed_term_contracts: int
    total_employment_months: int
    requires_permanent_next: bool
    warning_level: WarningLevel
    recommendation: str
    max_allowed_contracts: int
    max_allowed_months: int


class TerminationNotice(ReadModel):
    deadline_date: date
    days_until_deadline: int
    notification_status: NotificationStatus
    should_notify: bool
    penalty_days: int
    penalty_amount: float


class IntegrityDefect(ReadModel):
    kind: str
    message: str
    records: list[str] = Field(default_factory=list)


class EmploymentJourney(ReadModel):
    worker_id: str
    worker_name: str
    email: str = ""
    total_contracts: int
    total_employment_months: int
    first_start_date: date | None = None
    current_contract: ContractPeriod | None = None
    contracts: list[ContractPeriod] = Field(default_factory=list)
    chain_rule_status: ChainRuleStatus
    termination_notice: TerminationNotice | None = None
    salary_progression: list[SalaryChange] = Field(default_factory=list)
    compliance_score: int = 100
    source: PeriodSource | None = None
    defects: list[IntegrityDefect] = Field(default_factory=list)


class ComplianceAlert(ReadModel):
    id: str
    worker_id: str
    worker_name: str
    type: AlertType
    severity: AlertSeverity
    message: str
    action_required: str
    deadline: date | None = None
    days_remaining: int | None = None
    contract_end_date: date | None = None
