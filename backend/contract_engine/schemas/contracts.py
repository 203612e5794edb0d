"""Pydantic schemas for contract writes and the worker contracts view."""

from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from contract_engine.schemas.sources import ContractStatus, EmploymentKind
from contract_engine.schemas.timeline import ContractPeriod, EmploymentJourney, IntegrityDefect, ReadModel


class ApiRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContractCreate(ApiRequest):
    worker_id: str
    employment_kind: EmploymentKind = "fixedTerm"
    status: ContractStatus = "draft"
    start_date: date
    end_date: date | None = None
    hourly_wage: float | None = Field(default=None, ge=0)
    monthly_wage: float | None = Field(default=None, ge=0)
    yearly_wage: float | None = Field(default=None, ge=0)
    scale: str | None = None
    step: str | None = None
    hours_per_week: float | None = Field(default=None, ge=0)
    days_per_week: float | None = Field(default=None, gt=0, le=7)
    template_version: str = "v2.0"
    created_by: str | None = None

    @model_validator(mode="after")
    def end_after_start(self) -> "ContractCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class StatusUpdate(ApiRequest):
    new_status: ContractStatus
    actor_id: str


class LinkRequest(ApiRequest):
    worker_id: str


class UpcomingDeadline(ReadModel):
    type: Literal["contractEnd", "terminationDeadline"]
    contract_id: str
    date: dt.date
    days_remaining: int
    severity: Literal["warning", "critical"]
    action_required: str


class ContractSummary(ReadModel):
    total: int
    active: int
    draft: int
    expiring_soon: int
    current_monthly_cost: float
    salary_growth_rate: float = 0.0
    average_contract_duration_days: int = 0
    compliance_score: int = 100
    risk_level: str = "LOW"
    next_recommended_action: str = ""
    upcoming_deadlines: list[UpcomingDeadline] = Field(default_factory=list)


class WorkerContractsResponse(ReadModel):
    contracts: list[ContractPeriod]
    timeline: EmploymentJourney
    summary: ContractSummary


class StatusChangeResult(ReadModel):
    contract: ContractPeriod
    previous_status: ContractStatus
    compliance: EmploymentJourney | None = None


class LinkResult(ReadModel):
    contract_id: str
    worker_id: str
    linked: bool
    created_dependents: list[str] = Field(default_factory=list)


class IntegrityReport(ReadModel):
    worker_id: str
    is_clean: bool = True
    defects: list[IntegrityDefect] = Field(default_factory=list)
