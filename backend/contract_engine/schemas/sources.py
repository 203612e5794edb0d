"""Explicit schemas for the three sources of employment facts.

Each source is validated once, here, so that the timeline builder never has to
ask whether a field exists. Missing financial fields become ``None`` and are
turned into zeros by the normalization step.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract_engine.core.legal_constants import NEVER_ENDED_SENTINELS

EmploymentKind = Literal["fixedTerm", "permanent"]
ContractStatus = Literal["draft", "active", "expired", "terminated"]


def parse_source_date(value: Any) -> date | None:
    """Parse provider dates (``YYYY-MM-DD`` or ISO datetimes); sentinels become ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        if value.year in (1, 9999):
            return None
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.startswith(NEVER_ENDED_SENTINELS):
        return None
    return date.fromisoformat(text[:10])


def parse_employment_kind(value: Any) -> EmploymentKind | None:
    if value is None:
        return None
    text = str(value).strip().lower().replace("_", "").replace("-", "").replace(" ", "")
    if text in {"permanent", "indefinite", "vast", "onbepaaldetijd"}:
        return "permanent"
    if text in {"fixed", "fixedterm", "temporary", "bepaaldetijd", "tijdelijk"}:
        return "fixedTerm"
    return None


# ---------------------------------------------------------------------------
# Source 1: payroll provider snapshot
# ---------------------------------------------------------------------------
class PayrollSalaryRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start_date: date | None = None
    hour_wage: float | None = None
    month_wage: float | None = None
    yearly_wage: float | None = None
    wage_reason: str | None = None
    is_active: bool = False

    normalize_dates = field_validator("start_date", mode="before")(parse_source_date)


class PayrollHoursRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    start_date: date | None = None
    hours_per_week: float | None = None
    days_per_week: float | None = None
    is_active: bool = False

    normalize_dates = field_validator("start_date", mode="before")(parse_source_date)


class PayrollEmployment(BaseModel):
    """One employment block of the payroll provider."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    contract_type: EmploymentKind | None = None
    is_active: bool | None = None
    salary: list[PayrollSalaryRecord] = Field(default_factory=list)
    hours: list[PayrollHoursRecord] = Field(default_factory=list)

    normalize_dates = field_validator("start_date", "end_date", mode="before")(parse_source_date)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, v: Any) -> str | None:
        return str(v) if v is not None else None

    @field_validator("contract_type", mode="before")
    @classmethod
    def normalize_contract_type(cls, v: Any) -> EmploymentKind | None:
        return parse_employment_kind(v)

    @field_validator("salary", "hours", mode="before")
    @classmethod
    def list_or_empty(cls, v: Any) -> list:
        if v is None:
            return []
        if isinstance(v, dict):
            return [v]
        return v

    def active_salary(self) -> PayrollSalaryRecord | None:
        return _pick_active(self.salary)

    def active_hours(self) -> PayrollHoursRecord | None:
        return _pick_active(self.hours)


def _pick_active(records: list[Any]) -> Any | None:
    """Active sub-record, else the most recent one by start date."""
    if not records:
        return None
    active = [r for r in records if r.is_active]
    pool = active or records
    return max(pool, key=lambda r: r.start_date or date.min)


# ---------------------------------------------------------------------------
# Source 2: internal contract ledger
# ---------------------------------------------------------------------------
class LedgerContractRow(BaseModel):
    """A contract ledger row flattened with its salary and hours sub-records."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    worker_id: str
    worker_name: str
    employment_kind: EmploymentKind = "fixedTerm"
    status: ContractStatus = "draft"
    start_date: date | None = None
    end_date: date | None = None
    created_at: datetime | None = None
    hourly_wage: float | None = None
    monthly_wage: float | None = None
    yearly_wage: float | None = None
    hours_per_week: float | None = None
    days_per_week: float | None = None
    has_salary_info: bool = True
    has_working_hours: bool = True
    has_workflow: bool = True


# ---------------------------------------------------------------------------
# Source 3: worker profile fallback
# ---------------------------------------------------------------------------
class WorkerProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str | None = None
    status: str = "active"
    employment_start_date: date | None = None
    employment_end_date: date | None = None
    hours_per_week: float | None = None
    hourly_wage: float | None = None
    salary_amount: float | None = None
