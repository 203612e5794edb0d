"""SQLAlchemy models for workers, payroll snapshots and the contract ledger."""

from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import JSON, Date, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for declarative SQLAlchemy models."""


class Worker(Base):
    """Worker profile; also the last-resort source of contract facts."""

    __tablename__ = "workers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    employment_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    employment_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    hours_per_week: Mapped[float | None] = mapped_column(Float, nullable=True)
    hourly_wage: Mapped[float | None] = mapped_column(Float, nullable=True)
    salary_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    contracts: Mapped[list["Contract"]] = relationship(back_populates="worker")
    payroll_snapshots: Mapped[list["PayrollSnapshot"]] = relationship(
        back_populates="worker",
        cascade="all, delete-orphan",
    )


class PayrollSnapshot(Base):
    """Raw employment payload fetched from the external payroll provider."""

    __tablename__ = "payroll_snapshots"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    worker_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("workers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    external_employee_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # List of employment blocks as returned by the provider.
    payload: Mapped[list | None] = mapped_column(JSON, nullable=True)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    worker: Mapped[Worker] = relationship(back_populates="payroll_snapshots")


class Contract(Base):
    """Internal contract ledger row. ``worker_id`` is null for orphaned contracts."""

    __tablename__ = "contracts"
    __table_args__ = (UniqueConstraint("worker_id", "start_date", name="uq_contracts_worker_start"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    worker_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("workers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    worker_name: Mapped[str] = mapped_column(String, nullable=False)
    employment_kind: Mapped[str] = mapped_column(String, nullable=False, default="fixedTerm")
    status: Mapped[str] = mapped_column(String, nullable=False, default="draft")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    template_version: Mapped[str] = mapped_column(String, nullable=False, default="v2.0")
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
    last_modified_by: Mapped[str | None] = mapped_column(String, nullable=True)
    last_modified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    worker: Mapped["Worker | None"] = relationship(back_populates="contracts")
    salary_info: Mapped["ContractSalaryInfo | None"] = relationship(
        back_populates="contract",
        cascade="all, delete-orphan",
        uselist=False,
    )
    working_hours: Mapped["ContractWorkingHours | None"] = relationship(
        back_populates="contract",
        cascade="all, delete-orphan",
        uselist=False,
    )
    workflow: Mapped["ContractWorkflow | None"] = relationship(
        back_populates="contract",
        cascade="all, delete-orphan",
        uselist=False,
    )


class ContractSalaryInfo(Base):
    __tablename__ = "contract_salary_info"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contract_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contracts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    scale: Mapped[str | None] = mapped_column(String, nullable=True)
    step: Mapped[str | None] = mapped_column(String, nullable=True)
    hourly_wage: Mapped[float | None] = mapped_column(Float, nullable=True)
    monthly_wage: Mapped[float | None] = mapped_column(Float, nullable=True)
    yearly_wage: Mapped[float | None] = mapped_column(Float, nullable=True)

    contract: Mapped[Contract] = relationship(back_populates="salary_info")


class ContractWorkingHours(Base):
    __tablename__ = "contract_working_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contract_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contracts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    hours_per_week: Mapped[float | None] = mapped_column(Float, nullable=True)
    days_per_week: Mapped[float | None] = mapped_column(Float, nullable=True)

    contract: Mapped[Contract] = relationship(back_populates="working_hours")


class ContractWorkflow(Base):
    """Workflow bookkeeping for a contract (current step and completed steps)."""

    __tablename__ = "contract_workflows"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    contract_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("contracts.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    current_step: Mapped[str] = mapped_column(String, nullable=False, default="draft_creation")
    steps_completed: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    revision: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    contract: Mapped[Contract] = relationship(back_populates="workflow")
