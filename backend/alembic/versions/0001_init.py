"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-16 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "workers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("employment_start_date", sa.Date(), nullable=True),
        sa.Column("employment_end_date", sa.Date(), nullable=True),
        sa.Column("hours_per_week", sa.Float(), nullable=True),
        sa.Column("hourly_wage", sa.Float(), nullable=True),
        sa.Column("salary_amount", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "payroll_snapshots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("worker_id", sa.String(length=36), nullable=False),
        sa.Column("external_employee_id", sa.String(), nullable=True),
        sa.Column("payload", sa.JSON(), nullable=True),
        sa.Column("fetched_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_payroll_snapshots_worker_id", "payroll_snapshots", ["worker_id"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("worker_id", sa.String(length=36), nullable=True),
        sa.Column("worker_name", sa.String(), nullable=False),
        sa.Column("employment_kind", sa.String(), nullable=False, server_default="fixedTerm"),
        sa.Column("status", sa.String(), nullable=False, server_default="draft"),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("template_version", sa.String(), nullable=False, server_default="v2.0"),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("last_modified_by", sa.String(), nullable=True),
        sa.Column("last_modified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["worker_id"], ["workers.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("worker_id", "start_date", name="uq_contracts_worker_start"),
    )
    op.create_index("ix_contracts_worker_id", "contracts", ["worker_id"])

    op.create_table(
        "contract_salary_info",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("contract_id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("scale", sa.String(), nullable=True),
        sa.Column("step", sa.String(), nullable=True),
        sa.Column("hourly_wage", sa.Float(), nullable=True),
        sa.Column("monthly_wage", sa.Float(), nullable=True),
        sa.Column("yearly_wage", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "contract_working_hours",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("contract_id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("hours_per_week", sa.Float(), nullable=True),
        sa.Column("days_per_week", sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "contract_workflows",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("contract_id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("current_step", sa.String(), nullable=False, server_default="draft_creation"),
        sa.Column("steps_completed", sa.JSON(), nullable=True),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
    )


def downgrade() -> None:
    op.drop_table("contract_workflows")
    op.drop_table("contract_working_hours")
    op.drop_table("contract_salary_info")
    op.drop_index("ix_contracts_worker_id", table_name="contracts")
    op.drop_table("contracts")
    op.drop_index("ix_payroll_snapshots_worker_id", table_name="payroll_snapshots")
    op.drop_table("payroll_snapshots")
    op.drop_table("workers")
