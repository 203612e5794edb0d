from __future__ import annotations

from datetime import date, datetime

import pytest

from contract_engine.schemas.sources import parse_employment_kind, parse_source_date
from contract_engine.services.timeline_sources import (
    PayrollSnapshotResolver,
    WorkerProfileResolver,
    derive_wages,
)
from tests.fixtures.synthetic_workers import (
    PAYROLL_HOURLY_ONLY,
    PAYROLL_TWO_EMPLOYMENTS,
    TODAY,
    make_profile,
)


class StaticFacts:
    def __init__(self, employments):
        self.employments = employments

    def fetch_employments(self, worker_id):
        return self.employments


@pytest.mark.parametrize(
    "raw",
    ["0001-01-01T00:00:00", "9999-12-31T00:00:00", "9999-12-31", "", None, datetime(9999, 12, 31)],
)
def test_never_ended_sentinels_become_none(raw):
    assert parse_source_date(raw) is None


def test_source_dates_accept_dates_and_iso_datetimes():
    assert parse_source_date("2024-01-01T00:00:00+01:00") == date(2024, 1, 1)
    assert parse_source_date(date(2024, 5, 2)) == date(2024, 5, 2)


def test_employment_kind_aliases():
    assert parse_employment_kind("Vast") == "permanent"
    assert parse_employment_kind("fixed_term") == "fixedTerm"
    assert parse_employment_kind("tijdelijk") == "fixedTerm"
    assert parse_employment_kind("intern") is None


def test_wages_are_derived_from_hourly_rate():
    hourly, monthly, yearly = derive_wages(20.0, None, None, 36)
    assert hourly == 20.0
    assert monthly == pytest.approx(3117.6)
    assert yearly == pytest.approx(37411.2)


def test_missing_wages_default_to_zero():
    assert derive_wages(None, None, None, None) == (0.0, 0.0, 0.0)


def test_payroll_blocks_become_periods():
    resolved = PayrollSnapshotResolver(StaticFacts(PAYROLL_TWO_EMPLOYMENTS)).resolve(make_profile(), today=TODAY)
    assert resolved.source == "payroll"
    first, second = resolved.periods
    assert first.id == "payroll-9001"
    assert first.employment_kind == "fixedTerm"
    assert first.is_active is False
    assert first.days_per_week == 4.5
    # Newest salary record wins when none is flagged active.
    assert first.monthly_wage == 2709.0
    assert second.start_date == date(2024, 1, 1)
    assert second.end_date is None
    assert second.is_active is True
    assert second.employment_kind == "permanent"
    assert second.monthly_wage == 2846.0
    assert second.yearly_wage == pytest.approx(34152.0)


def test_payroll_salary_history_reasons():
    resolved = PayrollSnapshotResolver(StaticFacts(PAYROLL_TWO_EMPLOYMENTS)).resolve(make_profile(), today=TODAY)
    assert [r.monthly_wage for r in resolved.salary_records] == [2539.0, 2709.0, 2777.0, 2846.0]
    assert [r.reason for r in resolved.salary_records] == [None, "review", None, "raise"]


def test_hourly_only_payroll_block():
    resolved = PayrollSnapshotResolver(StaticFacts(PAYROLL_HOURLY_ONLY)).resolve(make_profile(), today=TODAY)
    (period,) = resolved.periods
    assert period.id == "payroll-emp-77"
    assert period.end_date is None
    assert period.monthly_wage == pytest.approx(3117.6)
    assert period.hours_per_week == 36.0


def test_unparseable_payroll_block_is_reported():
    employments = [{"id": 1, "start_date": "not-a-date"}, *PAYROLL_HOURLY_ONLY]
    resolved = PayrollSnapshotResolver(StaticFacts(employments)).resolve(make_profile(), today=TODAY)
    assert len(resolved.periods) == 1
    assert [d.kind for d in resolved.defects] == ["malformed_source_record"]


def test_empty_payroll_yields_nothing():
    assert PayrollSnapshotResolver(StaticFacts(None)).resolve(make_profile(), today=TODAY) is None
    assert PayrollSnapshotResolver(StaticFacts([])).resolve(make_profile(), today=TODAY) is None


def test_profile_fallback_synthesizes_one_period():
    profile = make_profile(employment_start_date=date(2025, 2, 1), hourly_wage=18.0, hours_per_week=32)
    resolved = WorkerProfileResolver().resolve(profile, today=TODAY)
    (period,) = resolved.periods
    assert period.id == "profile-w-anna"
    assert period.source == "profile"
    assert period.employment_kind == "permanent"
    assert period.is_active is True
    assert period.monthly_wage == pytest.approx(2494.08)


def test_profile_without_start_date_yields_nothing():
    assert WorkerProfileResolver().resolve(make_profile(), today=TODAY) is None
