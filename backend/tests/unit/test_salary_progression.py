from __future__ import annotations

from contract_engine.schemas.timeline import SalaryRecord
from contract_engine.services.salary_progression import SalaryProgressionTracker
from tests.fixtures.synthetic_workers import SALARY_SERIES_MONTHLY, days_ago, make_period


def _records(wages, **kwargs):
    return [SalaryRecord(date=days_ago(400 - i * 100), monthly_wage=w, **kwargs) for i, w in enumerate(wages)]


def test_monthly_series_increase_percentages():
    progression = SalaryProgressionTracker.track(_records(SALARY_SERIES_MONTHLY))
    assert [c.increase_percent for c in progression] == [0.0, 6.70, 2.51, 2.48]
    assert [c.reason for c in progression] == ["contractStart", "contractRenewal", "contractRenewal", "contractRenewal"]


def test_tracking_is_idempotent_and_leaves_input_untouched():
    records = _records(SALARY_SERIES_MONTHLY)
    before = [r.model_dump() for r in records]
    first = SalaryProgressionTracker.track(records)
    second = SalaryProgressionTracker.track(records)
    assert first == second
    assert [r.model_dump() for r in records] == before
    assert first[0].increase_percent == 0


def test_supplied_raise_and_review_reasons_are_kept():
    records = [
        SalaryRecord(date=days_ago(300), monthly_wage=2500),
        SalaryRecord(date=days_ago(200), monthly_wage=2600, reason="raise"),
        SalaryRecord(date=days_ago(100), monthly_wage=2700, reason="review"),
    ]
    reasons = [c.reason for c in SalaryProgressionTracker.track(records)]
    assert reasons == ["contractStart", "raise", "review"]


def test_hourly_wage_is_compared_when_no_monthly_wage_exists():
    records = [
        SalaryRecord(date=days_ago(200), hourly_wage=16.0),
        SalaryRecord(date=days_ago(100), hourly_wage=18.0),
    ]
    progression = SalaryProgressionTracker.track(records)
    assert progression[1].increase_percent == 12.5


def test_zero_previous_wage_gives_zero_increase():
    progression = SalaryProgressionTracker.track(_records([0.0, 2800.0]))
    assert progression[1].increase_percent == 0.0


def test_periods_can_be_tracked_directly():
    periods = [
        make_period("c-1", days_ago(400), days_ago(200), monthly=2539.0),
        make_period("c-2", days_ago(199), monthly=2709.0),
    ]
    progression = SalaryProgressionTracker.track_periods(periods)
    assert [c.date for c in progression] == [days_ago(400), days_ago(199)]
    assert progression[1].increase_percent == 6.70


def test_growth_rate_from_first_to_last_entry():
    progression = SalaryProgressionTracker.track(_records(SALARY_SERIES_MONTHLY))
    assert SalaryProgressionTracker.growth_rate(progression) == 12.09
    assert SalaryProgressionTracker.growth_rate(progression[:1]) == 0.0
    assert SalaryProgressionTracker.growth_rate([]) == 0.0
