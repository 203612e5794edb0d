from __future__ import annotations

import pytest

from contract_engine.core.config import JURISDICTION_RULES, ChainRuleConfig, chain_rule_config_from_env
from contract_engine.services.chain_rule import ChainRuleEvaluator, months_between
from tests.fixtures.synthetic_workers import THREE_FIXED_TERM_40_MONTHS, TODAY, days_ago, days_ahead, make_period


def _evaluate(periods, first_start, config=None):
    return ChainRuleEvaluator(config).evaluate(periods, first_start, today=TODAY)


def test_three_fixed_term_contracts_over_forty_months_require_permanent():
    status = _evaluate(THREE_FIXED_TERM_40_MONTHS, days_ago(1205))
    assert status.warning_level == "permanentRequired"
    assert status.requires_permanent_next is True
    assert status.total_fixed_term_contracts == 3
    assert status.total_employment_months == 40
    assert status.max_allowed_contracts == 3
    assert status.max_allowed_months == 36


def test_permanent_contract_is_always_safe():
    periods = [make_period(f"c-{i}", days_ago(1500 - i * 200), days_ago(1400 - i * 200)) for i in range(5)]
    periods.append(make_period("c-perm", days_ago(100), kind="permanent"))
    status = _evaluate(periods, days_ago(1500))
    assert status.warning_level == "safe"
    assert status.requires_permanent_next is False
    assert status.total_fixed_term_contracts == 5


def test_three_recent_fixed_term_contracts_require_permanent():
    periods = [
        make_period("c-1", days_ago(300), days_ago(200)),
        make_period("c-2", days_ago(199), days_ago(100)),
        make_period("c-3", days_ago(99), days_ahead(100)),
    ]
    status = _evaluate(periods, days_ago(300))
    assert status.total_employment_months == 10
    assert status.requires_permanent_next is True


def test_thirty_six_months_on_one_contract_require_permanent():
    status = _evaluate([make_period("c-1", days_ago(1080))], days_ago(1080))
    assert status.total_employment_months == 36
    assert status.warning_level == "permanentRequired"


def test_two_fixed_term_contracts_are_critical():
    periods = [make_period("c-1", days_ago(200), days_ago(100)), make_period("c-2", days_ago(99), days_ahead(60))]
    status = _evaluate(periods, days_ago(200))
    assert status.warning_level == "critical"
    assert status.requires_permanent_next is False


def test_thirty_months_on_one_contract_is_critical():
    status = _evaluate([make_period("c-1", days_ago(905))], days_ago(905))
    assert status.total_employment_months == 30
    assert status.warning_level == "critical"


def test_single_contract_past_eighteen_months_is_warning():
    status = _evaluate([make_period("c-1", days_ago(575))], days_ago(575))
    assert status.total_employment_months == 19
    assert status.warning_level == "warning"


def test_single_contract_at_eighteen_months_is_safe():
    status = _evaluate([make_period("c-1", days_ago(545))], days_ago(545))
    assert status.total_employment_months == 18
    assert status.warning_level == "safe"


def test_no_history_is_safe_with_zero_months():
    status = _evaluate([], None)
    assert status.warning_level == "safe"
    assert status.total_employment_months == 0
    assert status.total_fixed_term_contracts == 0


def test_each_branch_has_its_own_recommendation():
    recommendations = {
        _evaluate(THREE_FIXED_TERM_40_MONTHS, days_ago(1205)).recommendation,
        _evaluate(THREE_FIXED_TERM_40_MONTHS[:2], days_ago(100)).recommendation,
        _evaluate([make_period("c-1", days_ago(575))], days_ago(575)).recommendation,
        _evaluate([make_period("c-1", days_ago(30))], days_ago(30)).recommendation,
        _evaluate([make_period("c-1", days_ago(30), kind="permanent")], days_ago(30)).recommendation,
    }
    assert len(recommendations) == 5


def test_months_between_floors_thirty_day_months():
    assert months_between(days_ago(59), TODAY) == 1
    assert months_between(days_ago(60), TODAY) == 2
    assert months_between(None, TODAY) == 0
    assert months_between(days_ahead(10), TODAY) == 0


def test_older_rule_set_breaks_chain_after_twenty_four_months():
    config = JURISDICTION_RULES["NL-2015"]
    status = _evaluate([make_period("c-1", days_ago(750))], days_ago(750), config)
    assert status.total_employment_months == 25
    assert status.warning_level == "permanentRequired"
    assert status.max_allowed_months == 24


def test_rule_config_from_environment(monkeypatch):
    monkeypatch.setenv("CHAIN_RULE_JURISDICTION", "nl")
    monkeypatch.setenv("CHAIN_RULE_MAX_CONTRACTS", "4")
    monkeypatch.setenv("TERMINATION_NOTICE_DAYS", "45")
    config = chain_rule_config_from_env()
    assert config.max_fixed_term_contracts == 4
    assert config.critical_fixed_term_contracts == 3
    assert config.notice_window_days == 45
    assert config.max_chain_months == ChainRuleConfig().max_chain_months


def test_unknown_jurisdiction_is_rejected(monkeypatch):
    monkeypatch.setenv("CHAIN_RULE_JURISDICTION", "XX")
    with pytest.raises(ValueError):
        chain_rule_config_from_env()
