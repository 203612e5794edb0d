"""Rule sets and runtime settings for the compliance engine."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from contract_engine.core.legal_constants import (
    CRITICAL_CHAIN_CONTRACTS,
    CRITICAL_CHAIN_MONTHS,
    DAYS_PER_MONTH,
    EXPIRING_SOON_DAYS,
    MAX_CHAIN_CONTRACTS,
    MAX_CHAIN_MONTHS,
    NOTICE_IDEAL_DAYS,
    NOTICE_URGENT_DAYS,
    TERMINATION_NOTICE_DAYS,
    UPCOMING_CONTRACT_END_DAYS,
    WARNING_SINGLE_CONTRACT_MONTHS,
)


@dataclass(frozen=True)
class ChainRuleConfig:
    """Thresholds for one jurisdiction's chain rule and notice obligation."""

    jurisdiction: str = "NL"
    max_fixed_term_contracts: int = MAX_CHAIN_CONTRACTS
    max_chain_months: int = MAX_CHAIN_MONTHS
    critical_fixed_term_contracts: int = CRITICAL_CHAIN_CONTRACTS
    critical_chain_months: int = CRITICAL_CHAIN_MONTHS
    warning_single_contract_months: int = WARNING_SINGLE_CONTRACT_MONTHS
    days_per_month: int = DAYS_PER_MONTH
    notice_window_days: int = TERMINATION_NOTICE_DAYS
    notice_urgent_days: int = NOTICE_URGENT_DAYS
    notice_ideal_days: int = NOTICE_IDEAL_DAYS


JURISDICTION_RULES: dict[str, ChainRuleConfig] = {
    "NL": ChainRuleConfig(),
    # Pre-2020 WWZ rules: chain broken after 24 months.
    "NL-2015": ChainRuleConfig(
        jurisdiction="NL-2015",
        max_chain_months=24,
        critical_chain_months=18,
        warning_single_contract_months=12,
    ),
}


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return int(raw)


def chain_rule_config_from_env() -> ChainRuleConfig:
    jurisdiction = os.getenv("CHAIN_RULE_JURISDICTION", "NL").upper()
    if jurisdiction not in JURISDICTION_RULES:
        raise ValueError(f"Unknown chain rule jurisdiction: {jurisdiction}")
    config = JURISDICTION_RULES[jurisdiction]

    overrides: dict[str, int] = {}
    max_contracts = _env_int("CHAIN_RULE_MAX_CONTRACTS")
    if max_contracts is not None:
        overrides["max_fixed_term_contracts"] = max_contracts
        overrides["critical_fixed_term_contracts"] = max_contracts - 1
    max_months = _env_int("CHAIN_RULE_MAX_MONTHS")
    if max_months is not None:
        overrides["max_chain_months"] = max_months
        overrides["critical_chain_months"] = max_months - 6
    notice_days = _env_int("TERMINATION_NOTICE_DAYS")
    if notice_days is not None:
        overrides["notice_window_days"] = notice_days
    return replace(config, **overrides) if overrides else config


@dataclass(frozen=True)
class EngineSettings:
    chain_rule: ChainRuleConfig = ChainRuleConfig()
    expiring_soon_days: int = EXPIRING_SOON_DAYS
    upcoming_contract_end_days: int = UPCOMING_CONTRACT_END_DAYS
    sweep_max_workers: int = 8
    sweep_timeout_seconds: float | None = None

    @classmethod
    def from_env(cls) -> "EngineSettings":
        timeout = os.getenv("ALERT_SWEEP_TIMEOUT_SECONDS")
        return cls(
            chain_rule=chain_rule_config_from_env(),
            sweep_max_workers=int(os.getenv("ALERT_SWEEP_MAX_WORKERS", "8")),
            sweep_timeout_seconds=float(timeout) if timeout else None,
        )
