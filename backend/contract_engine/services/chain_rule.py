from __future__ import annotations

from datetime import date
from typing import Iterable

from contract_engine.core.config import ChainRuleConfig
from contract_engine.schemas.timeline import ChainRuleStatus, ContractPeriod


def months_between(start: date | None, end: date, *, days_per_month: int = 30) -> int:
    if start is None:
        return 0
    days = (end - start).days
    if days <= 0:
        return 0
    return days // days_per_month


class ChainRuleEvaluator:
    """Decides whether the next contract of a worker must be permanent."""

    def __init__(self, config: ChainRuleConfig | None = None):
        self.config = config or ChainRuleConfig()

    def evaluate(
        self,
        periods: Iterable[ContractPeriod],
        first_start_date: date | None,
        *,
        today: date | None = None,
    ) -> ChainRuleStatus:
        cfg = self.config
        today = today or date.today()
        periods = list(periods)

        fixed_term = sum(1 for p in periods if p.employment_kind == "fixedTerm")
        months = months_between(first_start_date, today, days_per_month=cfg.days_per_month)
        years = months // 12

        def status(level: str, recommendation: str, *, requires_permanent: bool = False) -> ChainRuleStatus:
            return ChainRuleStatus(
                total_fixed_term_contracts=fixed_term,
                total_employment_months=months,
                requires_permanent_next=requires_permanent,
                warning_level=level,
                recommendation=recommendation,
                max_allowed_contracts=cfg.max_fixed_term_contracts,
                max_allowed_months=cfg.max_chain_months,
            )

        # A permanent contract discharges the obligation whatever the history.
        if any(p.employment_kind == "permanent" for p in periods):
            return status("safe", "Worker already holds a permanent contract.")

        if fixed_term >= cfg.max_fixed_term_contracts or months >= cfg.max_chain_months:
            return status(
                "permanentRequired",
                f"Next contract MUST be permanent ({fixed_term} fixed-term contracts / {years} years).",
                requires_permanent=True,
            )

        if fixed_term == cfg.critical_fixed_term_contracts or months >= cfg.critical_chain_months:
            return status(
                "critical",
                f"Approaching chain rule limit: {fixed_term}/{cfg.max_fixed_term_contracts} contracts, "
                f"{months}/{cfg.max_chain_months} months. Consider a permanent contract.",
            )

        if fixed_term == 1 and months > cfg.warning_single_contract_months:
            return status(
                "warning",
                f"Monitor contract progression: 1 contract running {months} months.",
            )

        return status(
            "safe",
            f"Within chain rule limits: {fixed_term}/{cfg.max_fixed_term_contracts} contracts.",
        )
