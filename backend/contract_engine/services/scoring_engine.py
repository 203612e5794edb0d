from __future__ import annotations

from datetime import date
from typing import Any, Iterable

from contract_engine.core.legal_constants import (
    SCORE_PENALTY_BY_LEVEL,
    SCORE_PENALTY_INTEGRITY_DEFECT,
    SCORE_PENALTY_MISSING_MONTHLY_WAGE,
    SCORE_PENALTY_MISSING_START_DATE,
    SCORE_PENALTY_STALE_DRAFT,
    STALE_DRAFT_DAYS,
)
from contract_engine.schemas.timeline import ChainRuleStatus, ContractPeriod


def _is_stale_draft(period: ContractPeriod, today: date) -> bool:
    if period.status != "draft" or period.created_at is None:
        return False
    return (today - period.created_at.date()).days > STALE_DRAFT_DAYS


def _level_for(score: int) -> str:
    if score >= 80:
        return "LOW"
    if score >= 50:
        return "MEDIUM"
    return "HIGH"


class ComplianceScorer:
    """Heuristic 0-100 health score of a worker's contract data.

    Not a legal determination: it only aggregates chain-rule risk and data
    completeness so dashboards can rank workers.
    """

    @staticmethod
    def score(
        periods: Iterable[ContractPeriod],
        chain_status: ChainRuleStatus,
        defects: Iterable[Any] = (),
        *,
        today: date | None = None,
    ) -> int:
        today = today or date.today()
        penalty = SCORE_PENALTY_BY_LEVEL.get(chain_status.warning_level, 0)

        for period in periods:
            if not period.monthly_wage:
                penalty += SCORE_PENALTY_MISSING_MONTHLY_WAGE
            if period.start_date is None:
                penalty += SCORE_PENALTY_MISSING_START_DATE
            if _is_stale_draft(period, today):
                penalty += SCORE_PENALTY_STALE_DRAFT

        penalty += SCORE_PENALTY_INTEGRITY_DEFECT * sum(1 for _ in defects)
        return max(0, min(100, 100 - penalty))

    @staticmethod
    def risk_level(score: int) -> str:
        return _level_for(score)
