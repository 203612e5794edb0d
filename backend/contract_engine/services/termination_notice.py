from __future__ import annotations

from datetime import date, timedelta

from contract_engine.core.config import ChainRuleConfig
from contract_engine.schemas.timeline import TerminationNotice


class TerminationNoticeCalculator:
    """Notice deadline and late-notice penalty for a fixed-term contract."""

    def __init__(self, config: ChainRuleConfig | None = None):
        self.config = config or ChainRuleConfig()

    def calculate(
        self,
        end_date: date | None,
        daily_wage: float | None,
        *,
        today: date | None = None,
    ) -> TerminationNotice | None:
        if end_date is None:
            return None
        cfg = self.config
        today = today or date.today()

        deadline = end_date - timedelta(days=cfg.notice_window_days)
        days_until_deadline = (deadline - today).days

        if days_until_deadline < 0:
            notification_status = "overdue"
        elif days_until_deadline == 0:
            notification_status = "critical"
        elif days_until_deadline <= cfg.notice_urgent_days:
            notification_status = "urgent"
        elif days_until_deadline <= cfg.notice_ideal_days:
            notification_status = "ideal"
        else:
            notification_status = "early"

        penalty_days = max(0, -days_until_deadline)
        # Unknown wage still yields a notice; only the penalty amount degrades.
        wage = float(daily_wage or 0.0)
        return TerminationNotice(
            deadline_date=deadline,
            days_until_deadline=days_until_deadline,
            notification_status=notification_status,
            should_notify=notification_status != "early",
            penalty_days=penalty_days,
            penalty_amount=penalty_days * wage,
        )
