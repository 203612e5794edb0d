from __future__ import annotations

from typing import Iterable, Sequence

from contract_engine.schemas.timeline import ContractPeriod, SalaryChange, SalaryRecord


def _as_record(item: SalaryRecord | ContractPeriod) -> SalaryRecord:
    if isinstance(item, SalaryRecord):
        return item
    return SalaryRecord(
        date=item.start_date,
        hourly_wage=item.hourly_wage,
        monthly_wage=item.monthly_wage,
        yearly_wage=item.yearly_wage,
    )


def percent_change(previous: float, current: float) -> float:
    if not previous:
        return 0.0
    return round((current - previous) / previous * 100, 2)


class SalaryProgressionTracker:
    """Builds the ordered salary history of a worker.

    The comparison basis is the monthly wage. When no record carries a
    monthly wage at all the hourly wage is compared instead, so hourly-only
    payroll data still produces a meaningful progression.
    """

    @staticmethod
    def track(records: Iterable[SalaryRecord | ContractPeriod]) -> list[SalaryChange]:
        records = [_as_record(r) for r in records]
        use_monthly = any(r.monthly_wage for r in records)

        changes: list[SalaryChange] = []
        previous: SalaryRecord | None = None
        for index, record in enumerate(records):
            if index == 0:
                increase = 0.0
                reason = "contractStart"
            else:
                if use_monthly:
                    increase = percent_change(previous.monthly_wage, record.monthly_wage)
                else:
                    increase = percent_change(previous.hourly_wage, record.hourly_wage)
                reason = record.reason if record.reason in {"raise", "review"} else "contractRenewal"
            changes.append(
                SalaryChange(
                    date=record.date,
                    hourly_wage=record.hourly_wage,
                    monthly_wage=record.monthly_wage,
                    yearly_wage=record.yearly_wage,
                    increase_percent=increase,
                    reason=reason,
                )
            )
            previous = record
        return changes

    @staticmethod
    def track_periods(periods: Iterable[ContractPeriod]) -> list[SalaryChange]:
        return SalaryProgressionTracker.track(periods)

    @staticmethod
    def growth_rate(progression: Sequence[SalaryChange]) -> float:
        """Percentage change from the first to the last entry."""
        if len(progression) < 2:
            return 0.0
        first, last = progression[0], progression[-1]
        if first.monthly_wage and last.monthly_wage:
            return percent_change(first.monthly_wage, last.monthly_wage)
        return percent_change(first.hourly_wage, last.hourly_wage)
