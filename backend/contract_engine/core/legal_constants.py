"""Statutory constants for chain-rule and termination-notice evaluation.

Values default to the Dutch Civil Code (Burgerlijk Wetboek, Boek 7) rules for
fixed-term employment. Every constant documents the article it comes from so
that a jurisdiction-specific rule set can be assembled next to it.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Art. 7:668a BW: Ketenregeling (chain rule)
# After more than three successive fixed-term contracts, or once the chain of
# fixed-term contracts exceeds 36 months, the next contract is deemed to be a
# contract for an indefinite period.
# ---------------------------------------------------------------------------
"""Art. 7:668a BW: fixed-term contracts after which a permanent contract is required."""
MAX_CHAIN_CONTRACTS: Final[int] = 3

"""Art. 7:668a BW: chain duration (months) after which a permanent contract is required."""
MAX_CHAIN_MONTHS: Final[int] = 36

"""Critical band: one contract short of the limit."""
CRITICAL_CHAIN_CONTRACTS: Final[int] = MAX_CHAIN_CONTRACTS - 1

"""Critical band: six months before the chain duration limit."""
CRITICAL_CHAIN_MONTHS: Final[int] = MAX_CHAIN_MONTHS - 6

"""Single long-running fixed-term contract worth monitoring (months, exclusive)."""
WARNING_SINGLE_CONTRACT_MONTHS: Final[int] = 18

"""Months are measured as elapsed days divided by this value."""
DAYS_PER_MONTH: Final[int] = 30

# ---------------------------------------------------------------------------
# Art. 7:668 BW: Aanzegplicht (termination notice obligation)
# For fixed-term contracts of six months or longer the employer must notify
# the employee in writing, at least one month before the end date, whether
# the contract will be renewed. Failing that, the employer owes one day of
# wages per day of delay (capped at one month).
# ---------------------------------------------------------------------------
"""Art. 7:668 BW: notice window (days) before the contract end date."""
TERMINATION_NOTICE_DAYS: Final[int] = 30

"""Deadline within this many days is urgent."""
NOTICE_URGENT_DAYS: Final[int] = 30

"""Deadline within this many days is the ideal moment to open the conversation."""
NOTICE_IDEAL_DAYS: Final[int] = 60

"""Contracts ending within this many days count as expiring soon."""
EXPIRING_SOON_DAYS: Final[int] = 60

"""Contract end dates within this many days appear as upcoming deadlines."""
UPCOMING_CONTRACT_END_DAYS: Final[int] = 90

# ---------------------------------------------------------------------------
# Wage conversion
# ---------------------------------------------------------------------------
"""Average number of weeks in a month used by payroll providers."""
WEEKS_PER_MONTH: Final[float] = 4.33

"""Working days per week assumed when a contract does not state it."""
DEFAULT_DAYS_PER_WEEK: Final[int] = 5

# ---------------------------------------------------------------------------
# Compliance score
# ---------------------------------------------------------------------------
"""A draft older than this many days counts as an unfinished contract."""
STALE_DRAFT_DAYS: Final[int] = 7

"""Penalty per warning level, subtracted from a perfect score of 100."""
SCORE_PENALTY_BY_LEVEL: Final[dict[str, int]] = {
    "permanentRequired": 50,
    "critical": 30,
    "warning": 10,
    "safe": 0,
}
SCORE_PENALTY_MISSING_MONTHLY_WAGE: Final[int] = 5
SCORE_PENALTY_MISSING_START_DATE: Final[int] = 10
SCORE_PENALTY_STALE_DRAFT: Final[int] = 15
SCORE_PENALTY_INTEGRITY_DEFECT: Final[int] = 5

# ---------------------------------------------------------------------------
# Payroll snapshot sentinels
# ---------------------------------------------------------------------------
"""Date prefixes the payroll provider uses to say "never ended"."""
NEVER_ENDED_SENTINELS: Final[tuple[str, ...]] = ("0001-01-01", "9999-12-31")
