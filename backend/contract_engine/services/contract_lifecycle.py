from __future__ import annotations

from contract_engine.core.errors import InvalidTransition

ALLOWED_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "draft": ("active",),
    "active": ("expired", "terminated"),
    "expired": (),
    "terminated": (),
}

INITIAL_STATUSES = ("draft", "active")
TERMINAL_STATUSES = frozenset(s for s, targets in ALLOWED_TRANSITIONS.items() if not targets)

# Workflow step recorded when a contract enters a status.
WORKFLOW_STEP_FOR_STATUS = {
    "draft": "draft_creation",
    "active": "contract_activation",
    "expired": "archived",
    "terminated": "terminated",
}


class ContractLifecycle:
    @staticmethod
    def allowed_from(current: str) -> list[str]:
        return list(ALLOWED_TRANSITIONS.get(current, ()))

    @staticmethod
    def assert_transition(current: str, new_status: str) -> None:
        allowed = ContractLifecycle.allowed_from(current)
        if new_status not in allowed:
            raise InvalidTransition(current, new_status, allowed)

    @staticmethod
    def assert_initial(status: str) -> None:
        if status not in INITIAL_STATUSES:
            raise InvalidTransition("new", status, list(INITIAL_STATUSES))

    @staticmethod
    def is_terminal(status: str) -> bool:
        return status in TERMINAL_STATUSES
