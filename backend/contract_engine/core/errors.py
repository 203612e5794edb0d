"""Error taxonomy shared by the compliance services."""

from __future__ import annotations


class ContractEngineError(Exception):
    """Base class for domain errors raised by the services."""

    code = "CONTRACT_ENGINE_ERROR"

    def __init__(self, message: str, *, payload: dict | None = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}


class NotFound(ContractEngineError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}", payload={"entity": entity, "id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class DataIntegrityDefect(ContractEngineError):
    """Inconsistent contract data: overlapping periods, missing dependents, conflicting links."""

    code = "DATA_INTEGRITY_DEFECT"

    def __init__(self, kind: str, message: str, *, records: list[str] | None = None):
        super().__init__(message, payload={"kind": kind, "records": records or []})
        self.kind = kind
        self.records = records or []


class InvalidTransition(ContractEngineError):
    code = "INVALID_TRANSITION"

    def __init__(self, current: str, attempted: str, allowed: list[str]):
        super().__init__(
            f"Cannot move contract from {current} to {attempted}; allowed: {', '.join(allowed) or 'none'}",
            payload={"current": current, "attempted": attempted, "allowed": allowed},
        )
        self.current = current
        self.attempted = attempted
        self.allowed = allowed


class SourceUnavailable(ContractEngineError):
    """An upstream source could not be read; resolvers fall through to the next one."""

    code = "SOURCE_UNAVAILABLE"

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}", payload={"source": source})
        self.source = source
