from __future__ import annotations

from functools import lru_cache
from typing import NoReturn

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from contract_engine.core.config import EngineSettings
from contract_engine.core.errors import (
    ContractEngineError,
    DataIntegrityDefect,
    InvalidTransition,
    NotFound,
    SourceUnavailable,
)
from contract_engine.db.session import get_db
from contract_engine.services.contract_service import UnifiedContractService


@lru_cache
def get_settings() -> EngineSettings:
    return EngineSettings.from_env()


def get_contract_service(db: Session = Depends(get_db)) -> UnifiedContractService:
    return UnifiedContractService(db, settings=get_settings())


def raise_http_error(exc: ContractEngineError) -> NoReturn:
    if isinstance(exc, NotFound):
        status_code = 404
    elif isinstance(exc, (InvalidTransition, DataIntegrityDefect)):
        status_code = 409
    elif isinstance(exc, SourceUnavailable):
        status_code = 503
    else:
        status_code = 500
    raise HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": exc.message, **exc.payload},
    ) from exc
