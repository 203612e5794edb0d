"""Worker timeline and contract lifecycle endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from contract_engine.api.deps import get_contract_service, raise_http_error
from contract_engine.core.errors import ContractEngineError
from contract_engine.schemas.contracts import (
    ContractCreate,
    IntegrityReport,
    LinkRequest,
    LinkResult,
    StatusChangeResult,
    StatusUpdate,
    WorkerContractsResponse,
)
from contract_engine.schemas.timeline import ContractPeriod, EmploymentJourney
from contract_engine.services.contract_service import UnifiedContractService

router = APIRouter(tags=["contracts"])


@router.get("/workers/{worker_id}/journey", response_model=EmploymentJourney)
def get_employment_journey(
    worker_id: str,
    service: UnifiedContractService = Depends(get_contract_service),
) -> EmploymentJourney:
    try:
        return service.build_employment_journey(worker_id)
    except ContractEngineError as exc:
        raise_http_error(exc)


@router.get("/workers/{worker_id}/contracts", response_model=WorkerContractsResponse)
def get_worker_contracts(
    worker_id: str,
    service: UnifiedContractService = Depends(get_contract_service),
) -> WorkerContractsResponse:
    try:
        return service.get_worker_contracts(worker_id)
    except ContractEngineError as exc:
        raise_http_error(exc)


@router.get("/workers/{worker_id}/integrity", response_model=IntegrityReport)
def check_worker_integrity(
    worker_id: str,
    service: UnifiedContractService = Depends(get_contract_service),
) -> IntegrityReport:
    try:
        return service.check_worker_integrity(worker_id)
    except ContractEngineError as exc:
        raise_http_error(exc)


@router.post("/contracts", response_model=ContractPeriod, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreate,
    service: UnifiedContractService = Depends(get_contract_service),
) -> ContractPeriod:
    try:
        return service.create_contract(payload)
    except ContractEngineError as exc:
        raise_http_error(exc)


@router.patch("/contracts/{contract_id}/status", response_model=StatusChangeResult)
def update_contract_status(
    contract_id: str,
    payload: StatusUpdate,
    service: UnifiedContractService = Depends(get_contract_service),
) -> StatusChangeResult:
    try:
        return service.update_contract_status(contract_id, payload.new_status, payload.actor_id)
    except ContractEngineError as exc:
        raise_http_error(exc)


@router.post("/contracts/{contract_id}/link", response_model=LinkResult)
def link_orphan_contract(
    contract_id: str,
    payload: LinkRequest,
    service: UnifiedContractService = Depends(get_contract_service),
) -> LinkResult:
    try:
        return service.link_orphan_contract(contract_id, payload.worker_id)
    except ContractEngineError as exc:
        raise_http_error(exc)
