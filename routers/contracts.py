# routers/contracts.py
"""
Contract API routes.

- POST /api/contracts: create the contract and installment schedule for an
  approved reservation (idempotent per reservation)
- GET  /api/contracts/by-reservation/{reservation_id}: lookup only, null when absent
- POST /api/contracts/{id}/validate-plan-change: dry run of a plan change
- POST /api/contracts/{id}/change-plan: regenerate the unpaid installments
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import actor_from_token, verify_token
from models import ContractStatus
from schemas.contract import (
     ContractCreate,
     ContractResponse,
     ContractDetailResponse,
     ContractListResponse,
     PaymentScheduleResponse,
     PlanChangeValidateRequest,
     PlanChangeRequest,
     PlanChangeReportResponse,
)
from services import ContractService, ContractWithSchedule

router = APIRouter(prefix="/api/contracts", tags=["contracts"])


def _detail(result: ContractWithSchedule) -> ContractDetailResponse:
     return ContractDetailResponse(
          contract=ContractResponse.model_validate(result.contract),
          payment_schedules=[PaymentScheduleResponse.model_validate(s) for s in result.payment_schedules],
     )


@router.post(
     "",
     response_model=ContractDetailResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create contract from an approved reservation",
)
def create_contract(
     body: ContractCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     result = ContractService.create_contract(
          db,
          reservation_id=body.reservation_id,
          payment_plan_months=body.payment_plan_months,
          signed_at=body.contract_signed_date,
     )
     return _detail(result)


@router.get("", response_model=ContractListResponse)
def list_contracts(
     status_filter: Optional[ContractStatus] = Query(None, alias="status"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     contracts = ContractService.list_contracts(db, status=status_filter)
     return ContractListResponse(
          contracts=[ContractResponse.model_validate(c) for c in contracts],
          total=len(contracts),
     )


@router.get(
     "/by-reservation/{reservation_id}",
     response_model=Optional[ContractDetailResponse],
     summary="Find the contract created for a reservation",
)
def get_contract_by_reservation(
     reservation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     result = ContractService.get_contract_by_reservation(db, reservation_id)
     return _detail(result) if result else None


@router.get("/{contract_id}", response_model=ContractDetailResponse)
def get_contract(
     contract_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return _detail(ContractService.get_contract(db, contract_id))


@router.post(
     "/{contract_id}/validate-plan-change",
     response_model=PlanChangeReportResponse,
     summary="Check a payment plan change without applying it",
)
def validate_plan_change(
     contract_id: int,
     body: PlanChangeValidateRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     report = ContractService.validate_plan_change(db, contract_id, body.new_payment_plan_months)
     return PlanChangeReportResponse(**report.to_dict())


@router.post(
     "/{contract_id}/change-plan",
     response_model=ContractDetailResponse,
     summary="Change the payment plan of a contract",
)
def change_plan(
     contract_id: int,
     body: PlanChangeRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     result = ContractService.change_plan(
          db,
          contract_id,
          body.new_payment_plan_months,
          reason=body.reason,
          changed_by=actor_from_token(token),
          expected_version=body.expected_version,
     )
     return _detail(result)
