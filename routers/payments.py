# routers/payments.py
"""
Walk-in payment API.

POST /api/payments/walk-in: record a full or partial payment at the office.
POST /api/payments/{schedule_id}/revert: undo the payment of an installment.
POST /api/payments/mark-overdue: flag pending installments past due (daily job).
GET  /api/payments/history: transactions of a contract or installment with a summary.
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import actor_from_token, verify_token
from models import TransactionStatus
from schemas.contract import ContractResponse, PaymentScheduleResponse
from schemas.payment import (
     WalkInPaymentRequest,
     WalkInPaymentResponse,
     PaymentTransactionResponse,
     PaymentRevertResponse,
     MarkOverdueResponse,
     PaymentHistoryResponse,
     PaymentHistorySummary,
)
from services import PaymentService

router = APIRouter(prefix="/api/payments", tags=["payments"])


@router.post(
     "/walk-in",
     response_model=WalkInPaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record walk-in payment",
)
def record_walk_in_payment(
     body: WalkInPaymentRequest,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     result = PaymentService.record_payment(
          db,
          body.schedule_id,
          payment_type=body.payment_type,
          amount=body.amount,
          payment_method=body.payment_method,
          reference_number=body.reference_number,
          processed_by=actor_from_token(token),
          notes=body.notes,
     )
     return WalkInPaymentResponse(
          transaction=PaymentTransactionResponse.model_validate(result.transaction),
          schedule=PaymentScheduleResponse.model_validate(result.schedule),
          contract=ContractResponse.model_validate(result.contract),
     )


@router.get("/history", response_model=PaymentHistoryResponse, summary="Payment history")
def payment_history(
     contract_id: Optional[int] = Query(None, gt=0),
     schedule_id: Optional[int] = Query(None, gt=0),
     status_filter: Optional[TransactionStatus] = Query(None, alias="status"),
     payment_method: Optional[str] = Query(None, max_length=30),
     start_date: Optional[date] = Query(None),
     end_date: Optional[date] = Query(None),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     history = PaymentService.list_transactions(
          db,
          contract_id=contract_id,
          schedule_id=schedule_id,
          status=status_filter,
          payment_method=payment_method,
          start_date=start_date,
          end_date=end_date,
     )
     return PaymentHistoryResponse(
          transactions=[PaymentTransactionResponse.model_validate(t) for t in history.transactions],
          summary=PaymentHistorySummary(**history.summary),
     )


@router.post("/mark-overdue", response_model=MarkOverdueResponse)
def mark_overdue(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return MarkOverdueResponse(marked_overdue=PaymentService.mark_overdue_schedules(db))


@router.post("/{schedule_id}/revert", response_model=PaymentRevertResponse)
def revert_payment(
     schedule_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     result = PaymentService.revert_payment(db, schedule_id)
     return PaymentRevertResponse(
          schedule=PaymentScheduleResponse.model_validate(result.schedule),
          contract=ContractResponse.model_validate(result.contract),
          transactions_reverted=result.transactions_reverted,
     )
