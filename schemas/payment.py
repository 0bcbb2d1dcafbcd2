# schemas/payment.py
"""
Pydantic schemas for walk-in payment API.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, ConfigDict

from models import TransactionStatus
from .contract import ContractResponse, PaymentScheduleResponse


class WalkInPaymentRequest(BaseModel):
     """Request body for POST /payments/walk-in."""

     schedule_id: int = Field(..., gt=0, description="Installment being paid")
     payment_type: Literal["full", "partial"] = Field(default="full")
     amount: Optional[Decimal] = Field(
          None, gt=0, max_digits=14, decimal_places=2, description="Required for partial payments"
     )
     payment_method: str = Field(default="cash", max_length=30)
     reference_number: Optional[str] = Field(None, max_length=100)
     notes: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "schedule_id": 1,
                    "payment_type": "partial",
                    "amount": 5000.00,
                    "payment_method": "cash",
               }
          }
     )


class PaymentTransactionResponse(BaseModel):
     id: int
     contract_id: int
     schedule_id: Optional[int] = None
     amount_paid: Decimal
     penalty_paid: Decimal
     payment_type: str
     payment_method: str
     reference_number: Optional[str] = None
     receipt_number: str
     processed_by: Optional[str] = None
     transaction_status: TransactionStatus
     transaction_date: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class WalkInPaymentResponse(BaseModel):
     """Response for POST /payments/walk-in."""

     transaction: PaymentTransactionResponse
     schedule: PaymentScheduleResponse
     contract: ContractResponse


class PaymentRevertResponse(BaseModel):
     schedule: PaymentScheduleResponse
     contract: ContractResponse
     transactions_reverted: int


class PaymentHistorySummary(BaseModel):
     total_transactions: int
     total_amount_paid: Decimal = Field(..., description="Completed transactions only")
     total_penalties_paid: Decimal
     payment_methods: List[str]
     completed_count: int
     reverted_count: int


class PaymentHistoryResponse(BaseModel):
     """Response for GET /payments/history."""

     transactions: List[PaymentTransactionResponse]
     summary: PaymentHistorySummary


class MarkOverdueResponse(BaseModel):
     marked_overdue: int = Field(..., description="Installments flagged overdue by this run")
