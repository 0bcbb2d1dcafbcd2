# schemas/contract.py
"""
Pydantic schemas for contract creation, plan change and installment views.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import ContractStatus, DownpaymentStatus, ScheduleStatus


class ContractCreate(BaseModel):
     """Schema for creating a contract from an approved reservation."""
     reservation_id: int = Field(..., gt=0, description="Approved reservation")
     payment_plan_months: int = Field(..., description="Downpayment installments (1-60)")
     contract_signed_date: Optional[datetime] = Field(None, description="Defaults to now")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "reservation_id": 1,
                    "payment_plan_months": 12
               }
          }
     )


class PlanChangeValidateRequest(BaseModel):
     """Body for POST /contracts/{id}/validate-plan-change."""
     new_payment_plan_months: int = Field(..., description="Proposed total plan length in months")


class PlanChangeRequest(BaseModel):
     """Body for POST /contracts/{id}/change-plan."""
     new_payment_plan_months: int = Field(..., description="New total plan length in months (1-60)")
     reason: Optional[str] = Field(None, max_length=500)
     expected_version: Optional[int] = Field(
          None, ge=1, description="contract_version returned by validate-plan-change"
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "new_payment_plan_months": 24,
                    "reason": "Client requested lower monthly payments",
                    "expected_version": 3
               }
          }
     )


class PaymentScheduleResponse(BaseModel):
     """One installment of a contract."""
     id: int
     installment_number: int
     installment_description: Optional[str] = None
     due_date: date
     grace_period_end_date: date
     scheduled_amount: Decimal
     paid_amount: Decimal
     remaining_amount: Decimal
     penalty_amount: Decimal
     payment_status: ScheduleStatus
     paid_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class ContractResponse(BaseModel):
     """Schema for contract response (without installments)."""
     id: int
     contract_number: str
     reservation_id: int
     property_id: int
     client_name: str
     client_email: str
     total_contract_price: Decimal
     downpayment_percentage: Decimal
     downpayment_total: Decimal
     reservation_fee_paid: Decimal
     remaining_downpayment: Decimal
     bank_financing_percentage: Decimal
     bank_financing_amount: Decimal
     payment_plan_months: int
     monthly_installment: Decimal
     total_paid_amount: Decimal
     remaining_balance: Decimal
     downpayment_status: DownpaymentStatus
     contract_status: ContractStatus
     contract_signed_date: datetime
     first_installment_date: date
     final_installment_date: date
     version: int

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "contract_number": "CTS-2026-00000001",
                    "reservation_id": 1,
                    "total_contract_price": 2000000.00,
                    "downpayment_total": 200000.00,
                    "reservation_fee_paid": 50000.00,
                    "remaining_downpayment": 150000.00,
                    "bank_financing_amount": 1800000.00,
                    "payment_plan_months": 12,
                    "monthly_installment": 12500.00,
                    "downpayment_status": "in_progress",
                    "contract_status": "active",
                    "version": 1
               }
          }
     )


class ContractDetailResponse(BaseModel):
     """Contract together with its installment schedule."""
     contract: ContractResponse
     payment_schedules: List[PaymentScheduleResponse]


class ContractListResponse(BaseModel):
     contracts: List[ContractResponse]
     total: int


class PlanChangeReportResponse(BaseModel):
     """Result of a plan change validation; never an error for a rejected change."""
     allowed: bool
     validation_errors: List[str]
     warnings: List[str]
     current_plan: dict
     proposed_plan: dict
     impact: dict
     contract_version: Optional[int] = None
