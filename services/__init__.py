from .contract_service import ContractService, ContractWithSchedule, PlanChangeReport
from .payment_service import PaymentResult, PaymentService, RevertResult, TransactionHistory
from .pricing import (
     DownpaymentSplit,
     MonthlyInterest,
     compute_downpayment_split,
     compute_monthly_installment,
     compute_monthly_interest,
     compute_penalty,
     seasonal_interest_multiplier,
     validate_plan_months,
)
from .reservation_service import ReservationService
from .schedule_service import ScheduleService, split_amount
from .unit_of_work import unit_of_work

__all__ = [
     "ContractService",
     "ContractWithSchedule",
     "PlanChangeReport",
     "PaymentService",
     "PaymentResult",
     "RevertResult",
     "TransactionHistory",
     "DownpaymentSplit",
     "MonthlyInterest",
     "compute_downpayment_split",
     "compute_monthly_installment",
     "compute_monthly_interest",
     "compute_penalty",
     "seasonal_interest_multiplier",
     "validate_plan_months",
     "ReservationService",
     "ScheduleService",
     "split_amount",
     "unit_of_work",
]
