# schemas/__init__.py
from .reservation import (
     ReservationCreate,
     ReservationReject,
     ReservationResponse,
     ReservationListResponse,
)
from .contract import (
     ContractCreate,
     ContractResponse,
     ContractDetailResponse,
     ContractListResponse,
     PaymentScheduleResponse,
     PlanChangeValidateRequest,
     PlanChangeRequest,
     PlanChangeReportResponse,
)
from .payment import (
     WalkInPaymentRequest,
     WalkInPaymentResponse,
     PaymentTransactionResponse,
     PaymentRevertResponse,
     MarkOverdueResponse,
     PaymentHistoryResponse,
     PaymentHistorySummary,
)
from .pricing import MonthlyInterestResponse

__all__ = [
     "ReservationCreate",
     "ReservationReject",
     "ReservationResponse",
     "ReservationListResponse",
     "ContractCreate",
     "ContractResponse",
     "ContractDetailResponse",
     "ContractListResponse",
     "PaymentScheduleResponse",
     "PlanChangeValidateRequest",
     "PlanChangeRequest",
     "PlanChangeReportResponse",
     "WalkInPaymentRequest",
     "WalkInPaymentResponse",
     "PaymentTransactionResponse",
     "PaymentRevertResponse",
     "MarkOverdueResponse",
     "PaymentHistoryResponse",
     "PaymentHistorySummary",
     "MonthlyInterestResponse",
]
