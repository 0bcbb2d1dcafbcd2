from .base import Base
from .property import Property
from .reservation import Reservation, ReservationStatus
from .contract import Contract, ContractStatus, DownpaymentStatus
from .payment_schedule import PaymentSchedule, ScheduleStatus
from .payment_transaction import PaymentTransaction, TransactionStatus
from .plan_change import PlanChange

__all__ = [
     "Base",
     "Property",
     "Reservation",
     "ReservationStatus",
     "Contract",
     "ContractStatus",
     "DownpaymentStatus",
     "PaymentSchedule",
     "ScheduleStatus",
     "PaymentTransaction",
     "TransactionStatus",
     "PlanChange",
]
