from .reservation_repo import PropertyRepo, ReservationRepo
from .contract_repo import ContractRepo
from .schedule_repo import ScheduleRepo, TransactionRepo

__all__ = [
     "PropertyRepo",
     "ReservationRepo",
     "ContractRepo",
     "ScheduleRepo",
     "TransactionRepo",
]
