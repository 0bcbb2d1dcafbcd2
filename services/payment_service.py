# services/payment_service.py
"""
Payment Service - walk-in installment payments.

When staff record a payment:
1. The installment's remaining amount is reduced (full or partial payment)
2. A late penalty is computed once the 3-day grace period has passed
3. A PaymentTransaction row is appended with a receipt number
4. The contract's paid total and remaining balance are updated, so every
   payment also bumps the contract version

Reverting a payment puts the installment back to pending and flags its
transactions as reverted; transaction rows are never deleted. Both paths
lock the contract row before the installment row.
"""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, NamedTuple, Optional, Tuple

from sqlalchemy.orm import Session

from exceptions import InvalidQueryError, NotFoundError, PaymentRejectedError
from models import (
     Contract,
     DownpaymentStatus,
     PaymentSchedule,
     PaymentTransaction,
     ScheduleStatus,
     TransactionStatus,
)
from repos import ContractRepo, ScheduleRepo, TransactionRepo
from utils.money import Number, to_money
from .pricing import compute_penalty
from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

PAYMENT_TYPES = ("full", "partial")
MINIMUM_PARTIAL_RATE = Decimal("0.10")  # of the monthly installment


class PaymentResult(NamedTuple):
     transaction: PaymentTransaction
     schedule: PaymentSchedule
     contract: Contract


class RevertResult(NamedTuple):
     schedule: PaymentSchedule
     contract: Contract
     transactions_reverted: int


class TransactionHistory(NamedTuple):
     transactions: List[PaymentTransaction]
     summary: dict


def receipt_number_for(schedule_id: int, paid_at: datetime) -> str:
     return f"RCT-{paid_at.year}-{schedule_id:08d}"


def _load_schedule(db: Session, schedule_id: int, for_update: bool = False) -> PaymentSchedule:
     schedule = ScheduleRepo(db).find_by_id(schedule_id, for_update=for_update)
     if schedule is None:
          raise NotFoundError(f"Payment schedule with ID {schedule_id} not found")
     return schedule


def _lock_schedule_and_contract(db: Session, schedule_id: int) -> Tuple[PaymentSchedule, Contract]:
     """
     Row-lock the owning contract, then the installment, and reread both
     from the database. Lock order is always contract first.
     """
     contract_id = _load_schedule(db, schedule_id).contract_id
     contract = ContractRepo(db).find_by_id(contract_id, for_update=True)
     schedule = _load_schedule(db, schedule_id, for_update=True)
     return schedule, contract


def summarize_transactions(transactions: List[PaymentTransaction]) -> dict:
     completed = [t for t in transactions if t.transaction_status == TransactionStatus.COMPLETED]
     return {
          "total_transactions": len(transactions),
          "total_amount_paid": to_money(sum((Decimal(t.amount_paid) for t in completed), Decimal("0"))),
          "total_penalties_paid": to_money(sum((Decimal(t.penalty_paid or 0) for t in completed), Decimal("0"))),
          "payment_methods": sorted({t.payment_method for t in transactions}),
          "completed_count": len(completed),
          "reverted_count": sum(1 for t in transactions if t.transaction_status == TransactionStatus.REVERTED),
     }


def _recalculate_contract(db: Session, contract: Contract) -> None:
     """Recompute paid total and remaining balance from the installments."""
     schedules = ScheduleRepo(db).list_for_contract(contract.id, refresh=True)
     total_paid = sum((Decimal(s.paid_amount or 0) for s in schedules), Decimal("0"))
     remaining = sum(
          (Decimal(s.remaining_amount) for s in schedules if not s.is_paid),
          Decimal("0"),
     )
     contract.total_paid_amount = to_money(total_paid)
     contract.remaining_balance = to_money(remaining)
     if remaining == 0:
          contract.downpayment_status = DownpaymentStatus.COMPLETED
     elif contract.downpayment_status == DownpaymentStatus.COMPLETED:
          contract.downpayment_status = DownpaymentStatus.IN_PROGRESS


class PaymentService:
     """Service class for recording and reverting installment payments."""

     @staticmethod
     @unit_of_work
     def record_payment(
          db: Session,
          schedule_id: int,
          payment_type: str = "full",
          amount: Optional[Number] = None,
          payment_method: str = "cash",
          reference_number: Optional[str] = None,
          processed_by: Optional[str] = None,
          notes: Optional[str] = None,
          today: Optional[date] = None
     ) -> PaymentResult:
          """
          Record a walk-in payment against one installment.

          Args:
               db: SQLAlchemy database session
               schedule_id: Installment being paid
               payment_type: "full" pays the whole remaining amount; "partial" pays ``amount``
               amount: Amount received for a partial payment
               payment_method: cash, check, bank transfer...
               reference_number: External reference (check number, bank ref)
               processed_by: Staff member recording the payment
               notes: Free text
               today: Business date (defaults to today)

          Returns:
               PaymentResult(transaction, schedule, contract)

          Raises:
               NotFoundError: Unknown installment
               PaymentRejectedError: Nothing left to pay, amount below the
                    10% minimum, or above the remaining amount
          """
          today = today or date.today()
          if payment_type not in PAYMENT_TYPES:
               raise PaymentRejectedError(f"Unknown payment type '{payment_type}'")

          schedule, contract = _lock_schedule_and_contract(db, schedule_id)

          remaining = Decimal(schedule.remaining_amount)
          if schedule.is_paid or remaining <= 0:
               raise PaymentRejectedError("No remaining amount to pay for this installment")

          if payment_type == "full":
               amount_paid = remaining
          else:
               if amount is None:
                    raise PaymentRejectedError("A partial payment needs an amount")
               amount_paid = to_money(amount)
               minimum = to_money(Decimal(contract.monthly_installment) * MINIMUM_PARTIAL_RATE)
               if amount_paid < minimum:
                    raise PaymentRejectedError(f"Minimum payment is {minimum}")
               if amount_paid > remaining:
                    raise PaymentRejectedError("Payment exceeds remaining balance")

          penalty = compute_penalty(remaining, schedule.due_date, today)
          paid_at = datetime.now()

          schedule.paid_amount = to_money(Decimal(schedule.paid_amount or 0) + amount_paid)
          schedule.remaining_amount = to_money(remaining - amount_paid)
          schedule.penalty_amount = penalty
          if schedule.remaining_amount == 0:
               schedule.mark_as_paid(paid_at)

          transaction = TransactionRepo(db).save(
               PaymentTransaction(
                    contract_id=contract.id,
                    schedule_id=schedule.id,
                    amount_paid=amount_paid,
                    penalty_paid=penalty,
                    payment_type=payment_type,
                    payment_method=payment_method,
                    reference_number=reference_number,
                    receipt_number=receipt_number_for(schedule.id, paid_at),
                    processed_by=processed_by,
                    notes=notes,
                    transaction_status=TransactionStatus.COMPLETED,
               )
          )

          _recalculate_contract(db, contract)
          db.flush()

          logger.info(
               "Payment of %s (penalty %s) recorded on %s installment #%s; remaining balance %s",
               amount_paid, penalty, contract.contract_number,
               schedule.installment_number, contract.remaining_balance,
          )
          return PaymentResult(transaction, schedule, contract)

     @staticmethod
     @unit_of_work
     def revert_payment(db: Session, schedule_id: int, today: Optional[date] = None) -> RevertResult:
          """
          Put a paid installment back to pending, or overdue once its due date has passed.

          Raises:
               NotFoundError: Unknown installment
               PaymentRejectedError: The installment is not paid
          """
          today = today or date.today()
          schedule, contract = _lock_schedule_and_contract(db, schedule_id)
          if not schedule.is_paid:
               raise PaymentRejectedError("Payment schedule is not in paid status")
          if Decimal(schedule.scheduled_amount) == 0:
               raise PaymentRejectedError("Installment has no amount to revert")

          schedule.paid_amount = Decimal("0.00")
          schedule.remaining_amount = schedule.scheduled_amount
          schedule.penalty_amount = Decimal("0.00")
          schedule.paid_at = None
          schedule.payment_status = (
               ScheduleStatus.OVERDUE if schedule.due_date < today else ScheduleStatus.PENDING
          )

          transactions = TransactionRepo(db).list_for_schedule(schedule.id, status=TransactionStatus.COMPLETED)
          for transaction in transactions:
               transaction.transaction_status = TransactionStatus.REVERTED
               transaction.notes = f"Payment reverted on {today.isoformat()}"

          _recalculate_contract(db, contract)
          db.flush()

          logger.info(
               "Payment on %s installment #%s reverted (%s transaction(s))",
               contract.contract_number, schedule.installment_number, len(transactions),
          )
          return RevertResult(schedule, contract, len(transactions))

     @staticmethod
     @unit_of_work
     def mark_overdue_schedules(db: Session, today: Optional[date] = None) -> int:
          """
          Mark all pending installments past their due date as OVERDUE.

          This should be called by a scheduled job daily.

          Returns:
               Number of installments marked as overdue
          """
          today = today or date.today()
          count = 0
          for schedule in ScheduleRepo(db).list_past_due(today):
               schedule.mark_as_overdue()
               count += 1
          if count:
               logger.info("Marked %s installment(s) overdue as of %s", count, today)
          return count

     @staticmethod
     def list_transactions(
          db: Session,
          contract_id: Optional[int] = None,
          schedule_id: Optional[int] = None,
          status: Optional[TransactionStatus] = None,
          payment_method: Optional[str] = None,
          start_date: Optional[date] = None,
          end_date: Optional[date] = None
     ) -> TransactionHistory:
          """
          Payment history of a contract or an installment, newest first.

          Reverted transactions are listed but left out of the summary totals.

          Raises:
               InvalidQueryError: Neither contract_id nor schedule_id given
          """
          if contract_id is None and schedule_id is None:
               raise InvalidQueryError("Contract ID or Schedule ID is required")
          transactions = TransactionRepo(db).search(
               contract_id=contract_id,
               schedule_id=schedule_id,
               status=status,
               payment_method=payment_method,
               start_date=start_date,
               end_date=end_date,
          )
          return TransactionHistory(transactions, summarize_transactions(transactions))
