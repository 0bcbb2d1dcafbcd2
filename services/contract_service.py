# services/contract_service.py
"""
Contract Service - lifecycle of a contract to sell and its installment plan.

A contract is created once per approved reservation and carries the
downpayment plan: 10% of the property price, net of the reservation fee,
split into 1..60 monthly installments. The plan can later be revised;
installments already paid are kept as they are and every unpaid one is
regenerated.

Concurrency:
- ``property_contracts.reservation_id`` is unique, so two racing creators
  cannot both insert; the loser gets the winner's contract back.
- ``Contract.version`` is an optimistic lock. ``validate_plan_change``
  reports the version it saw and ``change_plan`` refuses to run against a
  different one.
"""
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, NamedTuple, Optional

from sqlalchemy.orm import Session

from exceptions import (
     ConcurrentModificationError,
     InvalidPlanError,
     NotFoundError,
     PlanChangeRejectedError,
     ReservationNotApprovedError,
     UniqueConstraintViolation,
)
from models import (
     Contract,
     ContractStatus,
     DownpaymentStatus,
     PaymentSchedule,
     PlanChange,
     Reservation,
     ReservationStatus,
     ScheduleStatus,
)
from repos import ContractRepo, ReservationRepo, ScheduleRepo
from utils.dates import add_months
from utils.money import to_money
from .pricing import (
     BANK_FINANCING_RATE,
     DOWNPAYMENT_RATE,
     compute_downpayment_split,
     compute_monthly_installment,
     validate_plan_months,
)
from .schedule_service import ScheduleService, build_installments, installment_due_date, split_amount
from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

DEFAULT_CHANGE_REASON = "No reason provided"


class ContractWithSchedule(NamedTuple):
     contract: Contract
     payment_schedules: List[PaymentSchedule]


@dataclass
class PlanChangeReport:
     """Outcome of checking whether a contract may move to a new month count."""

     allowed: bool
     validation_errors: List[str] = field(default_factory=list)
     warnings: List[str] = field(default_factory=list)
     current_plan: dict = field(default_factory=dict)
     proposed_plan: dict = field(default_factory=dict)
     impact: dict = field(default_factory=dict)
     contract_version: Optional[int] = None

     def to_dict(self) -> dict:
          return asdict(self)


def contract_number_for(reservation: Reservation, signed_at: datetime) -> str:
     """CTS-<year>-<tracking number without its TRK- prefix>."""
     if reservation.tracking_number:
          tracking_part = reservation.tracking_number.removeprefix("TRK-")
     else:
          tracking_part = f"{reservation.id:08d}"
     return f"CTS-{signed_at.year}-{tracking_part}"


def _load_contract(db: Session, contract_id: int, for_update: bool = False) -> Contract:
     contract = ContractRepo(db).find_by_id(contract_id, for_update=for_update)
     if contract is None:
          raise NotFoundError(f"Contract with ID {contract_id} not found")
     return contract


def _with_schedule(db: Session, contract: Contract) -> ContractWithSchedule:
     return ContractWithSchedule(contract, ScheduleRepo(db).list_for_contract(contract.id))


def _evaluate_plan_change(
     contract: Contract,
     schedules: List[PaymentSchedule],
     new_months,
     today: date
) -> PlanChangeReport:
     errors: List[str] = []
     warnings: List[str] = []

     paid = [s for s in schedules if s.is_paid]
     unpaid = [s for s in schedules if not s.is_paid]
     overdue = [
          s for s in unpaid
          if s.payment_status == ScheduleStatus.OVERDUE or s.is_past_due(today)
     ]

     months_valid = True
     try:
          validate_plan_months(new_months)
     except InvalidPlanError as exc:
          months_valid = False
          errors.append(exc.message)

     if contract.contract_status != ContractStatus.ACTIVE:
          errors.append(
               f"Contract status is '{contract.contract_status.value}'. Only active contracts can be modified."
          )
     if contract.downpayment_status == DownpaymentStatus.COMPLETED:
          errors.append("Downpayment is already completed. Plan change is not allowed.")
     elif contract.downpayment_status == DownpaymentStatus.DEFAULTED:
          errors.append("Contract is in defaulted status. Plan change is not allowed.")

     if schedules and len(paid) == len(schedules):
          errors.append("All installments are already paid. Plan change is not allowed.")

     if months_valid and new_months == contract.payment_plan_months:
          errors.append(f"Contract already has a {new_months}-month payment plan. Nothing to change.")

     open_slots = 0
     if months_valid:
          outside = sorted(s.installment_number for s in paid if s.installment_number > new_months)
          if outside:
               errors.append(
                    f"Paid installment(s) {', '.join(f'#{n}' for n in outside)} would fall outside "
                    f"a {new_months}-month plan."
               )
          open_slots = new_months - len(paid)
          if unpaid and open_slots < 1 and not outside:
               errors.append(
                    f"A {new_months}-month plan leaves no installment for the unpaid balance."
               )

     for entry in unpaid:
          if entry.has_partial_payment:
               errors.append(
                    f"Installment #{entry.installment_number} has a partial payment. "
                    "Settle it before changing the plan."
               )

     if overdue:
          warnings.append(
               f"There are {len(overdue)} overdue payment(s). "
               "Please settle overdue amounts before changing plan."
          )

     paid_total = sum((Decimal(s.scheduled_amount) for s in paid), Decimal("0"))
     unpaid_amount = Decimal(contract.remaining_downpayment) - paid_total
     current_installment = Decimal(contract.monthly_installment)
     signed_on = contract.contract_signed_date.date()

     proposed_installment = None
     new_final_date = None
     if months_valid and open_slots >= 1:
          proposed_installment = split_amount(unpaid_amount, open_slots)[0]
          new_final_date = installment_due_date(signed_on, new_months)

     difference = None
     change_percent = None
     if proposed_installment is not None:
          difference = proposed_installment - current_installment
          if current_installment:
               change_percent = to_money(difference / current_installment * 100)

     return PlanChangeReport(
          allowed=not errors,
          validation_errors=errors,
          warnings=warnings,
          current_plan={
               "payment_plan_months": contract.payment_plan_months,
               "monthly_installment": current_installment,
               "remaining_balance": Decimal(contract.remaining_balance),
               "paid_installments": len(paid),
               "pending_installments": len(unpaid),
               "overdue_installments": len(overdue),
               "final_installment_date": contract.final_installment_date,
          },
          proposed_plan={
               "payment_plan_months": new_months,
               "monthly_installment": proposed_installment,
               "remaining_balance": to_money(unpaid_amount),
               "new_final_installment_date": new_final_date,
          },
          impact={
               "monthly_payment_difference": difference,
               "monthly_payment_change_percent": change_percent,
               "schedules_to_recalculate": len(unpaid),
          },
          contract_version=contract.version,
     )


class ContractService:
     """Service class for contract creation, lookup and plan changes."""

     @staticmethod
     @unit_of_work
     def create_contract(
          db: Session,
          reservation_id: int,
          payment_plan_months: int,
          signed_at: Optional[datetime] = None
     ) -> ContractWithSchedule:
          """
          Create the contract and its installment schedule for an approved reservation.

          Calling this again for the same reservation returns the existing
          contract unchanged, whatever month count is passed.

          Args:
               db: SQLAlchemy database session
               reservation_id: Approved reservation
               payment_plan_months: Installment count, 1..60
               signed_at: Signing timestamp (defaults to now)

          Returns:
               ContractWithSchedule(contract, payment_schedules)

          Raises:
               InvalidPlanError: Month count outside 1..60
               NotFoundError: Unknown reservation
               ReservationNotApprovedError: Reservation is not approved
          """
          validate_plan_months(payment_plan_months)

          reservation = ReservationRepo(db).find_by_id(reservation_id)
          if reservation is None:
               raise NotFoundError(f"Reservation with ID {reservation_id} not found")

          contracts = ContractRepo(db)
          existing = contracts.find_by_reservation_id(reservation_id)
          if existing is not None:
               logger.info(
                    "Contract %s already exists for reservation %s",
                    existing.contract_number, reservation.tracking_number,
               )
               return _with_schedule(db, existing)

          if reservation.status != ReservationStatus.APPROVED:
               raise ReservationNotApprovedError(
                    f"Reservation {reservation.tracking_number} is '{reservation.status.value}', not approved"
               )

          signed_at = signed_at or datetime.now()
          try:
               return ContractService._insert_contract(db, reservation, payment_plan_months, signed_at)
          except UniqueConstraintViolation:
               # Another session created the contract between our check and insert
               winner = contracts.find_by_reservation_id(reservation_id)
               if winner is None:
                    raise
               logger.info(
                    "Lost contract creation race for reservation %s; returning %s",
                    reservation_id, winner.contract_number,
               )
               return _with_schedule(db, winner)

     @staticmethod
     def _insert_contract(
          db: Session,
          reservation: Reservation,
          months: int,
          signed_at: datetime
     ) -> ContractWithSchedule:
          price = Decimal(reservation.property.property_price)
          fee = Decimal(reservation.reservation_fee or 0)
          split = compute_downpayment_split(price, fee)
          monthly_installment = compute_monthly_installment(split.remaining_downpayment, months)
          start = signed_at.date()

          remaining = to_money(split.remaining_downpayment)
          contract = Contract(
               contract_number=contract_number_for(reservation, signed_at),
               reservation_id=reservation.id,
               property_id=reservation.property_id,
               client_name=reservation.client_name,
               client_email=reservation.client_email,
               total_contract_price=to_money(price),
               downpayment_percentage=DOWNPAYMENT_RATE * 100,
               downpayment_total=to_money(split.downpayment_total),
               reservation_fee_paid=to_money(fee),
               remaining_downpayment=remaining,
               bank_financing_percentage=BANK_FINANCING_RATE * 100,
               bank_financing_amount=to_money(split.bank_financing),
               payment_plan_months=months,
               monthly_installment=to_money(monthly_installment),
               total_paid_amount=Decimal("0.00"),
               remaining_balance=remaining,
               downpayment_status=(
                    DownpaymentStatus.COMPLETED if remaining == 0 else DownpaymentStatus.IN_PROGRESS
               ),
               contract_status=ContractStatus.ACTIVE,
               contract_signed_date=signed_at,
               first_installment_date=add_months(start, 1),
               final_installment_date=add_months(start, months),
          )
          ContractRepo(db).save(contract)

          schedules = ScheduleService.generate_schedule(
               db,
               contract_id=contract.id,
               start_date=start,
               monthly_installment=monthly_installment,
               months=months,
               settled_at=signed_at,
          )
          logger.info(
               "Contract %s created: %s months of %s (remaining downpayment %s)",
               contract.contract_number, months, contract.monthly_installment, remaining,
          )
          return ContractWithSchedule(contract, schedules)

     @staticmethod
     def get_contract(db: Session, contract_id: int) -> ContractWithSchedule:
          return _with_schedule(db, _load_contract(db, contract_id))

     @staticmethod
     def get_contract_by_reservation(db: Session, reservation_id: int) -> Optional[ContractWithSchedule]:
          """Lookup only; None when the reservation has no contract."""
          contract = ContractRepo(db).find_by_reservation_id(reservation_id)
          if contract is None:
               return None
          return _with_schedule(db, contract)

     @staticmethod
     def list_contracts(db: Session, status: Optional[ContractStatus] = None) -> List[Contract]:
          return ContractRepo(db).list(status=status)

     @staticmethod
     def validate_plan_change(
          db: Session,
          contract_id: int,
          new_months,
          today: Optional[date] = None
     ) -> PlanChangeReport:
          """
          Check whether a contract may switch to ``new_months`` installments.

          Never raises for a rejected change; the report says why. Only an
          unknown contract raises NotFoundError.
          """
          contract = _load_contract(db, contract_id)
          schedules = ScheduleRepo(db).list_for_contract(contract_id)
          report = _evaluate_plan_change(contract, schedules, new_months, today or date.today())
          logger.info(
               "Plan change check for %s to %s months: allowed=%s",
               contract.contract_number, new_months, report.allowed,
          )
          return report

     @staticmethod
     @unit_of_work
     def change_plan(
          db: Session,
          contract_id: int,
          new_months: int,
          reason: Optional[str] = None,
          changed_by: Optional[str] = None,
          expected_version: Optional[int] = None,
          today: Optional[date] = None
     ) -> ContractWithSchedule:
          """
          Move a contract to a ``new_months`` installment plan.

          ``new_months`` is the total plan length. Paid installments keep
          their number, amount and due date; every unpaid installment is
          deleted and the unpaid balance is spread over the free installment
          numbers in 1..new_months. Everything happens in one transaction.

          Raises:
               NotFoundError: Unknown contract
               ConcurrentModificationError: ``expected_version`` is stale, or
                    another session updated the contract mid-flight
               PlanChangeRejectedError: Server-side validation failed
          """
          contract = _load_contract(db, contract_id, for_update=True)
          if expected_version is not None and contract.version != expected_version:
               raise ConcurrentModificationError(
                    f"Contract {contract.contract_number} changed since it was validated "
                    f"(version {expected_version} -> {contract.version})"
               )

          schedule_repo = ScheduleRepo(db)
          schedules = schedule_repo.list_for_contract(contract_id, refresh=True)
          report = _evaluate_plan_change(contract, schedules, new_months, today or date.today())
          if not report.allowed:
               raise PlanChangeRejectedError("Plan change is not allowed", report.validation_errors)

          paid = [s for s in schedules if s.is_paid]
          unpaid = [s for s in schedules if not s.is_paid]
          paid_total = sum((Decimal(s.scheduled_amount) for s in paid), Decimal("0"))
          unpaid_amount = to_money(Decimal(contract.remaining_downpayment) - paid_total)

          old_months = contract.payment_plan_months
          old_installment = contract.monthly_installment
          old_final_date = contract.final_installment_date

          # Deletes are flushed before the inserts reuse their installment numbers
          schedule_repo.delete_all(unpaid)

          paid_numbers = {s.installment_number for s in paid}
          free_numbers = [n for n in range(1, new_months + 1) if n not in paid_numbers]
          start = contract.contract_signed_date.date()
          new_entries = build_installments(
               contract_id=contract.id,
               start_date=start,
               installment_numbers=free_numbers,
               total=unpaid_amount,
               plan_months=new_months,
          )
          schedule_repo.save_all(new_entries)

          contract.payment_plan_months = new_months
          contract.monthly_installment = new_entries[0].scheduled_amount
          contract.final_installment_date = installment_due_date(start, new_months)
          contract.remaining_balance = unpaid_amount

          ContractRepo(db).add_plan_change(
               PlanChange(
                    contract_id=contract.id,
                    old_payment_plan_months=old_months,
                    new_payment_plan_months=new_months,
                    old_monthly_installment=old_installment,
                    new_monthly_installment=contract.monthly_installment,
                    old_final_installment_date=old_final_date,
                    new_final_installment_date=contract.final_installment_date,
                    reason=reason or DEFAULT_CHANGE_REASON,
                    changed_by=changed_by,
               )
          )
          logger.info(
               "Contract %s plan changed %s -> %s months: %s unpaid installment(s) replaced by %s, %s paid kept",
               contract.contract_number, old_months, new_months, len(unpaid), len(new_entries), len(paid),
          )
          return _with_schedule(db, contract)
