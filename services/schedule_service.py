# services/schedule_service.py
"""
Payment Schedule Generator - turns an installment plan into dated
PaymentSchedule rows.

Due dates run on a monthly cadence from the contract signing date: the
installment numbered ``n`` is due ``n`` calendar months after the start date
(so the first one is due one month after signing, never on the signing day).
Amounts are truncated to cents with the leftover cents placed on the last
generated installment, so the entries always sum to the planned total.
"""
from datetime import date, datetime
from decimal import Decimal, ROUND_DOWN
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from models import PaymentSchedule, ScheduleStatus
from repos import ScheduleRepo
from utils.dates import add_days, add_months
from utils.money import CENT, Number, to_decimal, to_money

GRACE_PERIOD_DAYS = 7


def split_amount(total: Number, parts: int) -> List[Decimal]:
     """
     Split ``total`` into ``parts`` cent amounts that add up to it exactly.

     Every part is the even share truncated to cents; the last part absorbs the
     leftover cents, so it is never smaller than the others.
     """
     if parts < 1:
          raise ValueError("parts must be positive")
     total_cents = to_money(total)
     share = (total_cents / Decimal(parts)).quantize(CENT, rounding=ROUND_DOWN)
     amounts = [share] * (parts - 1)
     amounts.append(total_cents - share * (parts - 1))
     return amounts


def installment_due_date(start_date: date, installment_number: int) -> date:
     return add_months(start_date, installment_number)


def build_installments(
     contract_id: int,
     start_date: date,
     installment_numbers: Sequence[int],
     total: Number,
     plan_months: int,
     settled_at: Optional[datetime] = None
) -> List[PaymentSchedule]:
     """
     Build (but do not persist) pending entries for the given installment slots.

     ``total`` is spread over the slots with ``split_amount``; ``plan_months``
     only feeds the "Monthly Payment i of N" description. A slot whose share
     is 0.00 has nothing to collect, so it is built already PAID at
     ``settled_at`` (default: now).
     """
     numbers = sorted(installment_numbers)
     amounts = split_amount(total, len(numbers))
     entries = []
     for number, amount in zip(numbers, amounts):
          due_date = installment_due_date(start_date, number)
          entries.append(
               PaymentSchedule(
                    contract_id=contract_id,
                    installment_number=number,
                    installment_description=f"Monthly Payment {number} of {plan_months}",
                    due_date=due_date,
                    grace_period_end_date=add_days(due_date, GRACE_PERIOD_DAYS),
                    scheduled_amount=amount,
                    paid_amount=Decimal("0.00"),
                    remaining_amount=amount,
                    penalty_amount=Decimal("0.00"),
                    payment_status=ScheduleStatus.PENDING,
               )
          )
          if amount == 0:
               entries[-1].mark_as_paid(settled_at or datetime.now())
     return entries


class ScheduleService:
     """Service class for payment schedule generation."""

     @staticmethod
     def generate_schedule(
          db: Session,
          contract_id: int,
          start_date: date,
          monthly_installment: Number,
          months: int,
          settled_at: Optional[datetime] = None
     ) -> List[PaymentSchedule]:
          """
          Create ``months`` pending installments for a contract.

          Entries are numbered 1..months, due one calendar month apart
          starting one month after ``start_date``, and flushed together in
          ascending installment order. The caller owns the transaction: if
          the flush fails the enclosing unit of work rolls everything back.

          Args:
               db: SQLAlchemy database session
               contract_id: Owning contract
               start_date: Contract signing date
               monthly_installment: Unrounded per-month amount
               months: Number of installments
               settled_at: paid_at stamp for 0.00 installments (the signing time)

          Returns:
               Persisted PaymentSchedule objects in installment order
          """
          total = to_decimal(monthly_installment) * Decimal(months)
          entries = build_installments(
               contract_id=contract_id,
               start_date=start_date,
               installment_numbers=range(1, months + 1),
               total=total,
               plan_months=months,
               settled_at=settled_at,
          )
          return ScheduleRepo(db).save_all(entries)
