# services/pricing.py
"""
Pricing Calculator - pure price arithmetic for contracts to sell.

- Downpayment split: 10% downpayment (net of the reservation fee already
  collected) and 90% bank financing.
- Monthly installment: remaining downpayment over 1..60 months.
- Seasonal interest multiplier and monthly interest used for homeowner dues.
- Late-payment penalty for installments past their grace period.

No I/O and no session access; everything takes and returns Decimal.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional

from exceptions import InvalidPlanError
from utils.dates import add_days
from utils.money import Number, to_decimal, to_money

logger = logging.getLogger(__name__)

DOWNPAYMENT_RATE = Decimal("0.10")
BANK_FINANCING_RATE = Decimal("0.90")

MIN_PLAN_MONTHS = 1
MAX_PLAN_MONTHS = 60

DEFAULT_INTEREST_RATE = Decimal("0.05")

PENALTY_GRACE_DAYS = 3
DEFAULT_PENALTY_RATE = Decimal("0.03")  # per month, accrued daily over 30 days

# Higher rates around the holidays (Nov-Jan) and school opening (June)
SEASONAL_RATE_MULTIPLIERS = {
     1: Decimal("1.2"),
     2: Decimal("1.0"),
     3: Decimal("1.0"),
     4: Decimal("1.0"),
     5: Decimal("1.0"),
     6: Decimal("1.1"),
     7: Decimal("1.0"),
     8: Decimal("1.0"),
     9: Decimal("1.0"),
     10: Decimal("1.0"),
     11: Decimal("1.2"),
     12: Decimal("1.3"),
}


@dataclass(frozen=True)
class DownpaymentSplit:
     """Result of splitting a property price into downpayment and bank financing."""

     downpayment_total: Decimal
     bank_financing: Decimal
     remaining_downpayment: Decimal
     fee_exceeds_downpayment: bool = False


class MonthlyInterest(NamedTuple):
     remaining_balance: Decimal
     monthly_interest: Decimal


def compute_downpayment_split(property_price: Number, reservation_fee_paid: Number) -> DownpaymentSplit:
     """
     Split a property price into the 10% downpayment and 90% bank financing.

     The reservation fee already collected counts toward the downpayment. A fee
     larger than the downpayment leaves nothing to pay in installments: the
     remaining downpayment is clamped to zero and the split is flagged.
     """
     price = to_decimal(property_price)
     fee = to_decimal(reservation_fee_paid)

     downpayment_total = price * DOWNPAYMENT_RATE
     bank_financing = price * BANK_FINANCING_RATE
     remaining = downpayment_total - fee

     exceeds = remaining < 0
     if exceeds:
          logger.warning(
               "Reservation fee %s exceeds downpayment %s; remaining downpayment clamped to 0",
               fee, downpayment_total,
          )
          remaining = Decimal("0")

     return DownpaymentSplit(
          downpayment_total=downpayment_total,
          bank_financing=bank_financing,
          remaining_downpayment=remaining,
          fee_exceeds_downpayment=exceeds,
     )


def validate_plan_months(months) -> int:
     """Return ``months`` if it is an integer in 1..60, else raise InvalidPlanError."""
     if isinstance(months, bool) or not isinstance(months, int):
          raise InvalidPlanError(f"Payment plan months must be an integer, got {months!r}")
     if months < MIN_PLAN_MONTHS or months > MAX_PLAN_MONTHS:
          raise InvalidPlanError(
               f"Payment plan must be between {MIN_PLAN_MONTHS} and {MAX_PLAN_MONTHS} months"
          )
     return months


def compute_monthly_installment(remaining_downpayment: Number, months: int) -> Decimal:
     """
     Divide the remaining downpayment evenly over ``months``.

     The quotient is returned unrounded; rounding to cents happens when the
     schedule is materialized.
     """
     validate_plan_months(months)
     return to_decimal(remaining_downpayment) / Decimal(months)


def seasonal_interest_multiplier(month: int) -> Decimal:
     """Rate multiplier for a calendar month (1-12); unknown months get 1.0."""
     return SEASONAL_RATE_MULTIPLIERS.get(month, Decimal("1.0"))


def compute_monthly_interest(
     total_price: Number,
     down_payment: Number,
     rate: Optional[Number],
     month: int
) -> MonthlyInterest:
     """
     Monthly interest on the balance left after the downpayment.

     interest = (total - down) * rate * multiplier(month) / 12

     A missing or zero rate falls back to 5%. A non-positive total or a
     negative downpayment yields zeros.
     """
     total = to_decimal(total_price or 0)
     down = to_decimal(down_payment or 0)
     annual_rate = to_decimal(rate) if rate else DEFAULT_INTEREST_RATE

     if total <= 0 or down < 0:
          return MonthlyInterest(Decimal("0"), Decimal("0"))

     remaining = total - down
     interest = (remaining * annual_rate * seasonal_interest_multiplier(month)) / Decimal(12)
     return MonthlyInterest(remaining, interest)


def compute_penalty(
     base_amount: Number,
     due_date: date,
     today: date,
     penalty_rate: Number = DEFAULT_PENALTY_RATE
) -> Decimal:
     """
     Late-payment penalty for an installment.

     Nothing accrues until the 3-day grace period after the due date is over;
     afterwards the monthly rate is charged per day (rate / 30) on the unpaid
     base amount. Rounded to cents.
     """
     grace_period_end = add_days(due_date, PENALTY_GRACE_DAYS)
     if today <= grace_period_end:
          return Decimal("0.00")

     days_overdue = (today - grace_period_end).days
     daily_rate = to_decimal(penalty_rate) / Decimal(30)
     return to_money(to_decimal(base_amount) * daily_rate * days_overdue)
