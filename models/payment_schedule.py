# models/payment_schedule.py
import enum
from datetime import date
from decimal import Decimal
from sqlalchemy import (
     Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class ScheduleStatus(str, enum.Enum):
     """Enumeration for installment payment status."""
     PENDING = "pending"
     PAID = "paid"
     OVERDUE = "overdue"


class PaymentSchedule(TimestampMixin, Base):
     """
     One dated installment of a contract's downpayment plan.

     ``paid_amount`` accumulates partial payments; the entry becomes PAID
     once ``remaining_amount`` reaches zero.
     """
     __tablename__ = "contract_payment_schedules"
     __table_args__ = (
          UniqueConstraint(
               "contract_id",
               "installment_number",
               name="uq_contract_payment_schedules_installment"
          ),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     contract_id = Column(
          Integer,
          ForeignKey("property_contracts.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     installment_number = Column(Integer, nullable=False)
     installment_description = Column(String(100), nullable=True)

     due_date = Column(Date, nullable=False, index=True)
     grace_period_end_date = Column(Date, nullable=False)

     scheduled_amount = Column(Numeric(14, 2), nullable=False)
     paid_amount = Column(Numeric(14, 2), nullable=False, default=0)
     remaining_amount = Column(Numeric(14, 2), nullable=False)
     penalty_amount = Column(Numeric(12, 2), nullable=False, default=0)

     payment_status = Column(
          Enum(
               ScheduleStatus,
               name="schedule_payment_status",
               create_constraint=True,
               values_callable=enum_values,
          ),
          default=ScheduleStatus.PENDING,
          nullable=False,
          index=True
     )
     paid_at = Column(DateTime, nullable=True)

     # Relationships
     contract = relationship("Contract", back_populates="payment_schedules")
     transactions = relationship("PaymentTransaction", back_populates="schedule")

     def __repr__(self):
          return (
               f"<PaymentSchedule(id={self.id}, contract_id={self.contract_id}, "
               f"no={self.installment_number}, amount={self.scheduled_amount}, "
               f"status='{self.payment_status.value}')>"
          )

     @property
     def is_paid(self) -> bool:
          return self.payment_status == ScheduleStatus.PAID

     @property
     def has_partial_payment(self) -> bool:
          """Unpaid entry that already received part of its amount."""
          return not self.is_paid and Decimal(self.paid_amount or 0) > 0

     def is_past_due(self, today: date) -> bool:
          return not self.is_paid and self.due_date < today

     def mark_as_paid(self, paid_at) -> None:
          """Mark the installment as fully paid."""
          self.payment_status = ScheduleStatus.PAID
          self.remaining_amount = Decimal("0.00")
          self.paid_at = paid_at

     def mark_as_overdue(self) -> None:
          """Mark the installment as overdue."""
          self.payment_status = ScheduleStatus.OVERDUE
