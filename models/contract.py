# models/contract.py
import enum
from sqlalchemy import (
     Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class ContractStatus(str, enum.Enum):
     """Enumeration for contract status."""
     ACTIVE = "active"
     CANCELLED = "cancelled"


class DownpaymentStatus(str, enum.Enum):
     """Progress of the downpayment installment plan."""
     IN_PROGRESS = "in_progress"
     COMPLETED = "completed"
     DEFAULTED = "defaulted"


class Contract(TimestampMixin, Base):
     """
     Contract to sell - generated from an approved reservation.

     Carries the 10% downpayment installment plan; the other 90% is bank
     financed and tracked only as a figure. ``version`` is the optimistic
     lock: every UPDATE is issued with ``WHERE version = <read version>``.
     """
     __tablename__ = "property_contracts"
     __table_args__ = (
          UniqueConstraint("reservation_id", name="uq_property_contracts_reservation_id"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     contract_number = Column(String(50), nullable=False, unique=True)

     reservation_id = Column(
          Integer,
          ForeignKey("property_reservations.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     property_id = Column(Integer, ForeignKey("property_info.id"), nullable=False)

     # Client snapshot at signing
     client_name = Column(String(200), nullable=False)
     client_email = Column(String(255), nullable=False)

     # Pricing
     total_contract_price = Column(Numeric(14, 2), nullable=False)
     downpayment_percentage = Column(Numeric(5, 2), nullable=False, default=10)
     downpayment_total = Column(Numeric(14, 2), nullable=False)
     reservation_fee_paid = Column(Numeric(12, 2), nullable=False, default=0)
     remaining_downpayment = Column(Numeric(14, 2), nullable=False)
     bank_financing_percentage = Column(Numeric(5, 2), nullable=False, default=90)
     bank_financing_amount = Column(Numeric(14, 2), nullable=False)

     # Installment plan
     payment_plan_months = Column(Integer, nullable=False)
     monthly_installment = Column(Numeric(14, 2), nullable=False)
     total_paid_amount = Column(Numeric(14, 2), nullable=False, default=0)
     remaining_balance = Column(Numeric(14, 2), nullable=False)

     downpayment_status = Column(
          Enum(
               DownpaymentStatus,
               name="downpayment_status",
               create_constraint=True,
               values_callable=enum_values,
          ),
          default=DownpaymentStatus.IN_PROGRESS,
          nullable=False
     )
     contract_status = Column(
          Enum(
               ContractStatus,
               name="contract_status",
               create_constraint=True,
               values_callable=enum_values,
          ),
          default=ContractStatus.ACTIVE,
          nullable=False,
          index=True
     )

     # Dates
     contract_signed_date = Column(DateTime, nullable=False)
     first_installment_date = Column(Date, nullable=False)
     final_installment_date = Column(Date, nullable=False)

     # Optimistic lock
     version = Column(Integer, nullable=False, default=1)

     __mapper_args__ = {"version_id_col": version}

     # Relationships
     reservation = relationship("Reservation", back_populates="contract")
     property_info = relationship("Property")
     payment_schedules = relationship(
          "PaymentSchedule",
          back_populates="contract",
          cascade="all, delete-orphan",
          order_by="PaymentSchedule.installment_number"
     )
     transactions = relationship(
          "PaymentTransaction",
          back_populates="contract",
          cascade="all, delete-orphan"
     )
     plan_changes = relationship(
          "PlanChange",
          back_populates="contract",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return (
               f"<Contract(id={self.id}, number='{self.contract_number}', "
               f"months={self.payment_plan_months}, remaining={self.remaining_balance})>"
          )

     @property
     def is_active(self) -> bool:
          return self.contract_status == ContractStatus.ACTIVE
