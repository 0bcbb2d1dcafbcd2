# models/payment_transaction.py
"""
PaymentTransaction model - one row per walk-in payment received against an
installment. Rows are append-only; reverting a payment flips
``transaction_status`` to REVERTED instead of deleting the row. When a plan
change regenerates the installment, ``schedule_id`` of its reverted rows is
set to NULL and the row stays attached to the contract.
"""
import enum
from sqlalchemy import Column, Integer, String, Numeric, Text, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from .base import Base, enum_values


class TransactionStatus(str, enum.Enum):
     COMPLETED = "completed"
     REVERTED = "reverted"


class PaymentTransaction(Base):
     __tablename__ = "contract_payment_transactions"

     id = Column(Integer, primary_key=True, autoincrement=True)
     contract_id = Column(
          Integer,
          ForeignKey("property_contracts.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     schedule_id = Column(
          Integer,
          ForeignKey("contract_payment_schedules.id", ondelete="SET NULL"),
          nullable=True,
          index=True
     )

     amount_paid = Column(Numeric(14, 2), nullable=False)
     penalty_paid = Column(Numeric(12, 2), nullable=False, default=0)
     payment_type = Column(String(20), nullable=False)  # full, partial
     payment_method = Column(String(30), nullable=False, default="cash")
     reference_number = Column(String(100), nullable=True)
     receipt_number = Column(String(50), nullable=False)
     processed_by = Column(String(100), nullable=True)
     notes = Column(Text, nullable=True)

     transaction_status = Column(
          Enum(
               TransactionStatus,
               name="transaction_status",
               create_constraint=True,
               values_callable=enum_values,
          ),
          default=TransactionStatus.COMPLETED,
          nullable=False
     )
     transaction_date = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     contract = relationship("Contract", back_populates="transactions")
     schedule = relationship("PaymentSchedule", back_populates="transactions")

     def __repr__(self):
          return f"<PaymentTransaction(id={self.id}, schedule_id={self.schedule_id}, amount={self.amount_paid})>"
