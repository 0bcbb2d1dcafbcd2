# models/plan_change.py
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class PlanChange(Base):
     """
     Audit record written for every executed payment plan change.
     Table name is derived from the class name (plan_changes).
     """

     id = Column(Integer, primary_key=True, autoincrement=True)
     contract_id = Column(
          Integer,
          ForeignKey("property_contracts.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     old_payment_plan_months = Column(Integer, nullable=False)
     new_payment_plan_months = Column(Integer, nullable=False)
     old_monthly_installment = Column(Numeric(14, 2), nullable=False)
     new_monthly_installment = Column(Numeric(14, 2), nullable=False)
     old_final_installment_date = Column(Date, nullable=True)
     new_final_installment_date = Column(Date, nullable=True)

     reason = Column(String(500), nullable=False, default="No reason provided")
     changed_by = Column(String(100), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     contract = relationship("Contract", back_populates="plan_changes")

     def __repr__(self):
          return (
               f"<PlanChange(id={self.id}, contract_id={self.contract_id}, "
               f"{self.old_payment_plan_months}->{self.new_payment_plan_months})>"
          )
