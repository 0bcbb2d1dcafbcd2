# models/reservation.py
import enum
from sqlalchemy import Column, Integer, String, Numeric, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, enum_values


class ReservationStatus(str, enum.Enum):
     """Enumeration for reservation review status."""
     PENDING = "pending"
     APPROVED = "approved"
     REJECTED = "rejected"


class Reservation(TimestampMixin, Base):
     """
     Reservation model - a prospective buyer's hold on a property,
     waiting for staff review. A contract can only be created once the
     reservation is approved.
     """
     __tablename__ = "property_reservations"

     id = Column(Integer, primary_key=True, autoincrement=True)
     tracking_number = Column(String(20), nullable=True, unique=True, index=True)

     property_id = Column(
          Integer,
          ForeignKey("property_info.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     reservation_fee = Column(Numeric(12, 2), nullable=False, default=0)

     # Client identity
     client_name = Column(String(200), nullable=False)
     client_email = Column(String(255), nullable=False)
     client_phone = Column(String(50), nullable=True)
     client_address = Column(String(500), nullable=True)

     # Employment
     occupation = Column(String(150), nullable=True)
     employer = Column(String(200), nullable=True)
     employment_status = Column(String(50), nullable=True)
     years_employed = Column(Integer, nullable=True)

     # Income
     monthly_income = Column(Numeric(12, 2), nullable=True)
     other_income_source = Column(String(200), nullable=True)
     other_income_amount = Column(Numeric(12, 2), nullable=True)
     total_monthly_income = Column(Numeric(12, 2), nullable=True)

     message = Column(Text, nullable=True)

     # Review
     status = Column(
          Enum(
               ReservationStatus,
               name="reservation_status",
               create_constraint=True,
               values_callable=enum_values,
          ),
          default=ReservationStatus.PENDING,
          nullable=False,
          index=True
     )
     rejection_reason = Column(String(500), nullable=True)
     status_changed_by = Column(String(100), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="reservations")
     contract = relationship("Contract", back_populates="reservation", uselist=False)

     def __repr__(self):
          return f"<Reservation(id={self.id}, tracking='{self.tracking_number}', status='{self.status.value}')>"

     @staticmethod
     def tracking_number_for(reservation_id: int) -> str:
          """Human-readable tracking number derived from the row id."""
          return f"TRK-{reservation_id:08d}"
