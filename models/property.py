# models/property.py
from sqlalchemy import Column, Integer, String, Numeric, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Property(TimestampMixin, Base):
     """
     Property model - a lot/house offered for sale.
     Maps to the 'property_info' catalog table; only the columns the
     reservation and contract flows read are mapped here.
     """
     __tablename__ = "property_info"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_title = Column(String(255), nullable=False)
     property_price = Column(Numeric(14, 2), nullable=False)
     description = Column(Text, nullable=True)

     # Relationships
     reservations = relationship("Reservation", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, title='{self.property_title}', price={self.property_price})>"
