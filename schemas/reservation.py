# schemas/reservation.py
"""
Pydantic schemas for Reservation API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models import ReservationStatus


class ReservationCreate(BaseModel):
     """Schema for submitting a new reservation."""
     property_id: int = Field(..., gt=0, description="Property being reserved (must exist)")
     reservation_fee: Decimal = Field(
          default=Decimal("0"), ge=0, max_digits=12, decimal_places=2, description="Fee collected at reservation"
     )
     client_name: str = Field(..., min_length=1, max_length=200)
     client_email: str = Field(..., min_length=3, max_length=255)
     client_phone: Optional[str] = Field(None, max_length=50)
     client_address: Optional[str] = Field(None, max_length=500)
     occupation: Optional[str] = Field(None, max_length=150)
     employer: Optional[str] = Field(None, max_length=200)
     employment_status: Optional[str] = Field(None, max_length=50)
     years_employed: Optional[int] = Field(None, ge=0)
     monthly_income: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     other_income_source: Optional[str] = Field(None, max_length=200)
     other_income_amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     total_monthly_income: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     message: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "property_id": 1,
                    "reservation_fee": 50000.00,
                    "client_name": "Maria Santos",
                    "client_email": "maria@example.com",
                    "client_phone": "+63 917 555 0101",
                    "occupation": "Engineer",
                    "employment_status": "employed",
                    "monthly_income": 85000.00
               }
          }
     )


class ReservationReject(BaseModel):
     """Body for POST /reservations/{id}/reject."""
     reason: Optional[str] = Field(None, max_length=500, description="Why the reservation was rejected")


class ReservationResponse(BaseModel):
     """Schema for reservation response."""
     id: int
     tracking_number: Optional[str] = None
     property_id: int
     reservation_fee: Decimal
     client_name: str
     client_email: str
     client_phone: Optional[str] = None
     status: ReservationStatus
     rejection_reason: Optional[str] = None
     status_changed_by: Optional[str] = None
     created_at: Optional[datetime] = None

     model_config = ConfigDict(
          from_attributes=True,
          json_schema_extra={
               "example": {
                    "id": 1,
                    "tracking_number": "TRK-00000001",
                    "property_id": 1,
                    "reservation_fee": 50000.00,
                    "client_name": "Maria Santos",
                    "client_email": "maria@example.com",
                    "status": "pending",
                    "created_at": "2026-01-31T10:30:00"
               }
          }
     )


class ReservationListResponse(BaseModel):
     """Schema for paginated reservation list response."""
     reservations: List[ReservationResponse]
     total: int
     page: int = 1
     page_size: int = 50
