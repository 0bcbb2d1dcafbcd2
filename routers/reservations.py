# routers/reservations.py
"""
Reservation API routes.

Intake plus the review state machine: approve, reject and revert. Approving
does not create the contract; the client calls POST /api/contracts next.
"""
from typing import Optional
from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import actor_from_token, verify_token
from models import ReservationStatus
from schemas.reservation import (
     ReservationCreate,
     ReservationReject,
     ReservationResponse,
     ReservationListResponse,
)
from services import ReservationService

router = APIRouter(prefix="/api/reservations", tags=["reservations"])


@router.post(
     "",
     response_model=ReservationResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Submit a reservation",
)
def create_reservation(
     body: ReservationCreate,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     details = body.model_dump(exclude={"property_id", "reservation_fee"}, exclude_none=True)
     return ReservationService.create_reservation(
          db, property_id=body.property_id, reservation_fee=body.reservation_fee, **details
     )


@router.get(
     "",
     response_model=ReservationListResponse,
     summary="List reservations",
)
def list_reservations(
     status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
     page: int = Query(1, ge=1),
     page_size: int = Query(50, ge=1, le=200),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     rows, total = ReservationService.list_reservations(
          db, status=status_filter, page=page, page_size=page_size
     )
     return ReservationListResponse(
          reservations=[ReservationResponse.model_validate(r) for r in rows],
          total=total,
          page=page,
          page_size=page_size,
     )


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
     reservation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return ReservationService.get_reservation(db, reservation_id)


@router.post("/{reservation_id}/approve", response_model=ReservationResponse)
def approve_reservation(
     reservation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return ReservationService.approve(db, reservation_id, approved_by=actor_from_token(token))


@router.post("/{reservation_id}/reject", response_model=ReservationResponse)
def reject_reservation(
     reservation_id: int,
     body: Optional[ReservationReject] = Body(None),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     reason = body.reason if body else None
     return ReservationService.reject(
          db, reservation_id, reason=reason, rejected_by=actor_from_token(token)
     )


@router.post("/{reservation_id}/revert", response_model=ReservationResponse)
def revert_reservation(
     reservation_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token),
):
     return ReservationService.revert(db, reservation_id, reverted_by=actor_from_token(token))
