# services/reservation_service.py
"""
Reservation Service - intake and the review state machine.

Allowed status moves:

     pending  -> approved   (approve)
     pending  -> rejected   (reject)
     approved -> pending    (revert)
     rejected -> pending    (revert)

There is no direct approved <-> rejected move; a reservation goes back to
pending first. Approval does not create a contract; that is a separate call
to ContractService.create_contract.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from exceptions import InvalidTransitionError, NotFoundError, ReservationRejectedError
from models import Reservation, ReservationStatus
from repos import ContractRepo, PropertyRepo, ReservationRepo
from utils.money import to_decimal
from .unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

DEFAULT_REJECTION_REASON = "No reason provided"

ALLOWED_TRANSITIONS = {
     ReservationStatus.PENDING: {ReservationStatus.APPROVED, ReservationStatus.REJECTED},
     ReservationStatus.APPROVED: {ReservationStatus.PENDING},
     ReservationStatus.REJECTED: {ReservationStatus.PENDING},
}

INTAKE_FIELDS = (
     "client_name",
     "client_email",
     "client_phone",
     "client_address",
     "occupation",
     "employer",
     "employment_status",
     "years_employed",
     "monthly_income",
     "other_income_source",
     "other_income_amount",
     "total_monthly_income",
     "message",
)


def _load(db: Session, reservation_id: int) -> Reservation:
     reservation = ReservationRepo(db).find_by_id(reservation_id, for_update=True)
     if reservation is None:
          raise NotFoundError(f"Reservation with ID {reservation_id} not found")
     return reservation


def _transition(
     reservation: Reservation,
     target: ReservationStatus,
     actor: Optional[str]
) -> Reservation:
     current = reservation.status
     if target not in ALLOWED_TRANSITIONS.get(current, set()):
          raise InvalidTransitionError(
               f"Reservation {reservation.tracking_number} cannot move from "
               f"'{current.value}' to '{target.value}'"
          )
     reservation.status = target
     reservation.status_changed_by = actor
     logger.info(
          "Reservation %s: %s -> %s", reservation.tracking_number, current.value, target.value
     )
     return reservation


class ReservationService:
     """Service class for reservation intake and review."""

     @staticmethod
     @unit_of_work
     def create_reservation(db: Session, property_id: int, reservation_fee: Decimal, **details) -> Reservation:
          """
          Store a new pending reservation and assign its tracking number.

          Raises:
               NotFoundError: If the property doesn't exist
               ReservationRejectedError: If the fee is negative or above the property price
          """
          prop = PropertyRepo(db).find_by_id(property_id)
          if prop is None:
               raise NotFoundError(f"Property with ID {property_id} not found")

          fee = to_decimal(reservation_fee or 0)
          if fee < 0:
               raise ReservationRejectedError("Reservation fee cannot be negative")
          if fee > prop.property_price:
               raise ReservationRejectedError(
                    f"Reservation fee {fee} exceeds the property price {prop.property_price}"
               )

          unknown = set(details) - set(INTAKE_FIELDS)
          if unknown:
               raise ReservationRejectedError(f"Unknown reservation fields: {', '.join(sorted(unknown))}")

          reservation = Reservation(
               property_id=property_id,
               reservation_fee=fee,
               status=ReservationStatus.PENDING,
               **details,
          )
          repo = ReservationRepo(db)
          repo.save(reservation)
          reservation.tracking_number = Reservation.tracking_number_for(reservation.id)
          db.flush()

          logger.info("Reservation %s created for property %s", reservation.tracking_number, property_id)
          return reservation

     @staticmethod
     def get_reservation(db: Session, reservation_id: int) -> Reservation:
          reservation = ReservationRepo(db).find_by_id(reservation_id)
          if reservation is None:
               raise NotFoundError(f"Reservation with ID {reservation_id} not found")
          return reservation

     @staticmethod
     def list_reservations(
          db: Session,
          status: Optional[ReservationStatus] = None,
          page: int = 1,
          page_size: int = 50
     ) -> Tuple[List[Reservation], int]:
          return ReservationRepo(db).list(status=status, page=page, page_size=page_size)

     @staticmethod
     @unit_of_work
     def approve(db: Session, reservation_id: int, approved_by: Optional[str] = None) -> Reservation:
          """pending -> approved."""
          reservation = _load(db, reservation_id)
          return _transition(reservation, ReservationStatus.APPROVED, approved_by)

     @staticmethod
     @unit_of_work
     def reject(
          db: Session,
          reservation_id: int,
          reason: Optional[str] = None,
          rejected_by: Optional[str] = None
     ) -> Reservation:
          """pending -> rejected; the reason is kept for audit."""
          reservation = _load(db, reservation_id)
          _transition(reservation, ReservationStatus.REJECTED, rejected_by)
          reservation.rejection_reason = reason or DEFAULT_REJECTION_REASON
          return reservation

     @staticmethod
     @unit_of_work
     def revert(db: Session, reservation_id: int, reverted_by: Optional[str] = None) -> Reservation:
          """
          approved/rejected -> pending.

          A contract already created for the reservation is left active and
          untouched; only a warning is logged.
          """
          reservation = _load(db, reservation_id)
          _transition(reservation, ReservationStatus.PENDING, reverted_by)
          reservation.rejection_reason = None

          contract = ContractRepo(db).find_by_reservation_id(reservation_id)
          if contract is not None:
               logger.warning(
                    "Reservation %s reverted to pending while contract %s stays active",
                    reservation.tracking_number, contract.contract_number,
               )
          return reservation
