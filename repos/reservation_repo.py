# repos/reservation_repo.py
from typing import List, Optional, Tuple

from models import Property, Reservation, ReservationStatus
from .base import BaseRepo


class PropertyRepo(BaseRepo):
     def find_by_id(self, property_id: int) -> Optional[Property]:
          return self.db.query(Property).filter(Property.id == property_id).first()

     def save(self, prop: Property) -> Property:
          return self._add_and_flush(prop)


class ReservationRepo(BaseRepo):
     def find_by_id(self, reservation_id: int, for_update: bool = False) -> Optional[Reservation]:
          query = self.db.query(Reservation).filter(Reservation.id == reservation_id)
          if for_update:
               query = query.with_for_update().populate_existing()
          return query.first()

     def list(
          self,
          status: Optional[ReservationStatus] = None,
          page: int = 1,
          page_size: int = 50
     ) -> Tuple[List[Reservation], int]:
          query = self.db.query(Reservation)
          if status:
               query = query.filter(Reservation.status == status)
          total = query.count()
          offset = (page - 1) * page_size
          rows = query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).offset(offset).limit(page_size).all()
          return rows, total

     def save(self, reservation: Reservation) -> Reservation:
          return self._add_and_flush(reservation)
