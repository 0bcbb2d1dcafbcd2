# repos/contract_repo.py
from typing import List, Optional

from models import Contract, ContractStatus, PlanChange
from .base import BaseRepo


class ContractRepo(BaseRepo):
     def find_by_id(self, contract_id: int, for_update: bool = False) -> Optional[Contract]:
          """
          Load a contract. ``for_update`` takes a row lock (SELECT ... FOR UPDATE
          where supported) and refreshes any copy already in the session.
          """
          query = self.db.query(Contract).filter(Contract.id == contract_id)
          if for_update:
               query = query.with_for_update().populate_existing()
          return query.first()

     def find_by_reservation_id(self, reservation_id: int) -> Optional[Contract]:
          return self.db.query(Contract).filter(Contract.reservation_id == reservation_id).first()

     def list(self, status: Optional[ContractStatus] = None) -> List[Contract]:
          query = self.db.query(Contract)
          if status:
               query = query.filter(Contract.contract_status == status)
          return query.order_by(Contract.id.desc()).all()

     def save(self, contract: Contract) -> Contract:
          """Insert a new contract; a second contract for the same reservation raises UniqueConstraintViolation."""
          return self._add_and_flush(contract)

     def add_plan_change(self, record: PlanChange) -> PlanChange:
          return self._add_and_flush(record)
