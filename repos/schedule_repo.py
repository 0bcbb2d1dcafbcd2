# repos/schedule_repo.py
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from models import PaymentSchedule, PaymentTransaction, ScheduleStatus, TransactionStatus
from .base import BaseRepo


class ScheduleRepo(BaseRepo):
     def find_by_id(self, schedule_id: int, for_update: bool = False) -> Optional[PaymentSchedule]:
          query = self.db.query(PaymentSchedule).filter(PaymentSchedule.id == schedule_id)
          if for_update:
               query = query.with_for_update().populate_existing()
          return query.first()

     def list_for_contract(self, contract_id: int, refresh: bool = False) -> List[PaymentSchedule]:
          """``refresh`` overwrites copies already in the session with the stored rows."""
          query = (
               self.db.query(PaymentSchedule)
               .filter(PaymentSchedule.contract_id == contract_id)
               .order_by(PaymentSchedule.installment_number.asc())
          )
          if refresh:
               query = query.populate_existing()
          return query.all()

     def list_past_due(self, today: date) -> List[PaymentSchedule]:
          return (
               self.db.query(PaymentSchedule)
               .filter(
                    PaymentSchedule.payment_status == ScheduleStatus.PENDING,
                    PaymentSchedule.due_date < today
               )
               .all()
          )

     def save_all(self, entries: Iterable[PaymentSchedule]) -> List[PaymentSchedule]:
          """Insert entries in the given order within the current transaction."""
          return self._add_all_and_flush(entries)

     def delete_all(self, entries: Iterable[PaymentSchedule]) -> int:
          count = 0
          for entry in entries:
               self.db.delete(entry)
               count += 1
          self._flush()
          return count


class TransactionRepo(BaseRepo):
     def list_for_schedule(
          self,
          schedule_id: int,
          status: Optional[TransactionStatus] = None
     ) -> List[PaymentTransaction]:
          query = self.db.query(PaymentTransaction).filter(PaymentTransaction.schedule_id == schedule_id)
          if status:
               query = query.filter(PaymentTransaction.transaction_status == status)
          return query.order_by(PaymentTransaction.id.desc()).all()

     def search(
          self,
          contract_id: Optional[int] = None,
          schedule_id: Optional[int] = None,
          status: Optional[TransactionStatus] = None,
          payment_method: Optional[str] = None,
          start_date: Optional[date] = None,
          end_date: Optional[date] = None
     ) -> List[PaymentTransaction]:
          """Newest first. The date range covers whole days, both ends included."""
          query = self.db.query(PaymentTransaction)
          if contract_id is not None:
               query = query.filter(PaymentTransaction.contract_id == contract_id)
          if schedule_id is not None:
               query = query.filter(PaymentTransaction.schedule_id == schedule_id)
          if status:
               query = query.filter(PaymentTransaction.transaction_status == status)
          if payment_method:
               query = query.filter(PaymentTransaction.payment_method == payment_method)
          if start_date:
               query = query.filter(PaymentTransaction.transaction_date >= datetime.combine(start_date, time.min))
          if end_date:
               query = query.filter(
                    PaymentTransaction.transaction_date < datetime.combine(end_date + timedelta(days=1), time.min)
               )
          return query.order_by(PaymentTransaction.transaction_date.desc(), PaymentTransaction.id.desc()).all()

     def save(self, transaction: PaymentTransaction) -> PaymentTransaction:
          return self._add_and_flush(transaction)
