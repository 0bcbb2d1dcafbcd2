# repos/base.py
"""
Shared repository plumbing: add/flush with driver errors translated into
the engine's error taxonomy.
"""
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exceptions import UniqueConstraintViolation


class BaseRepo:
     def __init__(self, db: Session):
          self.db = db

     def _add_and_flush(self, *instances):
          self.db.add_all(instances)
          self._flush()
          return instances[0] if len(instances) == 1 else list(instances)

     def _add_all_and_flush(self, instances: Iterable) -> list:
          items = list(instances)
          self.db.add_all(items)
          self._flush()
          return items

     def _flush(self) -> None:
          try:
               self.db.flush()
          except IntegrityError as exc:
               self.db.rollback()
               raise UniqueConstraintViolation(f"Integrity constraint violated: {exc.orig}") from exc
