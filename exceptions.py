# exceptions.py
"""
Error taxonomy for the contract payment plan engine.

Every error raised by a service carries a machine-readable ``kind`` and the
HTTP status the API layer answers with. Nothing here is caught and logged
only; callers decide how to present the failure.
"""
from typing import List, Optional


class ContractEngineError(Exception):
     """Base exception for all engine errors."""

     kind = "engine_error"
     status_code = 400

     def __init__(self, message: str):
          super().__init__(message)
          self.message = message

     def to_dict(self) -> dict:
          return {"success": False, "error": self.kind, "message": self.message}


class InvalidPlanError(ContractEngineError):
     """Raised when a payment plan month count is outside 1..60."""

     kind = "invalid_plan"


class ReservationNotApprovedError(ContractEngineError):
     """Raised when a contract is requested for a reservation that is not approved."""

     kind = "reservation_not_approved"
     status_code = 409


class ReservationRejectedError(ContractEngineError):
     """Raised when reservation intake data breaks a business rule."""

     kind = "reservation_rejected"


class InvalidTransitionError(ContractEngineError):
     """Raised on a reservation status move the state machine does not allow."""

     kind = "invalid_transition"
     status_code = 409


class NotFoundError(ContractEngineError):
     """Raised when a referenced entity does not exist."""

     kind = "not_found"
     status_code = 404


class PlanChangeRejectedError(ContractEngineError):
     """Raised when a plan change fails server-side validation."""

     kind = "plan_change_rejected"

     def __init__(self, message: str, validation_errors: Optional[List[str]] = None):
          super().__init__(message)
          self.validation_errors = list(validation_errors or [])

     def to_dict(self) -> dict:
          payload = super().to_dict()
          payload["validation_errors"] = self.validation_errors
          return payload


class PaymentRejectedError(ContractEngineError):
     """Raised when a payment or payment revert is not acceptable."""

     kind = "payment_rejected"


class InvalidQueryError(ContractEngineError):
     """Raised when a listing request is missing a required filter."""

     kind = "invalid_query"


class ConcurrentModificationError(ContractEngineError):
     """Raised when a contract changed since the caller last read it."""

     kind = "concurrent_modification"
     status_code = 409


class UniqueConstraintViolation(ContractEngineError):
     """Raised when an insert collides with a uniqueness constraint."""

     kind = "unique_constraint_violation"
     status_code = 409


class PersistenceError(ContractEngineError):
     """Raised when the storage layer fails after the retry budget is spent."""

     kind = "persistence_error"
     status_code = 503
