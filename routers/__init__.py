# routers/__init__.py
from .reservations import router as reservations_router
from .contracts import router as contracts_router
from .payments import router as payments_router
from .pricing import router as pricing_router

__all__ = [
     "reservations_router",
     "contracts_router",
     "payments_router",
     "pricing_router",
]
