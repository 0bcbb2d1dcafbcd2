# routers/pricing.py
"""
Public pricing quotes; no token required.
"""
from datetime import date
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Query

from schemas.pricing import MonthlyInterestResponse
from services.pricing import DEFAULT_INTEREST_RATE, compute_monthly_interest, seasonal_interest_multiplier

router = APIRouter(prefix="/api/pricing", tags=["pricing"])


@router.get("/monthly-interest", response_model=MonthlyInterestResponse)
def monthly_interest(
     total_price: Decimal = Query(..., description="Property price"),
     down_payment: Decimal = Query(Decimal("0"), description="Downpayment already covered"),
     rate: Optional[Decimal] = Query(None, ge=0, description="Annual rate, defaults to 5%"),
     month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month, defaults to the current one"),
):
     month = month or date.today().month
     result = compute_monthly_interest(total_price, down_payment, rate, month)
     return MonthlyInterestResponse(
          total_price=total_price,
          down_payment=down_payment,
          annual_rate=rate or DEFAULT_INTEREST_RATE,
          month=month,
          seasonal_multiplier=seasonal_interest_multiplier(month),
          remaining_balance=result.remaining_balance,
          monthly_interest=result.monthly_interest,
     )
