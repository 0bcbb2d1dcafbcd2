# schemas/pricing.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict


class MonthlyInterestResponse(BaseModel):
     """Response for GET /pricing/monthly-interest."""
     total_price: Decimal
     down_payment: Decimal
     annual_rate: Decimal
     month: int
     seasonal_multiplier: Decimal
     remaining_balance: Decimal
     monthly_interest: Decimal

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "total_price": 2000000.00,
                    "down_payment": 200000.00,
                    "annual_rate": 0.05,
                    "month": 12,
                    "seasonal_multiplier": 1.3,
                    "remaining_balance": 1800000.00,
                    "monthly_interest": 9750.00
               }
          }
     )
