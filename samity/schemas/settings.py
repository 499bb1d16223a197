from pydantic import BaseModel, Field
from decimal import Decimal


class SettingsResponse(BaseModel):
    interest_rate: Decimal
    monthly_savings_amount: Decimal

    class Config:
        from_attributes = True
        frozen = True


class SettingsUpdate(BaseModel):
    """Schema for replacing the group settings."""
    interest_rate: Decimal = Field(..., ge=0, le=100, decimal_places=2, description="Monthly interest rate percentage on outstanding principal")
    monthly_savings_amount: Decimal = Field(..., gt=0, decimal_places=2, description="Default deposit for the monthly collection")
