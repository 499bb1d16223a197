from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
import enum
from samity.models.transaction import TransactionType


class HistoryFilter(str, enum.Enum):
    """Member history views: everything, loan activity only, or one transaction type."""
    ALL = "ALL"
    LOAN_HISTORY = "LOAN_HISTORY"
    DEPOSIT = TransactionType.DEPOSIT.value
    LOAN_TAKEN = TransactionType.LOAN_TAKEN.value
    LOAN_REPAYMENT = TransactionType.LOAN_REPAYMENT.value
    INTEREST_PAID = TransactionType.INTEREST_PAID.value


class TransactionResponse(BaseModel):
    id: UUID
    member_id: UUID
    date: datetime
    type: TransactionType
    amount: Decimal
    note: Optional[str] = None

    class Config:
        from_attributes = True
        frozen = True


class TransactionCreate(BaseModel):
    """Schema for recording a single transaction."""
    member_id: UUID
    type: TransactionType
    amount: Decimal = Field(..., description="Rupee amount, greater than zero with at most two decimal places")
    note: Optional[str] = None
    date: Optional[datetime] = Field(None, description="Defaults to the time of recording")


class MonthlyCollectionRequest(BaseModel):
    """Bulk monthly savings collection for the selected members."""
    member_ids: List[UUID] = Field(..., description="Members to credit; duplicates are ignored")
    amount: Optional[Decimal] = Field(None, description="Defaults to the configured monthly savings amount")
