from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from samity.db.base import get_db
from samity.core.dependencies import ledger_http_exception
from samity.schemas.snapshot import SamitySnapshot
from samity.schemas.transaction import MonthlyCollectionRequest, TransactionCreate, TransactionResponse
from samity.services import operations
from samity.services.ledger import LedgerError
from typing import List

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionResponse])
def list_transactions(db: Session = Depends(get_db)):
    """The full transaction log in recording order."""
    return operations.list_transactions(db)


@router.post("", response_model=SamitySnapshot)
def record_transaction(
    transaction: TransactionCreate,
    db: Session = Depends(get_db)
):
    """Record a deposit, loan, repayment or interest payment."""
    try:
        return operations.record_transaction(db, transaction)
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.post("/monthly-collection", response_model=SamitySnapshot)
def record_monthly_collection(
    request: MonthlyCollectionRequest,
    db: Session = Depends(get_db)
):
    """Record the monthly savings deposit for each selected member."""
    try:
        return operations.record_bulk_deposits(db, request.member_ids, request.amount)
    except LedgerError as e:
        raise ledger_http_exception(e)
