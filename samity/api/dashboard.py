from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from samity.db.base import get_db
from samity.core.dependencies import ledger_http_exception
from samity.schemas.ledger import DashboardStats, LedgerIntegrityReport
from samity.services import operations
from samity.services.ledger import LedgerError

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
def get_dashboard(db: Session = Depends(get_db)):
    """Active members, total savings, loans outstanding and fund position."""
    return operations.get_dashboard(db)


@router.get("/integrity", response_model=LedgerIntegrityReport)
def check_ledger_integrity(db: Session = Depends(get_db)):
    """Compare stored member balances with a full replay of the transaction log."""
    try:
        return operations.verify_ledger(db)
    except LedgerError as e:
        raise ledger_http_exception(e)
