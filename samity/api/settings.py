from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from samity.db.base import get_db
from samity.schemas.settings import SettingsResponse, SettingsUpdate
from samity.schemas.snapshot import SamitySnapshot
from samity.services import operations

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
def get_settings(db: Session = Depends(get_db)):
    """Get interest rate and monthly savings amount."""
    return operations.get_settings(db)


@router.put("", response_model=SamitySnapshot)
def update_settings(
    settings_update: SettingsUpdate,
    db: Session = Depends(get_db)
):
    """Replace the group settings."""
    return operations.save_settings(db, settings_update)


@router.post("/reset", response_model=SamitySnapshot)
def reset_all_data(db: Session = Depends(get_db)):
    """Delete all members and transactions and restore default settings."""
    return operations.reset_all(db)
