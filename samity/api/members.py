from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from samity.db.base import get_db
from samity.core.dependencies import ledger_http_exception
from samity.models.transaction import TransactionType
from samity.schemas.member import (
    MemberBulkDeleteRequest,
    MemberOverview,
    MemberResponse,
    MemberUpsert,
    SuggestedAmountResponse,
)
from samity.schemas.snapshot import SamitySnapshot
from samity.schemas.transaction import HistoryFilter
from samity.services import operations
from samity.services.ledger import LedgerError
from typing import List, Optional
from uuid import UUID

router = APIRouter(prefix="/api/members", tags=["members"])


@router.get("", response_model=List[MemberResponse])
def list_members(
    search: Optional[str] = Query(None, description="Name or phone fragment; restricts to active members"),
    db: Session = Depends(get_db)
):
    """List all members, or search active members by name or phone."""
    if search is None:
        return operations.list_members(db)
    return operations.search_members(db, search)


@router.post("", response_model=SamitySnapshot)
def add_member(
    member: MemberUpsert,
    db: Session = Depends(get_db)
):
    """Add a new member (or edit one, when an existing id is supplied)."""
    try:
        return operations.add_or_update_member(db, member)
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.post("/bulk-delete", response_model=SamitySnapshot)
def bulk_delete_members(
    request: MemberBulkDeleteRequest,
    db: Session = Depends(get_db)
):
    """Soft-delete several members at once."""
    try:
        return operations.soft_delete_members(db, request.member_ids)
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.get("/{member_id}", response_model=MemberOverview)
def get_member(
    member_id: UUID,
    history: HistoryFilter = Query(HistoryFilter.ALL, description="History view: ALL, LOAN_HISTORY or a transaction type"),
    db: Session = Depends(get_db)
):
    """Member balances, estimated interest due, current loan cycle and history."""
    try:
        return operations.get_member_overview(db, member_id, history)
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.put("/{member_id}", response_model=SamitySnapshot)
def update_member(
    member_id: UUID,
    member: MemberUpsert,
    db: Session = Depends(get_db)
):
    """Edit a member's name and phone number."""
    if member.id is not None and member.id != member_id:
        raise HTTPException(status_code=400, detail="Member id in body does not match the URL")
    try:
        return operations.add_or_update_member(db, member.model_copy(update={"id": member_id}))
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.delete("/{member_id}", response_model=SamitySnapshot)
def delete_member(
    member_id: UUID,
    db: Session = Depends(get_db)
):
    """Soft-delete a member. Their transactions are kept."""
    try:
        return operations.soft_delete_member(db, member_id)
    except LedgerError as e:
        raise ledger_http_exception(e)


@router.get("/{member_id}/suggested-amount", response_model=SuggestedAmountResponse)
def get_suggested_amount(
    member_id: UUID,
    type: TransactionType = Query(..., description="Transaction type being recorded"),
    db: Session = Depends(get_db)
):
    """Prefilled amount for the record form."""
    try:
        return {"amount": operations.suggest_amount(db, member_id, type)}
    except LedgerError as e:
        raise ledger_http_exception(e)
