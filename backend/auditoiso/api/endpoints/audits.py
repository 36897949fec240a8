"""
Audit API endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from auditoiso.api.deps import get_audit_store
from auditoiso.schemas.audit import Audit, AuditCreate
from auditoiso.services.audit_store import AuditStore, ScoreMismatch
from auditoiso.services.auth import CurrentUser, get_current_user

router = APIRouter(tags=["Audits"])


@router.get("", response_model=List[Audit])
def list_audits(
    user: CurrentUser = Depends(get_current_user),
    store: AuditStore = Depends(get_audit_store),
):
    """Audits created by the caller, newest first."""
    return store.list_by_owner(user.id)


@router.post("", response_model=Audit, status_code=201)
def create_audit(
    request: AuditCreate,
    user: CurrentUser = Depends(get_current_user),
    store: AuditStore = Depends(get_audit_store),
):
    """Submit a completed audit. The score is stored as sent."""
    try:
        return store.create(request, owner_id=user.id)
    except ScoreMismatch as e:
        raise HTTPException(status_code=422, detail=str(e))
