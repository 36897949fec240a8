"""
Checklist template endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends

from auditoiso.api.deps import get_checklist_service
from auditoiso.schemas.checklist import ChecklistTemplate
from auditoiso.services.checklists import ChecklistService

router = APIRouter(tags=["Checklists"])


@router.get("/defaults", response_model=List[ChecklistTemplate])
def default_checklists(service: ChecklistService = Depends(get_checklist_service)):
    """Default ISO checklist templates."""
    return service.get_defaults()
