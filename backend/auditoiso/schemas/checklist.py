"""
Pydantic schemas for checklist templates.
"""

from typing import List

from pydantic import BaseModel, Field

from auditoiso.schemas.base import Number


class ChecklistItem(BaseModel):
    """A template question; results are recorded as ChecklistResult."""
    id: str
    text: str
    weight: Number = Field(..., gt=0)


class ChecklistTemplate(BaseModel):
    name: str
    standard: str
    version: str = "1.0"
    items: List[ChecklistItem] = []
