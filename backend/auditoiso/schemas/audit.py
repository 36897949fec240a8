"""
Pydantic schemas for audits.

Submissions are validated strictly. Stored audits are read leniently: a
malformed field falls back to its default instead of failing, so records
written by older clients never break listing or PDF export. Unknown keys on
checklist items and scores are kept as submitted.
"""

from copy import copy
from typing import Annotated, Any, List, Optional, Union

from pydantic import Field, ValidationError, WrapValidator, field_validator

from auditoiso.schemas.base import CamelModel, Number

# ISO-8601 string, or epoch milliseconds as sent by JS clients
Timestamp = Union[str, int, float]


def _fallback(default: Any) -> WrapValidator:
    def validate(value, handler):
        try:
            return handler(value)
        except ValidationError:
            return copy(default)
    return WrapValidator(validate)


class ChecklistResult(CamelModel):
    """One evaluated checklist item."""
    id: str
    text: str
    weight: Number = Field(..., gt=0)
    passed: bool = False

    class Config:
        extra = "allow"


class Score(CamelModel):
    """Aggregate score as submitted by the client."""
    total_achieved: Optional[Number] = None
    total_possible: Optional[Number] = None
    percent: Optional[Number] = None

    class Config:
        extra = "allow"


class AuditCreate(CamelModel):
    """Request body for submitting an audit."""
    name: str = Field(..., min_length=1, description="Display title")
    standard: str = Field("", description="Compliance standard, e.g. ISO 9001")
    checklist: List[ChecklistResult] = Field(default_factory=list)
    score: Optional[Score] = None
    notes: Optional[str] = None
    auditor: Optional[str] = None
    created_at_audit: Optional[Timestamp] = Field(None, description="When the audit was performed")

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Q1 Review",
                "standard": "ISO 9001",
                "checklist": [
                    {"id": "9001-1", "text": "Existe un proceso documentado", "weight": 3, "passed": True}
                ],
                "score": {"totalAchieved": 3, "totalPossible": 3, "percent": 100},
                "notes": "",
                "auditor": "Jane"
            }
        }


LenientNumber = Annotated[Optional[Number], _fallback(None)]
LenientText = Annotated[Optional[str], _fallback("")]


class RecordedItem(CamelModel):
    """A checklist item as found in storage."""
    id: LenientText = ""
    text: LenientText = ""
    weight: LenientNumber = None
    passed: Annotated[bool, _fallback(False)] = False

    class Config:
        extra = "allow"


class RecordedScore(CamelModel):
    """A score as found in storage; unusable parts read as None."""
    total_achieved: LenientNumber = None
    total_possible: LenientNumber = None
    percent: LenientNumber = None

    class Config:
        extra = "allow"


class Audit(CamelModel):
    """A stored audit record."""
    id: str
    name: LenientText = ""
    standard: LenientText = ""
    checklist: Annotated[List[RecordedItem], _fallback([])] = Field(default_factory=list)
    score: Annotated[Optional[RecordedScore], _fallback(None)] = None
    notes: LenientText = ""
    auditor: LenientText = ""
    created_at_audit: Annotated[Optional[Timestamp], _fallback(None)] = None
    created_at: LenientText = ""
    created_by: LenientText = ""

    class Config:
        extra = "allow"
