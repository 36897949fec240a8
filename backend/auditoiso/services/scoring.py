"""
Audit scoring.

The store persists whatever score the client submits. These helpers compute
the expected score from a checklist so mismatches can be logged or rejected
(see SCORE_MISMATCH_POLICY) without ever rewriting the stored value.
"""

import math
from typing import List, Optional

from auditoiso.schemas.audit import ChecklistResult, Score


def _compact(value: float):
    """3.0 -> 3, keep real fractions."""
    return int(value) if float(value).is_integer() else value


def percent_of(achieved: float, possible: float) -> int:
    """Whole percent, half rounded up; 0 when nothing was possible."""
    if not possible or possible <= 0:
        return 0
    return int(math.floor(100 * achieved / possible + 0.5))


def compute_score(checklist: List[ChecklistResult]) -> Score:
    """Score a checklist: passed items contribute their weight."""
    possible = sum(item.weight for item in checklist)
    achieved = sum(item.weight for item in checklist if item.passed)
    return Score(
        total_achieved=_compact(achieved),
        total_possible=_compact(possible),
        percent=percent_of(achieved, possible),
    )


def score_mismatches(checklist: List[ChecklistResult], score: Optional[Score]) -> List[str]:
    """Describe how a submitted score differs from the checklist.

    Returns an empty list when the score is consistent or absent.
    """
    if score is None:
        return []

    expected = compute_score(checklist)
    problems = []
    for field_name in ("total_achieved", "total_possible", "percent"):
        given = getattr(score, field_name)
        wanted = getattr(expected, field_name)
        if given is None:
            continue
        if not math.isclose(float(given), float(wanted), abs_tol=1e-9):
            problems.append(f"{field_name}={given} (expected {wanted})")
    return problems
