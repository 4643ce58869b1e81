from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from ..common.crud_service import CrudService
from ..common.validators import is_blank, optional_number
from ..core.constants import SCORE_MAX, SCORE_MIN
from ..core.exceptions import ValidationError
from .grading import GradingScale, band_key

SKILL_FIELDS = ("listening_score", "speaking_score", "reading_score", "writing_score")


def total_of(skills: List[float]) -> float:
    mean = sum(Decimal(str(s)) for s in skills) / Decimal(len(skills))
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class ScoreService(CrudService):
    label = "Score"
    required_fields = ("student_id", "test_id")
    required_message = "Student ID and Test ID are required"

    def __init__(self, repo, *, grading: Optional[GradingScale] = None, **kwargs):
        super().__init__(repo, **kwargs)
        self._grading = grading or GradingScale()

    def list_by_student(self, student_id: int) -> List[Dict[str, Any]]:
        return self._repo.list_by_student(int(student_id))

    def list_by_test(self, test_id: int) -> List[Dict[str, Any]]:
        return self._repo.list_by_test(int(test_id))

    def update(self, record_id: int, data: Any) -> Dict[str, Any]:
        existing = self.get(record_id)
        if isinstance(data, dict):
            # Recompute total/grade from the merged skill scores.
            data = {**{f: existing.get(f) for f in SKILL_FIELDS}, **data}
        return super().update(record_id, data)

    def _clean(self, values: Dict[str, Any], *, creating: bool) -> Dict[str, Any]:
        for key in ("student_id", "test_id"):
            if key in values:
                value = values[key]
                if isinstance(value, bool) or not isinstance(value, (int, str)) or not str(value).strip().isdigit():
                    raise ValidationError("IDs must be numbers")
                values[key] = int(value)

        skills = []
        for field in SKILL_FIELDS:
            if field not in values:
                continue
            score = optional_number(values[field], field)
            if score is not None and not SCORE_MIN <= score <= SCORE_MAX:
                raise ValidationError(f"All scores must be between {SCORE_MIN} and {SCORE_MAX}")
            values[field] = score
            if score is not None:
                skills.append(score)

        values.pop("total_score", None)
        values.pop("grade", None)
        if len(skills) == len(SKILL_FIELDS):
            values["total_score"] = total_of(skills)
            values["grade"] = self._grading.grade_for(values["total_score"])
        elif not creating and any(f in values and is_blank(values[f]) for f in SKILL_FIELDS):
            values["total_score"] = None
            values["grade"] = None
        return values

    def statistics(self) -> Dict[str, Any]:
        overview = self._repo.totals_overview()
        counts = self._repo.grade_counts()

        def rounded(key: str) -> Optional[float]:
            value = overview.get(key)
            return None if value is None else round(float(value), 2)

        stats: Dict[str, Any] = {
            "total_scores": int(overview.get("total_scores") or 0),
            "average_score": rounded("average_score"),
            "highest_score": rounded("highest_score"),
            "lowest_score": rounded("lowest_score"),
        }
        for label in self._grading.labels:
            stats[band_key(label)] = counts.get(label, 0)
        return stats
