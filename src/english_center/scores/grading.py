from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import DEFAULT_GRADE_BANDS


class GradingScale:
    """Maps a total score to a grade label.

    Bands are ``(label, minimum)`` pairs; a score gets the label of the highest
    minimum it reaches. The lowest band acts as the floor for anything below it.
    """

    def __init__(self, bands: Optional[Iterable[Sequence]] = None):
        pairs = [(str(label), float(minimum)) for label, minimum in (bands or DEFAULT_GRADE_BANDS)]
        if not pairs:
            raise ValueError("A grading scale needs at least one band")
        labels = [label for label, _ in pairs]
        if len(set(labels)) != len(labels):
            raise ValueError("Grade band labels must be unique")
        self._bands: List[Tuple[str, float]] = sorted(pairs, key=lambda b: b[1], reverse=True)

    @property
    def bands(self) -> List[Tuple[str, float]]:
        return list(self._bands)

    @property
    def labels(self) -> List[str]:
        return [label for label, _ in self._bands]

    def grade_for(self, total: float) -> str:
        for label, minimum in self._bands:
            if total >= minimum:
                return label
        return self._bands[-1][0]


def band_key(label: str) -> str:
    """Statistics key for a band, e.g. ``"Very Good"`` -> ``"very_good_count"``."""
    return "_".join(label.lower().split()) + "_count"
