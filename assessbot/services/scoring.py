# assessbot/services/scoring.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class Score:
    percentage: float  # 0..100, one decimal
    correct: int
    total: int

    @property
    def wrong(self) -> int:
        return self.total - self.correct


def score_submission(submitted: Sequence[str], answer_key: Sequence[str]) -> Score:
    """
    A submitted token counts as correct when it appears anywhere in the key
    (membership, not position). Both sides are compared lower-cased.

    Callers must check the submission size first: a length mismatch is a
    ValueError here, never a partial score.
    """
    if not answer_key:
        raise ValueError("Answer key is empty")
    if len(submitted) != len(answer_key):
        raise ValueError(
            f"Expected {len(answer_key)} answers, got {len(submitted)}"
        )

    key = {token.strip().lower() for token in answer_key}
    correct = sum(1 for token in submitted if token.strip().lower() in key)
    total = len(answer_key)

    return Score(
        percentage=round(100 * correct / total, 1),
        correct=correct,
        total=total,
    )
