"""Prediction result, outcome, and rendered report models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel

from exovet.models.form import ValidationReport

# Expert probabilities (``expert_NN_proba``) plus ``final_score``.
PredictionResult = Mapping[str, float]

FINAL_SCORE_KEY = "final_score"


class ManualEntryMarker(Enum):
    """Ground-truth sentinel for free-form entries with nothing to compare."""

    MANUAL_ENTRY = "MANUAL ENTRY"


MANUAL_ENTRY = ManualEntryMarker.MANUAL_ENTRY


@dataclass(frozen=True)
class PredictionOutcome:
    """Render input: a result and the ground truth it is compared to."""

    result: PredictionResult
    ground_truth: str | ManualEntryMarker

    @property
    def is_manual(self) -> bool:
        return self.ground_truth is MANUAL_ENTRY


class ExpertLine(BaseModel):
    """One simulated expert's probability, formatted for display."""

    key: str
    name: str
    probability: float
    percent: str
    text: str


class RenderedReport(BaseModel):
    """Display payload for a single prediction.

    ``status`` and ``headline`` are only set when a ground truth was
    available to compare against.
    """

    manual_entry: bool
    notice: str | None = None
    experts: list[ExpertLine]
    final_prediction: Literal["PLANET", "FALSE_POSITIVE"]
    final_score: float
    final_score_text: str
    summary: str
    ground_truth: str | None = None
    is_correct: bool | None = None
    status: Literal["correct", "incorrect"] | None = None
    headline: str | None = None


class PredictResponse(BaseModel):
    """Response for ``POST /predict``.

    Exactly one of ``report`` and ``validation`` is set.  ``lines`` is the
    report flattened to plain text for shells that only print.
    """

    report: RenderedReport | None = None
    validation: ValidationReport | None = None
    lines: list[str] = []
