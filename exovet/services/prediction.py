"""Prediction resolution: fixture lookup or simulated manual prediction.

Branches are evaluated in priority order:

1. **manual** -- ``candidate_id`` is empty.  Editable fields must
   validate; a result is then synthesized from the random source.
2. **lookup** -- ``candidate_id`` has a synthesis record.  The record is
   returned as-is and compared against the form's ``disposition``.
3. **fallback** -- ``candidate_id`` has no synthesis record.  Editable
   fields must validate; the request then proceeds exactly as a manual
   entry and the stale candidate's ground truth is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from exovet.models.form import FormState, ValidationReport
from exovet.models.prediction import (
    FINAL_SCORE_KEY,
    MANUAL_ENTRY,
    PredictionOutcome,
    PredictionResult,
)
from exovet.repositories.registry import SampleRegistry
from exovet.services.random_source import RandomSource
from exovet.services.validation import validate_fields

logger = logging.getLogger(__name__)

EXPERT_COUNT = 9
EXPERT_PROBA_HIGH = 0.35
NOISE_HALF_WIDTH = 0.05


def expert_key(index: int) -> str:
    """Return the result key for the 1-based expert *index*."""
    return f"expert_{index:02d}_proba"


@dataclass(frozen=True)
class Resolution:
    """What a predict request resolved to.

    Exactly one of ``outcome`` and ``validation`` is set: a failed
    validation aborts the request without producing a result.
    """

    mode: Literal["manual", "lookup", "fallback"]
    outcome: PredictionOutcome | None = None
    validation: ValidationReport | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not None


class PredictionResolver:
    """Resolves a form state into a :class:`PredictionOutcome`."""

    def __init__(self, registry: SampleRegistry, random_source: RandomSource) -> None:
        self.registry = registry
        self.random_source = random_source

    def synthesize(self) -> PredictionResult:
        """Draw a low-scoring placeholder result.

        Each expert is uniform in ``[0, 0.35)``; ``final_score`` is their
        mean plus uniform noise in ``[-0.05, 0.05)``, floored at zero.
        """
        probas = self.random_source.uniform(0.0, EXPERT_PROBA_HIGH, EXPERT_COUNT)
        (noise,) = self.random_source.uniform(-NOISE_HALF_WIDTH, NOISE_HALF_WIDTH, 1)
        result: dict[str, float] = {
            expert_key(i): proba for i, proba in enumerate(probas, start=1)
        }
        avg = sum(probas) / len(probas)
        result[FINAL_SCORE_KEY] = max(0.0, avg + noise)
        return MappingProxyType(result)

    def resolve(self, form: FormState) -> Resolution:
        candidate_id = form.candidate_id

        if not candidate_id:
            return self._resolve_manual(form, mode="manual")

        record = self.registry.find_synthesis(candidate_id)
        if record is not None:
            return Resolution(
                mode="lookup",
                outcome=PredictionOutcome(result=record, ground_truth=form.disposition),
            )

        # TODO: decide whether a lookup miss should keep the selected
        # disposition for comparison instead of degrading to manual entry.
        logger.warning(
            "No synthesis record for candidate %s; treating as manual entry",
            candidate_id,
        )
        return self._resolve_manual(form, mode="fallback")

    def _resolve_manual(
        self, form: FormState, mode: Literal["manual", "fallback"]
    ) -> Resolution:
        report = validate_fields(form)
        if not report.valid:
            return Resolution(mode=mode, validation=report)
        return Resolution(
            mode=mode,
            outcome=PredictionOutcome(result=self.synthesize(), ground_truth=MANUAL_ENTRY),
        )
