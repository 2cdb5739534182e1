"""In-memory registry of loaded samples and synthesis records."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from exovet.models.prediction import FINAL_SCORE_KEY
from exovet.models.sample import (
    CANDIDATE_ID_FIELD,
    Sample,
    SynthesisRecord,
    to_field_value,
)

logger = logging.getLogger(__name__)


class DuplicateCandidateError(ValueError):
    """Two records in one collection share a ``candidate_id``."""


class SynthesisShapeError(ValueError):
    """A synthesis record lacks ``final_score`` or holds a non-probability."""


def _freeze(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(record))


def _is_probability(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
        and 0.0 <= value <= 1.0
    )


def _check_synthesis_shape(record: Mapping[str, Any], idx: int) -> None:
    """Require ``final_score`` and every ``expert_*_proba`` to be in [0, 1]."""
    if FINAL_SCORE_KEY not in record:
        raise SynthesisShapeError(
            f"synthesis record {idx} has no {FINAL_SCORE_KEY!r} field"
        )
    for key, value in record.items():
        is_score = key == FINAL_SCORE_KEY or (
            key.startswith("expert_") and key.endswith("_proba")
        )
        if is_score and not _is_probability(value):
            raise SynthesisShapeError(
                f"synthesis record {idx} field {key!r} is not a probability: {value!r}"
            )


def _index_by_candidate(
    records: list[Mapping[str, Any]], collection: str
) -> dict[str, Mapping[str, Any]]:
    index: dict[str, Mapping[str, Any]] = {}
    for idx, record in enumerate(records):
        if CANDIDATE_ID_FIELD not in record:
            raise ValueError(
                f"{collection} record {idx} has no {CANDIDATE_ID_FIELD!r} field"
            )
        candidate_id = to_field_value(record[CANDIDATE_ID_FIELD])
        if candidate_id in index:
            raise DuplicateCandidateError(
                f"Duplicate candidate_id {candidate_id!r} in {collection}"
            )
        index[candidate_id] = record
    return index


class SampleRegistry:
    """Holds the two loaded collections for the lifetime of the process.

    :meth:`load` may be called exactly once.  Records are stored as
    read-only mappings so lookups always hand out the same snapshot.
    A failed load leaves the registry empty and records the reason in
    :attr:`load_error`.
    """

    def __init__(self) -> None:
        self._samples: tuple[Sample, ...] = ()
        self._samples_by_id: dict[str, Sample] = {}
        self._synthesis_by_id: dict[str, SynthesisRecord] = {}
        self._loaded = False
        self.load_error: str | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(
        self,
        samples: Iterable[Mapping[str, Any]],
        synthesis: Iterable[Mapping[str, Any]],
    ) -> None:
        """Populate the registry.

        Raises
        ------
        RuntimeError
            If the registry was already loaded or marked as failed.
        DuplicateCandidateError
            If a ``candidate_id`` repeats within either collection.
        SynthesisShapeError
            If a synthesis record lacks ``final_score`` or holds a value
            outside [0, 1] in a score field.
        ValueError
            If a record lacks a ``candidate_id``.
        """
        if self._loaded or self.load_error is not None:
            raise RuntimeError("SampleRegistry can only be loaded once")

        frozen_samples = [_freeze(s) for s in samples]
        frozen_synthesis = [_freeze(r) for r in synthesis]
        for idx, record in enumerate(frozen_synthesis):
            _check_synthesis_shape(record, idx)

        samples_by_id = _index_by_candidate(frozen_samples, "samples")
        synthesis_by_id = _index_by_candidate(frozen_synthesis, "synthesis")

        self._samples = tuple(frozen_samples)
        self._samples_by_id = samples_by_id
        self._synthesis_by_id = synthesis_by_id
        self._loaded = True
        logger.info(
            "Registry loaded: %d samples, %d synthesis records",
            len(self._samples),
            len(self._synthesis_by_id),
        )

    def mark_failed(self, reason: str) -> None:
        """Enter the terminal load-error state."""
        self._samples = ()
        self._samples_by_id = {}
        self._synthesis_by_id = {}
        self._loaded = False
        self.load_error = reason

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def samples(self) -> tuple[Sample, ...]:
        """All samples in load order."""
        return self._samples

    def first_sample(self) -> Sample | None:
        return self._samples[0] if self._samples else None

    def find_sample(self, candidate_id: str) -> Sample | None:
        """Return the sample for *candidate_id*, or ``None``."""
        return self._samples_by_id.get(candidate_id)

    def find_synthesis(self, candidate_id: str) -> SynthesisRecord | None:
        """Return the synthesis record for *candidate_id*, or ``None``."""
        return self._synthesis_by_id.get(candidate_id)
