"""Demo session: the entry points a UI shell drives.

``on_data_loaded`` runs once at startup.  After that every handler is a
function of the registry plus the form state the caller passes in; the
session keeps no per-client form state of its own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from exovet.models.form import FormState
from exovet.models.prediction import PredictResponse
from exovet.models.sample import (
    CANDIDATE_ID_FIELD,
    DISPOSITION_FIELD,
    Sample,
    SampleListResponse,
    SampleOption,
    to_field_value,
)
from exovet.repositories.registry import SampleRegistry
from exovet.services.form_sync import FieldSchema, FormSynchronizer
from exovet.services.prediction import PredictionResolver
from exovet.services.random_source import RandomSource
from exovet.services.report import render_report, report_to_text

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error: Could not load necessary data files."
PLACEHOLDER_LABEL = "Select a sample..."


class DataNotLoadedError(RuntimeError):
    """The datasets failed to load (or never loaded); nothing is interactive."""


class UnknownCandidateError(KeyError):
    """A selection named a candidate id that is not in the registry."""


class DemoSession:
    """Wires registry, form synchronizer, resolver and renderer together."""

    def __init__(self, registry: SampleRegistry, random_source: RandomSource) -> None:
        self.registry = registry
        self.resolver = PredictionResolver(registry, random_source)
        self._synchronizer: FormSynchronizer | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def on_data_loaded(
        self,
        samples: Iterable[Mapping[str, Any]],
        synthesis: Iterable[Mapping[str, Any]],
    ) -> FormState:
        """Load the registry and build the empty form from the first sample.

        With no samples the form has no fields at all.
        """
        self.registry.load(samples, synthesis)
        first = self.registry.first_sample()
        schema = FieldSchema.from_sample(first) if first is not None else FieldSchema()
        self._synchronizer = FormSynchronizer(schema)
        logger.info("Form schema registered with %d fields", len(schema.names))
        return self._synchronizer.empty_form()

    def on_load_failed(self, reason: str) -> None:
        """Enter the terminal load-error state."""
        logger.error("Data load failed: %s", reason)
        self.registry.mark_failed(reason)
        self._synchronizer = None

    @property
    def load_error(self) -> str | None:
        return self.registry.load_error

    def _ensure_loaded(self) -> None:
        if self._synchronizer is None:
            raise DataNotLoadedError(LOAD_ERROR_MESSAGE)

    @property
    def synchronizer(self) -> FormSynchronizer:
        self._ensure_loaded()
        return self._synchronizer

    # ------------------------------------------------------------------
    # Selector and form
    # ------------------------------------------------------------------

    def empty_form(self) -> FormState:
        return self.synchronizer.empty_form()

    def selector_options(self) -> SampleListResponse:
        """Placeholder first, then one option per sample in load order."""
        self._ensure_loaded()
        options = [
            SampleOption(
                value=to_field_value(s[CANDIDATE_ID_FIELD]),
                label=f"Candidate: {to_field_value(s[CANDIDATE_ID_FIELD])} ({s.get(DISPOSITION_FIELD, '')})",
            )
            for s in self.registry.samples
        ]
        return SampleListResponse(
            placeholder=SampleOption(value="", label=PLACEHOLDER_LABEL),
            options=options,
            total=len(options),
        )

    def get_sample(self, candidate_id: str) -> Sample:
        self._ensure_loaded()
        sample = self.registry.find_sample(candidate_id)
        if sample is None:
            raise UnknownCandidateError(candidate_id)
        return sample

    def on_selection_changed(
        self, candidate_id: str | None, form: FormState | None = None
    ) -> FormState:
        """Apply a selector change to *form* (the empty form if omitted).

        An id with no matching sample leaves the form as it was.
        """
        synchronizer = self.synchronizer
        current = form if form is not None else synchronizer.empty_form()
        if not candidate_id:
            return synchronizer.apply_selection(current, None)
        sample = self.registry.find_sample(candidate_id)
        if sample is None:
            logger.warning("Selection of unknown candidate %s ignored", candidate_id)
            synchronizer.check_shape(current)
            return current
        return synchronizer.apply_selection(current, sample)

    def on_field_edited(self, form: FormState, name: str, value: str) -> FormState:
        return self.synchronizer.apply_edit(form, name, value)

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------

    def on_predict_requested(self, field_values: Mapping[str, str]) -> PredictResponse:
        """Resolve and render a prediction for the submitted field values.

        A failed validation is a normal response carrying the invalid
        field names; no result is produced in that case.
        """
        form = self.synchronizer.from_values(field_values)
        resolution = self.resolver.resolve(form)
        if resolution.outcome is None:
            return PredictResponse(validation=resolution.validation)

        report = render_report(resolution.outcome)
        logger.info(
            "Prediction (%s): %s score=%s",
            resolution.mode,
            report.final_prediction,
            report.final_score_text,
        )
        return PredictResponse(report=report, lines=report_to_text(report))
