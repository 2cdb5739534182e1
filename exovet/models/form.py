"""Pydantic models for the candidate form and its validation report."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from exovet.models.sample import CANDIDATE_ID_FIELD, DISPOSITION_FIELD


class FormField(BaseModel, frozen=True):
    """A single named input of the candidate form."""

    name: str
    read_only: bool = False
    value: str = ""


class FormState(BaseModel, frozen=True):
    """Ordered, immutable snapshot of every form field.

    Handlers never mutate a FormState; they return a new one with
    updated values.  The field names and their order are fixed by the
    schema the form was built from.
    """

    fields: tuple[FormField, ...] = ()

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> str:
        """Return the current value of *name*, or ``""`` if absent."""
        for f in self.fields:
            if f.name == name:
                return f.value
        return ""

    def values(self) -> dict[str, str]:
        """Return a ``name -> value`` mapping in form order."""
        return {f.name: f.value for f in self.fields}

    def with_values(self, updates: dict[str, str]) -> FormState:
        """Return a copy with the given field values replaced.

        Names not present in the form are ignored.
        """
        return FormState(
            fields=tuple(
                f.model_copy(update={"value": updates[f.name]})
                if f.name in updates
                else f
                for f in self.fields
            )
        )

    @property
    def candidate_id(self) -> str:
        return self.get(CANDIDATE_ID_FIELD)

    @property
    def disposition(self) -> str:
        return self.get(DISPOSITION_FIELD)

    @property
    def mode(self) -> Literal["lookup", "manual"]:
        """``lookup`` when tied to a candidate id, ``manual`` otherwise."""
        return "lookup" if self.candidate_id else "manual"


class ValidationReport(BaseModel):
    """Outcome of validating the manually editable fields."""

    valid: bool
    invalid_fields: list[str] = []
    message: str | None = None


class SelectionRequest(BaseModel):
    """Request body for ``POST /form/selection``.

    ``candidate_id`` of ``None`` (or ``""``) selects the placeholder and
    clears the form.  ``form`` carries the client's current state; when
    omitted the empty form is used as the starting point.
    """

    candidate_id: str | None = None
    form: FormState | None = None


class EditRequest(BaseModel):
    """Request body for ``POST /form/edit``."""

    form: FormState
    name: str
    value: str = ""


class PredictRequest(BaseModel):
    """Request body for ``POST /predict``: the current field values."""

    fields: dict[str, str] = Field(default_factory=dict)
