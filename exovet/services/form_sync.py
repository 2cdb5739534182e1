"""Form synchronization: building the candidate form and keeping it in step.

The form's shape (field names and order) is registered once from the
first loaded sample and never changes afterwards.  Selection and edit
events only ever replace values, returning a new :class:`FormState`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from exovet.models.form import FormField, FormState
from exovet.models.sample import (
    CANDIDATE_ID_FIELD,
    DISPOSITION_FIELD,
    Sample,
    to_field_value,
)

logger = logging.getLogger(__name__)

READ_ONLY_FIELDS: frozenset[str] = frozenset({CANDIDATE_ID_FIELD, DISPOSITION_FIELD})


class SchemaError(ValueError):
    """A field name or form shape does not match the registered schema."""


class ReadOnlyFieldError(ValueError):
    """An edit targeted ``candidate_id`` or ``disposition``."""


@dataclass(frozen=True)
class FieldSchema:
    """Ordered field names the form is built from."""

    names: tuple[str, ...] = ()

    @classmethod
    def from_sample(cls, sample: Sample) -> FieldSchema:
        """Register the schema from *sample*'s key set (values are ignored)."""
        missing = [n for n in (CANDIDATE_ID_FIELD, DISPOSITION_FIELD) if n not in sample]
        if missing:
            raise SchemaError(
                f"Sample schema is missing required fields: {', '.join(missing)}"
            )
        return cls(names=tuple(sample.keys()))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    @staticmethod
    def is_read_only(name: str) -> bool:
        return name in READ_ONLY_FIELDS


class FormSynchronizer:
    """Applies selection and edit events to a :class:`FormState`."""

    def __init__(self, schema: FieldSchema) -> None:
        self.schema = schema

    def empty_form(self) -> FormState:
        """Return the form with every field present and blank."""
        return FormState(
            fields=tuple(
                FormField(name=name, read_only=self.schema.is_read_only(name))
                for name in self.schema.names
            )
        )

    def check_shape(self, form: FormState) -> None:
        """Raise :class:`SchemaError` if *form* was not built from this schema."""
        if tuple(form.field_names) != self.schema.names:
            raise SchemaError("Form fields do not match the registered schema")

    def from_values(self, values: Mapping[str, str]) -> FormState:
        """Build a form from submitted ``name -> value`` pairs.

        Fields not submitted are blank; unknown names are rejected.
        """
        unknown = [name for name in values if name not in self.schema]
        if unknown:
            raise SchemaError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        return self.empty_form().with_values(dict(values))

    def apply_selection(self, form: FormState, sample: Sample | None) -> FormState:
        """Mirror a selector change into *form*.

        ``None`` (the placeholder) clears every field, read-only ones
        included.  A sample overwrites each field the form and sample have
        in common; sample keys outside the schema are skipped and form
        fields the sample lacks keep their current value.
        """
        self.check_shape(form)
        if sample is None:
            return self.empty_form()

        updates = {
            name: to_field_value(sample[name])
            for name in self.schema.names
            if name in sample
        }
        skipped = [key for key in sample if key not in self.schema]
        if skipped:
            logger.debug("Sample keys outside the form schema: %s", skipped)
        return form.with_values(updates)

    def apply_edit(self, form: FormState, name: str, value: str) -> FormState:
        """Replace a single editable field's value."""
        self.check_shape(form)
        if name not in self.schema:
            raise SchemaError(f"Unknown form field: {name}")
        if self.schema.is_read_only(name):
            raise ReadOnlyFieldError(f"Field {name} is read-only")
        return form.with_values({name: value})
