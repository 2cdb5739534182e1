"""Validation of manually entered form values."""

from __future__ import annotations

import logging
import re

from exovet.models.form import FormState, ValidationReport

logger = logging.getLogger(__name__)

# Free-text fields that are exempt from the numeric check.
NUMERIC_EXEMPT_FIELDS: frozenset[str] = frozenset({"dataset", "disposition", "tess_disp"})

VALIDATION_MESSAGE = (
    "Please fill all fields correctly. "
    "Non-numeric values are not allowed in number fields."
)

# Accepts what a browser's Number() accepts: signed decimals with optional
# exponent, signed Infinity, and unsigned 0x/0o/0b integer literals.
# Digits are ASCII only; float() would also take other Unicode digits.
_DECIMAL_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|Infinity)"
)
_RADIX_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def parse_number(value: str) -> float | None:
    """Parse *value* as a number, returning ``None`` if it is not one.

    Surrounding whitespace is ignored.  Python-only spellings such as
    ``"nan"``, ``"inf"`` or ``"1_000"`` are rejected.
    """
    text = value.strip()
    if _DECIMAL_RE.fullmatch(text):
        return float(text.replace("Infinity", "inf"))
    if _RADIX_RE.fullmatch(text):
        return float(int(text, 0))
    return None


def validate_fields(form: FormState) -> ValidationReport:
    """Check every editable field of *form*.

    Read-only fields are skipped.  A field is invalid when its trimmed
    value is empty, or when it must be numeric and does not parse.
    Values are never modified.
    """
    invalid: list[str] = []
    for field in form.fields:
        if field.read_only:
            continue
        if field.value.strip() == "":
            invalid.append(field.name)
        elif field.name not in NUMERIC_EXEMPT_FIELDS and parse_number(field.value) is None:
            invalid.append(field.name)

    if invalid:
        logger.info("Validation failed for fields: %s", ", ".join(invalid))
        return ValidationReport(
            valid=False, invalid_fields=invalid, message=VALIDATION_MESSAGE
        )
    return ValidationReport(valid=True)
