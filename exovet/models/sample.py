"""Sample and synthesis record types plus selector response models."""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

# Loaded records are flat field-name -> value mappings, read-only after load.
Sample = Mapping[str, Any]
SynthesisRecord = Mapping[str, Any]

CANDIDATE_ID_FIELD = "candidate_id"
DISPOSITION_FIELD = "disposition"

DISPOSITION_PLANET = "PLANET"
DISPOSITION_FALSE_POSITIVE = "FALSE_POSITIVE"


def to_field_value(value: Any) -> str:
    """Render a record value the way a text input would display it.

    Integral floats drop their trailing ``.0`` and ``None`` becomes empty,
    so ``1.0`` shows as ``"1"`` and ``9.48`` as ``"9.48"``.  Candidate ids
    are indexed with the same conversion so a displayed id always finds
    its record again.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    return str(value)


class SampleOption(BaseModel):
    """One entry of the sample selector dropdown."""

    value: str
    label: str


class SampleListResponse(BaseModel):
    """Selector contents: the "none" placeholder followed by every sample."""

    placeholder: SampleOption
    options: list[SampleOption]
    total: int
