"""Samples API router.

Endpoints:
- GET /samples                 -- selector options (placeholder + samples)
- GET /samples/{candidate_id}  -- a single raw sample record
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from exovet.dependencies import get_loaded_session
from exovet.models.sample import SampleListResponse
from exovet.services.session import DemoSession, UnknownCandidateError

router = APIRouter(prefix="/samples", tags=["samples"])


@router.get("", response_model=SampleListResponse)
def list_samples(
    session: DemoSession = Depends(get_loaded_session),
) -> SampleListResponse:
    """Return the sample selector contents in load order."""
    return session.selector_options()


@router.get("/{candidate_id}")
def get_sample(
    candidate_id: str,
    session: DemoSession = Depends(get_loaded_session),
) -> dict[str, Any]:
    """Return the sample record for *candidate_id*."""
    try:
        sample = session.get_sample(candidate_id)
    except UnknownCandidateError:
        raise HTTPException(status_code=404, detail="Sample not found")
    return dict(sample)
