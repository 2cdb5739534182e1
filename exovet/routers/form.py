"""Form API router.

The server keeps no form state: clients send their current FormState
and receive the updated one.

Endpoints:
- GET /form            -- the empty form built from the first sample
- POST /form/selection -- apply a selector change
- POST /form/edit      -- replace one editable field's value
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exovet.dependencies import get_loaded_session
from exovet.models.form import EditRequest, FormState, SelectionRequest
from exovet.services.form_sync import ReadOnlyFieldError, SchemaError
from exovet.services.session import DemoSession

router = APIRouter(prefix="/form", tags=["form"])


@router.get("", response_model=FormState)
def get_empty_form(
    session: DemoSession = Depends(get_loaded_session),
) -> FormState:
    """Return every form field with an empty value."""
    return session.empty_form()


@router.post("/selection", response_model=FormState)
def change_selection(
    request: SelectionRequest,
    session: DemoSession = Depends(get_loaded_session),
) -> FormState:
    """Populate the form from a sample, or clear it for the placeholder.

    An id with no matching sample returns the submitted form unchanged.
    """
    try:
        return session.on_selection_changed(request.candidate_id, request.form)
    except SchemaError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/edit", response_model=FormState)
def edit_field(
    request: EditRequest,
    session: DemoSession = Depends(get_loaded_session),
) -> FormState:
    """Apply a manual edit to a single field."""
    try:
        return session.on_field_edited(request.form, request.name, request.value)
    except (SchemaError, ReadOnlyFieldError) as e:
        raise HTTPException(status_code=422, detail=str(e))
