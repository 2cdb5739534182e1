"""Prediction API router.

Endpoints:
- POST /predict -- resolve and render a prediction for the current fields
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from exovet.dependencies import get_loaded_session
from exovet.models.form import PredictRequest
from exovet.models.prediction import PredictResponse
from exovet.services.form_sync import SchemaError
from exovet.services.session import DemoSession

router = APIRouter(tags=["predict"])


@router.post("/predict", response_model=PredictResponse)
def predict(
    request: PredictRequest,
    session: DemoSession = Depends(get_loaded_session),
) -> PredictResponse:
    """Return a rendered report, or the invalid fields if validation fails.

    Validation failures are returned with status 200 and a populated
    ``validation`` block; the client is expected to highlight the fields
    and let the user retry.
    """
    try:
        return session.on_predict_requested(request.fields)
    except SchemaError as e:
        raise HTTPException(status_code=422, detail=str(e))
