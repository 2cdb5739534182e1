"""FastAPI dependency injection for the demo session."""

from fastapi import Depends, HTTPException, Request

from exovet.services.session import LOAD_ERROR_MESSAGE, DemoSession


def get_session(request: Request) -> DemoSession:
    """Return the application-wide DemoSession stored on app.state."""
    return request.app.state.session


def get_loaded_session(session: DemoSession = Depends(get_session)) -> DemoSession:
    """Return the session, or 503 if the datasets failed to load."""
    if session.load_error is not None or not session.registry.is_loaded:
        raise HTTPException(status_code=503, detail=LOAD_ERROR_MESSAGE)
    return session
