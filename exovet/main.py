"""ExoVet FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from exovet.config import get_settings
from exovet.ingestion.json_loader import load_datasets
from exovet.repositories.registry import SampleRegistry
from exovet.repositories.storage import StorageBackend
from exovet.services.random_source import NumpyRandomSource
from exovet.services.session import LOAD_ERROR_MESSAGE, DemoSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load both datasets and build the demo session.

    On startup:
    - Read samples and synthesis records concurrently.
    - Populate the SampleRegistry and register the form schema.
    - On any load failure, put the session into its terminal
      load-error state (the app keeps serving, but only errors).
    """
    settings = get_settings()

    storage = StorageBackend()
    registry = SampleRegistry()
    random_source = NumpyRandomSource(settings.random_seed)
    session = DemoSession(registry=registry, random_source=random_source)
    app.state.session = session

    try:
        samples, synthesis = await load_datasets(
            storage, settings.samples_path, settings.synthesis_path
        )
        session.on_data_loaded(samples, synthesis)
    except ValueError as e:
        logger.exception("Failed to load initial data")
        session.on_load_failed(str(e))

    yield


app = FastAPI(
    title="ExoVet",
    description="Candidate vetting demo with simulated multi-expert predictions",
    version="0.1.0",
    lifespan=lifespan,
)

# Behind a same-origin reverse proxy no CORS is needed.
settings = get_settings()
if not settings.behind_proxy:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Router includes
from exovet.routers import form, predict, samples  # noqa: E402

app.include_router(samples.router)
app.include_router(form.router)
app.include_router(predict.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check; reports the load error once data loading has failed."""
    if app.state.session.load_error is not None:
        return {"status": "error", "detail": LOAD_ERROR_MESSAGE}
    return {"status": "ok"}


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
