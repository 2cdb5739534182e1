"""Shared pytest fixtures for ExoVet tests."""

import json
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from exovet.repositories.registry import SampleRegistry
from exovet.routers import form, predict, samples
from exovet.services.random_source import NumpyRandomSource
from exovet.services.session import LOAD_ERROR_MESSAGE, DemoSession

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLES_JSON = FIXTURES_DIR / "samples.json"
SYNTHESIS_JSON = FIXTURES_DIR / "synthesis_data.json"


@pytest.fixture()
def sample_records() -> list[dict]:
    """Sample records from the fixture file (K001, K002, T003)."""
    return json.loads(SAMPLES_JSON.read_text())


@pytest.fixture()
def synthesis_records() -> list[dict]:
    """Synthesis records from the fixture file (K001, K002 only)."""
    return json.loads(SYNTHESIS_JSON.read_text())


@pytest.fixture()
def registry(sample_records: list[dict], synthesis_records: list[dict]) -> SampleRegistry:
    """A SampleRegistry loaded with the fixture data."""
    repo = SampleRegistry()
    repo.load(sample_records, synthesis_records)
    return repo


@pytest.fixture()
def session(sample_records: list[dict], synthesis_records: list[dict]) -> DemoSession:
    """A seeded DemoSession loaded with the fixture data."""
    demo = DemoSession(registry=SampleRegistry(), random_source=NumpyRandomSource(seed=7))
    demo.on_data_loaded(sample_records, synthesis_records)
    return demo


@pytest.fixture()
def failed_session() -> DemoSession:
    """A DemoSession in the terminal load-error state."""
    demo = DemoSession(registry=SampleRegistry(), random_source=NumpyRandomSource(seed=7))
    demo.on_load_failed("Dataset file not found: data/samples.json")
    return demo


def _build_test_app(session: DemoSession) -> FastAPI:
    test_app = FastAPI()

    test_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    test_app.state.session = session

    test_app.include_router(samples.router)
    test_app.include_router(form.router)
    test_app.include_router(predict.router)

    @test_app.get("/health")
    async def health_check() -> dict[str, str]:
        if test_app.state.session.load_error is not None:
            return {"status": "error", "detail": LOAD_ERROR_MESSAGE}
        return {"status": "ok"}

    return test_app


@pytest.fixture()
async def app_client(session: DemoSession) -> httpx.AsyncClient:
    """Create a FastAPI test app around the loaded session and yield a client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=_build_test_app(session)),
        base_url="http://testserver",
    ) as client:
        yield client


@pytest.fixture()
async def failed_app_client(failed_session: DemoSession) -> httpx.AsyncClient:
    """Create a FastAPI test app whose data load failed."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=_build_test_app(failed_session)),
        base_url="http://testserver",
    ) as client:
        yield client
