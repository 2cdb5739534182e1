"""Startup tests: the real app's lifespan against files on disk."""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import pytest

from exovet import main
from exovet.config import get_settings
from exovet.services.session import LOAD_ERROR_MESSAGE

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLES_JSON = FIXTURES_DIR / "samples.json"
SYNTHESIS_JSON = FIXTURES_DIR / "synthesis_data.json"


@asynccontextmanager
async def _started_client(
    monkeypatch: pytest.MonkeyPatch, samples_path: Path, synthesis_path: Path
) -> AsyncIterator[httpx.AsyncClient]:
    monkeypatch.setenv("EXOVET_SAMPLES_PATH", str(samples_path))
    monkeypatch.setenv("EXOVET_SYNTHESIS_PATH", str(synthesis_path))
    monkeypatch.setenv("EXOVET_RANDOM_SEED", "7")
    get_settings.cache_clear()
    try:
        async with main.lifespan(main.app):
            transport = httpx.ASGITransport(app=main.app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
    finally:
        get_settings.cache_clear()


@pytest.fixture()
async def started_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[httpx.AsyncClient]:
    """The real app after a successful startup on the fixture files."""
    async with _started_client(monkeypatch, SAMPLES_JSON, SYNTHESIS_JSON) as client:
        yield client


@pytest.fixture()
async def missing_file_client(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> AsyncIterator[httpx.AsyncClient]:
    """The real app after startup with the samples file missing."""
    async with _started_client(monkeypatch, tmp_path / "missing.json", SYNTHESIS_JSON) as client:
        yield client


@pytest.fixture()
async def duplicate_id_client(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> AsyncIterator[httpx.AsyncClient]:
    """The real app after startup with a repeated candidate_id in the samples."""
    records = json.loads(SAMPLES_JSON.read_text())
    path = tmp_path / "samples.json"
    path.write_text(json.dumps(records + records[:1]))
    async with _started_client(monkeypatch, path, SYNTHESIS_JSON) as client:
        yield client


class TestStartup:
    async def test_successful_load(self, started_client: httpx.AsyncClient) -> None:
        health = await started_client.get("/health")
        assert health.json() == {"status": "ok"}

        samples = await started_client.get("/samples")
        assert samples.status_code == 200
        assert [o["value"] for o in samples.json()["options"]] == ["K001", "K002", "T003"]

    async def test_missing_file_enters_load_error(
        self, missing_file_client: httpx.AsyncClient
    ) -> None:
        health = await missing_file_client.get("/health")
        assert health.status_code == 200
        assert health.json() == {"status": "error", "detail": LOAD_ERROR_MESSAGE}

        samples = await missing_file_client.get("/samples")
        assert samples.status_code == 503
        assert samples.json()["detail"] == LOAD_ERROR_MESSAGE

    async def test_duplicate_id_enters_load_error(
        self, duplicate_id_client: httpx.AsyncClient
    ) -> None:
        health = await duplicate_id_client.get("/health")
        assert health.json() == {"status": "error", "detail": LOAD_ERROR_MESSAGE}

        predict = await duplicate_id_client.post("/predict", json={"fields": {}})
        assert predict.status_code == 503
