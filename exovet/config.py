"""ExoVet application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """ExoVet application settings.

    All fields can be overridden via environment variables with
    the EXOVET_ prefix (e.g., EXOVET_SAMPLES_PATH).
    """

    host: str = "0.0.0.0"
    port: int = 8000
    samples_path: str = "data/samples.json"
    synthesis_path: str = "data/synthesis_data.json"
    random_seed: int | None = None  # Fixed seed makes manual predictions reproducible
    behind_proxy: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {
        "env_prefix": "EXOVET_",
        "env_file": ".env",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
