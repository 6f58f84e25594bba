"""Pydantic Settings — typed configuration with .env auto-loading."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application configuration loaded from environment / .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    service_port: int = 5000
    cors_origins: list[str] = ["*"]
    debug: bool = False
    log_level: str = "INFO"

    # ── Fixtures ─────────────────────────────────────────────
    fixture_dir: Path = PROJECT_ROOT / "data" / "mock"

    # ── Simulated latency (milliseconds) ─────────────────────
    simulate_latency: bool = True  # False = every call resolves on the next loop tick
    read_delay_ms: int = 200
    list_delay_ms: int = 300
    write_delay_ms: int = 400
    bulk_delay_ms: int = 500

    # ── Reports ──────────────────────────────────────────────
    top_students_limit: int = 10
    recent_activity_limit: int = 5


@lru_cache
def get_settings() -> Settings:
    """Singleton accessor for application settings."""
    return Settings()
