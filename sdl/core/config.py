"""
Configuration — logger settings from arguments or environment variables.
Every value has a safe default for local dev; the sink defaults to stdout.
"""

from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SDL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    # ── Filtering ─────────────────────────────────────────────────────────────
    # Anything below this level is dropped, e.g. "error" ignores info and debug.
    # Validated when the Logger is built, not here.
    logging_level: str = "info"

    # ── Service context (Error Reporting) ────────────────────────────────────
    service_name: str = ""
    version: str = ""

    # ── Sink ──────────────────────────────────────────────────────────────────
    # Any writable text stream. None means sys.stdout; tests pass a StringIO.
    write_location: Any = Field(default=None, exclude=True)

    @field_validator("write_location")
    @classmethod
    def require_writable(cls, v: Any) -> Any:
        # Rejects e.g. a path string picked up from SDL_WRITE_LOCATION.
        if v is not None and not callable(getattr(v, "write", None)):
            raise ValueError(f"write_location must be a writable stream, got {type(v).__name__}")
        return v


@lru_cache()
def get_settings() -> Config:
    return Config()
