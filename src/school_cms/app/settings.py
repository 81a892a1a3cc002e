from __future__ import annotations

import warnings
from enum import StrEnum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Env(StrEnum):
    LOCAL = "local"
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


# Map common aliases -> canonical
SYNONYMS: dict[str, Env] = {
    "development": Env.DEV,
    "dev": Env.DEV,
    "local": Env.LOCAL,
    "test": Env.TEST,
    "testing": Env.TEST,
    "preview": Env.TEST,
    "staging": Env.TEST,
    "prod": Env.PROD,
    "production": Env.PROD,
}


def normalize_env(raw: str | Env | None) -> Env:
    """Resolve a raw environment name, falling back to LOCAL with a warning."""
    if isinstance(raw, Env):
        return raw
    if not raw:
        return Env.LOCAL
    val = raw.strip().lower()
    if val in SYNONYMS:
        return SYNONYMS[val]
    warnings.warn(
        f"Unrecognized environment '{raw}', defaulting to 'local'.",
        RuntimeWarning,
        stacklevel=2,
    )
    return Env.LOCAL


class AppSettings(BaseSettings):
    # flat = easy env overrides
    name: str = "School CMS"
    version: str = "0.1.0"
    env: Env = Env.LOCAL

    # None -> derived from env (see app.core.logging)
    log_level: str | None = None
    log_format: str | None = None

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_request_bytes: int = 10 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_prefix="APP_",  # APP_NAME, APP_ENV, APP_LOG_LEVEL, ...
        env_file=".env",
        extra="ignore",
    )

    @field_validator("env", mode="before")
    @classmethod
    def _coerce_env(cls, value):
        return normalize_env(value)

    @property
    def is_prod(self) -> bool:
        return self.env is Env.PROD


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    # Only include kwargs that are not None, so defaults in AppSettings are used
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
