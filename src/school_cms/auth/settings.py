from __future__ import annotations

import logging
import secrets
from functools import lru_cache
from typing import Any, Optional

from pydantic import PrivateAttr, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class AuthSettings(BaseSettings):
    jwt_secret: Optional[SecretStr] = None
    jwt_algorithm: str = "HS256"
    token_lifetime_seconds: int = 3600
    # require an admin token on create/update/delete routes
    protect_writes: bool = False

    model_config = SettingsConfigDict(env_prefix="AUTH_", env_file=".env", extra="ignore")

    _ephemeral_secret: str = PrivateAttr(default_factory=lambda: secrets.token_urlsafe(32))

    def model_post_init(self, context: Any) -> None:
        if self.jwt_secret is None:
            logger.warning("AUTH_JWT_SECRET is not set; tokens are signed with a per-process key")

    @property
    def signing_key(self) -> str:
        if self.jwt_secret is not None:
            return self.jwt_secret.get_secret_value()
        return self._ephemeral_secret


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings()
