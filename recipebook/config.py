from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_CORS_ORIGIN = "http://localhost:5173"
DEFAULT_MAX_CONTENT_LENGTH = 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Process configuration read from environment variables."""

    env: str = "production"
    project: Optional[str] = None
    database: Optional[str] = None
    collection_name: str = "recipes"
    cors_origin: str = DEFAULT_CORS_ORIGIN
    api_prefix: str = "/api"
    log_level: str = "INFO"
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH

    @property
    def development(self) -> bool:
        return self.env == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""

        return cls(
            env=os.environ.get("APP_ENV", "production").strip().lower(),
            project=os.environ.get("GCP_PROJECT") or None,
            database=os.environ.get("FIRESTORE_DATABASE") or None,
            collection_name=os.environ.get("RECIPES_COLLECTION", "recipes"),
            cors_origin=os.environ.get("CORS_ORIGIN", DEFAULT_CORS_ORIGIN),
            api_prefix="/" + os.environ.get("API_PREFIX", "/api").strip("/"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            max_content_length=int(
                os.environ.get("MAX_CONTENT_LENGTH", DEFAULT_MAX_CONTENT_LENGTH)
            ),
        )


__all__ = ["Settings"]
