"""Runtime configuration — env-driven.

Reads from a .env file and BOTTLEFETCH_* environment variables. CLI flags
override individual fields per run via ``model_copy(update=...)``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_DOMAIN = "https://formulae.brew.sh/api/bottle"


class FetchConfig(BaseSettings):
    """Configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export BOTTLEFETCH_CACHE_DIR=/var/cache/bottles
        export BOTTLEFETCH_LOG_LEVEL=DEBUG
        export BOTTLEFETCH_PLATFORM_TAG=arm64_sonoma
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BOTTLEFETCH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage
    cache_dir: Path = Path.home() / ".cache" / "bottlefetch"

    # Manifest API — bare identifiers are expanded to {domain}/{name}.json
    api_domain: str = DEFAULT_API_DOMAIN
    linux_api_domain: str = DEFAULT_API_DOMAIN

    # Platform tag override; resolved from the host when unset
    platform_tag: str | None = None

    # Transport
    http_timeout_seconds: float = 60.0
    chunk_size: int = 1024 * 1024

    def api_domain_for(self, system: str) -> str:
        """Return the manifest API domain for an OS family (``platform.system()``)."""
        if system.lower() == "linux":
            return self.linux_api_domain
        return self.api_domain


# Module-level singleton — import as `from bottlefetch.config import config`
config = FetchConfig()
