"""Configuration loaded from environment (.env) and defaults."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locate the project root .env file regardless of CWD
_THIS_DIR = Path(__file__).resolve().parent          # retouch/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Replicate (asynchronous inpainting)
    replicate_api_token: str | None = None
    replicate_inpaint_model: str | None = None
    replicate_api_url: str = "https://api.replicate.com/v1"

    # ClipDrop (synchronous cleanup)
    clipdrop_api_token: str | None = None
    clipdrop_api_url: str = "https://clipdrop-api.co"

    # Where the orchestrator reaches the gateway over HTTP
    gateway_url: str = "http://localhost:3000"

    # Outbound request timeout in seconds
    request_timeout: float = Field(default=60.0, gt=0)

    # Poll loop: fixed interval, no backoff
    poll_interval: float = Field(default=1.0, gt=0)
    poll_max_attempts: int = Field(default=20, ge=1)

    # Results requested per inpaint job from the editor
    inpaint_outputs: int = Field(default=4, ge=1)

    # CORS origins (comma-separated)
    cors_origins: str = "*"

    # Max upload size in bytes (default 20 MB)
    max_upload_bytes: int = 20 * 1024 * 1024

    # Optional directory with editor assets served at /
    static_dir: str | None = None

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def static_path(self) -> Path | None:
        """Static directory as Path, resolved against the project root."""
        if not self.static_dir:
            return None
        p = Path(self.static_dir)
        if not p.is_absolute():
            return (_PROJECT_ROOT / p).resolve()
        return p.resolve()


@lru_cache
def get_settings() -> Settings:
    return Settings()
