"""Application settings.

Every `FPS_ESTIMATOR_*` environment variable is read here through
pydantic-settings. The CLI, the HTTP app and the adapters all receive the
same `AppSettings` instance instead of touching `os.environ` themselves.
"""

from __future__ import annotations

import os
import sys
from enum import Enum
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "FPS_ESTIMATOR_"


class ProviderKind(str, Enum):
    """Remote estimation backends."""

    GEMINI = "gemini"
    OPENAI = "openai"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "fps-estimator"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "fps-estimator"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "fps-estimator"
    return Path.home() / ".config" / "fps-estimator"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# fps-estimator user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    One typed contract for the CLI, the HTTP app and the adapters, validated
    at the edge (env vars / .env files).
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout for plain HTTP requests (seconds).",
    )
    user_agent: str = Field(
        default="fps-estimator/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent to remote providers.",
    )

    ai_provider: ProviderKind = Field(
        default=ProviderKind.GEMINI,
        description="Remote estimation backend (gemini or any OpenAI-compatible API).",
    )
    ai_api_key: str | None = Field(
        default=None,
        description="API key for the estimation provider. Unset means local-only estimates.",
    )
    ai_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        min_length=8,
        description="Provider base URL (Gemini REST root or OpenAI-compatible /v1 root).",
    )
    ai_model: str = Field(
        default="models/gemini-1.5-flash",
        min_length=1,
        description="Model identifier used for estimates.",
    )
    ai_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Upper bound for a provider call; on expiry the local estimate is used.",
    )

    cache_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="Maximum age of a cached estimate still served as a hit.",
    )
    cache_max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Optional bound on cached estimates (oldest written evicted first).",
    )
    coalesce_inflight: bool = Field(
        default=False,
        description="Share one computation between concurrent requests for the same key.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level for the CLI and HTTP app.",
    )

    def has_remote_provider(self) -> bool:
        """True when a provider credential is set, or the base URL is a local server."""

        if (self.ai_api_key or "").strip():
            return True
        return is_local_base_url(self.ai_base_url)


def is_local_base_url(url: str) -> bool:
    url_l = (url or "").strip().lower()
    return url_l.startswith("http://localhost") or url_l.startswith("http://127.0.0.1") or url_l.startswith(
        "http://0.0.0.0"
    )
