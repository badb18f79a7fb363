"""Backend configuration.

Why here:
- Centralizes the knobs (pydantic-settings) without leaking env parsing into
  adapters or the CLI.
- `O2_ROOT` and `HOME` are *not* settings: the dispatcher and the registry
  reader read them from the live environment on every call.
"""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

O2_ROOT_ENV = "O2_ROOT"
HOME_ENV = "HOME"


def get_user_config_dir() -> Path:
    """Per-user config directory (no extra dependencies)."""

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "radcontrol"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "radcontrol"
    return Path.home() / ".config" / "radcontrol"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def default_lock_path() -> Path:
    runtime = os.environ.get("XDG_RUNTIME_DIR")
    base = Path(runtime) if runtime else Path(tempfile.gettempdir())
    return base / "radcontrol.lock"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed + validated at the edge (env vars / .env).
    - One configuration contract for CLI, bridge and adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="RADCONTROL_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the per-user one.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    shell: str = Field(
        default="bash",
        min_length=1,
        description="Interpreter used for `-lc` invocations.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for the CLI (DEBUG, INFO, WARNING...).",
    )
    bridge_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Worker threads serving concurrent bridge requests.",
    )
    lock_path: Path | None = Field(
        default=None,
        description="Single-instance lock file (defaults to $XDG_RUNTIME_DIR/radcontrol.lock).",
    )

    def resolved_lock_path(self) -> Path:
        return self.lock_path or default_lock_path()
