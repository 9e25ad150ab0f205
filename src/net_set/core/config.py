"""Configuration loading — reads an optional TOML config file."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_CONFIG_PATHS = [
    Path.home() / ".config" / "net-set" / "config.toml",
    Path("netset.toml"),
]

DEFAULT_SCRIPTS_DIR = Path.home() / ".local" / "share" / "net-set" / "scripts"


class ConfigError(Exception):
    """Raised when a config file cannot be parsed or holds invalid values."""


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    provider: str = "Cloudflare"
    probe_timeout: float = Field(default=3.0, gt=0)
    command_timeout: float = Field(default=10.0, gt=0)
    script_timeout: float = Field(default=60.0, gt=0)
    scripts_dir: Path = DEFAULT_SCRIPTS_DIR
    interpreter: str = "/bin/sh"
    elevation_wrapper: list[str] = Field(default_factory=lambda: ["su", "-c"], min_length=1)


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    Searches default paths if no explicit path is given.
    Returns an empty dict if no config file is found.
    """
    paths = [path] if path is not None else DEFAULT_CONFIG_PATHS

    for p in paths:
        if p.exists():
            try:
                with open(p, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"{p}: {e}") from e

    if path is not None:
        raise ConfigError(f"config file not found: {path}")
    return {}


def load_settings(path: Path | None = None) -> Settings:
    """Build Settings: NETSET_* env vars → config.toml → defaults."""
    data = load_config(path)

    provider = os.environ.get("NETSET_PROVIDER")
    if provider:
        data["provider"] = provider
    scripts_dir = os.environ.get("NETSET_SCRIPTS_DIR")
    if scripts_dir:
        data["scripts_dir"] = scripts_dir

    try:
        settings = Settings(**data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
    return settings.model_copy(update={"scripts_dir": settings.scripts_dir.expanduser()})
