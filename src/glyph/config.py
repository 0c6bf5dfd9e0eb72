"""Tool configuration.

Values come from, in increasing precedence: built-in defaults, the TOML file
at ``$XDG_CONFIG_HOME/glyph/config.toml`` (``~/.config/glyph/config.toml``),
and ``GLYPH_*`` environment variables (a ``.env`` file in the working
directory is loaded first).
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from glyph.errors import ConfigError

logger = logging.getLogger(__name__)

_ENV_OVERRIDES: dict[str, str] = {
    "GLYPH_AI_PROVIDER": "ai_provider",
    "GLYPH_AI_MODEL": "ai_model",
    "GLYPH_API_KEY": "api_key",
    "GLYPH_OLLAMA_HOST": "ollama_host",
    "GLYPH_STYLE": "default_style",
}


@dataclass
class Config:
    """All glyph configuration values."""

    ai_provider: str = "groq"
    ai_model: str = "llama-3.3-70b-versatile"
    api_key: str = ""
    ollama_host: str = "http://localhost:11434"
    default_style: str = "rounded"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a Config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        cfg = cls()
        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            if not isinstance(value, str):
                raise ConfigError(f"config key {key!r} must be a string")
            setattr(cfg, key, value)
        return cfg


def config_dir() -> Path:
    """Return the glyph configuration directory (not created)."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "glyph"


def config_path() -> Path:
    return config_dir() / "config.toml"


def data_dir(tool: str) -> Path:
    """Return the data directory for *tool* under ``$XDG_DATA_HOME/glyph`` (not created)."""
    base = os.environ.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / "glyph" / tool


def load_config(
    path: str | Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    dotenv: bool = True,
) -> Config:
    """Load configuration from file and environment.

    A missing file is not an error; defaults are used.

    Args:
        path: Config file to read. Defaults to :func:`config_path`.
        env: Environment mapping for overrides. Defaults to ``os.environ``.
        dotenv: Load ``.env`` from the working directory before reading
            the environment.

    Raises:
        ConfigError: The file exists but cannot be read or parsed.
    """
    if dotenv:
        load_dotenv(".env")
    path = Path(path) if path is not None else config_path()
    env = os.environ if env is None else env

    data: dict[str, Any] = {}
    if path.is_file():
        try:
            with path.open("rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError("failed to parse config file", cause=exc) from exc
        except OSError as exc:
            raise ConfigError("cannot read config file", cause=exc) from exc
        logger.debug("Loaded config from %s", path)

    cfg = Config.from_dict(data)
    for var, attr in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            setattr(cfg, attr, value)
    return cfg
