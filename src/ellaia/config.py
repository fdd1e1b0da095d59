"""Configuration loaded from .ellaia.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field

from ellaia.storage.adapter import DEFAULT_PREFIX

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".ellaia.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "ellaia" / "config.toml"


class StorageBackendKind(StrEnum):
    MEMORY = "memory"
    FILE = "file"


class StorageConfig(BaseModel):
    """[storage] section."""

    backend: StorageBackendKind = StorageBackendKind.MEMORY
    directory: str = "./.ellaia-data"
    prefix: str = DEFAULT_PREFIX
    fixtures_dir: str | None = None


class ApiConfig(BaseModel):
    """[api] section: simulated network latency in milliseconds."""

    latency_ms: int = Field(default=500, ge=0)
    contact_latency_ms: int = Field(default=1500, ge=0)

    @property
    def latency(self) -> float:
        return self.latency_ms / 1000

    @property
    def contact_latency(self) -> float:
        return self.contact_latency_ms / 1000


class EllaiaConfig(BaseModel):
    """Top-level configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


def load_config(path: str | Path | None = None) -> EllaiaConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .ellaia.toml in CWD
    3. ~/.config/ellaia/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged EllaiaConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = EllaiaConfig.model_validate(data) if data else EllaiaConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: EllaiaConfig, **cli_kwargs: object) -> EllaiaConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).  Setting ``data_dir`` also switches the backend to
    file storage.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "backend": ("storage", "backend"),
        "data_dir": ("storage", "directory"),
        "prefix": ("storage", "prefix"),
        "fixtures_dir": ("storage", "fixtures_dir"),
        "latency_ms": ("api", "latency_ms"),
        "contact_latency_ms": ("api", "contact_latency_ms"),
    }

    for key, value in cli_kwargs.items():
        if value is None or key not in mapping:
            continue
        section, field = mapping[key]
        data[section][field] = str(value) if isinstance(value, Path) else value
        if key == "data_dir" and cli_kwargs.get("backend") is None:
            data["storage"]["backend"] = StorageBackendKind.FILE

    return EllaiaConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: EllaiaConfig) -> EllaiaConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "ELLAIA_STORAGE_BACKEND": ("storage", "backend"),
        "ELLAIA_DATA_DIR": ("storage", "directory"),
        "ELLAIA_STORAGE_PREFIX": ("storage", "prefix"),
        "ELLAIA_FIXTURES_DIR": ("storage", "fixtures_dir"),
        "ELLAIA_LATENCY_MS": ("api", "latency_ms"),
        "ELLAIA_CONTACT_LATENCY_MS": ("api", "contact_latency_ms"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value.strip()

    return EllaiaConfig.model_validate(data)
