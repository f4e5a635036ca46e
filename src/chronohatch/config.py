"""Application configuration loaded from an optional YAML file.

Example ``chronohatch.yaml``::

    store_path: data/batches.json
    species_file: species_overrides.yaml
    event_log: telemetry/events.jsonl

Relative paths are resolved against the directory holding the config file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict

from chronohatch.core.errors import ChronoHatchValueError

DEFAULT_STORE_PATH = Path("chronohatch_batches.json")


class AppConfig(BaseModel):
    """Where batches, species overrides and lifecycle events live."""

    model_config = ConfigDict(extra="forbid")

    store_path: Path = DEFAULT_STORE_PATH
    species_file: Path | None = None
    event_log: Path | None = None

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return a copy where every non-``None`` override replaces the configured value."""
        update = {key: value for key, value in overrides.items() if value is not None}
        return self.model_copy(update=update)


def _reroot(value: Any, root: Path) -> Any:
    if value is None:
        return None
    path = Path(value)
    return path if path.is_absolute() else root / path


def load_config(path: str | Path | None) -> AppConfig:
    """Load ``path`` into :class:`AppConfig` (defaults when ``path`` is ``None``)."""
    if path is None:
        return AppConfig()
    base_path = Path(path).resolve()
    if not base_path.exists():
        raise FileNotFoundError(base_path)
    with base_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ChronoHatchValueError(f"{base_path} must contain a YAML mapping")
    root = base_path.parent
    data = dict(payload)
    for key in ("store_path", "species_file", "event_log"):
        if key in data:
            data[key] = _reroot(data[key], root)
    return AppConfig.model_validate(data)


__all__ = ["AppConfig", "DEFAULT_STORE_PATH", "load_config"]
