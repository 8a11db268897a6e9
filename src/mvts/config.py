"""Settings for alignment and autocovariance runs, loadable from JSON or YAML."""

from __future__ import annotations

import importlib
import importlib.util
import json
import pathlib
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field


def _load_yaml_module() -> Any | None:
    spec = importlib.util.find_spec("yaml")
    if spec is None:
        return None
    return importlib.import_module("yaml")


_yaml = _load_yaml_module()


class AlignmentSettings(BaseModel):
    """Defaults applied when a caller does not specify a parameter."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    impute_missing: bool = False
    max_lag: int = Field(default=10, ge=0)
    normalize: bool = True
    detail_level: int = Field(default=2, ge=0, le=2)


def _parse_text(text: str, *, suffix: str) -> Mapping[str, Any]:
    if suffix in {".yaml", ".yml"}:
        if _yaml is None:
            raise ValueError("PyYAML is required to load YAML settings files.")
        data = _yaml.safe_load(text)
    else:
        data = json.loads(text)

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("Settings payload must be a mapping.")
    return data


def load_settings(
    source: str | pathlib.Path | Mapping[str, Any] | None = None,
) -> AlignmentSettings:
    """Load settings from a mapping or a JSON/YAML file; ``None`` gives defaults."""

    if source is None:
        return AlignmentSettings()
    if isinstance(source, Mapping):
        payload = source
    else:
        path = pathlib.Path(source)
        payload = _parse_text(path.read_text(encoding="utf-8"), suffix=path.suffix.lower())

    return AlignmentSettings.model_validate(dict(payload))


__all__ = ["AlignmentSettings", "load_settings"]
