from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from .model import Settings, default_config_file

DATA_FILE_ENV = "TIMESINCE_DATA_FILE"
CONFIG_ENV = "TIMESINCE_CONFIG"


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle)
    if loaded is None:
        return {}
    if isinstance(loaded, dict):
        return loaded
    raise TypeError(f"{path} must contain a mapping")


def load_settings(
    config_path: Path | None = None,
    *,
    data_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from the YAML config file, the environment and overrides.

    Later sources win: file values, then ``TIMESINCE_DATA_FILE``, then an
    explicit *data_file*. A missing default config file is ignored, but an
    explicitly requested one must exist.
    """
    env = os.environ if environ is None else environ
    explicit = config_path is not None or bool(env.get(CONFIG_ENV))
    if config_path is None:
        config_path = Path(env[CONFIG_ENV]) if env.get(CONFIG_ENV) else default_config_file()
    config_path = config_path.expanduser()

    values: Dict[str, Any] = {}
    if config_path.exists():
        values.update(_load_yaml(config_path))
    elif explicit:
        raise FileNotFoundError(f"Config file {config_path} does not exist")

    if env.get(DATA_FILE_ENV):
        values["data_file"] = env[DATA_FILE_ENV]
    if data_file is not None:
        values["data_file"] = data_file
    if "data_file" in values:
        values["data_file"] = Path(str(values["data_file"])).expanduser()

    allowed_keys = set(Settings.__dataclass_fields__)
    unknown = sorted(set(values) - allowed_keys)
    if unknown:
        raise ValueError(f"{config_path} has unknown keys: {', '.join(unknown)}")
    if isinstance(values.get("log_level"), str):
        values["log_level"] = values["log_level"].upper()
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ValueError(f"Invalid settings in {config_path}: {exc}") from exc
