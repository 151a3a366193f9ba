from __future__ import annotations

from pathlib import Path
from typing import Literal

import typer
from pydantic import Field
from pydantic.dataclasses import dataclass

APP_NAME = "timesince"


def default_app_dir() -> Path:
    """Per-user configuration directory, e.g. ``~/.config/timesince``."""
    return Path(typer.get_app_dir(APP_NAME))


def default_data_file() -> Path:
    return default_app_dir() / "data.json"


def default_config_file() -> Path:
    return default_app_dir() / "config.yaml"


@dataclass
class Settings:
    """Resolved runtime settings for one invocation."""

    # Location of the JSON event file
    data_file: Path = Field(default_factory=default_data_file)

    # Default ordering for `list` when --sort is not given
    list_order: Literal["name", "recent", "oldest"] = "name"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @property
    def log_file(self) -> Path:
        return self.data_file.parent / "logs" / f"{APP_NAME}.log"
