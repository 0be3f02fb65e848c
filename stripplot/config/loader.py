from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import DEFAULT_INPUT_PATH, InvalidValuePolicy, StripPlotConfig
from ..models.view_state import ColorStrategy, ModeFilter, SortKey

"""Config loader.

Responsibilities:
- Load the YAML config (default: config/stripplot.yml)
- Validate it against the packaged JSON schema
- Apply defaults and convert enum-valued keys
- Apply environment overrides (STRIPPLOT_INPUT / STRIPPLOT_OUTPUT_DIR)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "default_config",
    "apply_env_overrides",
]

DEFAULT_CONFIG_PATH = Path("config/stripplot.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_INPUT = "STRIPPLOT_INPUT"
ENV_OUTPUT_DIR = "STRIPPLOT_OUTPUT_DIR"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _from_mapping(data: dict[str, Any]) -> StripPlotConfig:
    defaults = StripPlotConfig(input_path=data["input_path"])
    return StripPlotConfig(
        input_path=data["input_path"],
        output_directory=data.get("output_directory", defaults.output_directory),
        sheet_name=data.get("sheet_name", defaults.sheet_name),
        header_row=data.get("header_row", defaults.header_row),
        default_sort=SortKey(data.get("default_sort", defaults.default_sort.value)),
        default_mode=ModeFilter(data.get("default_mode", defaults.default_mode.value)),
        color_strategy=ColorStrategy(data.get("color_strategy", defaults.color_strategy.value)),
        invalid_value_policy=InvalidValuePolicy(
            data.get("invalid_value_policy", defaults.invalid_value_policy.value)
        ),
        include_plotlyjs=data.get("include_plotlyjs", defaults.include_plotlyjs),
        title=data.get("title"),
    )


def load_config(path: Path) -> StripPlotConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _from_mapping(data)


def default_config() -> StripPlotConfig:
    """Configuration used when no config file is present."""
    return StripPlotConfig(input_path=DEFAULT_INPUT_PATH)


def apply_env_overrides(cfg: StripPlotConfig) -> StripPlotConfig:
    """Environment (typically loaded from .env) wins over the file values."""
    input_path = os.getenv(ENV_INPUT)
    output_dir = os.getenv(ENV_OUTPUT_DIR)
    if input_path:
        cfg = replace(cfg, input_path=input_path)
    if output_dir:
        cfg = replace(cfg, output_directory=output_dir)
    return cfg
