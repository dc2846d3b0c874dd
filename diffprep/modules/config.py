"""Configuration for the diff processing engine.

Values come from, lowest to highest precedence: the model defaults, the
``diff_processing`` section of a YAML file, ``DIFFPREP_*`` environment
variables, and explicit keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

KIB = 1024
MIB = 1024 * KIB

ENV_PREFIX = "DIFFPREP_"
CONFIG_SECTION = "diff_processing"


class ConfigError(ValueError):
    """Raised for invalid engine configuration."""


class ProcessorConfig(BaseModel):
    """Limits and switches for one engine instance. Sizes are UTF-8 bytes."""

    model_config = ConfigDict(frozen=True)

    max_direct_size: int = Field(default=100 * KIB, gt=0, description="Largest diff forwarded unmodified")
    max_chunk_size: int = Field(default=50 * KIB, gt=0, description="Per-file body cap")
    max_total_size: int = Field(default=400 * KIB, gt=0, description="Byte budget for chunked output")
    max_files: int = Field(default=100, gt=0, description="File sections kept by the splitter")
    enable_summarization: bool = Field(default=True, description="Allow the summarized strategy")
    truncation_reserve: int = Field(default=100, ge=0, description="Room left below a cap for the marker")
    min_useful_remainder: int = Field(
        default=1000, ge=0, description="Smallest leftover budget worth a partial unit"
    )
    summary_min_priority: int = Field(default=4, ge=1, le=5)
    summary_max_units: int = Field(default=5, gt=0)
    summary_excerpt_size: int = Field(default=2000, gt=0)

    @model_validator(mode="after")
    def _check_reserve(self) -> "ProcessorConfig":
        if self.truncation_reserve >= self.max_chunk_size:
            raise ValueError(
                f"truncation_reserve ({self.truncation_reserve}) must be smaller than "
                f"max_chunk_size ({self.max_chunk_size})"
            )
        # A partial unit is cut to (remaining - reserve) bytes
        if self.min_useful_remainder < self.truncation_reserve:
            raise ValueError(
                f"min_useful_remainder ({self.min_useful_remainder}) must not be smaller than "
                f"truncation_reserve ({self.truncation_reserve})"
            )
        return self

    def with_overrides(self, **overrides: Any) -> "ProcessorConfig":
        return self.from_mapping({**self.to_dict(), **overrides})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ProcessorConfig":
        """Build a validated config from a plain mapping, ignoring unknown keys.

        Raises:
            ConfigError: a value has the wrong type or is out of range
        """
        values: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key not in cls.model_fields:
                logger.warning(f"Ignoring unknown diff_processing option: {key}")
                continue
            values[key] = value

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"Invalid diff_processing configuration: {problems}") from e


def _env_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in ProcessorConfig.model_fields:
        env_key = ENV_PREFIX + name.upper()
        if env_key in environ:
            overrides[name] = environ[env_key]
    return overrides


def load_yaml_section(config_path: str) -> Dict[str, Any]:
    """Read the ``diff_processing`` section from a YAML file."""
    config_file = Path(config_path)

    if not config_file.exists():
        logger.warning(f"Config file not found: {config_path}. Using defaults.")
        return {}

    with open(config_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")

    section = data.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{CONFIG_SECTION}' in {config_path} must be a mapping")

    logger.debug(f"Loaded {len(section)} diff_processing option(s) from: {config_path}")
    return section


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ProcessorConfig:
    """Resolve a ProcessorConfig from YAML, environment and overrides."""
    merged: Dict[str, Any] = {}
    if config_path:
        merged.update(load_yaml_section(config_path))
    merged.update(_env_overrides(os.environ if environ is None else environ))
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return ProcessorConfig.from_mapping(merged)
