# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Settings model and YAML loader for the optional ``.mapedit.yaml`` file.

Field names of each section equal the keyword arguments of the matching
analysis function, so ``settings.model_dump()`` can be passed straight in.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".mapedit.yaml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class FormatSettings(BaseModel):
    """Options of the formatter."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    indent: int = Field(default=4, ge=1)
    extra_openers: list[str] = Field(alias="extra-openers", default_factory=list)


class BalanceSettings(BaseModel):
    """Options of the END balance detector."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    extra_openers: list[str] = Field(alias="extra-openers", default_factory=list)
    heuristic_openers: bool = Field(alias="heuristic-openers", default=True)
    allow_inline_end_without_opener: bool = Field(alias="allow-inline-end-without-opener", default=False)
    allow_multiline_quotes: bool = Field(alias="allow-multiline-quotes", default=False)


class SyntaxSettings(BaseModel):
    """Options of the syntax/context checker."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    soft_suppression_lines: int = Field(alias="soft-suppression-lines", default=25, ge=0)
    enable_suggestions: bool = Field(alias="enable-suggestions", default=True)
    max_suggestions: int = Field(alias="max-suggestions", default=3, ge=0)
    allow_multiline_quotes: bool = Field(alias="allow-multiline-quotes", default=False)
    extra_openers: list[str] = Field(alias="extra-openers", default_factory=list)


class ExtentSettings(BaseModel):
    """Options of the extent synchronizer."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    viewport_crs: str = Field(alias="viewport-crs", default="CRS:84")
    add_missing: bool = Field(alias="add-missing", default=True)
    update_map: bool = Field(alias="update-map", default=True)
    update_layers: bool = Field(alias="update-layers", default=True)


class MetadataSettings(BaseModel):
    """Options of the WMS/WFS metadata completion."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    online_resource: str = Field(alias="online-resource", default="http://localhost:4300/api/wms")


class MapEditConfig(BaseModel):
    """Top-level configuration.

    Attributes:
        log_level: Logging level used by the command line tool.
        format: Formatter options.
        balance: Balance detector options.
        syntax: Syntax checker options.
        extent: Extent synchronizer options.
        metadata: Metadata completion options.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    log_level: LogLevel = Field(alias="log-level", default="WARNING")
    format: FormatSettings = Field(default_factory=FormatSettings)
    balance: BalanceSettings = Field(default_factory=BalanceSettings)
    syntax: SyntaxSettings = Field(default_factory=SyntaxSettings)
    extent: ExtentSettings = Field(default_factory=ExtentSettings)
    metadata: MetadataSettings = Field(default_factory=MetadataSettings)


def find_config(mapfile: Path) -> Path | None:
    """Return the ``.mapedit.yaml`` next to *mapfile*, or None if there is none."""
    candidate = mapfile.parent / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def load_config(path: Path) -> MapEditConfig:
    """Load and validate a configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to the YAML file.

    Returns:
        A validated MapEditConfig instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML, or
            does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    return parse_config(raw, source_label=str(path))


def parse_config(text: str, source_label: str = "<string>") -> MapEditConfig:
    """Parse configuration YAML text.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages.

    Returns:
        A validated MapEditConfig instance.

    Raises:
        ConfigError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: configuration must be a YAML mapping")

    try:
        return MapEditConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {source_label}: {exc}") from exc
