# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project-level settings for MapEdit."""

from mapedit.workspace.config import (
    CONFIG_FILE_NAME,
    BalanceSettings,
    ConfigError,
    ExtentSettings,
    FormatSettings,
    MapEditConfig,
    MetadataSettings,
    SyntaxSettings,
    find_config,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "BalanceSettings",
    "ConfigError",
    "ExtentSettings",
    "FormatSettings",
    "MapEditConfig",
    "MetadataSettings",
    "SyntaxSettings",
    "find_config",
    "load_config",
    "parse_config",
]
