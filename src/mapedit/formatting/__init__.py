# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical re-indentation of mapfiles."""

from mapedit.formatting.formatter import DEFAULT_INDENT, format_mapfile

__all__ = [
    "DEFAULT_INDENT",
    "format_mapfile",
]
