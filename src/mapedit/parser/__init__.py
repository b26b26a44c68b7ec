# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and block structure primitives shared by all mapfile consumers."""

from mapedit.parser.blocks import (
    DEFAULT_OPENERS,
    BlockStack,
    LineIndex,
    StackFrame,
    end_hint,
    find_block_end,
    find_block_start,
    find_last_end,
    is_standalone_opener,
)
from mapedit.parser.lexer import LexerState, LineScan, Token, TokenKind, scan_line, scan_lines
from mapedit.parser.metadata import MetadataEntry, metadata_entry

__all__ = [
    "DEFAULT_OPENERS",
    "BlockStack",
    "LexerState",
    "LineIndex",
    "LineScan",
    "MetadataEntry",
    "StackFrame",
    "Token",
    "TokenKind",
    "end_hint",
    "find_block_end",
    "find_block_start",
    "find_last_end",
    "is_standalone_opener",
    "metadata_entry",
    "scan_line",
    "scan_lines",
]
