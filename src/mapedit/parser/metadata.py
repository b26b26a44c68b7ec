# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Key/value extraction for lines inside METADATA blocks."""

import re
from dataclasses import dataclass

from mapedit.parser.lexer import LineScan, TokenKind, scan_line

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class MetadataEntry:
    """A single ``"key" "value"`` pair of a METADATA block."""

    key: str
    value: str


def metadata_entry(line: str, scan: LineScan | None = None) -> MetadataEntry | None:
    """Parse a METADATA line into a key/value pair.

    Quoted pairs (``"wfs_title" "Roads"``) are taken from the lexer tokens.
    Unquoted values (``wfs_srs EPSG:2100``) are read from the raw line up to
    a trailing comment, since the lexer skips digits and punctuation.

    Args:
        line: The raw line text.
        scan: The line's lexer output when the caller already has it.

    Returns:
        The entry, or None for lines without both a key and a value.
    """
    scan = scan if scan is not None else scan_line(line)
    tokens = scan.tokens
    if not tokens:
        return None
    if len(tokens) >= 2 and tokens[0].kind is TokenKind.STRING and tokens[1].kind is TokenKind.STRING:
        return MetadataEntry(key=tokens[0].text, value=tokens[1].text)

    match = _RAW_ENTRY_RE.match(_strip_comment(line))
    if match is None:
        return None
    key = next(group for group in match.group(1, 2, 3) if group is not None)
    value = match.group(4).strip().strip("\"'")
    if not key or not value:
        return None
    return MetadataEntry(key=key, value=value)


# ################
# Implementation
# ################

_RAW_ENTRY_RE = re.compile(r"""^\s*(?:"([^"]*)"|'([^']*)'|([^\s"']+))\s+(.+?)\s*$""")


def _strip_comment(line: str) -> str:
    """Cut a trailing ``#`` or ``//`` comment that is not inside quotes."""
    quote = ""
    for index, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch == "#" or line.startswith("//", index):
            return line[:index]
    return line
