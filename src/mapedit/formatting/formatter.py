# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Stack-based mapfile re-indentation.

Only leading whitespace changes. Each line is indented by the number of
blocks open before it; an ``END`` line first closes its block (realigning on
an optional trailing name such as ``END # CLASS``) and is then emitted at the
resulting, shallower depth.
"""

from collections.abc import Iterable

from mapedit.parser.blocks import BlockStack, LineIndex, end_hint, resolve_openers
from mapedit.parser.lexer import split_lines

# ###############
# Public Interface
# ###############

DEFAULT_INDENT = 4


def format_mapfile(text: str, indent: int = DEFAULT_INDENT, *, extra_openers: Iterable[str] = ()) -> str:
    """Re-indent a mapfile to canonical nesting-based indentation.

    Rules per line:

    * Blank lines are emitted empty.
    * Comment-only lines are re-indented at the current depth.
    * ``END`` lines realign on a trailing block name when it names an open
      block, close one block, and are emitted at the new depth.
    * Any other line is emitted at the current depth and, if it is a
      standalone block opener, opens a block for the following lines.

    Tabs are replaced by two spaces before processing and line endings are
    normalized to ``\\n``. Formatting is idempotent.

    Args:
        text: The mapfile source.
        indent: Spaces per nesting level; non-positive values fall back to 4.
        extra_openers: Additional block keywords to trust as openers.

    Returns:
        The re-indented mapfile text.
    """
    unit = " " * (indent if indent > 0 else DEFAULT_INDENT)
    index = LineIndex(split_lines(text.replace("\t", "  ")), resolve_openers(extra_openers))
    stack = BlockStack()
    out: list[str] = []

    for lineno, (raw, info) in enumerate(zip(index.lines, index.infos, strict=True), start=1):
        trimmed = raw.strip()
        if not trimmed:
            out.append("")
            continue

        if info.is_end:
            stack.close(end_hint(raw))
            out.append(unit * stack.depth + trimmed)
            continue

        out.append(unit * stack.depth + trimmed)
        if info.is_opener and info.first_word is not None:
            first = info.scan.tokens[0]
            stack.push(info.first_word, lineno, first.column)

    return "\n".join(out)
