# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Detection of unmatched ``END`` lines and unterminated blocks.

The detector never fails: pops on an empty stack become *extra ends* and
blocks still open at end of file become *missing ends*. It is a fast, local
pre-check and not a substitute for MapServer's own parser.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from pydantic import BaseModel
from pydantic import Field as _Field

from mapedit.model.diagnostics import Diagnostic, IssueKind, Recovery, Severity
from mapedit.parser.blocks import END, BlockStack, StackFrame, resolve_openers, standalone_keyword
from mapedit.parser.lexer import LineScan, TokenKind, scan_lines, split_lines

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ExtraEnd(BaseModel):
    """An ``END`` found while no block was open."""

    line: int
    col: int
    excerpt: str = ""


class OpenBlock(BaseModel):
    """A block opener, optionally flagged as recognised only heuristically."""

    kind: str
    line: int
    col: int
    heuristic: bool = False


class BalanceReport(BaseModel):
    """Result of :func:`analyze_balance`.

    Attributes:
        ok: True when there are neither extra nor missing ends.
        extra_ends: END lines without an open block, in source order.
        missing_ends: Blocks open at end of file, innermost first.
        heuristic_openers: Lines that were treated as openers only because
            they look like an unknown ALLCAPS block keyword.
        message: Human-readable summary.
    """

    ok: bool
    extra_ends: list[ExtraEnd] = _Field(default_factory=list)
    missing_ends: list[OpenBlock] = _Field(default_factory=list)
    heuristic_openers: list[OpenBlock] = _Field(default_factory=list)
    message: str = ""

    @property
    def recoveries(self) -> list[Recovery]:
        """Heuristic fallbacks that influenced this report."""
        return [Recovery.HEURISTIC_OPENER] if self.heuristic_openers else []

    def diagnostics(self) -> list[Diagnostic]:
        """Convert the report into the shared diagnostic shape."""
        result = [
            Diagnostic(
                line_no=extra.line,
                col=extra.col,
                kind=IssueKind.END_MISMATCH,
                severity=Severity.HARD,
                message="END without an open block to close.",
                excerpt=extra.excerpt,
            )
            for extra in self.extra_ends
        ]
        result.extend(
            Diagnostic(
                line_no=block.line,
                col=block.col,
                kind=IssueKind.MISSING_END,
                severity=Severity.HARD,
                message=f"Block {block.kind} is never closed by END.",
            )
            for block in self.missing_ends
        )
        return result


def analyze_balance(
    text: str,
    *,
    extra_openers: Iterable[str] = (),
    heuristic_openers: bool = True,
    allow_inline_end_without_opener: bool = False,
    allow_multiline_quotes: bool = False,
) -> BalanceReport:
    """Find extra and missing ``END`` lines.

    A line opens a block when:

    * it is a standalone known opener (``LAYER``, ``STYLE # fill``), or
    * *heuristic_openers* is set and the line is a single standalone ALLCAPS
      word of at least three characters other than ``END``, or
    * its first word is a known opener and the same line carries an inline
      ``END`` (``PATTERN 10 5 END``), so the block opens and closes in place.

    ``END`` words count when they are the first word of the line, when the
    line itself opened a block, or when *allow_inline_end_without_opener*
    is set.

    Args:
        text: The mapfile source.
        extra_openers: Additional block keywords.
        heuristic_openers: Treat unknown standalone ALLCAPS words as openers.
        allow_inline_end_without_opener: Honor ``END`` anywhere on a line.
        allow_multiline_quotes: Let quoted strings span lines.

    Returns:
        A :class:`BalanceReport`.
    """
    openers = resolve_openers(extra_openers)
    lines = split_lines(text)
    stack = BlockStack()
    heuristic_frames: set[tuple[int, int]] = set()
    heuristic_list: list[OpenBlock] = []
    extra_ends: list[ExtraEnd] = []

    for lineno, (line, scan) in enumerate(
        zip(lines, scan_lines(lines, allow_multiline_quotes=allow_multiline_quotes), strict=True), start=1
    ):
        words = scan.words
        if not words:
            continue

        opened, heuristic = _opens_block(line, scan, openers, heuristic_openers)
        if opened:
            frame = stack.push(words[0].upper, lineno, words[0].column)
            if heuristic:
                logger.debug("Line %d: treating unknown keyword %s as a block opener", lineno, frame.kind)
                heuristic_frames.add((frame.line, frame.column))
                heuristic_list.append(OpenBlock(kind=frame.kind, line=lineno, col=frame.column, heuristic=True))

        for position, token in enumerate(words):
            if token.upper != END:
                continue
            if not (position == 0 or allow_inline_end_without_opener or opened):
                continue
            if stack.close().popped is None:
                extra_ends.append(ExtraEnd(line=lineno, col=token.column, excerpt=line.strip()[:200]))

    missing_ends = [
        OpenBlock(
            kind=frame.kind,
            line=frame.line,
            col=frame.column,
            heuristic=(frame.line, frame.column) in heuristic_frames,
        )
        for frame in reversed(stack.open_frames)
    ]
    ok = not extra_ends and not missing_ends
    return BalanceReport(
        ok=ok,
        extra_ends=extra_ends,
        missing_ends=missing_ends,
        heuristic_openers=heuristic_list,
        message=_render_message(ok, extra_ends, missing_ends, stack.open_frames),
    )


# ################
# Implementation
# ################

_ALLCAPS_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")


def _opens_block(line: str, scan: LineScan, openers: frozenset[str], heuristic_openers: bool) -> tuple[bool, bool]:
    """Return ``(opened, heuristic)`` for a scanned line."""
    first = scan.first
    if first is None or first.kind is not TokenKind.WORD:
        return False, False
    if standalone_keyword(line, scan, openers) is not None:
        return True, False
    if first.upper in openers and any(tok.upper == END for tok in scan.words[1:]):
        return True, False
    if (
        heuristic_openers
        and first.upper != END
        and len(first.text) >= 3
        and _ALLCAPS_RE.match(first.text)
        and standalone_keyword(line, scan, frozenset({first.upper})) is not None
    ):
        return True, True
    return False, False


def _render_message(
    ok: bool, extra_ends: list[ExtraEnd], missing_ends: list[OpenBlock], open_frames: list[StackFrame]
) -> str:
    """Build the human-readable summary of a balance check."""
    parts = ["Block/END balance check"]
    if ok:
        parts.append("No problem found: there is no extra END and no missing END.")
        return "\n".join(parts)

    parts.append(f"Found {len(extra_ends)} extra END(s) and {len(missing_ends)} block(s) without END.")

    if extra_ends:
        parts.append("")
        parts.append("Extra END:")
        for extra in extra_ends:
            detail = f'  (line: "{extra.excerpt}")' if extra.excerpt else ""
            parts.append(f"- Extra END at line {extra.line}, column {extra.col}.{detail}")

    if missing_ends:
        parts.append("")
        parts.append("Missing END (blocks still open at end of file):")
        for block in missing_ends:
            suffix = " [heuristic opener]" if block.heuristic else ""
            parts.append(
                f"- Missing END for block {block.kind} (opened at line {block.line}, column {block.col}).{suffix}"
            )
        nesting = " > ".join(frame.describe() for frame in open_frames)
        parts.append("")
        parts.append(f"Nesting (outermost to innermost): {nesting}")

    return "\n".join(parts)
