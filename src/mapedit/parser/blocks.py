# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Block structure of mapfiles: opener classification and the block stack.

A mapfile block is a ``KEYWORD ... END`` span. Several block keywords also
exist as single-line directives (``PATTERN 10 10``, ``POINTS 1 1 END``,
``STYLE HILITE`` inside ``QUERYMAP``), so a line only opens a block when the
keyword stands alone on it, optionally followed by a comment.
"""

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from mapedit.parser.lexer import LexerState, LineScan, TokenKind, scan_line

# ###############
# Public Interface
# ###############

ROOT = "ROOT"
END = "END"

DEFAULT_OPENERS: frozenset[str] = frozenset(
    {
        "MAP",
        "LAYER",
        "CLASS",
        "STYLE",
        "LABEL",
        "LEADER",
        "WEB",
        "METADATA",
        "PROJECTION",
        "OUTPUTFORMAT",
        "SYMBOL",
        "LEGEND",
        "SCALEBAR",
        "QUERYMAP",
        "REFERENCE",
        "CLUSTER",
        "GRID",
        "COMPOSITE",
        "FEATURE",
        "JOIN",
        "VALIDATION",
        "IDENTIFY",
        "SCALETOKEN",
        "VALUES",
        "PATTERN",
        "POINTS",
    }
)
"""Block keywords shared by every consumer. Callers extend it with extra openers."""


def resolve_openers(extra: Iterable[str] = (), base: Iterable[str] = DEFAULT_OPENERS) -> frozenset[str]:
    """Return *base* extended with *extra* openers, upper-cased."""
    return frozenset(base) | {str(kw).upper() for kw in extra}


def is_standalone_opener(line: str, openers: Iterable[str] = DEFAULT_OPENERS) -> bool:
    """Return True if *line* opens a block.

    The first word, upper-cased, must be one of *openers* and everything
    after it must be empty or a comment. ``STYLE`` and ``STYLE  # hilite``
    open a block; ``STYLE HILITE`` and ``PATTERN 10 10`` do not.
    """
    return standalone_keyword(line, scan_line(line), frozenset(openers)) is not None


def end_hint(line: str) -> str | None:
    """Return the block name carried by an ``END`` line, if any.

    Accepts ``END LAYER``, ``END # LAYER`` and ``END // LAYER``; returns
    ``None`` for a bare ``END`` or a line that is not an END line.
    """
    match = _END_HINT_RE.match(line)
    if match is None or match.group(1) is None:
        return None
    return match.group(1).upper()


@dataclass(frozen=True)
class StackFrame:
    """One open block.

    Attributes:
        kind: Upper-cased block keyword (``ROOT`` for the synthetic bottom frame).
        line: 1-based line number of the opener.
        column: 1-based column of the opener keyword.
    """

    kind: str
    line: int
    column: int

    def describe(self) -> str:
        """Return ``KIND@line:col`` for compact nesting chains."""
        return f"{self.kind}@{self.line}:{self.column}"


@dataclass(frozen=True)
class CloseResult:
    """Outcome of closing a block on an ``END``.

    Attributes:
        popped: The frame that was closed, or None when only ROOT was open.
        dropped: Frames discarded while realigning on a named ``END`` hint,
            outermost first. These blocks never received their own END.
    """

    popped: StackFrame | None
    dropped: list[StackFrame] = field(default_factory=list)


class BlockStack:
    """Stack of open blocks with a synthetic ROOT frame at the bottom."""

    def __init__(self) -> None:
        self._frames: list[StackFrame] = [StackFrame(ROOT, 0, 0)]

    @property
    def depth(self) -> int:
        """Number of open blocks, excluding ROOT."""
        return len(self._frames) - 1

    @property
    def current(self) -> StackFrame:
        """The innermost open frame (ROOT when nothing is open)."""
        return self._frames[-1]

    @property
    def open_frames(self) -> list[StackFrame]:
        """Open frames from outermost to innermost, excluding ROOT."""
        return list(self._frames[1:])

    def contains(self, kind: str) -> bool:
        """Return True if a block of *kind* is open anywhere on the stack."""
        return any(frame.kind == kind for frame in self._frames[1:])

    def push(self, kind: str, line: int, column: int) -> StackFrame:
        """Open a new block and return its frame."""
        frame = StackFrame(kind.upper(), line, column)
        self._frames.append(frame)
        return frame

    def close(self, hint: str | None = None) -> CloseResult:
        """Close one block, realigning on *hint* first when it names an open block.

        With a hint, the stack is searched from the top for a frame of that
        kind. If found, the frames above it are dropped so that it becomes the
        innermost block, and then it is popped. Without a matching frame the
        hint is ignored and the innermost block is popped.
        """
        dropped: list[StackFrame] = []
        if hint:
            for index in range(len(self._frames) - 1, 0, -1):
                if self._frames[index].kind == hint.upper():
                    dropped = self._frames[index + 1 :]
                    del self._frames[index + 1 :]
                    break
        if self.depth == 0:
            return CloseResult(popped=None, dropped=dropped)
        return CloseResult(popped=self._frames.pop(), dropped=dropped)


@dataclass(frozen=True)
class LineInfo:
    """Structural facts about one physical line.

    Attributes:
        scan: The lexer output for the line.
        first_word: Upper-cased first token when it is a word.
        is_opener: The line is a standalone block opener.
        is_end: The first token of the line is ``END``.
    """

    scan: LineScan
    first_word: str | None
    is_opener: bool
    is_end: bool

    @property
    def has_code(self) -> bool:
        """False for blank lines and lines holding only comments."""
        return bool(self.scan.tokens)


class LineIndex:
    """A list of mapfile lines with per-line structural facts.

    The facts are recomputed whenever a line is replaced or inserted, so that
    block comments spanning several lines stay consistent after edits.
    """

    def __init__(
        self,
        lines: Sequence[str],
        openers: Iterable[str] = DEFAULT_OPENERS,
        *,
        allow_multiline_quotes: bool = False,
    ) -> None:
        self.lines: list[str] = list(lines)
        self._openers = frozenset(openers)
        self._allow_multiline_quotes = allow_multiline_quotes
        self.infos: list[LineInfo] = []
        self._reindex()

    def __len__(self) -> int:
        return len(self.lines)

    def replace(self, index: int, text: str) -> None:
        """Replace the line at *index*."""
        self.lines[index] = text
        self._reindex()

    def insert(self, index: int, text: str) -> None:
        """Insert a new line before *index*."""
        self.lines.insert(index, text)
        self._reindex()

    def find_block_start(self, keyword: str, start: int = 0, stop: int | None = None) -> int:
        """Return the index of the first code line whose first word is *keyword*, or -1."""
        stop = len(self.lines) if stop is None else min(stop, len(self.lines))
        for index in range(start, stop):
            if self.infos[index].first_word == keyword.upper():
                return index
        return -1

    def find_block_end(self, start: int) -> int:
        """Return the index of the END closing the block opened at *start*.

        Returns *start* itself when end of file is reached first.
        """
        depth = 1
        for index in range(start + 1, len(self.lines)):
            info = self.infos[index]
            if info.is_end:
                depth -= 1
                if depth == 0:
                    return index
            elif info.is_opener:
                depth += 1
        return start

    def find_last_end(self, after: int) -> int:
        """Return the index of the last END line after *after*, or *after* if there is none."""
        for index in range(len(self.lines) - 1, after, -1):
            if self.infos[index].is_end:
                return index
        return after

    def walk(self, start: int, end: int) -> Iterator[tuple[int, int, LineInfo]]:
        """Yield ``(index, depth, info)`` for every code line strictly inside a block.

        *depth* is the nesting level of the line relative to the block opened
        at *start*: direct children sit at depth 1, including the opener and
        the END of a child block.
        """
        depth = 1
        for index in range(start + 1, end):
            info = self.infos[index]
            if not info.has_code:
                continue
            if info.is_end:
                depth -= 1
                yield index, depth, info
            elif info.is_opener:
                yield index, depth, info
                depth += 1
            else:
                yield index, depth, info

    def inner_indent(self, start: int, end: int) -> str:
        """Guess the indentation used for direct children of the block at *start*."""
        for index, depth, info in self.walk(start, end):
            if depth == 1 and not info.is_end:
                return _leading_whitespace(self.lines[index])
        return _leading_whitespace(self.lines[start]) + "  "

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reindex(self) -> None:
        infos: list[LineInfo] = []
        state = LexerState()
        for line in self.lines:
            scan = scan_line(line, state, allow_multiline_quotes=self._allow_multiline_quotes)
            state = scan.state
            first_word = scan.first_word
            infos.append(
                LineInfo(
                    scan=scan,
                    first_word=first_word,
                    is_opener=standalone_keyword(line, scan, self._openers) is not None,
                    is_end=first_word == END,
                )
            )
        self.infos = infos


def find_block_start(lines: Sequence[str], keyword: str) -> int:
    """Return the index of the first code line starting with *keyword*, or -1."""
    return LineIndex(lines).find_block_start(keyword)


def find_block_end(lines: Sequence[str], start: int, openers: Iterable[str] = DEFAULT_OPENERS) -> int:
    """Return the index of the END closing the block at *start*, or *start* if not found."""
    return LineIndex(lines, openers).find_block_end(start)


def find_last_end(lines: Sequence[str], after: int) -> int:
    """Return the index of the last END line after *after*, or *after* if there is none.

    This is the recovery heuristic for a MAP block whose END cannot be found
    by depth counting: in practice the MAP's END is the last END of the file.
    """
    return LineIndex(lines).find_last_end(after)


def is_comment_remainder(rest: str) -> bool:
    """Return True if *rest* is empty or starts with a comment marker."""
    rest = rest.strip()
    return not rest or rest.startswith(("#", "//", "/*"))


def standalone_keyword(line: str, scan: LineScan, openers: frozenset[str]) -> str | None:
    """Return the opener keyword if the scanned *line* is a standalone opener, else None.

    The keyword must be the first token of the line (only a closed block
    comment may precede it) and nothing but a comment may follow it.
    """
    first = scan.first
    if first is None or first.kind is not TokenKind.WORD or first.upper not in openers:
        return None
    before = line[: first.column - 1].strip()
    if before and not before.endswith("*/"):
        return None
    if len(scan.tokens) > 1 or scan.unclosed_quotes:
        return None
    return first.upper if is_comment_remainder(line[first.column - 1 + len(first.text) :]) else None


# ################
# Implementation
# ################

_END_HINT_RE = re.compile(r"^\s*END\b[ \t]*(?:(?:#|//)[ \t]*)?([A-Za-z_][A-Za-z0-9_]*)?", re.IGNORECASE)


def _leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]
