# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Heuristic syntax and context checker for mapfiles.

Issues are split into HARD findings, which are likely to make MapServer's
parser fail, and SOFT findings (misplaced or unknown keywords, odd METADATA
lines), which are often noise after a real parse break. Once a HARD issue is
recorded, SOFT issues in the following lines are counted but not reported.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from pydantic import BaseModel
from pydantic import Field as _Field

from mapedit.model.diagnostics import Diagnostic, IssueKind, Recovery, Severity
from mapedit.parser.blocks import END, ROOT, BlockStack, end_hint, resolve_openers, standalone_keyword
from mapedit.parser.lexer import LineScan, TokenKind, scan_lines, split_lines
from mapedit.validation.grammar import ALLOWED_FIRST_TOKENS, ALLOWED_PARENTS, GLOBAL_KNOWN, contexts_accepting

# ###############
# Public Interface
# ###############

DEFAULT_SOFT_SUPPRESSION_LINES = 25

_KIND_ORDER = [
    IssueKind.NESTING,
    IssueKind.END_MISMATCH,
    IssueKind.MISSING_END,
    IssueKind.MISSING_QUOTE,
    IssueKind.UNKNOWN_KEYWORD,
    IssueKind.CONTEXT,
    IssueKind.METADATA_FORMAT,
]

_KIND_TITLES = {
    IssueKind.NESTING: "Illegal block nesting",
    IssueKind.END_MISMATCH: "END without a matching block",
    IssueKind.MISSING_END: "Missing END (blocks left open)",
    IssueKind.MISSING_QUOTE: "Missing quote (\" or ')",
    IssueKind.UNKNOWN_KEYWORD: "Unknown or misspelled keyword",
    IssueKind.CONTEXT: "Keyword in an unexpected context",
    IssueKind.METADATA_FORMAT: "Suspicious METADATA format",
}


class SyntaxReport(BaseModel):
    """Result of :func:`detect_syntax_issues`.

    Attributes:
        issues: Reported issues in source order (suppressed SOFT issues excluded).
        suppressed_soft: Number of SOFT issues withheld by cascade suppression.
        recoveries: Heuristic fallbacks that fired while tracking blocks.
    """

    issues: list[Diagnostic] = _Field(default_factory=list)
    suppressed_soft: int = 0
    recoveries: list[Recovery] = _Field(default_factory=list)

    @property
    def hard(self) -> list[Diagnostic]:
        """HARD issues in source order."""
        return [issue for issue in self.issues if issue.severity is Severity.HARD]

    @property
    def soft(self) -> list[Diagnostic]:
        """Reported SOFT issues in source order."""
        return [issue for issue in self.issues if issue.severity is Severity.SOFT]

    @property
    def ok(self) -> bool:
        """True when nothing was found."""
        return not self.issues

    @property
    def has_hard(self) -> bool:
        """True when at least one HARD issue was found."""
        return any(issue.is_hard for issue in self.issues)

    def render(self, include_notes: bool = True) -> str:
        """Build the human-readable report, grouped by severity and then by kind."""
        if not self.issues:
            lines = ["No obvious syntax problems found."]
            if include_notes:
                lines.append(
                    "Note: this check is heuristic and not a full MapServer parser. "
                    "Compare with the error reported by MapServer for an exact match."
                )
            return "\n".join(lines)

        out = [f"Found {len(self.issues)} possible problem(s):"]
        for title, group in (
            ("HARD errors (likely parse failure)", self.hard),
            ("SOFT warnings (possible typo, wrong context or version)", self.soft),
        ):
            if not group:
                continue
            out.append("")
            out.append(f"== {title} ({len(group)}) ==")
            for kind in _KIND_ORDER:
                members = [issue for issue in group if issue.kind is kind]
                if not members:
                    continue
                out.append("")
                out.append(f"-- {_KIND_TITLES[kind]} ({len(members)})")
                for issue in members:
                    out.append(f"  * {issue.location().capitalize()}: {issue.message}")
                    if issue.excerpt:
                        out.append(f"    Excerpt: {issue.excerpt}")

        if self.suppressed_soft:
            out.append("")
            out.append(f"(Info) {self.suppressed_soft} soft warning(s) suppressed after a HARD error (cascade control).")

        if include_notes:
            out.append("")
            out.append(
                "Note: the detector is heuristic. For full accuracy, also run the MapServer parser "
                "and map its error message to the lines above."
            )
        return "\n".join(out)


def levenshtein(a: str, b: str) -> int:
    """Return the edit distance between *a* and *b*."""
    if a == b:
        return 0
    if len(b) > len(a):
        a, b = b, a
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + (ca != cb)))
        previous = current
    return previous[-1]


def suggest_keywords(word: str, known: Iterable[str] = GLOBAL_KNOWN, max_suggestions: int = 3) -> list[str]:
    """Return up to *max_suggestions* known keywords close to *word*.

    The distance threshold is 2 for words of up to six characters and 3 for
    longer ones. Candidates are ordered by distance, then alphabetically.
    """
    if max_suggestions <= 0:
        return []
    target = word.upper()
    max_dist = 2 if len(target) <= 6 else 3
    scored: list[tuple[int, str]] = []
    for candidate in known:
        if candidate == target or abs(len(candidate) - len(target)) > max_dist:
            continue
        distance = levenshtein(target, candidate)
        if distance <= max_dist:
            scored.append((distance, candidate))
    scored.sort()
    return [candidate for _, candidate in scored[:max_suggestions]]


def detect_syntax_issues(
    text: str,
    *,
    soft_suppression_lines: int = DEFAULT_SOFT_SUPPRESSION_LINES,
    enable_suggestions: bool = True,
    max_suggestions: int = 3,
    allow_multiline_quotes: bool = False,
    extra_openers: Iterable[str] = (),
) -> SyntaxReport:
    """Scan a mapfile for likely syntax and context errors.

    Args:
        text: The mapfile source.
        soft_suppression_lines: After a HARD issue at line L, SOFT issues up
            to line ``L + soft_suppression_lines`` are counted but not reported.
        enable_suggestions: Add typo suggestions to UNKNOWN_KEYWORD issues.
        max_suggestions: Maximum number of suggestions per unknown keyword.
        allow_multiline_quotes: Let quoted strings span lines.
        extra_openers: Additional block keywords.

    Returns:
        A :class:`SyntaxReport`. Malformed input never raises.
    """
    checker = _SyntaxChecker(
        soft_suppression_lines=max(0, soft_suppression_lines),
        max_suggestions=max(0, max_suggestions) if enable_suggestions else 0,
        extra_openers=extra_openers,
    )
    lines = split_lines(text)
    for lineno, (line, scan) in enumerate(
        zip(lines, scan_lines(lines, allow_multiline_quotes=allow_multiline_quotes), strict=True), start=1
    ):
        checker.check_line(lineno, line, scan)
    checker.finish(len(lines))
    return SyntaxReport(issues=checker.issues, suppressed_soft=checker.suppressed_soft, recoveries=checker.recoveries)


# ################
# Implementation
# ################

_ALLCAPS_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")


def _looks_like_keyword(word: str) -> bool:
    return bool(_ALLCAPS_RE.match(word))


class _SyntaxChecker:
    """Line-by-line checker holding the block stack and cascade state."""

    def __init__(self, soft_suppression_lines: int, max_suggestions: int, extra_openers: Iterable[str]) -> None:
        self._window = soft_suppression_lines
        self._max_suggestions = max_suggestions
        extra = resolve_openers(extra_openers, base=())
        self._openers = resolve_openers(extra, base=resolve_openers(ALLOWED_PARENTS))
        self._known = GLOBAL_KNOWN | extra
        self._stack = BlockStack()
        self._suppress_until = 0
        self.issues: list[Diagnostic] = []
        self.suppressed_soft = 0
        self.recoveries: list[Recovery] = []

    def check_line(self, lineno: int, line: str, scan: LineScan) -> None:
        if not scan.tokens:
            return
        excerpt = line.strip()

        for unclosed in scan.unclosed_quotes:
            self._add(
                lineno,
                unclosed.column,
                IssueKind.MISSING_QUOTE,
                Severity.HARD,
                f"Opening {unclosed.quote} is not closed on the same line.",
                excerpt,
            )

        first = scan.tokens[0]
        if first.kind is not TokenKind.WORD:
            return
        keyword = first.upper
        context = self._stack.current.kind

        if keyword == END:
            self._close(lineno, first.column, line, excerpt)
            return

        opener = standalone_keyword(line, scan, self._openers)
        if opener is not None:
            self._open(lineno, first.column, opener, context, excerpt)
            return

        if context in ALLOWED_FIRST_TOKENS and ALLOWED_FIRST_TOKENS[context] is None:
            if context == "METADATA":
                self._check_metadata(lineno, scan, excerpt)
            return

        if not _looks_like_keyword(first.text):
            return

        allowed_here = ALLOWED_FIRST_TOKENS.get(context)
        if allowed_here is not None and keyword not in allowed_here:
            if keyword in self._known:
                accepted_in = contexts_accepting(keyword)
                hint = (
                    f" (usually allowed in: {', '.join(accepted_in[:4])})"
                    if accepted_in
                    else " (possibly version-specific or in the wrong block)"
                )
            else:
                hint = " (possible typo or unknown keyword)"
            self._add(
                lineno,
                first.column,
                IssueKind.CONTEXT,
                Severity.SOFT,
                f"Wrong context or order: keyword {keyword} is not expected inside {context}.{hint}",
                excerpt,
            )

        if keyword not in self._known:
            suggestions = suggest_keywords(keyword, self._known, self._max_suggestions)
            message = f"Unknown or suspicious keyword at start of line: {keyword} (possible typo)"
            message += f". Did you mean: {', '.join(suggestions)}?" if suggestions else "."
            self._add(lineno, first.column, IssueKind.UNKNOWN_KEYWORD, Severity.SOFT, message, excerpt)

    def finish(self, line_count: int) -> None:
        frames = self._stack.open_frames
        if not frames:
            return
        chain = " -> ".join(f"{frame.kind} (opened at line {frame.line}, column {frame.column})" for frame in frames)
        self._add(
            line_count,
            0,
            IssueKind.MISSING_END,
            Severity.HARD,
            f"END appears to be missing. Blocks still open at end of file: {chain}",
            "",
        )

    def _open(self, lineno: int, column: int, keyword: str, parent: str, excerpt: str) -> None:
        allowed_parents = ALLOWED_PARENTS.get(keyword)
        if allowed_parents is not None and parent not in allowed_parents:
            self._add(
                lineno,
                column,
                IssueKind.NESTING,
                Severity.HARD,
                f"Illegal nesting: found {keyword} while the current block is {parent}. "
                f"{keyword} is expected inside: {', '.join(sorted(allowed_parents))}.",
                excerpt,
            )
        allowed_here = ALLOWED_FIRST_TOKENS.get(parent)
        if allowed_here is not None and keyword not in allowed_here:
            self._add(
                lineno,
                column,
                IssueKind.CONTEXT,
                Severity.SOFT,
                f"Suspicious context: keyword {keyword} is not expected inside {parent}.",
                excerpt,
            )
        self._stack.push(keyword, lineno, column)

    def _close(self, lineno: int, column: int, line: str, excerpt: str) -> None:
        result = self._stack.close(end_hint(line))
        if result.dropped and Recovery.NAMED_END_REALIGN not in self.recoveries:
            self.recoveries.append(Recovery.NAMED_END_REALIGN)
        for frame in result.dropped:
            self._add(
                lineno,
                column,
                IssueKind.MISSING_END,
                Severity.HARD,
                f"Block {frame.kind} opened at line {frame.line}, column {frame.column} "
                f"is never closed before this END of {result.popped.kind if result.popped else ROOT}.",
                excerpt,
            )
        if result.popped is None:
            self._add(
                lineno,
                column,
                IssueKind.END_MISMATCH,
                Severity.HARD,
                "END without an open block to close.",
                excerpt,
            )

    def _check_metadata(self, lineno: int, scan: LineScan, excerpt: str) -> None:
        if len(scan.tokens) < 2:
            return
        key, value = scan.tokens[0], scan.tokens[1]
        key_ok = key.kind is TokenKind.STRING or not _looks_like_keyword(key.text)
        value_ok = value.kind in (TokenKind.STRING, TokenKind.WORD)
        if not (key_ok and value_ok):
            self._add(
                lineno,
                key.column,
                IssueKind.METADATA_FORMAT,
                Severity.SOFT,
                'Possible METADATA format problem: entries are usually "key" "value".',
                excerpt,
            )

    def _add(
        self, lineno: int, column: int, kind: IssueKind, severity: Severity, message: str, excerpt: str
    ) -> None:
        if severity is Severity.SOFT and lineno <= self._suppress_until:
            self.suppressed_soft += 1
            return
        self.issues.append(
            Diagnostic(line_no=lineno, col=column, kind=kind, severity=severity, message=message, excerpt=excerpt)
        )
        if severity is Severity.HARD:
            self._suppress_until = max(self._suppress_until, lineno + self._window)
