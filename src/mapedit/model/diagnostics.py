# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostic records shared by the balance detector and the syntax checker."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class Severity(Enum):
    """How likely an issue is to break MapServer's own parser."""

    HARD = "HARD"
    SOFT = "SOFT"


class IssueKind(Enum):
    """Categories of mapfile issues, in report order."""

    NESTING = "NESTING"
    END_MISMATCH = "END_MISMATCH"
    MISSING_END = "MISSING_END"
    MISSING_QUOTE = "MISSING_QUOTE"
    UNKNOWN_KEYWORD = "UNKNOWN_KEYWORD"
    CONTEXT = "CONTEXT"
    METADATA_FORMAT = "METADATA_FORMAT"


class Recovery(Enum):
    """Heuristic fallbacks that a consumer applied while recovering structure."""

    LAST_END = "LAST_END"
    HEURISTIC_OPENER = "HEURISTIC_OPENER"
    NAMED_END_REALIGN = "NAMED_END_REALIGN"


class Diagnostic(BaseModel):
    """A single located finding.

    Attributes:
        line_no: 1-based line number.
        col: 1-based column, or 0 when the issue has no column (end of file).
        kind: Issue category.
        severity: HARD for likely parse failures, SOFT for contextual concerns.
        message: Human-readable description.
        excerpt: The trimmed source line, empty for end-of-file issues.
    """

    model_config = ConfigDict(frozen=True)

    line_no: int
    col: int
    kind: IssueKind
    severity: Severity
    message: str
    excerpt: str = ""

    @property
    def is_hard(self) -> bool:
        """Return True for HARD issues."""
        return self.severity is Severity.HARD

    def location(self) -> str:
        """Return ``line N, column M`` (column omitted when unknown)."""
        return f"line {self.line_no}, column {self.col}" if self.col else f"line {self.line_no}"
