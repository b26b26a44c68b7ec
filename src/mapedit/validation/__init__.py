# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Heuristic structural checks for mapfiles (END balance, nesting, keyword context)."""

from mapedit.validation.balance import BalanceReport, ExtraEnd, OpenBlock, analyze_balance
from mapedit.validation.grammar import ALLOWED_FIRST_TOKENS, ALLOWED_PARENTS, GLOBAL_KNOWN
from mapedit.validation.syntax import SyntaxReport, detect_syntax_issues, levenshtein, suggest_keywords

__all__ = [
    # Balance
    "BalanceReport",
    "ExtraEnd",
    "OpenBlock",
    "analyze_balance",
    # Grammar
    "ALLOWED_FIRST_TOKENS",
    "ALLOWED_PARENTS",
    "GLOBAL_KNOWN",
    # Syntax
    "SyntaxReport",
    "detect_syntax_issues",
    "levenshtein",
    "suggest_keywords",
]
