# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the heuristic syntax/context checker."""

import pytest

from mapedit.model.diagnostics import IssueKind, Recovery, Severity
from mapedit.validation.syntax import detect_syntax_issues, levenshtein, suggest_keywords

# ###############
# Test Helpers
# ###############

_CLEAN = """\
MAP
  NAME "demo"
  EXTENT 0 0 1 1
  WEB
    METADATA
      "wms_title" "Demo"
    END
  END
  PROJECTION
    "init=epsg:4326"
    +proj=longlat +datum=WGS84
  END
  LAYER
    NAME "roads"
    TYPE LINE
    STATUS ON
    CLASS
      STYLE
        COLOR 255 0 0
        WIDTH 2
      END
      LABEL
        SIZE 8
      END
    END
  END
END
"""


def _kinds(source: str, **kwargs: object) -> list[tuple[IssueKind, Severity, int]]:
    report = detect_syntax_issues(source, **kwargs)  # type: ignore[arg-type]
    return [(issue.kind, issue.severity, issue.line_no) for issue in report.issues]


# ###############
# Clean Input
# ###############


class TestCleanInput:
    def test_no_issues(self) -> None:
        report = detect_syntax_issues(_CLEAN)
        assert report.ok
        assert not report.has_hard
        assert report.suppressed_soft == 0

    def test_render_without_issues(self) -> None:
        rendered = detect_syntax_issues(_CLEAN).render()
        assert rendered.startswith("No obvious syntax problems found.")
        assert "Note:" in rendered
        assert "Note:" not in detect_syntax_issues(_CLEAN).render(include_notes=False)

    def test_empty_text(self) -> None:
        assert detect_syntax_issues("").ok


# ###############
# HARD Issues
# ###############


class TestHardIssues:
    def test_end_without_block(self) -> None:
        assert _kinds("MAP\nEND\nEND\n") == [(IssueKind.END_MISMATCH, Severity.HARD, 3)]

    def test_missing_quote(self) -> None:
        report = detect_syntax_issues('MAP\n  NAME "demo\nEND\n')
        assert [(i.kind, i.line_no, i.col) for i in report.issues] == [(IssueKind.MISSING_QUOTE, 2, 8)]

    def test_missing_end_at_eof_lists_open_chain(self) -> None:
        report = detect_syntax_issues("MAP\n  LAYER\n")
        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.kind is IssueKind.MISSING_END
        assert issue.col == 0
        assert issue.line_no == 3
        assert "MAP (opened at line 1, column 1) -> LAYER (opened at line 2, column 3)" in issue.message

    def test_illegal_nesting(self) -> None:
        report = detect_syntax_issues("MAP\n  CLASS\n  END\nEND\n")
        assert [(i.kind, i.line_no) for i in report.hard] == [(IssueKind.NESTING, 2)]
        assert "expected inside: LAYER" in report.hard[0].message

    def test_named_end_reports_dropped_blocks(self) -> None:
        report = detect_syntax_issues("MAP\n  LAYER\n    CLASS\n  END # LAYER\nEND\n")
        assert [(i.kind, i.line_no) for i in report.issues] == [(IssueKind.MISSING_END, 4)]
        assert "CLASS opened at line 3" in report.issues[0].message
        assert report.recoveries == [Recovery.NAMED_END_REALIGN]


# ###############
# SOFT Issues
# ###############


class TestSoftIssues:
    def test_misspelled_keyword(self) -> None:
        report = detect_syntax_issues("MAP\n  LAYER\n    STATSU ON\n  END\nEND\n")
        assert [(i.kind, i.severity) for i in report.issues] == [
            (IssueKind.CONTEXT, Severity.SOFT),
            (IssueKind.UNKNOWN_KEYWORD, Severity.SOFT),
        ]
        assert "Did you mean: " in report.issues[1].message
        assert "STATUS" in report.issues[1].message

    def test_suggestions_can_be_disabled(self) -> None:
        report = detect_syntax_issues("MAP\n  LAYER\n    STATSU ON\n  END\nEND\n", enable_suggestions=False)
        assert report.issues[1].message.endswith("(possible typo).")

    def test_known_keyword_in_wrong_context_names_accepting_blocks(self) -> None:
        report = detect_syntax_issues('MAP\n  LAYER\n    SHAPEPATH "data"\n  END\nEND\n')
        assert [i.kind for i in report.issues] == [IssueKind.CONTEXT]
        assert "usually allowed in: MAP" in report.issues[0].message

    def test_lowercase_words_are_not_checked(self) -> None:
        assert detect_syntax_issues("MAP\n  LAYER\n    statsu on\n  END\nEND\n").ok

    def test_metadata_format(self) -> None:
        source = 'MAP\n  METADATA\n    WMS_TITLE "x"\n    wms_abstract "y"\n    "wms_srs" "EPSG:4326"\n  END\nEND\n'
        assert _kinds(source) == [(IssueKind.METADATA_FORMAT, Severity.SOFT, 3)]

    def test_free_form_contexts_are_not_checked(self) -> None:
        source = "MAP\n  PROJECTION\n    PROJ_LIB foo\n  END\n  SYMBOL\n    POINTS\n      ANYTHING 1 1\n    END\n  END\nEND\n"
        assert detect_syntax_issues(source).ok

    def test_extra_openers(self) -> None:
        source = "MAP\n  WIDGET\n  END\nEND\n"
        assert detect_syntax_issues(source).has_hard
        report = detect_syntax_issues(source, extra_openers=["widget"])
        assert not report.has_hard
        assert [i.kind for i in report.issues] == [IssueKind.CONTEXT]


# ###############
# Cascade Suppression
# ###############


class TestCascade:
    def test_soft_issues_after_hard_are_counted_not_reported(self) -> None:
        source = "CLASS\n" + '  SHAPEPATH "x"\n' * 10 + "END\n"
        report = detect_syntax_issues(source)
        assert [(i.kind, i.severity) for i in report.issues] == [(IssueKind.NESTING, Severity.HARD)]
        assert report.soft == []
        assert report.suppressed_soft == 11
        assert "11 soft warning(s) suppressed" in report.render()

    def test_soft_issues_beyond_window_are_reported(self) -> None:
        source = "MAP\n  CLASS\n  END\n  FOO_BAR 1\nEND\n"
        report = detect_syntax_issues(source, soft_suppression_lines=0)
        assert [(i.kind, i.line_no) for i in report.hard] == [(IssueKind.NESTING, 2)]
        assert [(i.kind, i.line_no) for i in report.soft] == [
            (IssueKind.CONTEXT, 4),
            (IssueKind.UNKNOWN_KEYWORD, 4),
        ]
        assert report.suppressed_soft == 1

    def test_default_window_covers_twenty_five_lines(self) -> None:
        filler = "  NAME x\n" * 23
        source = "MAP\n  CLASS\n  END\n" + filler + "  FOO_BAR 1\nEND\n"
        report = detect_syntax_issues(source)
        assert report.soft == []
        filler = "  NAME x\n" * 24
        report = detect_syntax_issues("MAP\n  CLASS\n  END\n" + filler + "  FOO_BAR 1\nEND\n")
        assert len(report.soft) == 2


# ###############
# Rendering
# ###############


class TestRender:
    def test_groups_hard_before_soft(self) -> None:
        source = "MAP\n  CLASS\n  END\n  FOO_BAR 1\nEND\n"
        rendered = detect_syntax_issues(source, soft_suppression_lines=0).render(include_notes=False)
        assert rendered.startswith("Found 3 possible problem(s):")
        assert rendered.index("== HARD errors") < rendered.index("== SOFT warnings")
        assert "-- Illegal block nesting (1)" in rendered
        assert "  * Line 2, column 3: Illegal nesting" in rendered
        assert "    Excerpt: CLASS" in rendered
        assert "Note:" not in rendered

    def test_eof_issue_has_no_column(self) -> None:
        rendered = detect_syntax_issues("MAP\n").render()
        assert "  * Line 2: END appears to be missing." in rendered

    def test_json_dump_uses_enum_values(self) -> None:
        dumped = detect_syntax_issues("END\n").model_dump(mode="json")
        assert dumped["issues"][0]["kind"] == "END_MISMATCH"
        assert dumped["issues"][0]["severity"] == "HARD"


# ###############
# Suggestions
# ###############


class TestSuggestions:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [("kitten", "sitting", 3), ("", "abc", 3), ("abc", "", 3), ("LAYER", "LAYER", 0), ("STATSU", "STATUS", 2)],
    )
    def test_levenshtein(self, a: str, b: str, expected: int) -> None:
        assert levenshtein(a, b) == expected

    def test_nearest_keyword_first(self) -> None:
        assert suggest_keywords("layr")[0] == "LAYER"

    def test_limit(self) -> None:
        assert len(suggest_keywords("COLOUR", max_suggestions=1)) <= 1
        assert suggest_keywords("COLOUR", max_suggestions=0) == []

    def test_no_suggestion_for_distant_words(self) -> None:
        assert suggest_keywords("QQQQQQQQQQQQ") == []
