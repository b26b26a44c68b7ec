# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for mapfile re-indentation."""

import pytest

from mapedit.formatting import format_mapfile

# ###############
# Basic Layout
# ###############


class TestIndentation:
    def test_nested_blocks(self) -> None:
        source = "MAP\nLAYER\nNAME \"a\"\nCLASS\nSTYLE\nCOLOR 1 2 3\nEND\nEND\nEND\nEND\n"
        expected = (
            "MAP\n"
            "    LAYER\n"
            '        NAME "a"\n'
            "        CLASS\n"
            "            STYLE\n"
            "                COLOR 1 2 3\n"
            "            END\n"
            "        END\n"
            "    END\n"
            "END\n"
        )
        assert format_mapfile(source) == expected

    def test_custom_indent(self) -> None:
        assert format_mapfile("MAP\nNAME x\nEND", indent=2) == "MAP\n  NAME x\nEND"

    @pytest.mark.parametrize("indent", [0, -3])
    def test_non_positive_indent_falls_back_to_four(self, indent: int) -> None:
        assert format_mapfile("MAP\nNAME x\nEND", indent=indent) == "MAP\n    NAME x\nEND"

    def test_blank_lines_are_emptied(self) -> None:
        assert format_mapfile("MAP\n   \nEND") == "MAP\n\nEND"

    def test_comment_lines_follow_current_depth(self) -> None:
        assert format_mapfile("MAP\n# note\nEND") == "MAP\n    # note\nEND"

    def test_tabs_and_crlf_are_normalized(self) -> None:
        assert format_mapfile("MAP\r\n\tNAME x\r\nEND\r\n") == "MAP\n    NAME x\nEND\n"


# ###############
# Directives vs Blocks
# ###############


class TestDirectives:
    def test_inline_directives_do_not_indent(self) -> None:
        source = "STYLE\nPATTERN 10 10\nSYMBOL 'x'\nEND\nNAME y"
        assert format_mapfile(source, indent=2) == "STYLE\n  PATTERN 10 10\n  SYMBOL 'x'\nEND\nNAME y"

    def test_style_hilite_is_not_a_block(self) -> None:
        source = "QUERYMAP\nSTYLE HILITE\nEND"
        assert format_mapfile(source, indent=2) == "QUERYMAP\n  STYLE HILITE\nEND"

    def test_opener_with_trailing_comment(self) -> None:
        source = "CLASS # roads\nNAME a\nEND"
        assert format_mapfile(source, indent=2) == "CLASS # roads\n  NAME a\nEND"

    def test_extra_openers(self) -> None:
        source = "WIDGET\nNAME a\nEND"
        assert format_mapfile(source, indent=2) == "WIDGET\nNAME a\nEND"
        assert format_mapfile(source, indent=2, extra_openers=["widget"]) == "WIDGET\n  NAME a\nEND"


# ###############
# Recovery
# ###############


class TestRecovery:
    def test_named_end_realigns_after_missing_end(self) -> None:
        source = "MAP\nLAYER\nCLASS\nNAME a\nEND # LAYER\nLAYER\nEND\nEND"
        expected = "MAP\n  LAYER\n    CLASS\n      NAME a\n  END # LAYER\n  LAYER\n  END\nEND"
        assert format_mapfile(source, indent=2) == expected

    def test_extra_end_stays_at_column_zero(self) -> None:
        assert format_mapfile("END\nNAME x", indent=2) == "END\nNAME x"


# ###############
# Properties
# ###############

_SAMPLES = [
    "",
    "MAP\n  LAYER\n    NAME \"a\"\n  END\nEND\n",
    "MAP\nLAYER\nCLASS\nEND # LAYER\nEND\nEND\nEND\n",
    "/* MAP\nLAYER */\nMAP\n\tWEB\nMETADATA\n'a' 'b'\nEND\nEND\nEND",
    'MAP\nNAME "unterminated\nLAYER\nEND\n',
]


@pytest.mark.parametrize("source", _SAMPLES)
def test_formatting_is_idempotent(source: str) -> None:
    once = format_mapfile(source)
    assert format_mapfile(once) == once


def test_balanced_roundtrip_with_correct_indentation() -> None:
    source = 'MAP\n  LAYER\n    NAME "a"\n  END\nEND\n'
    assert format_mapfile(source, indent=2) == source
