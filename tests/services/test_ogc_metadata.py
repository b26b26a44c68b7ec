# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for WMS/WFS metadata completion."""

import pytest

from mapedit.services.ogc_metadata import ensure_metadata, ensure_ogc_metadata
from mapedit.services.wfs_support import classify_wfs_support

_URL = "https://maps.example.org/wms"

_BARE = """\
MAP
  NAME "demo"
  LAYER
    NAME "roads"
    TYPE LINE
  END
END
"""

# ###############
# Missing Blocks
# ###############


class TestMissingBlocks:
    def test_web_and_layer_blocks_are_inserted(self) -> None:
        update = ensure_ogc_metadata(_BARE, _URL)
        assert update.text == (
            "MAP\n"
            '  NAME "demo"\n'
            "  WEB\n"
            "    METADATA\n"
            '      "wms_enable_request" "*"\n'
            '      "wfs_enable_request" "*"\n'
            f'      "wms_onlineresource" "{_URL}"\n'
            f'      "wfs_onlineresource" "{_URL}"\n'
            "    END\n"
            "  END\n"
            "  LAYER\n"
            '    NAME "roads"\n'
            "    TYPE LINE\n"
            "    METADATA\n"
            '      "wms_title" "roads"\n'
            '      "wfs_title" "roads"\n'
            '      "gml_include_items" "all"\n'
            "    END\n"
            "  END\n"
            "END\n"
        )
        assert update.changed
        assert update.web_keys == ["wms_enable_request", "wfs_enable_request", "wms_onlineresource", "wfs_onlineresource"]
        assert update.layer_keys == {"roads": ["wms_title", "wfs_title", "gml_include_items"]}

    def test_inserted_web_block_enables_wfs_for_layers(self) -> None:
        verdict = classify_wfs_support(ensure_metadata(_BARE, _URL))["roads"]
        assert verdict.reasons == ["wfs_enable_request=* (scope=web)", "missing wfs_srs/ows_srs"]

    def test_web_without_metadata(self) -> None:
        source = 'MAP\n  WEB\n    IMAGEPATH "/tmp/"\n  END\nEND\n'
        update = ensure_ogc_metadata(source, _URL, layers=False)
        lines = update.text.splitlines()
        assert lines[3] == "    METADATA"
        assert lines[4] == '      "wms_enable_request" "*"'
        assert lines[8:11] == ["    END", "  END", "END"]

    def test_web_block_goes_before_the_map_end_without_layers(self) -> None:
        update = ensure_ogc_metadata("MAP\n  NAME x\nEND\n", _URL)
        assert update.text.splitlines()[2] == "  WEB"
        assert update.text.splitlines()[-1] == "END"


# ###############
# Existing Entries
# ###############


class TestExistingEntries:
    def test_second_run_is_a_no_op(self) -> None:
        once = ensure_metadata(_BARE, _URL)
        update = ensure_ogc_metadata(once, _URL)
        assert not update.changed
        assert update.text == once
        assert update.web_keys == []
        assert update.layer_keys == {}

    def test_existing_values_are_kept_and_missing_keys_appended(self) -> None:
        source = (
            "MAP\n  WEB\n    METADATA\n"
            '      "WMS_ENABLE_REQUEST" "GetMap"\n'
            "    END\n  END\n"
            '  LAYER\n    NAME "roads"\n    METADATA\n'
            '      "wfs_title" "Roads"\n'
            "    END\n  END\nEND\n"
        )
        update = ensure_ogc_metadata(source, _URL)
        lines = update.text.splitlines()
        assert lines[3] == '      "WMS_ENABLE_REQUEST" "GetMap"'
        assert lines[4] == '      "wfs_enable_request" "*"'
        assert update.web_keys == ["wfs_enable_request", "wms_onlineresource", "wfs_onlineresource"]
        assert update.layer_keys == {"roads": ["wms_title", "gml_include_items"]}
        assert '      "wfs_title" "Roads"' in lines

    def test_unnamed_layers_are_skipped(self) -> None:
        update = ensure_ogc_metadata("MAP\n  LAYER\n    TYPE POINT\n  END\nEND\n", _URL, web=False)
        assert not update.changed

    def test_nested_metadata_does_not_count(self) -> None:
        source = 'MAP\n  LAYER\n    NAME a\n    CLASS\n      METADATA\n        "wms_title" "x"\n      END\n    END\n  END\nEND\n'
        update = ensure_ogc_metadata(source, web=False)
        assert update.layer_keys == {"a": ["wms_title", "wfs_title", "gml_include_items"]}


# ###############
# Unusable Input
# ###############


class TestUnusableInput:
    def test_no_map_block(self, caplog: pytest.LogCaptureFixture) -> None:
        update = ensure_ogc_metadata('LAYER\n  NAME "a"\nEND\n')
        assert not update.changed
        assert "No MAP block found" in caplog.text

    def test_unterminated_map(self) -> None:
        source = "MAP\n  LAYER\n    NAME a\n  END\n"
        assert ensure_metadata(source) == source

    def test_crlf_is_preserved(self) -> None:
        text = ensure_metadata(_BARE.replace("\n", "\r\n"), _URL)
        assert "\r\n" in text
        assert "\n" not in text.replace("\r\n", "")
