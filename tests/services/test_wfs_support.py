# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the strict offline WFS classifier."""

import pytest

from mapedit.services.wfs_support import classify_wfs_support, compute_layer_verdict

_MAPFILE = """\
MAP
  WEB
    METADATA
      "wfs_enable_request" "*"
    END
  END
  LAYER
    NAME "roads"
    TYPE LINE
    METADATA
      "wfs_title" "Roads"
      "wfs_srs" "EPSG:2100"
    END
  END
  LAYER
    NAME "ortho"
    TYPE RASTER
    METADATA
      "wfs_title" "Orthophoto"
      "wfs_srs" "EPSG:2100"
    END
  END
  LAYER
    NAME "poi"
    TYPE POINT
    METADATA
      "ows_enable_request" "GetCapabilities"
      "ows_title" "POI"
      "ows_srs" "EPSG:4326"
    END
  END
  LAYER
    NAME "parcels"
    TYPE POLYGON
    METADATA
      "wfs_srs" "EPSG:2100"
    END
    CLASS
      METADATA
        "wfs_title" "nested"
      END
    END
  END
  LAYER
    TYPE POINT
  END
END
"""

# ###############
# Whole Mapfile
# ###############


class TestClassify:
    def test_named_layers_in_source_order(self) -> None:
        assert list(classify_wfs_support(_MAPFILE)) == ["roads", "ortho", "poi", "parcels"]

    def test_supported_layer_inherits_web_enable(self) -> None:
        verdict = classify_wfs_support(_MAPFILE)["roads"]
        assert verdict.supported
        assert verdict.reasons == ["wfs_enable_request=* (scope=web)", "has basic WFS metadata (title + srs)"]

    def test_raster_is_never_supported(self) -> None:
        verdict = classify_wfs_support(_MAPFILE)["ortho"]
        assert not verdict.supported
        assert verdict.reasons == ["TYPE=RASTER (WFS is vector-only)"]

    def test_enable_without_get_feature(self) -> None:
        verdict = classify_wfs_support(_MAPFILE)["poi"]
        assert not verdict.supported
        assert verdict.reasons == [
            "ows_enable_request=GetCapabilities (scope=layer)",
            "enable metadata does not allow GetFeature",
        ]

    def test_nested_metadata_does_not_count(self) -> None:
        verdict = classify_wfs_support(_MAPFILE)["parcels"]
        assert not verdict.supported
        assert verdict.reasons == ["wfs_enable_request=* (scope=web)", "missing wfs_title/ows_title"]

    def test_web_metadata_after_layer_is_not_inherited(self) -> None:
        source = (
            "MAP\n  LAYER\n    NAME a\n    METADATA\n"
            '      "wfs_title" "A"\n      "wfs_srs" "EPSG:4326"\n'
            "    END\n  END\n"
            '  WEB\n    METADATA\n      "wfs_enable_request" "*"\n    END\n  END\nEND\n'
        )
        verdict = classify_wfs_support(source)["a"]
        assert not verdict.supported
        assert verdict.reasons == ["missing enable metadata (wfs_enable_request / ows_enable_request)"]

    def test_empty_and_layerless_text(self) -> None:
        assert classify_wfs_support("") == {}
        assert classify_wfs_support("MAP\n  NAME x\nEND\n") == {}


# ###############
# Single Layer Rules
# ###############


class TestLayerVerdict:
    def test_raster_type_overrides_complete_metadata(self) -> None:
        metadata = {"wfs_enable_request": "*", "wfs_title": "X", "wfs_srs": "EPSG:4326"}
        assert compute_layer_verdict("POLYGON", metadata, {}).supported
        assert not compute_layer_verdict("RASTER", metadata, {}).supported

    def test_layer_scope_wins_over_web(self) -> None:
        verdict = compute_layer_verdict(
            "POINT",
            {"wfs_enable_request": "GetFeature", "wfs_title": "t", "wfs_srs": "EPSG:4326"},
            {"ows_enable_request": "!*"},
        )
        assert verdict.supported
        assert verdict.reasons[0] == "wfs_enable_request=GetFeature (scope=layer)"

    def test_keys_are_case_insensitive(self) -> None:
        verdict = compute_layer_verdict("line", {"WFS_TITLE": "t", "OWS_SRS": "EPSG:2100"}, {"OWS_ENABLE_REQUEST": "all"})
        assert verdict.supported

    @pytest.mark.parametrize("value", ["", "none", "0", "false", "OFF"])
    def test_disabled_values(self, value: str) -> None:
        verdict = compute_layer_verdict(None, {"wfs_title": "t", "wfs_srs": "s"}, {"wfs_enable_request": value})
        assert not verdict.supported
        assert verdict.reasons[-1] == "enable metadata does not allow GetFeature"

    def test_reports_every_missing_metadata(self) -> None:
        verdict = compute_layer_verdict("POLYGON", {"wfs_title": "  "}, {"wfs_enable_request": "*"})
        assert verdict.reasons == [
            "wfs_enable_request=* (scope=web)",
            "missing wfs_title/ows_title",
            "missing wfs_srs/ows_srs",
        ]

    def test_raster_check_comes_first(self) -> None:
        verdict = compute_layer_verdict(" raster ", {}, {})
        assert verdict.reasons == ["TYPE=RASTER (WFS is vector-only)"]
