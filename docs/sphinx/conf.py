# Copyright 2026 MapEdit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for MapEdit documentation."""

project = "MapEdit"
author = "MapEdit Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]

html_theme = "alabaster"
