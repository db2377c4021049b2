# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the fhirmodel documentation."""

project = "fhirmodel"
author = "FhirModel Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_member_order = "bysource"

html_theme = "alabaster"
