# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the fhirmodel test suite."""

import pytest

from fhirmodel.config import ModelConfig, configure


@pytest.fixture(autouse=True)
def default_model_config():
    """Every test starts and ends with the default process-wide configuration."""
    configure(ModelConfig())
    yield
    configure(ModelConfig())
