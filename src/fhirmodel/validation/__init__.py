# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural validation of record trees."""

from fhirmodel.validation.checks import ValidationError, ValidationResult, ValidationWarning, validate

__all__ = [
    "validate",
    "ValidationResult",
    "ValidationError",
    "ValidationWarning",
]
