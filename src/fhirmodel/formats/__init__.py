# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Wire formats for reading and writing records."""

from fhirmodel.formats.json_format import compose_resource, parse_resource, resource_from_dict, resource_to_dict

__all__ = [
    "parse_resource",
    "resource_from_dict",
    "compose_resource",
    "resource_to_dict",
]
