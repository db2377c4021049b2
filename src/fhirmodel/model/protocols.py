# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Capability protocols consumed by readers, writers, validators and converters.

Collaborators depend on these capabilities rather than on concrete classes, so
any node implementing them can be traversed generically.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from fhirmodel.model.composite import Child
    from fhirmodel.model.datatypes import Extension
    from fhirmodel.model.element import Base

# ###############
# Public Interface
# ###############


@runtime_checkable
class HasExtensions(Protocol):
    """A node carrying an id and open-world extensions."""

    id: str | None

    @property
    def extension(self) -> tuple[Extension, ...]: ...

    def add_extension(self, url: str, value: Base | None = None) -> Extension: ...

    def append_extension(self, ext: Extension) -> Extension: ...

    def extensions_by_url(self, url: str) -> list[Extension]: ...


@runtime_checkable
class DeepComparable(Protocol):
    """A node supporting structural comparison and emptiness testing."""

    def is_empty(self) -> bool: ...

    def deep_equals(self, other: object) -> bool: ...

    def shallow_equals(self, other: object) -> bool: ...


@runtime_checkable
class Cloneable(Protocol):
    """A node that can produce an independent deep clone."""

    def copy(self) -> Self: ...


@runtime_checkable
class FieldEnumerable(Protocol):
    """A node exposing its catalog-declared fields through the generic protocol."""

    def list_children(self) -> tuple[Child, ...]: ...

    def get_field(self, identity: Enum) -> tuple[Base, ...]: ...

    def set_field(self, identity: Enum, value: Any) -> Base: ...

    def create_child(self, wire_name: str) -> Base: ...

    def allowed_wire_types(self, identity: Enum) -> tuple[str, ...]: ...

