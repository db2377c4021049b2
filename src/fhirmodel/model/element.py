# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Base node types shared by every value in the object model."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Self

from fhirmodel.errors import ModelError, TypeMismatchError
from fhirmodel.model import registry

if TYPE_CHECKING:
    from fhirmodel.model.datatypes import Extension

# ###############
# Public Interface
# ###############


class Base(ABC):
    """Root of the model: every node knows its wire type and supports comparison and cloning."""

    type_name: ClassVar[str] = ""
    is_primitive: ClassVar[bool] = False

    @abstractmethod
    def is_empty(self) -> bool:
        """Return True if the node carries no content, checked recursively."""

    @abstractmethod
    def deep_equals(self, other: object) -> bool:
        """Return True if *other* has the same type and recursively equal content."""

    @abstractmethod
    def shallow_equals(self, other: object) -> bool:
        """Return True if *other* has the same type and equal primitive-valued fields."""

    @abstractmethod
    def copy(self) -> Self:
        """Return an independent deep clone."""


class Element(Base):
    """A node that can carry an id and an ordered list of extensions.

    Attributes:
        id: Optional identifier, unique within the enclosing record.
        extension: Open-world annotations in insertion order, read-only; assign a
            new sequence or use :meth:`add_extension` to change them.
    """

    def __init__(self) -> None:
        self.id: str | None = None
        self._extension: list[Extension] = []

    @property
    def extension(self) -> tuple[Extension, ...]:
        return tuple(self._extension)

    @extension.setter
    def extension(self, values: Iterable[Extension] | None) -> None:
        self._extension = []
        for ext in values or ():
            self.append_extension(ext)

    def add_extension(self, url: str, value: Base | None = None) -> Extension:
        """Append a new extension with *url* and optional *value* and return it."""
        ext: Extension = registry.create("Extension")  # type: ignore[assignment]
        ext.url = url
        if value is not None:
            ext.value = value
        return self.append_extension(ext)

    def append_extension(self, ext: Extension) -> Extension:
        """Append an existing extension and return it.

        Raises:
            TypeMismatchError: If *ext* is not an extension.
        """
        if not isinstance(ext, Base) or ext.type_name != "Extension":
            raise TypeMismatchError(f"{self.type_name}.extension expects Extension, got {type(ext).__name__}")
        self._extension.append(ext)
        return ext

    def extensions_by_url(self, url: str) -> list[Extension]:
        return [ext for ext in self.extension if ext.url == url]

    def has_extension(self, url: str) -> bool:
        return any(ext.url == url and not ext.is_empty() for ext in self.extension)

    def get_extension(self, url: str) -> Extension | None:
        """Return the single extension with *url*, or None.

        Raises:
            ModelError: If more than one extension carries *url*.
        """
        found = self.extensions_by_url(url)
        if len(found) > 1:
            raise ModelError(f"Multiple extensions with url '{url}' on {self.type_name}")
        return found[0] if found else None

    def remove_extension(self, url: str) -> None:
        self._extension = [ext for ext in self._extension if ext.url != url]

    def _element_is_empty(self) -> bool:
        return self.id is None and all(ext.is_empty() for ext in self.extension)

    def _element_deep_equals(self, other: Element) -> bool:
        return self.id == other.id and values_deep_equal(self.extension, other.extension)


def values_deep_equal(left: Sequence[Base], right: Sequence[Base]) -> bool:
    """Compare two field value sequences deeply; empty values match absent ones."""
    if all(v.is_empty() for v in left) and all(v.is_empty() for v in right):
        return True
    if len(left) != len(right):
        return False
    return all(_pair_deep_equal(a, b) for a, b in zip(left, right))


def values_shallow_equal(left: Sequence[Base], right: Sequence[Base]) -> bool:
    """Compare two primitive value sequences by value only."""
    if all(v.is_empty() for v in left) and all(v.is_empty() for v in right):
        return True
    if len(left) != len(right):
        return False
    return all(a.shallow_equals(b) for a, b in zip(left, right))


# ################
# Implementation
# ################


def _pair_deep_equal(a: Any, b: Any) -> bool:
    if a.is_empty() and b.is_empty():
        return True
    return a.deep_equals(b)
