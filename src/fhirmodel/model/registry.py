# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type registry mapping wire type names to the classes that model them.

Readers and choice fields instantiate values by declared type name, so every
concrete type registers itself here with the :func:`register` decorator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from fhirmodel.model.element import Base
    from fhirmodel.model.resource import Resource

T = TypeVar("T", bound="type[Base]")

# ###############
# Public Interface
# ###############


def register(cls: T) -> T:
    """Class decorator registering *cls* under its ``type_name``.

    Raises:
        ValueError: If another class is already registered under the same name.
    """
    name = cls.type_name
    existing = _TYPES.get(name)
    if existing is not None and existing is not cls:
        raise ValueError(f"Type name '{name}' is already registered to {existing.__qualname__}")
    _TYPES[name] = cls
    return cls


def type_for(name: str) -> type[Base]:
    """Return the class registered under the wire type *name*.

    Raises:
        LookupError: If no class is registered under that name.
    """
    try:
        return _TYPES[name]
    except KeyError:
        raise LookupError(f"No model class registered for type '{name}'") from None


def create(name: str) -> Base:
    """Instantiate an empty value of the type registered under *name*."""
    return type_for(name)()


def resource_class(resource_type: str) -> type[Resource]:
    """Return the record class for a ``resourceType`` discriminator.

    Raises:
        LookupError: If the name is unknown or does not denote a record type.
    """
    from fhirmodel.model.resource import Resource

    cls = type_for(resource_type)
    if not issubclass(cls, Resource):
        raise LookupError(f"Type '{resource_type}' is not a resource type")
    return cls


def registered_types() -> tuple[str, ...]:
    """Return every registered type name, sorted."""
    return tuple(sorted(_TYPES))


# ################
# Implementation
# ################

_TYPES: dict[str, type[Base]] = {}
