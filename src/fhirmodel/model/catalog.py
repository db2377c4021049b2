# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Property metadata catalogs: the ordered, immutable field table of each type.

A catalog is built once per type and shared by every instance. It indexes its
properties by identity (the primary key used by generic field access) and by
wire name, including the discriminator-suffixed names of choice fields
(``valueDecimal`` for ``value[x]`` with a ``decimal`` variant).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from fhirmodel.errors import UnknownPropertyError
from fhirmodel.model.types import ChoiceTypeRef, PropertyDef

# ###############
# Public Interface
# ###############


def fused_name(base: str, type_name: str) -> str:
    """Return the wire name of a choice field holding a *type_name* value.

    ``fused_name("value", "dateTime") == "valueDateTime"``.
    """
    return base + type_name[:1].upper() + type_name[1:]


class Catalog(BaseModel):
    """Ordered property table for one record or structure type.

    Attributes:
        type_name: Wire type name of the described type.
        properties: Property definitions in declaration (serialization) order.
    """

    model_config = ConfigDict(frozen=True)

    type_name: str
    properties: tuple[PropertyDef, ...] = ()

    _by_identity: dict[Enum, PropertyDef] = PrivateAttr(default_factory=dict)
    _by_name: dict[str, PropertyDef] = PrivateAttr(default_factory=dict)
    _by_wire_name: dict[str, tuple[PropertyDef, str | None]] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for prop in self.properties:
            if prop.identity in self._by_identity:
                raise ValueError(f"{self.type_name}: duplicate property identity {prop.identity}")
            if prop.name in self._by_name:
                raise ValueError(f"{self.type_name}: duplicate property name '{prop.name}'")
            self._by_identity[prop.identity] = prop
            self._by_name[prop.name] = prop
            self._by_wire_name[prop.name] = (prop, None)
            if isinstance(prop.type, ChoiceTypeRef):
                for variant in prop.type.variant_names():
                    self._by_wire_name[fused_name(prop.name, variant)] = (prop, variant)

    def extend(self, type_name: str, *properties: PropertyDef) -> Catalog:
        """Return a new catalog with *properties* appended after this catalog's properties."""
        return Catalog(type_name=type_name, properties=self.properties + properties)

    def identities(self) -> tuple[Enum, ...]:
        """Return every property identity in declaration order."""
        return tuple(p.identity for p in self.properties)

    def has(self, identity: Enum) -> bool:
        return identity in self._by_identity

    def lookup(self, identity: Enum) -> PropertyDef:
        """Return the property declared under *identity*.

        Raises:
            UnknownPropertyError: If the identity is not declared in this catalog.
        """
        try:
            return self._by_identity[identity]
        except KeyError:
            raise UnknownPropertyError(f"{self.type_name} has no property {identity!r}") from None

    def by_name(self, name: str) -> PropertyDef:
        """Return the property whose base wire name is *name*.

        Raises:
            UnknownPropertyError: If no property has that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownPropertyError(f"{self.type_name} has no property named '{name}'") from None

    def resolve(self, wire_name: str) -> tuple[PropertyDef, str | None] | None:
        """Resolve a wire name to its property and, for choice fields, the variant type name.

        Returns None if the wire name is not declared. A choice field's bare base
        name resolves with a None variant.
        """
        return self._by_wire_name.get(wire_name)
