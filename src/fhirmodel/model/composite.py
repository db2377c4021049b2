# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Composite nodes: elements owning a fixed, catalog-declared set of child slots.

Every structure and record type is a thin subclass of :class:`Composite` that
names its :class:`~fhirmodel.model.catalog.Catalog`. All field access goes
through the identity-keyed generic protocol implemented here; the per-type
Python attributes are descriptors that delegate to it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Self

from fhirmodel.config import current_config
from fhirmodel.errors import (
    AutoCreateError,
    StructuralParseError,
    TypeMismatchError,
    UnknownPropertyError,
    UnsupportedOperationError,
)
from fhirmodel.model import registry
from fhirmodel.model.catalog import Catalog, fused_name
from fhirmodel.model.choice import ChoiceSlot, ChoiceVariant
from fhirmodel.model.element import Base, Element, values_deep_equal, values_shallow_equal
from fhirmodel.model.enumeration import Enumeration
from fhirmodel.model.primitives import PrimitiveType
from fhirmodel.model.types import ComplexTypeRef, PrimitiveTypeRef, PropertyDef, TypeRef

# ###############
# Public Interface
# ###############


class ElementField(Enum):
    """Identities of the fields every element and backbone structure carries."""

    ID = "id"
    EXTENSION = "extension"
    MODIFIER_EXTENSION = "modifierExtension"


ELEMENT_CATALOG = Catalog(
    type_name="Element",
    properties=(
        PropertyDef(
            identity=ElementField.ID,
            name="id",
            type=PrimitiveTypeRef(code="string"),
            short="Unique id for inter-element referencing",
        ),
        PropertyDef(
            identity=ElementField.EXTENSION,
            name="extension",
            type=ComplexTypeRef(code="Extension"),
            max=None,
            short="Additional content defined by implementations",
        ),
    ),
)

BACKBONE_CATALOG = ELEMENT_CATALOG.extend(
    "BackboneElement",
    PropertyDef(
        identity=ElementField.MODIFIER_EXTENSION,
        name="modifierExtension",
        type=ComplexTypeRef(code="Extension"),
        max=None,
        modifier=True,
        summary=True,
        short="Extensions that cannot be ignored even if unrecognized",
    ),
)


@dataclass(frozen=True)
class Child:
    """One declared field of a node together with its current values.

    Attributes:
        prop: The catalog definition of the field.
        values: Current values in order; empty when the field is unset.
    """

    prop: PropertyDef
    values: tuple[Base, ...]

    @property
    def identity(self) -> Enum:
        return self.prop.identity

    @property
    def name(self) -> str:
        return self.prop.name

    @property
    def type(self) -> TypeRef:
        return self.prop.type

    @property
    def variant(self) -> str | None:
        """Type name of the value stored in a choice field, or None."""
        if not self.prop.is_choice or not self.values:
            return None
        return self.values[0].type_name

    @property
    def wire_name(self) -> str:
        variant = self.variant
        return fused_name(self.prop.name, variant) if variant else self.prop.name


def new_value_for(prop: PropertyDef, variant: str | None = None) -> Base:
    """Instantiate an empty value for *prop*, of *variant* type for a choice field."""
    if prop.binding is not None:
        return Enumeration(prop.binding)
    if prop.is_choice:
        if variant is None:
            raise UnsupportedOperationError(f"Choice property '{prop.display_name}' needs a variant type")
        return registry.create(variant)
    return registry.create(prop.type.type_name)


class Composite(Element):
    """A node with named child slots declared by its class-level catalog.

    Keyword arguments to the constructor are assigned through the class's
    field attributes, so ``Coding(system="http://loinc.org", code="1234-5")``
    stores wrapped primitives exactly like two attribute assignments would.
    """

    catalog: ClassVar[Catalog] = ELEMENT_CATALOG
    id_field: ClassVar[Enum] = ElementField.ID

    def __init__(self, **fields: Any) -> None:
        super().__init__()
        self._slots: dict[Enum, Any] = {}
        for name, value in fields.items():
            if not (name in ("id", "extension") or _is_field_attribute(type(self), name)):
                raise UnknownPropertyError(f"{type(self).__name__} has no field '{name}'")
            setattr(self, name, value)

    def __repr__(self) -> str:
        populated = ", ".join(c.wire_name for c in self.list_children() if any(not v.is_empty() for v in c.values))
        return f"{type(self).__name__}({populated})"

    # Generic field access

    def list_children(self) -> tuple[Child, ...]:
        """Return every declared field with its current values, in catalog order."""
        return tuple(Child(prop, self._values(prop)) for prop in self.catalog.properties)

    def get_field(self, identity: Enum) -> tuple[Base, ...]:
        """Return the values of the field declared under *identity*.

        Raises:
            UnknownPropertyError: If *identity* is not declared for this type.
        """
        return self._values(self.catalog.lookup(identity))

    def set_field(self, identity: Enum, value: Any) -> Base:
        """Store *value* in the field declared under *identity* and return the stored node.

        Repeating fields append; singular fields (choice fields included) replace.
        Python scalars are wrapped for primitive fields and enumeration members for
        coded fields.

        Raises:
            TypeMismatchError: If the value's type is outside the declared type set.
            UnknownCodeError: If a plain code is unknown to the field's binding and
                lenient decoding is off.
        """
        prop = self.catalog.lookup(identity)
        accepted = self._accept(prop, value)
        if prop.identity is self.id_field and isinstance(accepted, Element) and not accepted._element_is_empty():
            raise TypeMismatchError(f"{self.type_name}.id cannot carry its own id or extensions")
        self._store(prop, accepted)
        return accepted

    def create_child(self, wire_name: str) -> Base:
        """Create, store and return a fresh child for a reader.

        Raises:
            StructuralParseError: If *wire_name* is not declared, or names a choice
                field without a known type suffix.
            UnsupportedOperationError: If the field holds primitive values.
        """
        resolved = self.catalog.resolve(wire_name)
        if resolved is None:
            raise StructuralParseError(f"Unknown property '{wire_name}'", self.type_name)
        prop, variant = resolved
        if prop.is_choice:
            if variant is None:
                raise StructuralParseError(f"Choice property '{prop.display_name}' needs a type suffix", self.type_name)
            value = new_value_for(prop, variant)
        elif prop.is_primitive:
            raise UnsupportedOperationError(
                f"Cannot create a child for primitive property {self.type_name}.{prop.name}"
            )
        else:
            value = new_value_for(prop)
        self._store(prop, value)
        return value

    def allowed_wire_types(self, identity: Enum) -> tuple[str, ...]:
        """Return the wire type names the field declared under *identity* may hold."""
        return self.catalog.lookup(identity).type.wire_names()

    def has_field(self, identity: Enum) -> bool:
        """Return True if the field holds at least one non-empty value."""
        return any(not v.is_empty() for v in self.get_field(identity))

    def clear_field(self, identity: Enum) -> None:
        prop = self.catalog.lookup(identity)
        if prop.identity is self.id_field:
            self.id = None
        elif prop.identity is ElementField.EXTENSION:
            self.extension = []
        else:
            self._slots.pop(prop.identity, None)

    def get_or_create(self, identity: Enum) -> Base | None:
        """Return the value of a singular field, applying the auto-creation policy when unset.

        Raises:
            AutoCreateError: If the field is unset and error-on-auto-create is configured.
            UnsupportedOperationError: If the field is repeating or a choice field.
        """
        prop = self.catalog.lookup(identity)
        if prop.is_repeating:
            raise UnsupportedOperationError(f"{self.type_name}.{prop.name} is repeating; use first() or add()")
        if prop.is_choice:
            raise UnsupportedOperationError(f"{self.type_name}.{prop.display_name} is a choice; use choice_value()")
        existing = self._values(prop)
        if existing:
            return existing[0]
        if not self._may_auto_create(prop):
            return None
        value = new_value_for(prop)
        self._store(prop, value)
        return value

    def choice_value(self, identity: Enum, variant_cls: type[Base]) -> Base:
        """Return the value of a choice field, which must be of *variant_cls*.

        Raises:
            TypeMismatchError: If *variant_cls* is not a declared variant, or the
                stored value is of a different variant.
            AutoCreateError: If the field is unset and error-on-auto-create is configured.
            UnsupportedOperationError: If the field is unset and auto-creation is off.
        """
        prop = self._choice_prop(identity, variant_cls)
        current = self._slots.get(prop.identity)
        if current is None:
            if not self._may_auto_create(prop):
                raise UnsupportedOperationError(f"{self.type_name}.{prop.display_name} is not present")
            current = variant_cls()
            self._slots[prop.identity] = current
            return current
        if current.type_name != variant_cls.type_name:
            raise TypeMismatchError(
                f"Type mismatch: the type {variant_cls.type_name} was expected, "
                f"but {current.type_name} was encountered"
            )
        return current

    def has_choice(self, identity: Enum, variant_cls: type[Base]) -> bool:
        prop = self._choice_prop(identity, variant_cls)
        current = self._slots.get(prop.identity)
        return current is not None and current.type_name == variant_cls.type_name

    def add(self, identity: Enum, value: Any = None) -> Base:
        """Append *value*, or a fresh element when omitted, to a repeating field and return it."""
        prop = self.catalog.lookup(identity)
        if not prop.is_repeating:
            raise UnsupportedOperationError(f"{self.type_name}.{prop.name} is not repeating")
        return self.set_field(identity, new_value_for(prop) if value is None else value)

    def first(self, identity: Enum) -> Base:
        """Return the first repetition of a repeating field, adding one when there is none."""
        existing = self.get_field(identity)
        return existing[0] if existing else self.add(identity)

    def add_modifier_extension(self, url: str, value: Base | None = None) -> Base:
        """Append a modifier extension with *url* and optional *value* and return it."""
        ext = self.add(ElementField.MODIFIER_EXTENSION)
        ext.url = url  # type: ignore[attr-defined]
        if value is not None:
            ext.value = value  # type: ignore[attr-defined]
        return ext

    # Comparison and cloning

    def is_empty(self) -> bool:
        return all(v.is_empty() for child in self.list_children() for v in child.values)

    def deep_equals(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return False
        return all(values_deep_equal(self._values(p), other._values(p)) for p in self.catalog.properties)

    def shallow_equals(self, other: object) -> bool:
        if type(other) is not type(self):
            return False
        return all(
            values_shallow_equal(self._values(p), other._values(p))
            for p in self.catalog.properties
            if p.is_primitive and p.identity is not self.id_field
        )

    def copy(self) -> Self:
        dst = type(self)()
        dst.id = self.id
        dst.extension = [ext.copy() for ext in self.extension]
        for identity, stored in self._slots.items():
            if isinstance(stored, list):
                dst._slots[identity] = [v.copy() for v in stored]
            else:
                dst._slots[identity] = stored.copy()
        self._copy_extras(dst)
        return dst

    # ################
    # Implementation
    # ################

    def _copy_extras(self, dst: Self) -> None:
        """Hook for subclasses carrying state outside the catalog-declared slots."""

    def _values(self, prop: PropertyDef) -> tuple[Base, ...]:
        if prop.identity is self.id_field:
            if self.id is None:
                return ()
            return (registry.type_for(prop.type.type_name).from_wire(self.id),)  # type: ignore[attr-defined]
        if prop.identity is ElementField.EXTENSION:
            return tuple(self.extension)
        stored = self._slots.get(prop.identity)
        if stored is None:
            return ()
        if isinstance(stored, list):
            return tuple(stored)
        return (stored,)

    def _store(self, prop: PropertyDef, value: Base) -> None:
        if prop.identity is self.id_field:
            self.id = value.wire_value  # type: ignore[attr-defined]
        elif prop.identity is ElementField.EXTENSION:
            self._extension.append(value)  # type: ignore[arg-type]
        elif prop.is_repeating:
            self._slots.setdefault(prop.identity, []).append(value)
        else:
            self._slots[prop.identity] = value

    def _accept(self, prop: PropertyDef, value: Any) -> Base:
        if prop.binding is not None:
            return self._accept_coded(prop, value)
        if not isinstance(value, Base):
            if not prop.is_primitive:
                raise TypeMismatchError(
                    f"{self.type_name}.{prop.display_name} expects {prop.type.describe()}, got {type(value).__name__}"
                )
            wrapped = new_value_for(prop)
            wrapped.value = value  # type: ignore[attr-defined]
            return wrapped
        if value.type_name not in prop.instance_type_names():
            raise TypeMismatchError(
                f"{self.type_name}.{prop.display_name} expects {prop.type.describe()}, got {value.type_name}"
            )
        return value

    def _accept_coded(self, prop: PropertyDef, value: Any) -> Enumeration[Any]:
        binding = prop.binding
        if isinstance(value, Enumeration):
            if value.binding is not binding:
                raise TypeMismatchError(
                    f"{self.type_name}.{prop.name} is bound to {binding.name}, got a {value.binding.name} value"
                )
            return value
        if isinstance(value, PrimitiveType):
            if value.type_name != "code":
                raise TypeMismatchError(f"{self.type_name}.{prop.name} expects code, got {value.type_name}")
            coded = Enumeration.from_wire_for(binding, value.wire_value)
            coded.id = value.id
            coded.extension = value.extension
            return coded
        if isinstance(value, str):
            return Enumeration.from_wire_for(binding, value)
        return Enumeration(binding, value)

    def _may_auto_create(self, prop: PropertyDef) -> bool:
        config = current_config()
        if config.error_on_auto_create:
            raise AutoCreateError(f"{self.type_name}.{prop.display_name} is not set and auto-creation is disabled")
        return config.auto_create

    def _choice_prop(self, identity: Enum, variant_cls: type[Base]) -> PropertyDef:
        prop = self.catalog.lookup(identity)
        if not prop.is_choice:
            raise TypeMismatchError(f"{self.type_name}.{prop.name} is not a choice property")
        if variant_cls.type_name not in prop.instance_type_names():
            raise TypeMismatchError(
                f"{variant_cls.type_name} is not a declared type of {self.type_name}.{prop.display_name}"
            )
        return prop


# ###############
# Field descriptors
# ###############


class PrimitiveSlot:
    """Attribute exposing a singular primitive field as its Python value."""

    def __init__(self, identity: Enum) -> None:
        self.identity = identity

    def __get__(self, node: Composite | None, owner: type | None = None) -> Any:
        if node is None:
            return self
        values = node.get_field(self.identity)
        return values[0].value if values else None  # type: ignore[attr-defined]

    def __set__(self, node: Composite, value: Any) -> None:
        if value is None:
            node.clear_field(self.identity)
        else:
            node.set_field(self.identity, value)


class ElementSlot:
    """Attribute exposing a singular structural field under the auto-creation policy."""

    def __init__(self, identity: Enum) -> None:
        self.identity = identity

    def __get__(self, node: Composite | None, owner: type | None = None) -> Any:
        if node is None:
            return self
        return node.get_or_create(self.identity)

    def __set__(self, node: Composite, value: Any) -> None:
        if value is None:
            node.clear_field(self.identity)
        else:
            node.set_field(self.identity, value)


class ListSlot:
    """Attribute exposing a repeating field as a read-only tuple of its values.

    Assigning a sequence replaces the field; each value goes through :meth:`Composite.set_field`.
    """

    def __init__(self, identity: Enum) -> None:
        self.identity = identity

    def __get__(self, node: Composite | None, owner: type | None = None) -> Any:
        if node is None:
            return self
        return node.get_field(self.identity)

    def __set__(self, node: Composite, values: Any) -> None:
        node.clear_field(self.identity)
        for value in values or ():
            node.set_field(self.identity, value)


class BackboneElement(Composite):
    """A structure nested inside a record type, adding modifier extensions."""

    catalog = BACKBONE_CATALOG

    modifier_extension = ListSlot(ElementField.MODIFIER_EXTENSION)


# ################
# Implementation
# ################


def _is_field_attribute(cls: type, name: str) -> bool:
    """Return True if *name* is a field attribute declared on *cls* or one of its bases."""
    for klass in cls.__mro__:
        if name in vars(klass):
            return isinstance(vars(klass)[name], (PrimitiveSlot, ElementSlot, ListSlot, ChoiceSlot, ChoiceVariant))
    return False
