# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Declared-type descriptors and property definitions for the metadata catalog."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, InstanceOf
from pydantic import Field as _Field

from fhirmodel.model.binding import EnumBinding

# ###############
# Public Interface
# ###############


class PrimitiveTypeRef(BaseModel):
    """Reference to a primitive type such as ``string`` or ``dateTime``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    code: str

    @property
    def type_name(self) -> str:
        return self.code

    def wire_names(self) -> tuple[str, ...]:
        return (self.code,)

    def describe(self) -> str:
        return self.code


class ComplexTypeRef(BaseModel):
    """Reference to a reusable complex datatype such as ``Coding``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["complex"] = "complex"
    code: str

    @property
    def type_name(self) -> str:
        return self.code

    def wire_names(self) -> tuple[str, ...]:
        return (self.code,)

    def describe(self) -> str:
        return self.code


class BackboneTypeRef(BaseModel):
    """Reference to a backbone structure owned by a record type, by its dotted path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["backbone"] = "backbone"
    path: str

    @property
    def type_name(self) -> str:
        return self.path

    def wire_names(self) -> tuple[str, ...]:
        return (f"@{self.path}",)

    def describe(self) -> str:
        return f"@{self.path}"


class ReferenceTypeRef(BaseModel):
    """A non-owning logical reference, optionally restricted to target resource types.

    An empty ``targets`` list means any resource type may be referenced.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["reference"] = "reference"
    targets: tuple[str, ...] = ()

    @property
    def type_name(self) -> str:
        return "Reference"

    def wire_names(self) -> tuple[str, ...]:
        return ("Reference", *self.targets)

    def describe(self) -> str:
        return f"Reference({'|'.join(self.targets) or 'Any'})"


class CanonicalTypeRef(BaseModel):
    """A canonical URL pointing at a definitional resource."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["canonical"] = "canonical"
    targets: tuple[str, ...] = ()

    @property
    def type_name(self) -> str:
        return "canonical"

    def wire_names(self) -> tuple[str, ...]:
        return ("canonical",)

    def describe(self) -> str:
        return f"canonical({'|'.join(self.targets) or 'Any'})"


# A single declared type: every kind except a choice.
VariantTypeRef = Annotated[
    PrimitiveTypeRef | ComplexTypeRef | BackboneTypeRef | ReferenceTypeRef | CanonicalTypeRef,
    _Field(discriminator="kind"),
]


class ChoiceTypeRef(BaseModel):
    """A closed set of alternative types for a polymorphic ``name[x]`` slot.

    The order of ``variants`` is the declaration order reported to readers.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["choice"] = "choice"
    variants: tuple[VariantTypeRef, ...]

    def variant_names(self) -> tuple[str, ...]:
        return tuple(v.type_name for v in self.variants)

    def wire_names(self) -> tuple[str, ...]:
        return self.variant_names()

    def describe(self) -> str:
        return "|".join(v.describe() for v in self.variants)


TypeRef = Annotated[
    PrimitiveTypeRef | ComplexTypeRef | BackboneTypeRef | ReferenceTypeRef | CanonicalTypeRef | ChoiceTypeRef,
    _Field(discriminator="kind"),
]


class PropertyDef(BaseModel):
    """One field of a record or structure type.

    Attributes:
        identity: Stable enum member used as the primary lookup key.
        name: Wire name; for choice fields the base name without the type suffix.
        type: Declared type or type set.
        min: Minimum cardinality.
        max: Maximum cardinality; None means unbounded.
        short: One-line documentation.
        definition: Full documentation.
        binding: Enumeration binding for coded fields.
        modifier: Whether the field can change the meaning of its parent.
        summary: Whether the field is part of the summary view.
    """

    model_config = ConfigDict(frozen=True)

    identity: InstanceOf[Enum]
    name: str
    type: TypeRef
    min: int = 0
    max: int | None = 1
    short: str | None = None
    definition: str | None = None
    binding: InstanceOf[EnumBinding] | None = None
    modifier: bool = False
    summary: bool = False

    @property
    def is_repeating(self) -> bool:
        return self.max is None or self.max > 1

    @property
    def is_choice(self) -> bool:
        return isinstance(self.type, ChoiceTypeRef)

    @property
    def is_primitive(self) -> bool:
        """True for a non-choice field whose values are primitive leaves."""
        return isinstance(self.type, (PrimitiveTypeRef, CanonicalTypeRef))

    @property
    def display_name(self) -> str:
        return f"{self.name}[x]" if self.is_choice else self.name

    def instance_type_names(self) -> tuple[str, ...]:
        """Return the type names a stored value may carry."""
        if isinstance(self.type, ChoiceTypeRef):
            return self.type.variant_names()
        return (self.type.type_name,)
