# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Record roots: composite nodes tagged with a stable ``resourceType`` discriminator."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from fhirmodel.model.catalog import Catalog
from fhirmodel.model.composite import Composite, ElementField, ListSlot, PrimitiveSlot
from fhirmodel.model.types import ComplexTypeRef, PrimitiveTypeRef, PropertyDef

# ###############
# Public Interface
# ###############


class ResourceField(Enum):
    """Identities of the fields shared by every record type."""

    ID = "id"
    IMPLICIT_RULES = "implicitRules"
    LANGUAGE = "language"


RESOURCE_CATALOG = Catalog(
    type_name="DomainResource",
    properties=(
        PropertyDef(
            identity=ResourceField.ID,
            name="id",
            type=PrimitiveTypeRef(code="id"),
            summary=True,
            short="Logical id of this artifact",
        ),
        PropertyDef(
            identity=ResourceField.IMPLICIT_RULES,
            name="implicitRules",
            type=PrimitiveTypeRef(code="uri"),
            modifier=True,
            summary=True,
            short="A set of rules under which this content was created",
        ),
        PropertyDef(
            identity=ResourceField.LANGUAGE,
            name="language",
            type=PrimitiveTypeRef(code="code"),
            short="Language of the resource content",
        ),
        PropertyDef(
            identity=ElementField.EXTENSION,
            name="extension",
            type=ComplexTypeRef(code="Extension"),
            max=None,
            short="Additional content defined by implementations",
        ),
        PropertyDef(
            identity=ElementField.MODIFIER_EXTENSION,
            name="modifierExtension",
            type=ComplexTypeRef(code="Extension"),
            max=None,
            modifier=True,
            short="Extensions that cannot be ignored",
        ),
    ),
)


class Resource(Composite):
    """Base class of every record type.

    Subclasses set ``resource_type``; it doubles as the registered type name
    used by readers to dispatch on the ``resourceType`` member.
    """

    resource_type: ClassVar[str] = ""
    catalog = RESOURCE_CATALOG
    id_field = ResourceField.ID

    implicit_rules = PrimitiveSlot(ResourceField.IMPLICIT_RULES)
    language = PrimitiveSlot(ResourceField.LANGUAGE)
    modifier_extension = ListSlot(ElementField.MODIFIER_EXTENSION)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.resource_type:
            cls.type_name = cls.resource_type

    def __repr__(self) -> str:
        return f"{self.resource_type}(id={self.id!r})"
