# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generic object model: primitives, composite nodes, catalogs and enumeration bindings."""

from fhirmodel.model.binding import CodeDefinition, CodeState, EnumBinding
from fhirmodel.model.catalog import Catalog, fused_name
from fhirmodel.model.choice import ChoiceSlot, ChoiceVariant
from fhirmodel.model.composite import (
    BACKBONE_CATALOG,
    ELEMENT_CATALOG,
    BackboneElement,
    Child,
    Composite,
    ElementField,
    ElementSlot,
    ListSlot,
    PrimitiveSlot,
    new_value_for,
)
from fhirmodel.model.datatypes import (
    Attachment,
    Coding,
    Extension,
    Identifier,
    IdentifierUse,
    Quantity,
    QuantityComparator,
    Reference,
)
from fhirmodel.model.element import Base, Element
from fhirmodel.model.enumeration import Enumeration
from fhirmodel.model.primitives import (
    Base64BinaryType,
    BooleanType,
    CanonicalType,
    CodeType,
    DateTimeType,
    DateType,
    DecimalType,
    IdType,
    IntegerType,
    PrimitiveType,
    StringType,
    TemporalPrecision,
    TimeType,
    UriType,
)
from fhirmodel.model.protocols import Cloneable, DeepComparable, FieldEnumerable, HasExtensions
from fhirmodel.model.resource import Resource, ResourceField
from fhirmodel.model.types import (
    BackboneTypeRef,
    CanonicalTypeRef,
    ChoiceTypeRef,
    ComplexTypeRef,
    PrimitiveTypeRef,
    PropertyDef,
    ReferenceTypeRef,
    TypeRef,
)

__all__ = [
    # Node hierarchy
    "Base",
    "Element",
    "Composite",
    "BackboneElement",
    "Resource",
    "ResourceField",
    "ElementField",
    "Child",
    "new_value_for",
    # Primitives
    "PrimitiveType",
    "BooleanType",
    "IntegerType",
    "DecimalType",
    "StringType",
    "CodeType",
    "IdType",
    "UriType",
    "CanonicalType",
    "Base64BinaryType",
    "DateType",
    "DateTimeType",
    "TimeType",
    "TemporalPrecision",
    # Enumerations
    "EnumBinding",
    "CodeDefinition",
    "CodeState",
    "Enumeration",
    # Datatypes
    "Extension",
    "Identifier",
    "IdentifierUse",
    "Coding",
    "Quantity",
    "QuantityComparator",
    "Attachment",
    "Reference",
    # Catalog
    "Catalog",
    "fused_name",
    "ELEMENT_CATALOG",
    "BACKBONE_CATALOG",
    "PropertyDef",
    "TypeRef",
    "PrimitiveTypeRef",
    "ComplexTypeRef",
    "BackboneTypeRef",
    "ReferenceTypeRef",
    "CanonicalTypeRef",
    "ChoiceTypeRef",
    # Field attributes
    "PrimitiveSlot",
    "ElementSlot",
    "ListSlot",
    "ChoiceSlot",
    "ChoiceVariant",
    # Capabilities
    "HasExtensions",
    "DeepComparable",
    "Cloneable",
    "FieldEnumerable",
]
