# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reusable complex datatypes: Extension, Identifier, Coding, Quantity, Attachment and Reference."""

from __future__ import annotations

from enum import Enum
from typing import Any, Self

from fhirmodel.model.binding import CodeDefinition, EnumBinding
from fhirmodel.model.choice import ChoiceSlot
from fhirmodel.model.composite import ELEMENT_CATALOG, Composite, ElementSlot, PrimitiveSlot
from fhirmodel.model.registry import register
from fhirmodel.model.resource import Resource
from fhirmodel.model.types import ChoiceTypeRef, ComplexTypeRef, PrimitiveTypeRef, PropertyDef, ReferenceTypeRef


def _primitive(identity: Enum, name: str, code: str, short: str, **kwargs: Any) -> PropertyDef:
    return PropertyDef(identity=identity, name=name, type=PrimitiveTypeRef(code=code), short=short, **kwargs)


# ###############
# Extension
# ###############


class ExtensionField(Enum):
    URL = "url"
    VALUE = "value"


EXTENSION_VALUE_TYPES = (
    PrimitiveTypeRef(code="base64Binary"),
    PrimitiveTypeRef(code="boolean"),
    PrimitiveTypeRef(code="canonical"),
    PrimitiveTypeRef(code="code"),
    PrimitiveTypeRef(code="date"),
    PrimitiveTypeRef(code="dateTime"),
    PrimitiveTypeRef(code="decimal"),
    PrimitiveTypeRef(code="id"),
    PrimitiveTypeRef(code="integer"),
    PrimitiveTypeRef(code="string"),
    PrimitiveTypeRef(code="time"),
    PrimitiveTypeRef(code="uri"),
    ComplexTypeRef(code="Attachment"),
    ComplexTypeRef(code="Coding"),
    ComplexTypeRef(code="Identifier"),
    ComplexTypeRef(code="Quantity"),
    ReferenceTypeRef(),
)


@register
class Extension(Composite):
    """An open-world annotation: a defining URL and either a value or nested extensions."""

    type_name = "Extension"
    catalog = ELEMENT_CATALOG.extend(
        "Extension",
        _primitive(ExtensionField.URL, "url", "uri", "identifies the meaning of the extension", min=1),
        PropertyDef(
            identity=ExtensionField.VALUE,
            name="value",
            type=ChoiceTypeRef(variants=EXTENSION_VALUE_TYPES),
            short="Value of extension",
        ),
    )

    url = PrimitiveSlot(ExtensionField.URL)
    value = ChoiceSlot(ExtensionField.VALUE)


# ###############
# Identifier
# ###############


class IdentifierUse(Enum):
    USUAL = "usual"
    OFFICIAL = "official"
    TEMP = "temp"
    SECONDARY = "secondary"
    OLD = "old"


IDENTIFIER_USE_BINDING = EnumBinding(
    "IdentifierUse",
    IdentifierUse,
    system="http://hl7.org/fhir/identifier-use",
    definitions={
        IdentifierUse.USUAL: CodeDefinition(
            "Usual",
            "The identifier recommended for display and use in real-world interactions.",
        ),
        IdentifierUse.OFFICIAL: CodeDefinition(
            "Official",
            "The identifier considered to be most trusted for the identification of this item.",
        ),
        IdentifierUse.TEMP: CodeDefinition("Temp", "A temporary identifier."),
        IdentifierUse.SECONDARY: CodeDefinition("Secondary", "An identifier that was assigned in secondary use."),
        IdentifierUse.OLD: CodeDefinition("Old", "The identifier id no longer considered valid."),
    },
    value_set="http://hl7.org/fhir/ValueSet/identifier-use",
)


class IdentifierField(Enum):
    USE = "use"
    SYSTEM = "system"
    VALUE = "value"
    ASSIGNER = "assigner"


@register
class Identifier(Composite):
    """A business identifier: a value unique within a namespace."""

    type_name = "Identifier"
    catalog = ELEMENT_CATALOG.extend(
        "Identifier",
        PropertyDef(
            identity=IdentifierField.USE,
            name="use",
            type=PrimitiveTypeRef(code="code"),
            binding=IDENTIFIER_USE_BINDING,
            modifier=True,
            summary=True,
            short="usual | official | temp | secondary | old",
        ),
        _primitive(IdentifierField.SYSTEM, "system", "uri", "The namespace for the identifier value", summary=True),
        _primitive(IdentifierField.VALUE, "value", "string", "The value that is unique", summary=True),
        PropertyDef(
            identity=IdentifierField.ASSIGNER,
            name="assigner",
            type=ReferenceTypeRef(targets=("Organization",)),
            summary=True,
            short="Organization that issued id",
        ),
    )

    use = PrimitiveSlot(IdentifierField.USE)
    system = PrimitiveSlot(IdentifierField.SYSTEM)
    value = PrimitiveSlot(IdentifierField.VALUE)
    assigner = ElementSlot(IdentifierField.ASSIGNER)


# ###############
# Coding
# ###############


class CodingField(Enum):
    SYSTEM = "system"
    VERSION = "version"
    CODE = "code"
    DISPLAY = "display"
    USER_SELECTED = "userSelected"


@register
class Coding(Composite):
    """A reference to a code defined by a terminology system."""

    type_name = "Coding"
    catalog = ELEMENT_CATALOG.extend(
        "Coding",
        _primitive(CodingField.SYSTEM, "system", "uri", "Identity of the terminology system", summary=True),
        _primitive(CodingField.VERSION, "version", "string", "Version of the system - if relevant", summary=True),
        _primitive(CodingField.CODE, "code", "code", "Symbol in syntax defined by the system", summary=True),
        _primitive(CodingField.DISPLAY, "display", "string", "Representation defined by the system", summary=True),
        _primitive(
            CodingField.USER_SELECTED,
            "userSelected",
            "boolean",
            "If this coding was chosen directly by the user",
            summary=True,
        ),
    )

    system = PrimitiveSlot(CodingField.SYSTEM)
    version = PrimitiveSlot(CodingField.VERSION)
    code = PrimitiveSlot(CodingField.CODE)
    display = PrimitiveSlot(CodingField.DISPLAY)
    user_selected = PrimitiveSlot(CodingField.USER_SELECTED)

    @classmethod
    def of(cls, binding: EnumBinding[Any], value: Enum) -> Self:
        """Build a coding carrying the system, code and display of an enumeration value."""
        return cls(system=binding.system(value), code=binding.encode(value), display=binding.display(value))


# ###############
# Quantity
# ###############


class QuantityComparator(Enum):
    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    GREATER_OR_EQUAL = ">="
    GREATER_THAN = ">"
    AD = "ad"


QUANTITY_COMPARATOR_BINDING = EnumBinding(
    "QuantityComparator",
    QuantityComparator,
    system="http://hl7.org/fhir/quantity-comparator",
    definitions={
        QuantityComparator.LESS_THAN: CodeDefinition("Less than", "The actual value is less than the given value."),
        QuantityComparator.LESS_OR_EQUAL: CodeDefinition(
            "Less or Equal to",
            "The actual value is less than or equal to the given value.",
        ),
        QuantityComparator.GREATER_OR_EQUAL: CodeDefinition(
            "Greater or Equal to",
            "The actual value is greater than or equal to the given value.",
        ),
        QuantityComparator.GREATER_THAN: CodeDefinition(
            "Greater than",
            "The actual value is greater than the given value.",
        ),
        QuantityComparator.AD: CodeDefinition(
            "Sufficient to achieve this total quantity",
            "The actual value is sufficient for the total quantity to equal the given value.",
        ),
    },
)


class QuantityField(Enum):
    VALUE = "value"
    COMPARATOR = "comparator"
    UNIT = "unit"
    SYSTEM = "system"
    CODE = "code"


@register
class Quantity(Composite):
    """A measured amount, with an optional comparator and a coded unit."""

    type_name = "Quantity"
    catalog = ELEMENT_CATALOG.extend(
        "Quantity",
        _primitive(QuantityField.VALUE, "value", "decimal", "Numerical value (with implicit precision)", summary=True),
        PropertyDef(
            identity=QuantityField.COMPARATOR,
            name="comparator",
            type=PrimitiveTypeRef(code="code"),
            binding=QUANTITY_COMPARATOR_BINDING,
            modifier=True,
            summary=True,
            short="< | <= | >= | > | ad - how to understand the value",
        ),
        _primitive(QuantityField.UNIT, "unit", "string", "Unit representation", summary=True),
        _primitive(QuantityField.SYSTEM, "system", "uri", "System that defines coded unit form", summary=True),
        _primitive(QuantityField.CODE, "code", "code", "Coded form of the unit", summary=True),
    )

    value = PrimitiveSlot(QuantityField.VALUE)
    comparator = PrimitiveSlot(QuantityField.COMPARATOR)
    unit = PrimitiveSlot(QuantityField.UNIT)
    system = PrimitiveSlot(QuantityField.SYSTEM)
    code = PrimitiveSlot(QuantityField.CODE)


# ###############
# Attachment
# ###############


class AttachmentField(Enum):
    CONTENT_TYPE = "contentType"
    LANGUAGE = "language"
    DATA = "data"
    URL = "url"
    SIZE = "size"
    HASH = "hash"
    TITLE = "title"
    CREATION = "creation"


@register
class Attachment(Composite):
    """Content in a format defined elsewhere, inline or by URL."""

    type_name = "Attachment"
    catalog = ELEMENT_CATALOG.extend(
        "Attachment",
        _primitive(
            AttachmentField.CONTENT_TYPE,
            "contentType",
            "code",
            "Mime type of the content, with charset etc.",
            summary=True,
        ),
        _primitive(
            AttachmentField.LANGUAGE, "language", "code", "Human language of the content (BCP-47)", summary=True
        ),
        _primitive(AttachmentField.DATA, "data", "base64Binary", "Data inline, base64ed"),
        _primitive(AttachmentField.URL, "url", "uri", "Uri where the data can be found", summary=True),
        _primitive(
            AttachmentField.SIZE, "size", "integer", "Number of bytes of content (if url provided)", summary=True
        ),
        _primitive(AttachmentField.HASH, "hash", "base64Binary", "Hash of the data (sha-1, base64ed)", summary=True),
        _primitive(AttachmentField.TITLE, "title", "string", "Label to display in place of the data", summary=True),
        _primitive(AttachmentField.CREATION, "creation", "dateTime", "Date attachment was first created", summary=True),
    )

    content_type = PrimitiveSlot(AttachmentField.CONTENT_TYPE)
    language = PrimitiveSlot(AttachmentField.LANGUAGE)
    data = PrimitiveSlot(AttachmentField.DATA)
    url = PrimitiveSlot(AttachmentField.URL)
    size = PrimitiveSlot(AttachmentField.SIZE)
    hash = PrimitiveSlot(AttachmentField.HASH)
    title = PrimitiveSlot(AttachmentField.TITLE)
    creation = PrimitiveSlot(AttachmentField.CREATION)


# ###############
# Reference
# ###############


class ReferenceField(Enum):
    REFERENCE = "reference"
    TYPE = "type"
    IDENTIFIER = "identifier"
    DISPLAY = "display"


@register
class Reference(Composite):
    """A non-owning pointer from one record to another.

    Attributes:
        resolved: The referenced record once a caller has resolved it. It is
            never serialized or compared, and copies share it rather than
            cloning it.
    """

    type_name = "Reference"
    catalog = ELEMENT_CATALOG.extend(
        "Reference",
        _primitive(
            ReferenceField.REFERENCE,
            "reference",
            "string",
            "Literal reference, Relative, internal or absolute URL",
            summary=True,
        ),
        _primitive(ReferenceField.TYPE, "type", "uri", "Type the reference refers to (e.g. \"Patient\")", summary=True),
        PropertyDef(
            identity=ReferenceField.IDENTIFIER,
            name="identifier",
            type=ComplexTypeRef(code="Identifier"),
            summary=True,
            short="Logical reference, when literal reference is not known",
        ),
        _primitive(ReferenceField.DISPLAY, "display", "string", "Text alternative for the resource", summary=True),
    )

    reference = PrimitiveSlot(ReferenceField.REFERENCE)
    type = PrimitiveSlot(ReferenceField.TYPE)
    identifier = ElementSlot(ReferenceField.IDENTIFIER)
    display = PrimitiveSlot(ReferenceField.DISPLAY)

    def __init__(self, **fields: Any) -> None:
        self.resolved: Resource | None = None
        super().__init__(**fields)

    @classmethod
    def for_resource(cls, resource: Resource) -> Self:
        """Build a relative reference to *resource* and keep it as the resolved target."""
        ref = cls(reference=f"{resource.resource_type}/{resource.id}" if resource.id else None)
        ref.resolved = resource
        return ref

    def reference_type(self) -> str | None:
        """Return the record type this reference points at, if it can be determined.

        The explicit ``type`` wins; otherwise the type segment of a relative or
        absolute literal reference is used. Contained (``#id``) references have none.
        """
        if self.type:
            return self.type.rstrip("/").rsplit("/", 1)[-1]
        literal = self.reference
        if not literal or literal.startswith("#"):
            return None
        parts = literal.split("/")
        if "_history" in parts:
            parts = parts[: parts.index("_history")]
        return parts[-2] if len(parts) >= 2 else None

    def _copy_extras(self, dst: Self) -> None:
        dst.resolved = self.resolved
