# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSON reading and writing of records through the generic field protocol.

The format follows the FHIR JSON conventions: ``resourceType`` comes first,
choice fields appear under their type-suffixed names (``valueDecimal``),
repeating fields are arrays, and a primitive's own id and extensions travel in
a sibling member prefixed with an underscore (``_birthDate``). Decimals are
parsed as :class:`decimal.Decimal` and written back with the same digits.
"""

from __future__ import annotations

import json
import logging
import re
from decimal import Decimal
from enum import Enum
from typing import Any

import fhirmodel.resources  # noqa: F401  (registers the record types)
from fhirmodel.config import ModelConfig, use_config
from fhirmodel.errors import StructuralParseError, TypeMismatchError
from fhirmodel.model import registry
from fhirmodel.model.composite import Composite, new_value_for
from fhirmodel.model.element import Base, Element
from fhirmodel.model.primitives import PrimitiveType
from fhirmodel.model.resource import Resource
from fhirmodel.model.types import PropertyDef

_LOG = logging.getLogger(__name__)

# Decimals travel through json.dumps as marked strings and are unquoted afterwards.
_DECIMAL_MARK = "\ufdd0"
_DECIMAL_TOKEN = re.compile(f'"{_DECIMAL_MARK}([^"{_DECIMAL_MARK}]+){_DECIMAL_MARK}"')

# ###############
# Public Interface
# ###############


def parse_resource(text: str, config: ModelConfig | None = None) -> Resource:
    """Parse a JSON document into a record.

    Args:
        text: The JSON document.
        config: Configuration to apply while reading; the active one when omitted.

    Returns:
        The record, of the class registered for its ``resourceType``.

    Raises:
        StructuralParseError: If the document is not valid JSON or does not match
            the declared structure of its record type.
        UnknownCodeError: If a coded field holds an unknown code and lenient
            decoding is off.
    """
    try:
        obj = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as exc:
        raise StructuralParseError(f"Invalid JSON: {exc}") from exc
    return resource_from_dict(obj, config)


def resource_from_dict(obj: Any, config: ModelConfig | None = None) -> Resource:
    """Build a record from an already decoded JSON object."""
    if not isinstance(obj, dict):
        raise StructuralParseError("A resource must be a JSON object")
    resource_type = obj.get("resourceType")
    if not isinstance(resource_type, str):
        raise StructuralParseError("Missing or invalid 'resourceType'")
    try:
        cls = registry.resource_class(resource_type)
    except LookupError as exc:
        raise StructuralParseError(str(exc), resource_type) from exc

    resource = cls()
    with use_config(config):
        _read_node(resource, obj, resource_type, skip=("resourceType",))
    _LOG.debug("Parsed %s with id %r", resource_type, resource.id)
    return resource


def compose_resource(resource: Resource, indent: int | None = None) -> str:
    """Serialize a record to a JSON document.

    Decimals are written with exactly the digits they hold, so ``3.140`` stays ``3.140``.
    """
    text = json.dumps(resource_to_dict(resource), indent=indent, ensure_ascii=False, default=_encode_decimal)
    text = _DECIMAL_TOKEN.sub(r"\1", text)
    _LOG.debug("Composed %s with id %r", resource.resource_type, resource.id)
    return text


def resource_to_dict(resource: Resource) -> dict[str, Any]:
    """Return the JSON object form of a record, omitting empty content.

    Decimal values are returned as :class:`~decimal.Decimal`.
    """
    out: dict[str, Any] = {"resourceType": resource.resource_type}
    out.update(_node_to_dict(resource))
    return out


# ################
# Implementation
# ################


def _read_node(node: Composite, obj: Any, path: str, skip: tuple[str, ...] = ()) -> None:
    if not isinstance(obj, dict):
        raise StructuralParseError(f"Expected a JSON object, got {type(obj).__name__}", path)
    seen: set[Enum] = set()
    for key, raw in obj.items():
        if key in skip:
            continue
        if key.startswith("_"):
            # Sibling extras are read together with their value.
            if key[1:] in obj:
                continue
            raw = None
            key = key[1:]
        resolved = node.catalog.resolve(key)
        if resolved is None:
            raise StructuralParseError(f"Unknown property '{key}'", path)
        prop, variant = resolved
        child_path = f"{path}.{key}"
        if prop.is_choice and variant is None:
            raise StructuralParseError(f"Choice property '{prop.display_name}' needs a type suffix", child_path)
        if not prop.is_repeating:
            if prop.identity in seen:
                raise StructuralParseError(f"Property '{prop.display_name}' appears more than once", child_path)
            seen.add(prop.identity)
        extras = obj.get("_" + key)
        if not prop.is_repeating:
            _read_value(node, prop, key, raw, extras, child_path)
            continue
        raw_items = raw if raw is not None else [None] * len(extras or ())
        if not isinstance(raw_items, list):
            raise StructuralParseError("Expected a JSON array", child_path)
        extra_items = extras if isinstance(extras, list) else []
        for index, item in enumerate(raw_items):
            item_extras = extra_items[index] if index < len(extra_items) else None
            _read_value(node, prop, key, item, item_extras, f"{child_path}[{index}]")


def _read_value(node: Composite, prop: PropertyDef, key: str, raw: Any, extras: Any, path: str) -> None:
    if prop.is_primitive:
        value = new_value_for(prop)
        _load_primitive(value, raw, extras, path)
        try:
            node.set_field(prop.identity, value)
        except TypeMismatchError as exc:
            raise StructuralParseError(str(exc), path) from exc
        return
    child = node.create_child(key)
    if isinstance(child, PrimitiveType):
        _load_primitive(child, raw, extras, path)
    else:
        _read_node(child, raw, path)  # type: ignore[arg-type]


def _load_primitive(value: PrimitiveType[Any], raw: Any, extras: Any, path: str) -> None:
    if raw is not None:
        try:
            value.load_json(raw)
        except TypeMismatchError as exc:
            raise StructuralParseError(str(exc), path) from exc
    if extras is None:
        return
    if not isinstance(extras, dict):
        raise StructuralParseError("Expected a JSON object for primitive extras", path)
    value.id = extras.get("id")
    for index, ext_obj in enumerate(extras.get("extension", ())):
        ext = registry.create("Extension")
        _read_node(ext, ext_obj, f"{path}.extension[{index}]")  # type: ignore[arg-type]
        value.append_extension(ext)  # type: ignore[arg-type]


def _node_to_dict(node: Composite) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for child in node.list_children():
        values = [v for v in child.values if not v.is_empty()]
        if not values:
            continue
        key = child.wire_name
        if child.prop.is_repeating:
            if values[0].is_primitive:
                out[key] = [v.to_json() for v in values]  # type: ignore[attr-defined]
                extras = [_primitive_extras(v) for v in values]
                if any(extras):
                    out["_" + key] = extras
            else:
                out[key] = [_node_to_dict(v) for v in values]  # type: ignore[arg-type]
        else:
            _write_single(out, key, values[0])
    return out


def _write_single(out: dict[str, Any], key: str, value: Base) -> None:
    if not isinstance(value, PrimitiveType):
        out[key] = _node_to_dict(value)  # type: ignore[arg-type]
        return
    wire = value.to_json()
    if wire is not None:
        out[key] = wire
    extras = _primitive_extras(value)
    if extras:
        out["_" + key] = extras


def _primitive_extras(value: Element) -> dict[str, Any] | None:
    extras: dict[str, Any] = {}
    if value.id is not None:
        extras["id"] = value.id
    extensions = [_node_to_dict(ext) for ext in value.extension if not ext.is_empty()]
    if extensions:
        extras["extension"] = extensions
    return extras or None


def _encode_decimal(value: Any) -> str:
    if isinstance(value, Decimal):
        return f"{_DECIMAL_MARK}{value}{_DECIMAL_MARK}"
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
