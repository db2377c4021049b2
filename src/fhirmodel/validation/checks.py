# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural validation of record trees.

These checks walk any node through the generic field protocol only, so they
apply unchanged to every record and structure type. They do not evaluate
profiles or terminology; they enforce what the catalogs themselves declare.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from fhirmodel.config import ModelConfig, use_config
from fhirmodel.model.binding import CodeState
from fhirmodel.model.composite import Child, Composite
from fhirmodel.model.datatypes import Extension, ExtensionField, Reference
from fhirmodel.model.element import Base
from fhirmodel.model.enumeration import Enumeration
from fhirmodel.model.primitives import PrimitiveType
from fhirmodel.model.types import ReferenceTypeRef

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue: the tree is usable but likely not what was intended.

    Attributes:
        message: Human-readable description of the warning.
        path: Dotted path of the offending node.
    """

    message: str
    path: str = ""


@dataclass(frozen=True)
class ValidationError:
    """A violation of the structure declared by a type's catalog.

    Attributes:
        message: Human-readable description of the error.
        path: Dotted path of the offending node.
    """

    message: str
    path: str = ""


@dataclass
class ValidationResult:
    """Result of running the structural checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Violations that make the tree invalid.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any validation errors were found."""
        return len(self.errors) > 0


def validate(node: Composite, config: ModelConfig | None = None) -> ValidationResult:
    """Run all structural checks on *node* and everything it owns.

    Checks performed:

    1. **Cardinality** (error): every field holds between its declared minimum
       and maximum number of non-empty values.

    2. **Primitive values** (error): primitives whose wire text did not parse
       are reported with the offending text.

    3. **Choice variants** (error): a choice field holds a value of one of its
       declared variant types.

    4. **Enumeration codes** (warning): coded fields decoded leniently from a
       code outside their binding.

    5. **Reference targets** (warning): literal references pointing at a record
       type outside the field's declared targets.

    6. **Extensions** (error): an extension carries either a value or nested
       extensions, never both and never neither.

    Args:
        node: Root of the tree to validate, usually a record.
        config: Configuration to apply while validating; the active one when omitted.

    Returns:
        A :class:`ValidationResult`; an empty one indicates a valid tree.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    with use_config(config):
        nodes = list(_walk(node, node.type_name))
        errors.extend(_check_cardinality(nodes))
        errors.extend(_check_primitive_values(nodes))
        errors.extend(_check_choice_variants(nodes))
        warnings.extend(_check_codes(nodes))
        warnings.extend(_check_reference_targets(nodes))
        errors.extend(_check_extensions(nodes))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


def _value_path(path: str, child: Child, index: int) -> str:
    base = f"{path}.{child.wire_name}"
    return f"{base}[{index}]" if child.prop.is_repeating else base


def _walk(node: Composite, path: str) -> Iterator[tuple[Composite, str]]:
    """Yield every non-empty composite node in the tree, depth first, with its path."""
    yield node, path
    for child in node.list_children():
        for index, value in enumerate(child.values):
            if value.is_empty():
                continue
            value_path = _value_path(path, child, index)
            if isinstance(value, Composite):
                yield from _walk(value, value_path)
            elif isinstance(value, PrimitiveType):
                for i, ext in enumerate(value.extension):
                    yield from _walk(ext, f"{value_path}.extension[{i}]")


def _values(nodes: list[tuple[Composite, str]]) -> Iterator[tuple[Composite, Child, Base, str]]:
    for node, path in nodes:
        for child in node.list_children():
            for index, value in enumerate(child.values):
                yield node, child, value, _value_path(path, child, index)


def _check_cardinality(nodes: list[tuple[Composite, str]]) -> list[ValidationError]:
    """Return errors for fields holding too few or too many values."""
    errors: list[ValidationError] = []
    for node, path in nodes:
        for child in node.list_children():
            prop = child.prop
            count = sum(1 for v in child.values if not v.is_empty())
            label = f"{path}.{prop.display_name}"
            if count < prop.min:
                errors.append(
                    ValidationError(message=f"minimum required = {prop.min}, but only found {count}", path=label)
                )
            if prop.max is not None and count > prop.max:
                errors.append(ValidationError(message=f"maximum allowed = {prop.max}, but found {count}", path=label))
    return errors


def _check_primitive_values(nodes: list[tuple[Composite, str]]) -> list[ValidationError]:
    """Return errors for primitives holding wire text that did not parse."""
    return [
        ValidationError(message=f"Invalid {value.type_name} value '{value.wire_value}'", path=path)
        for _, _, value, path in _values(nodes)
        if isinstance(value, PrimitiveType) and not value.is_valid
    ]


def _check_choice_variants(nodes: list[tuple[Composite, str]]) -> list[ValidationError]:
    """Return errors for choice fields holding a value outside their variant set."""
    errors: list[ValidationError] = []
    for node, child, value, path in _values(nodes):
        if not child.prop.is_choice:
            continue
        allowed = node.allowed_wire_types(child.identity)
        if value.type_name not in allowed:
            errors.append(
                ValidationError(
                    message=f"Type {value.type_name} is not allowed here; expected one of {', '.join(allowed)}",
                    path=path,
                )
            )
    return errors


def _check_codes(nodes: list[tuple[Composite, str]]) -> list[ValidationWarning]:
    """Return warnings for coded values that were not recognized by their binding."""
    return [
        ValidationWarning(
            message=f"Unrecognized {value.binding.name} code '{value.unrecognized_code}'",
            path=path,
        )
        for _, _, value, path in _values(nodes)
        if isinstance(value, Enumeration) and value.state is CodeState.UNRECOGNIZED
    ]


def _check_reference_targets(nodes: list[tuple[Composite, str]]) -> list[ValidationWarning]:
    """Return warnings for references whose target type is not declared for the field."""
    warnings: list[ValidationWarning] = []
    for _, child, value, path in _values(nodes):
        if not isinstance(value, Reference) or not isinstance(child.type, ReferenceTypeRef):
            continue
        targets = child.type.targets
        target = value.reference_type()
        if targets and target is not None and target not in targets:
            warnings.append(
                ValidationWarning(
                    message=f"Reference to {target} is not one of the allowed targets {'|'.join(targets)}",
                    path=path,
                )
            )
    return warnings


def _check_extensions(nodes: list[tuple[Composite, str]]) -> list[ValidationError]:
    """Return errors for extensions with both or neither of a value and nested extensions."""
    errors: list[ValidationError] = []
    for node, path in nodes:
        if not isinstance(node, Extension):
            continue
        has_value = node.has_field(ExtensionField.VALUE)
        has_nested = any(not ext.is_empty() for ext in node.extension)
        if has_value == has_nested:
            errors.append(
                ValidationError(
                    message=f"Extension '{node.url}' must have either nested extensions or a value, but not both",
                    path=path,
                )
            )
    return errors
