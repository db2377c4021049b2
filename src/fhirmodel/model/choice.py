# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Attributes for choice fields: one slot holding exactly one of a closed set of variants.

The stored value's own wire type is the discriminator. Writing any declared
variant replaces the current value wholesale; reading through a typed
:class:`ChoiceVariant` attribute of a different variant raises
:class:`~fhirmodel.errors.TypeMismatchError`.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from fhirmodel.errors import TypeMismatchError
from fhirmodel.model.element import Base

if TYPE_CHECKING:
    from fhirmodel.model.composite import Composite

# ###############
# Public Interface
# ###############


class ChoiceSlot:
    """Attribute exposing a choice field's current value, whatever its variant.

    Reading never auto-creates, since an unset choice has no variant to create.
    """

    def __init__(self, identity: Enum) -> None:
        self.identity = identity

    def __get__(self, node: Composite | None, owner: type | None = None) -> Any:
        if node is None:
            return self
        values = node.get_field(self.identity)
        return values[0] if values else None

    def __set__(self, node: Composite, value: Base | None) -> None:
        if value is None:
            node.clear_field(self.identity)
        else:
            node.set_field(self.identity, value)


class ChoiceVariant:
    """Attribute giving typed access to one variant of a choice field.

    Args:
        identity: Identity of the choice field.
        variant_cls: The variant class this attribute reads and writes.
    """

    def __init__(self, identity: Enum, variant_cls: type[Base]) -> None:
        self.identity = identity
        self.variant_cls = variant_cls

    def __get__(self, node: Composite | None, owner: type | None = None) -> Any:
        if node is None:
            return self
        return node.choice_value(self.identity, self.variant_cls)

    def __set__(self, node: Composite, value: Any) -> None:
        """Store *value*, wrapping a plain Python value for a primitive variant.

        Raises:
            TypeMismatchError: If *value* is a plain Python value and the variant is not primitive.
        """
        if not isinstance(value, Base):
            if not self.variant_cls.is_primitive:
                expected = self.variant_cls.__name__
                raise TypeMismatchError(f"Choice variant {expected} cannot be set from {type(value).__name__}")
            wrapped = self.variant_cls()
            wrapped.value = value  # type: ignore[attr-defined]
            value = wrapped
        node.set_field(self.identity, value)
