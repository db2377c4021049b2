# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Coded primitive bound to an :class:`~fhirmodel.model.binding.EnumBinding`."""

from __future__ import annotations

from enum import Enum
from typing import Any, TypeVar

from fhirmodel.model.binding import CodeState, EnumBinding
from fhirmodel.model.primitives import PrimitiveType

E = TypeVar("E", bound=Enum)

# ###############
# Public Interface
# ###############


class Enumeration(PrimitiveType[E]):
    """A ``code`` value restricted to the values of one binding.

    The value is in one of three states: unset, a known member of the binding,
    or unrecognized (a code outside the binding accepted in lenient mode). An
    unrecognized value encodes to no code at all and counts as empty; the
    offending code is kept in :attr:`unrecognized_code` for diagnostics only.
    """

    type_name = "code"

    def __init__(self, binding: EnumBinding[E], value: E | None = None) -> None:
        self.binding = binding
        self._unrecognized: str | None = None
        super().__init__(value)

    def __repr__(self) -> str:
        return f"Enumeration({self.binding.name}, {self.state.name}, {self.wire_value!r})"

    @classmethod
    def from_wire_for(cls, binding: EnumBinding[E], text: str | None) -> Enumeration[E]:
        """Build a coded value by decoding *text* through *binding*."""
        coded = cls(binding)
        coded.wire_value = text
        return coded

    @property
    def state(self) -> CodeState:
        if self._value is not None:
            return CodeState.KNOWN
        if self._unrecognized is not None:
            return CodeState.UNRECOGNIZED
        return CodeState.UNSET

    @property
    def unrecognized_code(self) -> str | None:
        return self._unrecognized

    @PrimitiveType.value.setter
    def value(self, value: E | None) -> None:
        self._unrecognized = None
        PrimitiveType.value.fset(self, value)

    @PrimitiveType.wire_value.setter
    def wire_value(self, text: str | None) -> None:
        """Decode *text* through the binding.

        Raises:
            UnknownCodeError: If the code is unmatched and lenient decoding is off.
        """
        state, member = self.binding.decode(text)
        self._invalid_text = None
        self._value = member
        self._unrecognized = text if state is CodeState.UNRECOGNIZED else None

    @property
    def system(self) -> str | None:
        return None if self._value is None else self.binding.system(self._value)

    @property
    def display(self) -> str | None:
        return None if self._value is None else self.binding.display(self._value)

    @property
    def definition(self) -> str | None:
        return None if self._value is None else self.binding.definition(self._value)

    def shallow_equals(self, other: object) -> bool:
        return isinstance(other, Enumeration) and other.binding is self.binding and self._same_value(other)

    def deep_equals(self, other: object) -> bool:
        if not isinstance(other, Enumeration) or other.binding is not self.binding:
            return False
        return self._element_deep_equals(other) and self._same_value(other)

    # ################
    # Implementation
    # ################

    def _format(self, value: E) -> str:
        return self.binding.encode(value)  # type: ignore[return-value]

    def _coerce(self, value: Any) -> E:
        self.binding.encode(value)
        return value
