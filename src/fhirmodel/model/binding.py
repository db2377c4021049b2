# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enumeration bindings: closed code tables and their decode/encode state machine.

Every enumerated field of every record type shares the one implementation in
:class:`EnumBinding`. A binding is parameterized by an :class:`enum.Enum`
whose member values are the wire codes, plus per-member display text,
definition text and defining-system URI.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from fhirmodel.config import current_config
from fhirmodel.errors import TypeMismatchError, UnknownCodeError

E = TypeVar("E", bound=Enum)

# ###############
# Public Interface
# ###############


class CodeState(Enum):
    """Decode outcome of a wire code against a binding."""

    UNSET = "unset"
    KNOWN = "known"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class CodeDefinition:
    """Human-facing metadata of one enumeration value.

    Attributes:
        display: Short display text.
        definition: Long-form definition text.
        system: Canonical URI of the defining code system. Falls back to the
            binding's system when omitted.
    """

    display: str
    definition: str = ""
    system: str | None = None


class EnumBinding(Generic[E]):
    """Maps the members of an enumeration to and from wire codes.

    Args:
        name: Binding name used in error messages (e.g. ``QuestionnaireResponseStatus``).
        enum_type: Enumeration whose member values are the wire codes.
        system: Default code system URI for every member.
        definitions: Display/definition metadata per member.
        value_set: Optional canonical URL of the bound value set.
    """

    def __init__(
        self,
        name: str,
        enum_type: type[E],
        system: str,
        definitions: Mapping[E, CodeDefinition] | None = None,
        value_set: str | None = None,
    ) -> None:
        self.name = name
        self.enum_type = enum_type
        self.default_system = system
        self.value_set = value_set
        self._definitions: dict[E, CodeDefinition] = dict(definitions or {})
        self._by_code: dict[str, E] = {}
        for member in enum_type:
            if not isinstance(member.value, str) or not member.value:
                raise ValueError(f"{name}: member {member.name} must carry a non-empty string code")
            self._by_code[member.value] = member

    def __repr__(self) -> str:
        return f"EnumBinding({self.name!r})"

    def values(self) -> tuple[E, ...]:
        """Return every bound value in declaration order."""
        return tuple(self.enum_type)

    def lookup(self, code: str) -> E | None:
        """Return the value for *code*, or None if the code is not bound."""
        return self._by_code.get(code)

    def decode(self, code: str | None, *, lenient: bool | None = None) -> tuple[CodeState, E | None]:
        """Decode a wire code.

        Args:
            code: The wire code; None or an empty string decodes to ``UNSET``.
            lenient: Overrides the configured ``accept_invalid_enums`` flag.

        Returns:
            The decode state together with the matched value (None unless ``KNOWN``).

        Raises:
            UnknownCodeError: If the code is unmatched and lenient decoding is off.
        """
        if code is None or code == "":
            return CodeState.UNSET, None
        member = self._by_code.get(code)
        if member is not None:
            return CodeState.KNOWN, member
        if lenient is None:
            lenient = current_config().accept_invalid_enums
        if lenient:
            return CodeState.UNRECOGNIZED, None
        raise UnknownCodeError(code, self.name)

    def encode(self, value: E | None) -> str | None:
        """Return the wire code for *value*; None encodes to None."""
        if value is None:
            return None
        self._require_member(value)
        return value.value

    def system(self, value: E) -> str:
        """Return the defining code system URI of *value*."""
        self._require_member(value)
        definition = self._definitions.get(value)
        if definition is not None and definition.system:
            return definition.system
        return self.default_system

    def display(self, value: E) -> str:
        """Return the display text of *value* (its code when no display is declared)."""
        self._require_member(value)
        definition = self._definitions.get(value)
        return definition.display if definition is not None else value.value

    def definition(self, value: E) -> str:
        """Return the long-form definition of *value*."""
        self._require_member(value)
        definition = self._definitions.get(value)
        return definition.definition if definition is not None else ""

    # ################
    # Implementation
    # ################

    def _require_member(self, value: object) -> None:
        if not isinstance(value, self.enum_type):
            raise TypeMismatchError(f"{self.name} expects a {self.enum_type.__name__} value, got {value!r}")
