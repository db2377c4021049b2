# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Primitive values: single scalars with a wire-string form and a validity state.

A primitive parses its wire string into a normalized Python value. Text that
does not parse is retained verbatim and the primitive reports itself invalid,
so a reader can load malformed input and a validator can report it later.
Comparison uses the normalized value, never the wire text: ``3.14`` and
``3.140`` are equal decimals.
"""

from __future__ import annotations

import base64
import binascii
import copy as _copy
import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Generic, Self, TypeVar

from fhirmodel.errors import TypeMismatchError
from fhirmodel.model.element import Element
from fhirmodel.model.registry import register

T = TypeVar("T")

# ###############
# Public Interface
# ###############


class TemporalPrecision(Enum):
    """How much of a date or dateTime was actually stated."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    SECOND = "second"


class PrimitiveType(Element, Generic[T]):
    """Base class for primitive leaves.

    Subclasses implement ``_parse`` (wire text to value), ``_format`` (value to
    wire text) and ``_coerce`` (accept a Python value assigned directly).
    """

    is_primitive = True

    def __init__(self, value: T | None = None) -> None:
        super().__init__()
        self._value: T | None = None
        self._invalid_text: str | None = None
        if value is not None:
            self.value = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.wire_value!r})"

    @property
    def value(self) -> T | None:
        return self._value

    @value.setter
    def value(self, value: T | None) -> None:
        self._invalid_text = None
        self._value = None if value is None else self._coerce(value)

    @property
    def wire_value(self) -> str | None:
        """The wire-string form; invalid input is returned verbatim."""
        if self._invalid_text is not None:
            return self._invalid_text
        if self._value is None:
            return None
        return self._format(self._value)

    @wire_value.setter
    def wire_value(self, text: str | None) -> None:
        self._value = None
        self._invalid_text = None
        if text is None or text == "":
            return
        try:
            self._value = self._parse(text)
        except ValueError:
            self._invalid_text = text

    @classmethod
    def from_wire(cls, text: str | None) -> Self:
        """Build a primitive from its wire string."""
        primitive = cls()
        primitive.wire_value = text
        return primitive

    @property
    def is_valid(self) -> bool:
        return self._invalid_text is None

    def has_value(self) -> bool:
        return self._value is not None

    def to_json(self) -> Any:
        """Return the JSON-native form of the value (None when unset)."""
        return self.wire_value

    def load_json(self, raw: Any) -> None:
        """Load a JSON-native value.

        Raises:
            TypeMismatchError: If *raw* has a JSON type this primitive does not accept.
        """
        if not isinstance(raw, str):
            raise TypeMismatchError(f"{self.type_name} expects a JSON string, got {type(raw).__name__}")
        self.wire_value = raw

    def is_empty(self) -> bool:
        return self._element_is_empty() and self._value is None and self._invalid_text is None

    def deep_equals(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return False
        return self._element_deep_equals(other) and self._same_value(other)

    def shallow_equals(self, other: object) -> bool:
        if type(other) is not type(self):
            return False
        return self._same_value(other)

    def copy(self) -> Self:
        dst = _copy.copy(self)
        dst.extension = [ext.copy() for ext in self.extension]
        return dst

    # ################
    # Implementation
    # ################

    def _same_value(self, other: PrimitiveType[Any]) -> bool:
        if self._invalid_text is not None or other._invalid_text is not None:
            return self._invalid_text == other._invalid_text
        return self._comparable() == other._comparable()

    def _comparable(self) -> Any:
        return self._value

    def _parse(self, text: str) -> T:
        raise NotImplementedError

    def _format(self, value: T) -> str:
        return str(value)

    def _coerce(self, value: Any) -> T:
        raise NotImplementedError


@register
class BooleanType(PrimitiveType[bool]):
    type_name = "boolean"

    def _parse(self, text: str) -> bool:
        if text == "true":
            return True
        if text == "false":
            return False
        raise ValueError(f"not a boolean: {text!r}")

    def _format(self, value: bool) -> str:
        return "true" if value else "false"

    def _coerce(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise TypeMismatchError(f"boolean expects a bool, got {type(value).__name__}")
        return value

    def to_json(self) -> Any:
        return self._value if self.is_valid else self._invalid_text

    def load_json(self, raw: Any) -> None:
        if isinstance(raw, bool):
            self.value = raw
        else:
            super().load_json(raw)


@register
class IntegerType(PrimitiveType[int]):
    type_name = "integer"

    _PATTERN = re.compile(r"[+-]?\d+")

    def _parse(self, text: str) -> int:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not an integer: {text!r}")
        return int(text)

    def _coerce(self, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatchError(f"integer expects an int, got {type(value).__name__}")
        return value

    def to_json(self) -> Any:
        return self._value if self.is_valid else self._invalid_text

    def load_json(self, raw: Any) -> None:
        if isinstance(raw, int) and not isinstance(raw, bool):
            self.value = raw
        else:
            super().load_json(raw)


@register
class DecimalType(PrimitiveType[Decimal]):
    type_name = "decimal"

    _PATTERN = re.compile(r"-?(0|[1-9]\d*)(\.\d+)?([eE][+-]?\d+)?")

    def _parse(self, text: str) -> Decimal:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not a decimal: {text!r}")
        return Decimal(text)

    def _coerce(self, value: Any) -> Decimal:
        number = self._to_decimal(value)
        if not number.is_finite():
            raise TypeMismatchError(f"decimal expects a finite number, got {value!r}")
        return number

    def to_json(self) -> Any:
        """Return the value as a :class:`~decimal.Decimal`, keeping its stated precision."""
        if not self.is_valid or self._value is None:
            return self._invalid_text
        return self._value

    def load_json(self, raw: Any) -> None:
        if isinstance(raw, (Decimal, int, float)) and not isinstance(raw, bool):
            self.value = raw
        else:
            super().load_json(raw)

    # ################
    # Implementation
    # ################

    def _to_decimal(self, value: Any) -> Decimal:
        if isinstance(value, bool):
            raise TypeMismatchError("decimal expects a number, got bool")
        if isinstance(value, Decimal):
            return value
        if isinstance(value, int):
            return Decimal(value)
        if isinstance(value, float):
            return Decimal(repr(value))
        if isinstance(value, str):
            try:
                return self._parse(value)
            except (ValueError, InvalidOperation) as exc:
                raise TypeMismatchError(str(exc)) from exc
        raise TypeMismatchError(f"decimal expects a number, got {type(value).__name__}")


@register
class StringType(PrimitiveType[str]):
    type_name = "string"

    def _parse(self, text: str) -> str:
        return text

    def _coerce(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeMismatchError(f"{self.type_name} expects a str, got {type(value).__name__}")
        return value


@register
class CodeType(StringType):
    type_name = "code"

    _PATTERN = re.compile(r"[^\s]+( [^\s]+)*")

    def _parse(self, text: str) -> str:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not a code: {text!r}")
        return text


@register
class IdType(StringType):
    type_name = "id"

    _PATTERN = re.compile(r"[A-Za-z0-9\-.]{1,64}")

    def _parse(self, text: str) -> str:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not an id: {text!r}")
        return text


@register
class UriType(PrimitiveType[str]):
    type_name = "uri"

    _PATTERN = re.compile(r"\S*")

    def _parse(self, text: str) -> str:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not a uri: {text!r}")
        return text

    def _coerce(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeMismatchError(f"{self.type_name} expects a str, got {type(value).__name__}")
        return value


@register
class CanonicalType(UriType):
    type_name = "canonical"

    @property
    def version(self) -> str | None:
        """The ``|version`` suffix of the canonical URL, if any."""
        if self._value is None or "|" not in self._value:
            return None
        return self._value.split("|", 1)[1]


@register
class Base64BinaryType(PrimitiveType[bytes]):
    type_name = "base64Binary"

    def _parse(self, text: str) -> bytes:
        try:
            return base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise ValueError(str(exc)) from exc

    def _format(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")

    def _coerce(self, value: Any) -> bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise TypeMismatchError(f"base64Binary expects bytes, got {type(value).__name__}")
        return bytes(value)


class _TemporalType(PrimitiveType[T]):
    """A date-like primitive that remembers the precision it was stated with."""

    def __init__(self, value: T | None = None) -> None:
        self.precision: TemporalPrecision | None = None
        super().__init__(value)

    def _comparable(self) -> Any:
        return (self._value, self.precision if self._value is not None else None)


@register
class DateType(_TemporalType[dt.date]):
    type_name = "date"

    _PATTERN = re.compile(r"(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?")

    def _parse(self, text: str) -> dt.date:
        value, precision = _parse_date(self._PATTERN, text)
        self.precision = precision
        return value

    def _format(self, value: dt.date) -> str:
        return _format_date(value, self.precision or TemporalPrecision.DAY)

    def _coerce(self, value: Any) -> dt.date:
        if isinstance(value, dt.datetime) or not isinstance(value, dt.date):
            raise TypeMismatchError(f"date expects a datetime.date, got {type(value).__name__}")
        self.precision = TemporalPrecision.DAY
        return value


@register
class DateTimeType(_TemporalType[dt.datetime]):
    type_name = "dateTime"

    _PARTIAL = re.compile(r"(\d{4})(?:-(\d{2})(?:-(\d{2}))?)?")
    _FULL = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})")

    def _parse(self, text: str) -> dt.datetime:
        if self._FULL.fullmatch(text):
            self.precision = TemporalPrecision.SECOND
            return dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
        value, precision = _parse_date(self._PARTIAL, text)
        self.precision = precision
        return dt.datetime(value.year, value.month, value.day)

    def _format(self, value: dt.datetime) -> str:
        precision = self.precision or TemporalPrecision.SECOND
        if precision is TemporalPrecision.SECOND:
            text = value.isoformat()
            return text[:-6] + "Z" if text.endswith("+00:00") else text
        return _format_date(value.date(), precision)

    def _coerce(self, value: Any) -> dt.datetime:
        if not isinstance(value, dt.datetime):
            raise TypeMismatchError(f"dateTime expects a datetime.datetime, got {type(value).__name__}")
        self.precision = TemporalPrecision.SECOND
        return value


@register
class TimeType(PrimitiveType[dt.time]):
    type_name = "time"

    _PATTERN = re.compile(r"([01]\d|2[0-3]):[0-5]\d:([0-5]\d|60)(\.\d+)?")

    def _parse(self, text: str) -> dt.time:
        if not self._PATTERN.fullmatch(text):
            raise ValueError(f"not a time: {text!r}")
        return dt.time.fromisoformat(text)

    def _format(self, value: dt.time) -> str:
        return value.isoformat()

    def _coerce(self, value: Any) -> dt.time:
        if not isinstance(value, dt.time):
            raise TypeMismatchError(f"time expects a datetime.time, got {type(value).__name__}")
        return value


# ################
# Implementation
# ################


def _parse_date(pattern: re.Pattern[str], text: str) -> tuple[dt.date, TemporalPrecision]:
    match = pattern.fullmatch(text)
    if match is None:
        raise ValueError(f"not a date: {text!r}")
    year, month, day = match.groups()
    precision = TemporalPrecision.DAY if day else TemporalPrecision.MONTH if month else TemporalPrecision.YEAR
    return dt.date(int(year), int(month or 1), int(day or 1)), precision


def _format_date(value: dt.date, precision: TemporalPrecision) -> str:
    if precision is TemporalPrecision.YEAR:
        return f"{value.year:04d}"
    if precision is TemporalPrecision.MONTH:
        return f"{value.year:04d}-{value.month:02d}"
    return value.isoformat()

