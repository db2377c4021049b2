# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for enumeration bindings and the coded primitive built on them."""

from enum import Enum

import pytest

from fhirmodel.config import ModelConfig, use_config
from fhirmodel.errors import TypeMismatchError, UnknownCodeError
from fhirmodel.model import CodeDefinition, CodeState, EnumBinding, Enumeration
from fhirmodel.resources import STATUS_BINDING, QuestionnaireResponseStatus

# ###############
# Test Helpers
# ###############


class _Light(Enum):
    RED = "red"
    AMBER = "amber"
    GREEN = "green"


class _Other(Enum):
    RED = "red"


_LIGHT = EnumBinding(
    "TrafficLight",
    _Light,
    system="http://example.org/lights",
    definitions={
        _Light.RED: CodeDefinition("Red", "Stop."),
        _Light.AMBER: CodeDefinition("Amber", "Prepare to stop.", system="http://example.org/amber"),
    },
)


# ###############
# Binding
# ###############


class TestDecode:
    def test_known_code(self) -> None:
        assert _LIGHT.decode("amber") == (CodeState.KNOWN, _Light.AMBER)

    @pytest.mark.parametrize("code", [None, ""])
    def test_missing_code_is_unset(self, code) -> None:
        assert _LIGHT.decode(code) == (CodeState.UNSET, None)

    def test_unknown_code_is_rejected_by_default(self) -> None:
        with pytest.raises(UnknownCodeError) as exc_info:
            _LIGHT.decode("blue")
        assert exc_info.value.code == "blue"
        assert exc_info.value.binding == "TrafficLight"
        assert str(exc_info.value) == "Unknown TrafficLight code 'blue'"

    def test_unknown_code_is_unrecognized_when_lenient(self) -> None:
        assert _LIGHT.decode("blue", lenient=True) == (CodeState.UNRECOGNIZED, None)

    def test_leniency_follows_active_config(self) -> None:
        with use_config(ModelConfig(accept_invalid_enums=True)):
            assert _LIGHT.decode("blue") == (CodeState.UNRECOGNIZED, None)
        with pytest.raises(UnknownCodeError):
            _LIGHT.decode("blue")

    def test_explicit_strict_overrides_lenient_config(self) -> None:
        with use_config(ModelConfig(accept_invalid_enums=True)), pytest.raises(UnknownCodeError):
            _LIGHT.decode("blue", lenient=False)


class TestMetadata:
    def test_encode(self) -> None:
        assert _LIGHT.encode(_Light.GREEN) == "green"
        assert _LIGHT.encode(None) is None

    def test_encode_rejects_foreign_members(self) -> None:
        with pytest.raises(TypeMismatchError):
            _LIGHT.encode(_Other.RED)

    def test_values_in_declaration_order(self) -> None:
        assert _LIGHT.values() == (_Light.RED, _Light.AMBER, _Light.GREEN)

    def test_display_definition_and_system(self) -> None:
        assert _LIGHT.display(_Light.RED) == "Red"
        assert _LIGHT.definition(_Light.RED) == "Stop."
        assert _LIGHT.system(_Light.RED) == "http://example.org/lights"
        assert _LIGHT.system(_Light.AMBER) == "http://example.org/amber"

    def test_undocumented_member_falls_back_to_code(self) -> None:
        assert _LIGHT.display(_Light.GREEN) == "green"
        assert _LIGHT.definition(_Light.GREEN) == ""

    def test_status_binding_metadata(self) -> None:
        status = QuestionnaireResponseStatus.ENTERED_IN_ERROR
        assert STATUS_BINDING.encode(status) == "entered-in-error"
        assert STATUS_BINDING.display(status) == "Entered in Error"
        assert STATUS_BINDING.system(status) == "http://hl7.org/fhir/questionnaire-answers-status"
        assert STATUS_BINDING.definition(status) == "This QuestionnaireResponse was entered in error and voided."

    def test_members_must_carry_string_codes(self) -> None:
        class _Numbered(Enum):
            ONE = 1

        with pytest.raises(ValueError, match="non-empty string code"):
            EnumBinding("Numbered", _Numbered, system="http://example.org/n")


# ###############
# Coded Primitive
# ###############


class TestEnumeration:
    def test_known_value(self) -> None:
        coded = Enumeration(_LIGHT, _Light.RED)
        assert coded.state is CodeState.KNOWN
        assert coded.wire_value == "red"
        assert coded.display == "Red"
        assert coded.type_name == "code"

    def test_wire_value_decodes_through_binding(self) -> None:
        coded = Enumeration(_LIGHT)
        coded.wire_value = "green"
        assert coded.value is _Light.GREEN

    def test_unset(self) -> None:
        coded = Enumeration(_LIGHT)
        assert coded.state is CodeState.UNSET
        assert coded.is_empty()
        assert coded.system is None

    def test_unknown_code_raises_in_strict_mode(self) -> None:
        coded = Enumeration(_LIGHT)
        with pytest.raises(UnknownCodeError):
            coded.wire_value = "blue"

    def test_unrecognized_code_encodes_to_nothing(self) -> None:
        """An unrecognized code is remembered for diagnostics but never written."""
        with use_config(ModelConfig(accept_invalid_enums=True)):
            coded = Enumeration.from_wire_for(_LIGHT, "blue")
        assert coded.state is CodeState.UNRECOGNIZED
        assert coded.unrecognized_code == "blue"
        assert coded.wire_value is None
        assert coded.is_empty()

    def test_assigning_a_value_clears_unrecognized_state(self) -> None:
        with use_config(ModelConfig(accept_invalid_enums=True)):
            coded = Enumeration.from_wire_for(_LIGHT, "blue")
        coded.value = _Light.AMBER
        assert coded.state is CodeState.KNOWN
        assert coded.unrecognized_code is None

    def test_foreign_member_is_rejected(self) -> None:
        with pytest.raises(TypeMismatchError):
            Enumeration(_LIGHT, _Other.RED)

    def test_comparison_and_copy(self) -> None:
        coded = Enumeration(_LIGHT, _Light.RED)
        clone = coded.copy()
        assert clone.deep_equals(coded)
        assert clone.binding is _LIGHT
        clone.value = _Light.GREEN
        assert coded.value is _Light.RED
        assert not clone.shallow_equals(coded)
