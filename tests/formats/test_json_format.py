# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for reading and writing records in the JSON format."""

import datetime as dt
import json
from decimal import Decimal

import pytest

from fhirmodel.config import ModelConfig
from fhirmodel.errors import StructuralParseError, UnknownCodeError
from fhirmodel.formats import compose_resource, parse_resource, resource_from_dict, resource_to_dict
from fhirmodel.model import Coding, DecimalType, Enumeration, StringType
from fhirmodel.model.binding import CodeState
from fhirmodel.resources import QuestionnaireResponse, QuestionnaireResponseStatus, ResponseField

DOC = {
    "resourceType": "QuestionnaireResponse",
    "id": "qr-1",
    "extension": [{"url": "http://example.org/source", "valueString": "kiosk"}],
    "identifier": [{"system": "urn:ietf:rfc:3986", "value": "urn:uuid:1234"}],
    "questionnaire": "http://example.org/Questionnaire/intake",
    "status": "completed",
    "subject": {"reference": "Patient/p1"},
    "authored": "2024-05-01T10:30:00Z",
    "item": [
        {
            "linkId": "a",
            "_linkId": {"extension": [{"url": "http://example.org/note", "valueString": "first"}]},
            "text": "Body temperature",
            "answer": [{"valueDecimal": 3.14}],
        },
        {
            "linkId": "b",
            "answer": [{"valueCoding": {"system": "http://example.org/colours", "code": "red"}}],
        },
    ],
}


def _doc(**overrides) -> str:
    return json.dumps({**DOC, **overrides})


# ###############
# Reading
# ###############


class TestParse:
    def test_parses_record(self) -> None:
        qr = parse_resource(_doc())
        assert isinstance(qr, QuestionnaireResponse)
        assert qr.id == "qr-1"
        assert qr.status is QuestionnaireResponseStatus.COMPLETED
        assert qr.subject.reference == "Patient/p1"
        assert qr.authored == dt.datetime(2024, 5, 1, 10, 30, tzinfo=dt.timezone.utc)
        assert qr.identifier[0].value == "urn:uuid:1234"

    def test_choice_values_take_their_suffixed_type(self) -> None:
        qr = parse_resource(_doc())
        first, second = qr.item
        assert isinstance(first.answer[0].value, DecimalType)
        assert first.answer[0].value_decimal.value == Decimal("3.14")
        assert isinstance(second.answer[0].value, Coding)
        assert second.answer[0].value_coding.code == "red"

    def test_record_extensions(self) -> None:
        qr = parse_resource(_doc())
        ext = qr.get_extension("http://example.org/source")
        assert isinstance(ext.value, StringType)
        assert ext.value.value == "kiosk"

    def test_primitive_extras_are_attached_to_the_value(self) -> None:
        qr = parse_resource(_doc())
        (link_id,) = qr.item[0].get_field(qr.item[0].catalog.resolve("linkId")[0].identity)
        assert link_id.value == "a"
        assert link_id.get_extension("http://example.org/note").value.value == "first"

    def test_extras_without_value(self) -> None:
        doc = _doc(_authored={"id": "a1"})
        doc = json.loads(doc)
        del doc["authored"]
        qr = resource_from_dict(doc)
        (authored,) = qr.get_field(ResponseField.AUTHORED)
        assert authored.value is None
        assert authored.id == "a1"
        assert not authored.is_empty()

    def test_decimal_precision_is_kept(self) -> None:
        text = _doc().replace("3.14", "3.140")
        qr = parse_resource(text)
        assert qr.item[0].answer[0].value_decimal.value == Decimal("3.140")

    def test_invalid_primitive_text_is_kept(self) -> None:
        qr = parse_resource(_doc(authored="yesterday"))
        (authored,) = qr.get_field(ResponseField.AUTHORED)
        assert not authored.is_valid
        assert authored.wire_value == "yesterday"


# ###############
# Read Errors
# ###############


class TestParseErrors:
    def test_invalid_json(self) -> None:
        with pytest.raises(StructuralParseError, match="Invalid JSON"):
            parse_resource("{not json")

    def test_not_an_object(self) -> None:
        with pytest.raises(StructuralParseError, match="must be a JSON object"):
            parse_resource("[]")

    def test_missing_resource_type(self) -> None:
        with pytest.raises(StructuralParseError, match="resourceType"):
            parse_resource(json.dumps({"id": "x"}))

    def test_unknown_resource_type(self) -> None:
        with pytest.raises(StructuralParseError) as exc_info:
            parse_resource(json.dumps({"resourceType": "Patient"}))
        assert exc_info.value.path == "Patient"

    def test_unknown_property_reports_path(self) -> None:
        with pytest.raises(StructuralParseError, match="Unknown property 'colour'") as exc_info:
            parse_resource(_doc(colour="red"))
        assert exc_info.value.path == "QuestionnaireResponse"

    def test_unknown_nested_property_reports_path(self) -> None:
        with pytest.raises(StructuralParseError) as exc_info:
            parse_resource(_doc(item=[{"linkId": "a", "bogus": 1}]))
        assert exc_info.value.path == "QuestionnaireResponse.item[0]"

    def test_choice_without_suffix(self) -> None:
        with pytest.raises(StructuralParseError, match="needs a type suffix") as exc_info:
            parse_resource(_doc(item=[{"linkId": "a", "answer": [{"value": 1}]}]))
        assert exc_info.value.path == "QuestionnaireResponse.item[0].answer[0].value"

    def test_undeclared_choice_suffix(self) -> None:
        with pytest.raises(StructuralParseError, match="Unknown property 'valueCode'"):
            parse_resource(_doc(item=[{"linkId": "a", "answer": [{"valueCode": "x"}]}]))

    def test_wrong_json_type_for_primitive(self) -> None:
        with pytest.raises(StructuralParseError, match="expects a JSON string") as exc_info:
            parse_resource(_doc(status=5))
        assert exc_info.value.path == "QuestionnaireResponse.status"

    def test_repeating_field_requires_array(self) -> None:
        with pytest.raises(StructuralParseError, match="Expected a JSON array"):
            parse_resource(_doc(item={"linkId": "a"}))

    def test_structure_requires_object(self) -> None:
        with pytest.raises(StructuralParseError, match="Expected a JSON object") as exc_info:
            parse_resource(_doc(item=["a"]))
        assert exc_info.value.path == "QuestionnaireResponse.item[0]"

    def test_second_choice_variant_is_rejected(self) -> None:
        answer = {"valueBoolean": True, "valueString": "x"}
        with pytest.raises(StructuralParseError, match="appears more than once") as exc_info:
            parse_resource(_doc(item=[{"linkId": "a", "answer": [answer]}]))
        assert exc_info.value.path == "QuestionnaireResponse.item[0].answer[0].valueString"

    def test_record_id_extras_are_rejected(self) -> None:
        extras = {"extension": [{"url": "http://example.org/ext", "valueString": "x"}]}
        with pytest.raises(StructuralParseError, match="cannot carry") as exc_info:
            parse_resource(_doc(id="qr-1", _id=extras))
        assert exc_info.value.path == "QuestionnaireResponse.id"

    def test_non_finite_decimal_is_rejected(self) -> None:
        text = json.dumps({**DOC, "item": [{"linkId": "a", "answer": [{"valueDecimal": float("nan")}]}]})
        assert "NaN" in text
        with pytest.raises(StructuralParseError) as exc_info:
            parse_resource(text)
        assert exc_info.value.path == "QuestionnaireResponse.item[0].answer[0].valueDecimal"


# ###############
# Enumeration Leniency
# ###############


class TestStatusCodes:
    def test_unknown_code_fails_by_default(self) -> None:
        with pytest.raises(UnknownCodeError) as exc_info:
            parse_resource(_doc(status="finished"))
        assert exc_info.value.code == "finished"
        assert exc_info.value.binding == "QuestionnaireResponseStatus"

    def test_unknown_code_accepted_when_lenient(self) -> None:
        qr = parse_resource(_doc(status="finished"), config=ModelConfig(accept_invalid_enums=True))
        (status,) = qr.get_field(ResponseField.STATUS)
        assert isinstance(status, Enumeration)
        assert status.state is CodeState.UNRECOGNIZED
        assert status.unrecognized_code == "finished"
        assert qr.status is None

    def test_unrecognized_code_is_omitted_on_write(self) -> None:
        qr = parse_resource(_doc(status="finished"), config=ModelConfig(accept_invalid_enums=True))
        assert "status" not in resource_to_dict(qr)

    def test_leniency_is_scoped_to_the_call(self) -> None:
        parse_resource(_doc(status="finished"), config=ModelConfig(accept_invalid_enums=True))
        with pytest.raises(UnknownCodeError):
            parse_resource(_doc(status="finished"))


# ###############
# Writing
# ###############


class TestCompose:
    def test_round_trip(self) -> None:
        composed = compose_resource(parse_resource(_doc()))
        assert json.loads(composed) == DOC

    def test_decimal_digits_survive_a_round_trip(self) -> None:
        text = _doc().replace("3.14", "3.140")
        composed = compose_resource(parse_resource(text))
        assert '"valueDecimal": 3.140' in composed
        assert "\ufdd0" not in composed
        out = resource_to_dict(parse_resource(text))
        assert out["item"][0]["answer"][0]["valueDecimal"] == Decimal("3.140")

    def test_large_decimal_is_written_exactly(self) -> None:
        qr = QuestionnaireResponse()
        item = qr.add_item()
        item.link_id = "a"
        item.add_answer().value_decimal =Decimal("12345678901234567890.000000000001")
        assert '"valueDecimal": 12345678901234567890.000000000001' in compose_resource(qr)

    def test_key_order_follows_catalog(self) -> None:
        out = resource_to_dict(parse_resource(_doc()))
        assert list(out) == [
            "resourceType",
            "id",
            "extension",
            "identifier",
            "questionnaire",
            "status",
            "subject",
            "authored",
            "item",
        ]
        assert list(out["item"][0]) == ["linkId", "_linkId", "text", "answer"]

    def test_empty_content_is_omitted(self) -> None:
        qr = QuestionnaireResponse()
        qr.subject  # noqa: B018
        qr.add_item()
        assert resource_to_dict(qr) == {"resourceType": "QuestionnaireResponse"}

    def test_compose_built_record(self) -> None:
        qr = QuestionnaireResponse(status=QuestionnaireResponseStatus.IN_PROGRESS)
        item = qr.add_item()
        item.link_id = "q1"
        item.add_answer().value_integer = 7
        item.add_answer().value_boolean = False
        assert resource_to_dict(qr) == {
            "resourceType": "QuestionnaireResponse",
            "status": "in-progress",
            "item": [{"linkId": "q1", "answer": [{"valueInteger": 7}, {"valueBoolean": False}]}],
        }

    def test_indent(self) -> None:
        text = compose_resource(QuestionnaireResponse(status="completed"), indent=2)
        assert text == '{\n  "resourceType": "QuestionnaireResponse",\n  "status": "completed"\n}'
