# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the QuestionnaireResponse record type built on the generic model."""

import datetime as dt
from decimal import Decimal

import pytest

from fhirmodel.errors import TypeMismatchError, UnknownCodeError
from fhirmodel.model import Coding, Enumeration, Identifier, Reference, StringType, registry
from fhirmodel.model.binding import CodeState
from fhirmodel.model.types import BackboneTypeRef, CanonicalTypeRef, ReferenceTypeRef
from fhirmodel.resources import (
    STATUS_BINDING,
    AnswerField,
    ItemField,
    QuestionnaireResponse,
    QuestionnaireResponseItem,
    QuestionnaireResponseItemAnswer,
    QuestionnaireResponseStatus,
    ResponseField,
)

# ###############
# Helpers
# ###############


def _build_response() -> QuestionnaireResponse:
    qr = QuestionnaireResponse()
    qr.id = "qr-1"
    qr.status = QuestionnaireResponseStatus.COMPLETED
    qr.questionnaire = "http://example.org/Questionnaire/intake|2.0"
    qr.authored = dt.datetime(2024, 5, 1, 10, 30, tzinfo=dt.timezone.utc)
    qr.subject = Reference(reference="Patient/p1")

    first = qr.add_item()
    first.link_id = "a"
    first.text = "Body temperature"
    first.add_answer().value_decimal = Decimal("3.14")

    second = qr.add_item()
    second.link_id = "b"
    second.add_answer().value_coding = Coding(system="http://example.org/colours", code="red")
    return qr


# ###############
# Record Behaviour
# ###############


class TestQuestionnaireResponse:
    def test_registered_as_record_type(self) -> None:
        assert registry.resource_class("QuestionnaireResponse") is QuestionnaireResponse
        assert QuestionnaireResponse.type_name == "QuestionnaireResponse"

    def test_backbone_types_are_registered_under_their_path(self) -> None:
        assert registry.type_for("QuestionnaireResponse.item") is QuestionnaireResponseItem
        assert registry.type_for("QuestionnaireResponse.item.answer") is QuestionnaireResponseItemAnswer
        with pytest.raises(LookupError, match="not a resource type"):
            registry.resource_class("QuestionnaireResponse.item")

    def test_end_to_end_population(self) -> None:
        qr = _build_response()
        assert qr.status is QuestionnaireResponseStatus.COMPLETED
        assert [item.link_id for item in qr.item] == ["a", "b"]
        assert qr.item[0].answer[0].value_decimal.value == Decimal("3.14")
        assert qr.item[1].first_answer().value_coding.code == "red"
        with pytest.raises(TypeMismatchError, match="the type string was expected, but decimal was encountered"):
            qr.item[0].answer[0].value_string  # noqa: B018

    def test_status_is_stored_as_enumeration(self) -> None:
        qr = _build_response()
        (stored,) = qr.get_field(ResponseField.STATUS)
        assert isinstance(stored, Enumeration)
        assert stored.binding is STATUS_BINDING
        assert stored.wire_value == "completed"
        assert stored.display == "Completed"
        assert stored.system == "http://hl7.org/fhir/questionnaire-answers-status"

    def test_status_from_code(self) -> None:
        qr = QuestionnaireResponse(status="entered-in-error")
        assert qr.status is QuestionnaireResponseStatus.ENTERED_IN_ERROR

    def test_unknown_status_code_strict(self) -> None:
        with pytest.raises(UnknownCodeError, match="Unknown QuestionnaireResponseStatus code 'finished'"):
            QuestionnaireResponse(status="finished")

    def test_status_binding_values_in_declaration_order(self) -> None:
        assert [STATUS_BINDING.encode(v) for v in STATUS_BINDING.values()] == [
            "in-progress",
            "completed",
            "amended",
            "entered-in-error",
            "stopped",
        ]
        assert STATUS_BINDING.decode("stopped") == (CodeState.KNOWN, QuestionnaireResponseStatus.STOPPED)

    def test_questionnaire_canonical_keeps_version(self) -> None:
        qr = _build_response()
        (canonical,) = qr.get_field(ResponseField.QUESTIONNAIRE)
        assert canonical.type_name == "canonical"
        assert canonical.version == "2.0"

    def test_copy_is_independent(self) -> None:
        qr = _build_response()
        clone = qr.copy()
        assert clone.deep_equals(qr)
        clone.item[0].answer[0].value_decimal = Decimal("2.72")
        clone.item[1].link_id = "c"
        assert qr.item[0].answer[0].value_decimal.value == Decimal("3.14")
        assert qr.item[1].link_id == "b"
        assert not clone.deep_equals(qr)

    def test_nested_items_beneath_answers(self) -> None:
        qr = QuestionnaireResponse()
        answer = qr.add_item().add_answer()
        answer.value_boolean = True
        nested = answer.add_item()
        nested.link_id = "a.1"
        assert qr.item[0].answer[0].item[0].link_id == "a.1"
        assert isinstance(nested, QuestionnaireResponseItem)

    def test_identifiers_and_based_on(self) -> None:
        qr = QuestionnaireResponse()
        identifier = qr.add_identifier()
        identifier.system = "urn:ietf:rfc:3986"
        identifier.value = "urn:uuid:1234"
        qr.add_based_on().reference = "CarePlan/cp1"
        qr.add_part_of().reference = "Procedure/pr1"
        assert isinstance(qr.identifier[0], Identifier)
        assert qr.based_on[0].reference_type() == "CarePlan"
        assert qr.part_of[0].reference == "Procedure/pr1"

    def test_first_item_adds_when_absent(self) -> None:
        qr = QuestionnaireResponse()
        item = qr.first_item()
        assert qr.item == (item,)
        assert qr.first_item() is item

    def test_repr(self) -> None:
        assert repr(_build_response()) == "QuestionnaireResponse(id='qr-1')"


# ###############
# Catalog
# ###############


class TestCatalog:
    def test_field_order(self) -> None:
        names = [child.name for child in QuestionnaireResponse().list_children()]
        assert names == [
            "id",
            "implicitRules",
            "language",
            "extension",
            "modifierExtension",
            "identifier",
            "basedOn",
            "partOf",
            "questionnaire",
            "status",
            "subject",
            "encounter",
            "authored",
            "author",
            "source",
            "item",
        ]

    def test_cardinalities(self) -> None:
        catalog = QuestionnaireResponse.catalog
        status = catalog.lookup(ResponseField.STATUS)
        assert (status.min, status.max) == (1, 1)
        assert status.binding is STATUS_BINDING
        assert catalog.lookup(ResponseField.ITEM).max is None
        link_id = QuestionnaireResponseItem.catalog.lookup(ItemField.LINK_ID)
        assert (link_id.min, link_id.max) == (1, 1)
        value = QuestionnaireResponseItemAnswer.catalog.lookup(AnswerField.VALUE)
        assert value.min == 1 and value.is_choice

    def test_declared_types(self) -> None:
        catalog = QuestionnaireResponse.catalog
        assert catalog.lookup(ResponseField.QUESTIONNAIRE).type == CanonicalTypeRef(targets=("Questionnaire",))
        assert catalog.lookup(ResponseField.ENCOUNTER).type == ReferenceTypeRef(targets=("Encounter",))
        assert catalog.lookup(ResponseField.ITEM).type == BackboneTypeRef(path="QuestionnaireResponse.item")
        assert QuestionnaireResponse().allowed_wire_types(ResponseField.ITEM) == ("@QuestionnaireResponse.item",)


# ###############
# References
# ###############


class TestReference:
    def test_for_resource(self) -> None:
        qr = _build_response()
        ref = Reference.for_resource(qr)
        assert ref.reference == "QuestionnaireResponse/qr-1"
        assert ref.resolved is qr

    def test_for_resource_without_id(self) -> None:
        ref = Reference.for_resource(QuestionnaireResponse())
        assert ref.reference is None
        assert ref.is_empty()

    def test_resolved_target_survives_copy(self) -> None:
        qr = _build_response()
        clone = Reference.for_resource(qr).copy()
        assert clone.resolved is qr

    @pytest.mark.parametrize(
        ("literal", "expected"),
        [
            ("Patient/p1", "Patient"),
            ("http://example.org/fhir/Patient/p1", "Patient"),
            ("Patient/p1/_history/2", "Patient"),
            ("#contained", None),
            ("p1", None),
        ],
    )
    def test_reference_type_from_literal(self, literal, expected) -> None:
        assert Reference(reference=literal).reference_type() == expected

    def test_explicit_type_wins(self) -> None:
        ref = Reference(reference="urn:uuid:1234", type="Patient")
        assert ref.reference_type() == "Patient"

    def test_display_is_plain_string(self) -> None:
        ref = Reference(display="Jane Doe")
        (stored,) = ref.get_field(next(c.identity for c in ref.list_children() if c.name == "display"))
        assert isinstance(stored, StringType)
