# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""QuestionnaireResponse: a structured set of questions and their answers.

The questions are ordered and grouped into coherent subsets, corresponding to
the structure of the grouping of the questionnaire being responded to. Items
nest recursively, both directly and beneath individual answers.
"""

from __future__ import annotations

from enum import Enum
from typing import cast

from fhirmodel.model.binding import CodeDefinition, EnumBinding
from fhirmodel.model.choice import ChoiceSlot, ChoiceVariant
from fhirmodel.model.composite import BACKBONE_CATALOG, BackboneElement, ElementSlot, ListSlot, PrimitiveSlot
from fhirmodel.model.datatypes import Attachment, Coding, Identifier, Quantity, Reference
from fhirmodel.model.primitives import (
    BooleanType,
    DateTimeType,
    DateType,
    DecimalType,
    IntegerType,
    StringType,
    TimeType,
    UriType,
)
from fhirmodel.model.registry import register
from fhirmodel.model.resource import RESOURCE_CATALOG, Resource
from fhirmodel.model.types import (
    BackboneTypeRef,
    CanonicalTypeRef,
    ChoiceTypeRef,
    ComplexTypeRef,
    PrimitiveTypeRef,
    PropertyDef,
    ReferenceTypeRef,
)

# ###############
# Public Interface
# ###############


class QuestionnaireResponseStatus(Enum):
    """Lifecycle status of the questionnaire response."""

    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    AMENDED = "amended"
    ENTERED_IN_ERROR = "entered-in-error"
    STOPPED = "stopped"


STATUS_BINDING = EnumBinding(
    "QuestionnaireResponseStatus",
    QuestionnaireResponseStatus,
    system="http://hl7.org/fhir/questionnaire-answers-status",
    definitions={
        QuestionnaireResponseStatus.IN_PROGRESS: CodeDefinition(
            "In Progress",
            "This QuestionnaireResponse has been partially filled out with answers but changes or additions "
            "are still expected to be made to it.",
        ),
        QuestionnaireResponseStatus.COMPLETED: CodeDefinition(
            "Completed",
            "This QuestionnaireResponse has been filled out with answers and the current content is regarded "
            "as definitive.",
        ),
        QuestionnaireResponseStatus.AMENDED: CodeDefinition(
            "Amended",
            "This QuestionnaireResponse has been filled out with answers, then marked as complete, yet changes "
            "or additions have been made to it afterwards.",
        ),
        QuestionnaireResponseStatus.ENTERED_IN_ERROR: CodeDefinition(
            "Entered in Error",
            "This QuestionnaireResponse was entered in error and voided.",
        ),
        QuestionnaireResponseStatus.STOPPED: CodeDefinition(
            "Stopped",
            "This QuestionnaireResponse has been partially filled out with answers but has been abandoned. "
            "No subsequent changes can be made.",
        ),
    },
    value_set="http://hl7.org/fhir/ValueSet/questionnaire-answers-status",
)

ITEM_PATH = "QuestionnaireResponse.item"
ANSWER_PATH = "QuestionnaireResponse.item.answer"

# Participants that may receive or provide the answers.
_AUTHOR_TARGETS = ("Device", "Practitioner", "PractitionerRole", "Patient", "RelatedPerson", "Organization")
_SOURCE_TARGETS = ("Device", "Organization", "Patient", "Practitioner", "PractitionerRole", "RelatedPerson")


class AnswerField(Enum):
    VALUE = "value"
    ITEM = "item"


class ItemField(Enum):
    LINK_ID = "linkId"
    DEFINITION = "definition"
    TEXT = "text"
    ANSWER = "answer"
    ITEM = "item"


class ResponseField(Enum):
    IDENTIFIER = "identifier"
    BASED_ON = "basedOn"
    PART_OF = "partOf"
    QUESTIONNAIRE = "questionnaire"
    STATUS = "status"
    SUBJECT = "subject"
    ENCOUNTER = "encounter"
    AUTHORED = "authored"
    AUTHOR = "author"
    SOURCE = "source"
    ITEM = "item"


ANSWER_CATALOG = BACKBONE_CATALOG.extend(
    ANSWER_PATH,
    PropertyDef(
        identity=AnswerField.VALUE,
        name="value",
        type=ChoiceTypeRef(
            variants=(
                PrimitiveTypeRef(code="boolean"),
                PrimitiveTypeRef(code="decimal"),
                PrimitiveTypeRef(code="integer"),
                PrimitiveTypeRef(code="date"),
                PrimitiveTypeRef(code="dateTime"),
                PrimitiveTypeRef(code="time"),
                PrimitiveTypeRef(code="string"),
                PrimitiveTypeRef(code="uri"),
                ComplexTypeRef(code="Attachment"),
                ComplexTypeRef(code="Coding"),
                ComplexTypeRef(code="Quantity"),
                ReferenceTypeRef(),
            )
        ),
        min=1,
        short="Single-valued answer to the question",
        definition="The answer (or one of the answers) provided by the respondent to the question.",
    ),
    PropertyDef(
        identity=AnswerField.ITEM,
        name="item",
        type=BackboneTypeRef(path=ITEM_PATH),
        max=None,
        short="Child items of question",
        definition="Nested groups and/or questions found within this particular answer.",
    ),
)

ITEM_CATALOG = BACKBONE_CATALOG.extend(
    ITEM_PATH,
    PropertyDef(
        identity=ItemField.LINK_ID,
        name="linkId",
        type=PrimitiveTypeRef(code="string"),
        min=1,
        short="Pointer to specific item from Questionnaire",
        definition="The item from the Questionnaire that corresponds to this item "
        "in the QuestionnaireResponse resource.",
    ),
    PropertyDef(
        identity=ItemField.DEFINITION,
        name="definition",
        type=PrimitiveTypeRef(code="uri"),
        short="ElementDefinition - details for the item",
        definition="A reference to an ElementDefinition that provides the details for the item.",
    ),
    PropertyDef(
        identity=ItemField.TEXT,
        name="text",
        type=PrimitiveTypeRef(code="string"),
        short="Name for group or question text",
        definition="Text that is displayed above the contents of the group "
        "or as the text of the question being answered.",
    ),
    PropertyDef(
        identity=ItemField.ANSWER,
        name="answer",
        type=BackboneTypeRef(path=ANSWER_PATH),
        max=None,
        short="The response(s) to the question",
        definition="The respondent's answer(s) to the question.",
    ),
    PropertyDef(
        identity=ItemField.ITEM,
        name="item",
        type=BackboneTypeRef(path=ITEM_PATH),
        max=None,
        short="Child items of group item",
        definition="Sub-questions, sub-groups or display items nested beneath a group.",
    ),
)

RESPONSE_CATALOG = RESOURCE_CATALOG.extend(
    "QuestionnaireResponse",
    PropertyDef(
        identity=ResponseField.IDENTIFIER,
        name="identifier",
        type=ComplexTypeRef(code="Identifier"),
        max=None,
        summary=True,
        short="Unique id for this set of answers",
        definition="A business identifier assigned to a particular completed (or partially completed) questionnaire.",
    ),
    PropertyDef(
        identity=ResponseField.BASED_ON,
        name="basedOn",
        type=ReferenceTypeRef(targets=("CarePlan", "ServiceRequest")),
        max=None,
        summary=True,
        short="Request fulfilled by this QuestionnaireResponse",
        definition="The order, proposal or plan that is fulfilled in whole or in part by this QuestionnaireResponse.",
    ),
    PropertyDef(
        identity=ResponseField.PART_OF,
        name="partOf",
        type=ReferenceTypeRef(targets=("Observation", "Procedure")),
        max=None,
        summary=True,
        short="Part of this action",
        definition="A procedure or observation that this questionnaire was performed as part of the execution of.",
    ),
    PropertyDef(
        identity=ResponseField.QUESTIONNAIRE,
        name="questionnaire",
        type=CanonicalTypeRef(targets=("Questionnaire",)),
        summary=True,
        short="Form being answered",
        definition="The Questionnaire that defines and organizes the questions for which answers are being provided.",
    ),
    PropertyDef(
        identity=ResponseField.STATUS,
        name="status",
        type=PrimitiveTypeRef(code="code"),
        min=1,
        binding=STATUS_BINDING,
        modifier=True,
        summary=True,
        short="in-progress | completed | amended | entered-in-error | stopped",
        definition="The position of the questionnaire response within its overall lifecycle.",
    ),
    PropertyDef(
        identity=ResponseField.SUBJECT,
        name="subject",
        type=ReferenceTypeRef(),
        summary=True,
        short="The subject of the questions",
        definition="The subject of the questionnaire response. This is who/what the answers apply to.",
    ),
    PropertyDef(
        identity=ResponseField.ENCOUNTER,
        name="encounter",
        type=ReferenceTypeRef(targets=("Encounter",)),
        summary=True,
        short="Encounter created as part of",
        definition="The Encounter during which this questionnaire response was created.",
    ),
    PropertyDef(
        identity=ResponseField.AUTHORED,
        name="authored",
        type=PrimitiveTypeRef(code="dateTime"),
        summary=True,
        short="Date the answers were gathered",
        definition="The date and/or time that this questionnaire response was last modified by the user.",
    ),
    PropertyDef(
        identity=ResponseField.AUTHOR,
        name="author",
        type=ReferenceTypeRef(targets=_AUTHOR_TARGETS),
        summary=True,
        short="The individual or device that received and recorded the answers",
        definition="The individual or device that received the answers to the questions "
        "and recorded them in the system.",
    ),
    PropertyDef(
        identity=ResponseField.SOURCE,
        name="source",
        type=ReferenceTypeRef(targets=_SOURCE_TARGETS),
        summary=True,
        short="The individual or device that answered the questions",
        definition="The individual or device that answered the questions about the subject.",
    ),
    PropertyDef(
        identity=ResponseField.ITEM,
        name="item",
        type=BackboneTypeRef(path=ITEM_PATH),
        max=None,
        short="Groups and questions",
        definition="A group or question item from the original questionnaire for which answers are provided.",
    ),
)


@register
class QuestionnaireResponseItemAnswer(BackboneElement):
    """One answer to a question, optionally carrying nested items."""

    type_name = ANSWER_PATH
    catalog = ANSWER_CATALOG

    value = ChoiceSlot(AnswerField.VALUE)
    value_boolean = ChoiceVariant(AnswerField.VALUE, BooleanType)
    value_decimal = ChoiceVariant(AnswerField.VALUE, DecimalType)
    value_integer = ChoiceVariant(AnswerField.VALUE, IntegerType)
    value_date = ChoiceVariant(AnswerField.VALUE, DateType)
    value_date_time = ChoiceVariant(AnswerField.VALUE, DateTimeType)
    value_time = ChoiceVariant(AnswerField.VALUE, TimeType)
    value_string = ChoiceVariant(AnswerField.VALUE, StringType)
    value_uri = ChoiceVariant(AnswerField.VALUE, UriType)
    value_attachment = ChoiceVariant(AnswerField.VALUE, Attachment)
    value_coding = ChoiceVariant(AnswerField.VALUE, Coding)
    value_quantity = ChoiceVariant(AnswerField.VALUE, Quantity)
    value_reference = ChoiceVariant(AnswerField.VALUE, Reference)
    item = ListSlot(AnswerField.ITEM)

    def add_item(self) -> QuestionnaireResponseItem:
        return cast(QuestionnaireResponseItem, self.add(AnswerField.ITEM))


@register
class QuestionnaireResponseItem(BackboneElement):
    """A group or question item from the questionnaire, with its answers."""

    type_name = ITEM_PATH
    catalog = ITEM_CATALOG

    link_id = PrimitiveSlot(ItemField.LINK_ID)
    definition = PrimitiveSlot(ItemField.DEFINITION)
    text = PrimitiveSlot(ItemField.TEXT)
    answer = ListSlot(ItemField.ANSWER)
    item = ListSlot(ItemField.ITEM)

    def add_answer(self) -> QuestionnaireResponseItemAnswer:
        return cast(QuestionnaireResponseItemAnswer, self.add(ItemField.ANSWER))

    def add_item(self) -> QuestionnaireResponseItem:
        return cast(QuestionnaireResponseItem, self.add(ItemField.ITEM))

    def first_answer(self) -> QuestionnaireResponseItemAnswer:
        """Return the first answer, adding an empty one when there is none."""
        return cast(QuestionnaireResponseItemAnswer, self.first(ItemField.ANSWER))


@register
class QuestionnaireResponse(Resource):
    """A structured set of questions and their answers."""

    resource_type = "QuestionnaireResponse"
    catalog = RESPONSE_CATALOG

    identifier = ListSlot(ResponseField.IDENTIFIER)
    based_on = ListSlot(ResponseField.BASED_ON)
    part_of = ListSlot(ResponseField.PART_OF)
    questionnaire = PrimitiveSlot(ResponseField.QUESTIONNAIRE)
    status = PrimitiveSlot(ResponseField.STATUS)
    subject = ElementSlot(ResponseField.SUBJECT)
    encounter = ElementSlot(ResponseField.ENCOUNTER)
    authored = PrimitiveSlot(ResponseField.AUTHORED)
    author = ElementSlot(ResponseField.AUTHOR)
    source = ElementSlot(ResponseField.SOURCE)
    item = ListSlot(ResponseField.ITEM)

    def add_identifier(self) -> Identifier:
        return cast(Identifier, self.add(ResponseField.IDENTIFIER))

    def add_based_on(self) -> Reference:
        return cast(Reference, self.add(ResponseField.BASED_ON))

    def add_part_of(self) -> Reference:
        return cast(Reference, self.add(ResponseField.PART_OF))

    def add_item(self) -> QuestionnaireResponseItem:
        """Append a new top-level item and return it for population."""
        return cast(QuestionnaireResponseItem, self.add(ResponseField.ITEM))

    def first_item(self) -> QuestionnaireResponseItem:
        return cast(QuestionnaireResponseItem, self.first(ResponseField.ITEM))
