# Copyright 2026 FhirModel Contributors
# SPDX-License-Identifier: Apache-2.0

"""Record types built on the generic object model."""

from fhirmodel.resources.questionnaire_response import (
    STATUS_BINDING,
    AnswerField,
    ItemField,
    QuestionnaireResponse,
    QuestionnaireResponseItem,
    QuestionnaireResponseItemAnswer,
    QuestionnaireResponseStatus,
    ResponseField,
)

__all__ = [
    "QuestionnaireResponse",
    "QuestionnaireResponseItem",
    "QuestionnaireResponseItemAnswer",
    "QuestionnaireResponseStatus",
    "STATUS_BINDING",
    "ResponseField",
    "ItemField",
    "AnswerField",
]
