"""
Course definition schemas.

Pydantic models for the JSON document a course is authored as. Field aliases
follow the authoring format (`_id`, `_parentId`, `_isQuestionType`, ...), so
an exported course loads unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from src.adaptive.models import AdaptiveContentConfig


class _Authored(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CompletionCriteriaConfig(_Authored):
    require_content_completed: bool = Field(True, alias="_requireContentCompleted")
    require_assessment_completed: bool = Field(False, alias="_requireAssessmentCompleted")


class CourseDefinition(_Authored):
    id: str = Field(..., alias="_id", min_length=1)
    title: str = ""
    adaptive_content: AdaptiveContentConfig | None = Field(None, alias="_adaptiveContent")
    completion_criteria: CompletionCriteriaConfig = Field(
        default_factory=CompletionCriteriaConfig, alias="_completionCriteria"
    )


class ContentObjectDefinition(_Authored):
    id: str = Field(..., alias="_id", min_length=1)
    parent_id: str = Field(..., alias="_parentId", min_length=1)
    title: str = ""
    is_available: bool = Field(True, alias="_isAvailable")
    is_optional: bool = Field(False, alias="_isOptional")
    is_complete: bool = Field(False, alias="_isComplete")
    is_locked: bool = Field(False, alias="_isLocked")
    classes: str = Field("", alias="_classes")


class BlockAdaptiveContentDefinition(_Authored):
    related_topics: list[str] = Field(default_factory=list, alias="_relatedTopics")


class BlockDefinition(ContentObjectDefinition):
    adaptive_content: BlockAdaptiveContentDefinition | None = Field(None, alias="_adaptiveContent")


class ComponentDefinition(ContentObjectDefinition):
    is_question_type: bool = Field(False, alias="_isQuestionType")
    is_correct: bool | None = Field(None, alias="_isCorrect")
    is_interaction_complete: bool = Field(False, alias="_isInteractionComplete")


class AssessmentDefinition(_Authored):
    id: str = Field(..., alias="_id", min_length=1)
    page_id: str = Field(..., alias="_pageId", min_length=1)
    is_percentage_based: bool = Field(True, alias="_isPercentageBased")
    question_ids: list[str] = Field(default_factory=list, alias="_questionIds")


class CourseDocument(_Authored):
    """The whole course file."""

    course: CourseDefinition
    content_objects: list[ContentObjectDefinition] = Field(
        default_factory=list, alias="contentObjects"
    )
    blocks: list[BlockDefinition] = Field(default_factory=list)
    components: list[ComponentDefinition] = Field(default_factory=list)
    assessments: list[AssessmentDefinition] = Field(default_factory=list)


class DiagnosticResultDocument(_Authored):
    """A recorded diagnostic attempt, replayed by the CLI."""

    assessment_id: str = Field(..., alias="assessmentId")
    is_pass: bool = Field(..., alias="isPass")
    score: float = 0.0
    max_score: float = Field(0.0, alias="maxScore")
    is_percentage_based: bool = Field(True, alias="isPercentageBased")
    score_as_percent: float = Field(0.0, alias="scoreAsPercent")
    questions: dict[str, bool] = Field(default_factory=dict)
