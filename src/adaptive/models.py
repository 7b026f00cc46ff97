"""
Adaptive Content Models.

Course-level configuration for diagnostic-driven content gating, parsed from
the `_adaptiveContent` object of a course definition, plus the constants the
engine shares with storage and presentation.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Offline storage keys
GATING_STATE_KEY = "adaptiveContent"
SCORE_KEY = "score"
DIAGNOSTIC_OPT_OUT_KEY = "diagnosticOptOut"


class PageStatus(str, Enum):
    """What happens to content the learner has shown mastery of."""

    UNAVAILABLE = "unavailable"  # Hidden from navigation
    OPTIONAL = "optional"  # Visible, not required for completion
    COMPLETE = "complete"  # Visible, already counted as done

    @property
    def marker_class(self) -> str | None:
        """Presentation marker added to gated content (None when hidden)."""
        return {
            PageStatus.UNAVAILABLE: None,
            PageStatus.OPTIONAL: "diag-optional",
            PageStatus.COMPLETE: "diag-complete",
        }[self]

    @property
    def display_name(self) -> str:
        return f"setAs{self.value.capitalize()}"


class AdaptiveContentConfig(BaseModel):
    """Course `_adaptiveContent` settings. Read-only after load."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    is_enabled: bool = Field(False, alias="_isEnabled")
    diagnostic_assessment_id: str = Field("", alias="_diagnosticAssessmentId")
    final_assessment_id: str | None = Field(None, alias="_finalAssessmentId")
    set_page_status_as: PageStatus = Field(PageStatus.UNAVAILABLE, alias="_setPageStatusAs")
    should_submit_score: bool = Field(False, alias="_shouldSubmitScore")

    # Where the opt-in/opt-out choice sends the learner
    opt_in_page_id: str | None = Field(None, alias="_optInPageId")
    opt_out_page_id: str | None = Field(None, alias="_optOutPageId")

    @field_validator("final_assessment_id", "opt_in_page_id", "opt_out_page_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        if isinstance(value, str) and not value.strip():
            return None
        return value
