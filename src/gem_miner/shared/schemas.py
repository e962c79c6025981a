"""
Schemas Module - Pydantic data models for the application.
==========================================================

Defines all data contracts used across the application:
- Source records (evaluation summaries, catalog entries, assessment signals)
- Merged and ranked course records returned to the conversational layer
- Query and filter models
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

NO_MEETING_TIME = "No meeting time listed"

_TRUE_WORDS = {"yes", "y", "true", "1"}
_FALSE_WORDS = {"no", "n", "false", "0", "none"}


def coerce_exam_flag(value: Any) -> Optional[bool]:
    """Map booleans and yes/no text to a tri-state flag; anything else is unknown."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class Provenance(str, Enum):
    """Where a merged record's rating and workload came from."""

    EVALUATION = "evaluation"
    CATALOG_ONLY = "catalog_only"
    DEFAULTS = "defaults"


# ─────────────────────────────────────────────────────────────────────────────
# Source Records
# ─────────────────────────────────────────────────────────────────────────────


class MeetingTime(BaseModel):
    """
    Parsed meeting time.

    An unscheduled meeting is a real value (``raw`` holds the sentinel text),
    so "known to have no meeting" is never confused with "not parsed".
    """

    weekdays: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    raw: str = NO_MEETING_TIME

    @classmethod
    def unscheduled(cls) -> "MeetingTime":
        return cls()

    @property
    def is_scheduled(self) -> bool:
        return bool(self.weekdays and self.start_time and self.end_time)


class EvaluationRecord(BaseModel):
    """One historical evaluation summary (Q-Report row) per course offering."""

    course_id: str = Field(..., min_length=1, description="Source course code, may carry a section suffix")
    title: str = Field(default="", description="Course title")
    rating: Optional[float] = Field(default=None, description="Mean course rating (0-5)")
    workload_hours: Optional[float] = Field(default=None, ge=0, description="Mean weekly workload hours")
    rec_score: Optional[float] = Field(default=None, description="Mean recommendation score")
    sentiment_score: Optional[float] = Field(default=None, description="Mean comment sentiment")
    gem_probability: Optional[float] = Field(default=None, description="Mean gem probability")
    best_comment: Optional[str] = Field(default=None, description="Representative gem comment")
    response_count: Optional[int] = Field(default=None, description="Number of respondents")
    evaluation_link: Optional[str] = Field(default=None, description="Link to the full report")

    # Optional catalog-style columns sometimes joined into the export
    description: Optional[str] = None
    distribution_tag: Optional[str] = Field(default=None, description="General-education tag")
    weekdays: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class CatalogEntry(BaseModel):
    """One current-term course offering from the academic-year catalog."""

    course_id: str = Field(..., min_length=1, description="Subject plus course number")
    subject: str = ""
    course_number: str = ""
    title: str = ""
    department: str = ""
    term: str = ""
    credits: str = ""
    weekdays: str = ""
    start_time: str = ""
    end_time: str = ""
    instructors: str = ""
    distribution: str = ""
    requirements: str = ""
    description: str = ""
    meeting: MeetingTime = Field(default_factory=MeetingTime.unscheduled)
    final_exam: Optional[bool] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("final_exam", mode="before")
    @classmethod
    def parse_final_exam(cls, v: Any) -> Optional[bool]:
        return coerce_exam_flag(v)


class AssessmentSignal(BaseModel):
    """Supplementary assessment-load signal for one course."""

    assessment_lightness: Optional[float] = Field(default=None, alias="assessmentLightness")
    final_exam: Optional[bool] = Field(default=None, alias="finalExam")

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("final_exam", mode="before")
    @classmethod
    def parse_final_exam(cls, v: Any) -> Optional[bool]:
        return coerce_exam_flag(v)


# ─────────────────────────────────────────────────────────────────────────────
# Merged / Ranked Records
# ─────────────────────────────────────────────────────────────────────────────


class MergedCourse(BaseModel):
    """
    Unified course record returned to the conversational layer.

    Rating and workload are either both real (evaluation provenance) or both
    synthetic defaults; catalog-only records carry neither.
    """

    course_id: str = Field(..., description="Canonical course identifier")
    title: str = "Unknown Title"
    department: Optional[str] = None
    subject: Optional[str] = None

    # Evaluation-sourced
    rating: Optional[float] = None
    workload_hours: Optional[float] = None
    sentiment_score: Optional[float] = None
    rec_score: Optional[float] = None
    gem_probability: Optional[float] = None
    best_comment: Optional[str] = None
    response_count: Optional[int] = None
    evaluation_link: Optional[str] = None

    # Assessment signals
    assessment_lightness: Optional[float] = None
    final_exam: Optional[bool] = None

    # Catalog-sourced
    weekdays: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    instructors: Optional[str] = None
    requirements: Optional[str] = None
    gen_ed: Optional[str] = None
    term: Optional[str] = None
    description: Optional[str] = None
    catalog_meeting: Optional[str] = Field(default=None, description="Raw catalog meeting text")

    gen_ed_category: Optional[str] = None
    provenance: Provenance = Provenance.EVALUATION

    @computed_field
    @property
    def meeting_time(self) -> Optional[str]:
        """Display meeting time, e.g. ``Mon/Wed 10:30 AM-11:45 AM``."""
        if self.weekdays and self.start_time and self.end_time:
            return f"{self.weekdays} {self.start_time}-{self.end_time}"
        return self.catalog_meeting

    @computed_field
    @property
    def has_evaluation_data(self) -> bool:
        return self.provenance == Provenance.EVALUATION

    @computed_field
    @property
    def using_defaults(self) -> bool:
        return self.provenance == Provenance.DEFAULTS


class RankedCourse(MergedCourse):
    """A merged course with its GemScore and logistics fit."""

    score: int = Field(..., ge=0, le=100, description="GemScore (0-100)")
    logistics_fit: int = Field(default=1, ge=0, le=1)


# ─────────────────────────────────────────────────────────────────────────────
# Query Models
# ─────────────────────────────────────────────────────────────────────────────


class _QueryModel(BaseModel):
    """Query option models accept snake_case or camelCase keys and reject unknown ones."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class EvaluationFilters(_QueryModel):
    """Pre-filters applied to evaluation records before the merge."""

    department: Optional[str] = None
    title_search: Optional[str] = None
    min_rating: Optional[float] = None
    max_hrs_per_week: Optional[float] = None
    min_gem_prob: Optional[float] = None


class GemQuery(_QueryModel):
    """Options for ``find_gems``."""

    filters: EvaluationFilters = Field(default_factory=EvaluationFilters)
    max_hrs_per_week: Optional[float] = None
    no_final: bool = False
    department: Optional[str] = None
    course_code: Optional[str] = None
    gen_ed_category: Optional[str] = None
    preferred_times: list[str] = Field(default_factory=list)


class CatalogFilters(_QueryModel):
    """Options for catalog-only listings."""

    term: Optional[str] = None
    subject: Optional[str] = None
    weekdays: Optional[str] = None
    course_code: Optional[str] = None
