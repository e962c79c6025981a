"""
Ranking Module - GemScore computation and ordering.
===================================================

GemScore is an integer in [0, 100] built from three components:

- Rating (10-50 points): higher mean rating scores higher
- Workload (0-40 points): fewer weekly hours score higher
- Comment bonus (0 or 10 points): the best comment calls the course a gem

Courses are ordered by score only. Equal scores keep their input order.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from gem_miner.shared.logging import get_logger
from gem_miner.shared.schemas import MergedCourse, RankedCourse

logger = get_logger(__name__)

# (lower bound, points), checked highest first
RATING_BANDS: tuple[tuple[float, int], ...] = (
    (4.5, 50),
    (4.0, 40),
    (3.5, 30),
    (3.0, 20),
)
RATING_FLOOR_POINTS = 10

# (upper bound, points), checked lightest first
WORKLOAD_BANDS: tuple[tuple[float, int], ...] = (
    (3.0, 40),
    (5.0, 30),
    (8.0, 20),
    (10.0, 10),
)
HEAVY_WORKLOAD_POINTS = 0

GEM_COMMENT_KEYWORDS = ("gem", "easy class", "easy course")
COMMENT_BONUS = 10

MIN_SCORE = 0
MAX_SCORE = 100

# Computed fields and ranking outputs, rebuilt on every call
_DERIVED_FIELDS = {"meeting_time", "has_evaluation_data", "using_defaults", "score", "logistics_fit"}


@dataclass(frozen=True)
class ScoreInputs:
    """
    The values GemScore reads from a course, with missing values made explicit.

    A missing rating scores like a rating of 0. A missing workload is not a
    number at all: it always lands in the heavy band.
    """

    rating: float
    workload_hours: Optional[float]
    best_comment: str

    MISSING_RATING = 0.0

    @classmethod
    def from_course(cls, course: MergedCourse) -> "ScoreInputs":
        return cls(
            rating=course.rating if course.rating is not None else cls.MISSING_RATING,
            workload_hours=course.workload_hours,
            best_comment=course.best_comment or "",
        )


def rating_points(rating: float) -> int:
    for lower_bound, points in RATING_BANDS:
        if rating >= lower_bound:
            return points
    return RATING_FLOOR_POINTS


def workload_points(workload_hours: Optional[float]) -> int:
    if workload_hours is None:
        return HEAVY_WORKLOAD_POINTS
    for upper_bound, points in WORKLOAD_BANDS:
        if workload_hours <= upper_bound:
            return points
    return HEAVY_WORKLOAD_POINTS


def comment_bonus(comment: str) -> int:
    lowered = comment.lower()
    if any(keyword in lowered for keyword in GEM_COMMENT_KEYWORDS):
        return COMMENT_BONUS
    return 0


def compute_score(course: MergedCourse) -> int:
    """
    Compute the GemScore of a merged course.

    Args:
        course: Merged course record

    Returns:
        Integer score clamped to [0, 100]

    Example:
        >>> compute_score(MergedCourse(course_id="CS 50", rating=4.2, workload_hours=14))
        40
    """
    inputs = ScoreInputs.from_course(course)
    total = (
        rating_points(inputs.rating)
        + workload_points(inputs.workload_hours)
        + comment_bonus(inputs.best_comment)
    )
    return max(MIN_SCORE, min(MAX_SCORE, round(total)))


def logistics_fit(course: MergedCourse, preferred_times: Sequence[str]) -> int:
    """1 if no times are preferred or the meeting time contains one of them, else 0."""
    if not preferred_times:
        return 1
    meeting = (course.meeting_time or "").lower()
    return int(any(str(t).lower() in meeting for t in preferred_times))


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def rank_courses(
    courses: Any,
    preferred_times: Optional[Sequence[str]] = None,
) -> list[RankedCourse]:
    """
    Score and order courses, best gems first.

    ``logistics_fit`` is attached to each result but does not affect the
    order. The sort is stable, so equal scores keep their input order.

    Args:
        courses: Merged (or already ranked) courses. None, an empty
            collection or a non-collection value gives an empty list
        preferred_times: Meeting-time substrings the caller prefers

    Returns:
        Ranked courses sorted by descending score
    """
    if not _is_collection(courses):
        return []

    preferred = list(preferred_times or [])
    ranked = [
        RankedCourse(
            **course.model_dump(exclude=_DERIVED_FIELDS),
            score=compute_score(course),
            logistics_fit=logistics_fit(course, preferred),
        )
        for course in courses
    ]
    ranked.sort(key=lambda c: c.score, reverse=True)

    if ranked:
        logger.debug(f"Ranked {len(ranked)} courses (top score {ranked[0].score})")
    return ranked
