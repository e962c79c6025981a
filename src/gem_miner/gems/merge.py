"""
Merge Module - Join, precedence and deduplication of course records.
====================================================================

Joins Q-Report evaluation records with catalog entries and assessment
signals into ``MergedCourse`` records.

Field precedence is an explicit table (``MERGE_PRECEDENCE``): for each merged
field, the ordered list of (source, attribute) pairs to read from. The first
present value wins; empty strings count as absent.

- The catalog wins for meeting time, instructors, requirements and the
  distribution tag, because it reflects the current term.
- The evaluation record is the only source of rating, workload, sentiment
  and the report link.
- Title and description fall back from evaluation record to catalog.

Deduplication happens twice: catalog entries per literal identifier before
the join, merged courses per canonical identifier after it.
"""

from typing import Any, Iterable, Optional

from gem_miner.gems.gened import get_gened_category
from gem_miner.shared.config import CatalogConfig, DefaultsConfig
from gem_miner.shared.identifiers import alias_candidates, matches_course_code, strip_section_number
from gem_miner.shared.logging import get_logger, log_stage
from gem_miner.shared.schemas import (
    AssessmentSignal,
    CatalogEntry,
    EvaluationRecord,
    GemQuery,
    MergedCourse,
    Provenance,
)
from gem_miner.shared.utils import contains_ci, extract_years

logger = get_logger(__name__)

UNKNOWN_TITLE = "Unknown Title"

EVALUATION = "evaluation"
CATALOG = "catalog"
SIGNAL = "signal"

MERGE_PRECEDENCE: dict[str, tuple[tuple[str, str], ...]] = {
    # Identity and descriptive fields: evaluation record, then catalog
    "title": ((EVALUATION, "title"), (CATALOG, "title")),
    "department": ((CATALOG, "department"), (CATALOG, "subject")),
    "subject": ((CATALOG, "subject"),),
    "description": ((EVALUATION, "description"), (CATALOG, "description")),
    # Quality signal: evaluation record only
    "rating": ((EVALUATION, "rating"),),
    "workload_hours": ((EVALUATION, "workload_hours"),),
    "sentiment_score": ((EVALUATION, "sentiment_score"),),
    "rec_score": ((EVALUATION, "rec_score"),),
    "gem_probability": ((EVALUATION, "gem_probability"),),
    "best_comment": ((EVALUATION, "best_comment"),),
    "response_count": ((EVALUATION, "response_count"),),
    "evaluation_link": ((EVALUATION, "evaluation_link"),),
    # Assessment signals, then whatever the catalog knows about exams
    "assessment_lightness": ((SIGNAL, "assessment_lightness"),),
    "final_exam": ((SIGNAL, "final_exam"), (CATALOG, "final_exam")),
    # Logistics: catalog (current term) wins over the older evaluation export
    "weekdays": ((CATALOG, "weekdays"), (EVALUATION, "weekdays")),
    "start_time": ((CATALOG, "start_time"), (EVALUATION, "start_time")),
    "end_time": ((CATALOG, "end_time"), (EVALUATION, "end_time")),
    "instructors": ((CATALOG, "instructors"),),
    "requirements": ((CATALOG, "requirements"),),
    "gen_ed": ((CATALOG, "distribution"), (EVALUATION, "distribution_tag")),
    "term": ((CATALOG, "term"),),
}


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def resolve_fields(sources: dict[str, Any]) -> dict[str, Any]:
    """
    Apply ``MERGE_PRECEDENCE`` to a set of named source records.

    Args:
        sources: Source name → record (or None when that source has no match)

    Returns:
        Merged field values (None when no source supplies one)
    """
    merged: dict[str, Any] = {}
    for field_name, candidates in MERGE_PRECEDENCE.items():
        merged[field_name] = None
        for source_name, attribute in candidates:
            record = sources.get(source_name)
            if record is None:
                continue
            value = getattr(record, attribute, None)
            if _is_present(value):
                merged[field_name] = value
                break
    return merged


def _meeting_text(catalog: Optional[CatalogEntry]) -> Optional[str]:
    if catalog is None:
        return None
    return catalog.meeting.raw


def _gened_category(course_id: str, subject: Optional[str], gen_ed: Optional[str], gened_subject: str) -> Optional[str]:
    is_gened = (subject or "").upper() == gened_subject or gen_ed is not None
    return get_gened_category(course_id) if is_gened else None


def merge_course(
    evaluation: Optional[EvaluationRecord],
    catalog: Optional[CatalogEntry],
    signal: Optional[AssessmentSignal] = None,
    gened_subject: str = "GENED",
) -> MergedCourse:
    """
    Merge one evaluation record with its catalog entry and signal.

    The merged identifier is canonical (section number removed) so that
    several sections of a course collapse into one record. An evaluation
    record without a catalog match still merges, with catalog fields empty.
    """
    fields = resolve_fields({EVALUATION: evaluation, CATALOG: catalog, SIGNAL: signal})

    raw_id = evaluation.course_id if evaluation is not None else (catalog.course_id if catalog else "")
    course_id = strip_section_number(raw_id) or "UNKNOWN"

    fields["title"] = fields["title"] or UNKNOWN_TITLE
    fields["gen_ed_category"] = _gened_category(
        course_id, fields["subject"], fields["gen_ed"], gened_subject
    )

    if evaluation is not None:
        provenance = Provenance.EVALUATION
    else:
        provenance = Provenance.CATALOG_ONLY

    return MergedCourse(
        course_id=course_id,
        catalog_meeting=_meeting_text(catalog),
        provenance=provenance,
        **fields,
    )


def catalog_only_course(
    catalog: CatalogEntry,
    signal: Optional[AssessmentSignal] = None,
    gened_subject: str = "GENED",
) -> MergedCourse:
    """A catalog entry as a merged course with no quality signal."""
    return merge_course(None, catalog, signal, gened_subject=gened_subject)


def fallback_course(
    catalog: CatalogEntry,
    defaults: DefaultsConfig,
    signal: Optional[AssessmentSignal] = None,
    gened_subject: str = "GENED",
) -> MergedCourse:
    """
    A catalog entry carrying synthetic default rating/workload/sentiment.

    Used only when the evaluation source is entirely empty, and always
    flagged with ``Provenance.DEFAULTS``.
    """
    course = catalog_only_course(catalog, signal, gened_subject=gened_subject)
    return course.model_copy(
        update={
            "rating": defaults.rating,
            "workload_hours": defaults.workload_hours,
            "sentiment_score": defaults.sentiment_score,
            "provenance": Provenance.DEFAULTS,
        }
    )


# ─────────────────────────────────────────────────────────────────────────────
# Catalog Dedup and Index
# ─────────────────────────────────────────────────────────────────────────────


def _latest_year(term: str) -> Optional[int]:
    years = extract_years(term)
    return max(years) if years else None


def _prefer(candidate: CatalogEntry, existing: CatalogEntry) -> bool:
    """Whether a duplicate catalog entry should replace the one already kept."""
    candidate_year = _latest_year(candidate.term)
    existing_year = _latest_year(existing.term)
    if candidate_year is not None and (existing_year is None or candidate_year > existing_year):
        return True
    return bool(candidate.term) and not existing.term


def dedupe_catalog(entries: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    """
    Keep one catalog entry per literal identifier.

    A duplicate replaces the kept entry when its term names a more recent
    year, or when it has a term and the kept one does not. Otherwise the
    first entry wins. Output order follows first appearance.
    """
    kept: dict[str, CatalogEntry] = {}
    for entry in entries:
        existing = kept.get(entry.course_id)
        if existing is None or _prefer(entry, existing):
            kept[entry.course_id] = entry
    return list(kept.values())


def build_catalog_index(entries: Iterable[CatalogEntry]) -> dict[str, CatalogEntry]:
    """
    Index catalog entries by literal and canonical identifier.

    Literal identifiers take priority over canonical ones on collision.
    """
    entries = list(entries)
    index: dict[str, CatalogEntry] = {entry.course_id: entry for entry in entries}
    for entry in entries:
        index.setdefault(strip_section_number(entry.course_id), entry)
    return index


def lookup_catalog(
    index: dict[str, CatalogEntry],
    course_id: str,
    aliases: Optional[dict[str, str]] = None,
) -> Optional[CatalogEntry]:
    """Literal, then canonical, then department-alias lookup."""
    if course_id in index:
        return index[course_id]

    canonical = strip_section_number(course_id)
    if canonical in index:
        return index[canonical]

    for candidate in alias_candidates(canonical, aliases or {}):
        if candidate in index:
            return index[candidate]
    return None


def dedupe_merged(courses: Iterable[MergedCourse]) -> list[MergedCourse]:
    """Keep the first merged course per canonical identifier."""
    kept: dict[str, MergedCourse] = {}
    for course in courses:
        kept.setdefault(course.course_id, course)
    return list(kept.values())


# ─────────────────────────────────────────────────────────────────────────────
# Joining
# ─────────────────────────────────────────────────────────────────────────────


def join_sources(
    evaluations: list[EvaluationRecord],
    catalog_entries: list[CatalogEntry],
    signals: dict[str, AssessmentSignal],
    catalog_config: CatalogConfig,
    defaults: DefaultsConfig,
    use_defaults: bool = False,
) -> list[MergedCourse]:
    """
    Join evaluation records with catalog entries.

    With ``use_defaults`` set (the evaluation source loaded no records) and a
    non-empty catalog, every catalog entry becomes a fallback course with
    default values instead. An empty ``evaluations`` list on its own is a
    real mismatch and yields no courses.
    """
    catalog_unique = dedupe_catalog(catalog_entries)
    log_stage(logger, "Catalog dedup", len(catalog_entries), len(catalog_unique), unit="entries")

    if use_defaults and catalog_unique:
        logger.warning("No Q-Report data found; using catalog entries with DEFAULT ratings")
        merged = [
            fallback_course(
                entry,
                defaults,
                signals.get(entry.course_id),
                gened_subject=catalog_config.gened_subject,
            )
            for entry in catalog_unique
        ]
    else:
        index = build_catalog_index(catalog_unique)
        merged = []
        unmatched = 0
        for record in evaluations:
            entry = lookup_catalog(index, record.course_id, catalog_config.department_aliases)
            if entry is None:
                unmatched += 1
            merged.append(
                merge_course(
                    record,
                    entry,
                    signals.get(record.course_id),
                    gened_subject=catalog_config.gened_subject,
                )
            )
        if unmatched:
            logger.debug(f"{unmatched} Q-Report courses had no catalog match")

    deduped = dedupe_merged(merged)
    log_stage(logger, "Merge dedup", len(merged), len(deduped))
    return deduped


# ─────────────────────────────────────────────────────────────────────────────
# Post-merge Filters
# ─────────────────────────────────────────────────────────────────────────────


def _matches_department(course: MergedCourse, department: str) -> bool:
    return any(
        contains_ci(value, department)
        for value in (course.department, course.subject, course.course_id, course.title)
    )


def apply_filters(
    courses: list[MergedCourse],
    query: GemQuery,
    gened_subject: str = "GENED",
) -> list[MergedCourse]:
    """
    Apply post-merge query filters conjunctively.

    - ``max_hrs_per_week``: inclusive; unknown workload passes
    - ``no_final``: passes unless the course is known to have a final
    - ``department``: substring of department/subject/id/title, except the
      word "gened", which requires the GenEd subject exactly
    - ``course_code``: exact or section-prefix match
    - ``gen_ed_category``: GenEd subject and matching category
    """
    filtered = list(courses)

    if query.max_hrs_per_week is not None:
        filtered = [
            c for c in filtered
            if c.workload_hours is None or c.workload_hours <= query.max_hrs_per_week
        ]

    if query.no_final:
        filtered = [c for c in filtered if c.final_exam is not True]

    if query.department:
        department = query.department.strip()
        if department.lower() == gened_subject.lower():
            filtered = [c for c in filtered if (c.subject or "").upper() == gened_subject]
            logger.info(f"Filtered to GenEds (subject = {gened_subject}): {len(filtered)} courses")
        else:
            filtered = [c for c in filtered if _matches_department(c, department)]

    if query.course_code:
        filtered = [c for c in filtered if matches_course_code(c.course_id, query.course_code)]
        logger.info(f"Filtered to course code {query.course_code.upper()!r}: {len(filtered)} courses")

    if query.gen_ed_category:
        filtered = [
            c for c in filtered
            if (c.subject or "").upper() == gened_subject and c.gen_ed_category == query.gen_ed_category
        ]
        logger.info(f"Filtered to GenEd category {query.gen_ed_category!r}: {len(filtered)} courses")

    return filtered
