"""
Q-Report Loader - Historical course evaluation summaries.
=========================================================

Loads the pre-scraped Q-Report export (one row per course offering) into
``EvaluationRecord`` objects, caches them for the life of the loader and
answers filtered queries.

Column names are matched case-insensitively by substring so that renamed
export headers ("course_score_mean" vs "mean_course_score_mean") still load.
Failures never escape: a missing or unreadable file yields an empty list.
"""

import threading
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from gem_miner.ingestion.cleaner import strip_wrapping_quotes
from gem_miner.ingestion.parser import (
    ColumnResolver,
    RowParseError,
    get_value,
    read_delimited,
)
from gem_miner.shared.logging import get_logger
from gem_miner.shared.schemas import EvaluationFilters, EvaluationRecord
from gem_miner.shared.utils import contains_ci, parse_float, parse_int

logger = get_logger(__name__)

REQUIRED_COLUMNS = (
    "course_code",
    "course_title",
    "course_score_mean",
    "workload_score_mean",
    "rec_score_mean",
    "sentiment_score_mean",
    "gem_probability_mean",
    "best_gem_comment",
    "num_responded",
    "link",
)

# Catalog-style columns some exports carry; their absence is normal
OPTIONAL_COLUMNS = (
    "description",
    "general_education",
    "weekdays",
    "start_time",
    "end_time",
)


class QReportLoader:
    """
    Load-once cache over the Q-Report CSV.

    Example:
        >>> loader = QReportLoader(Path("data/qreport-spring-2025.csv"))
        >>> gems = loader.query(EvaluationFilters(min_rating=4.5))
    """

    def __init__(self, csv_path: Path):
        self.csv_path = Path(csv_path)
        self._cache: Optional[list[EvaluationRecord]] = None
        self._lock = threading.Lock()
        logger.debug(f"Q-Report loader initialized: {self.csv_path}")

    @property
    def is_loaded(self) -> bool:
        return self._cache is not None

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None

    def load_all(self) -> list[EvaluationRecord]:
        """
        Load every evaluation record.

        Returns:
            Cached records (empty list if the source is unavailable)
        """
        if self._cache is not None:
            return self._cache

        with self._lock:
            if self._cache is not None:
                return self._cache

            if not self.csv_path.exists():
                logger.warning(f"Q-Report CSV not found: {self.csv_path}")
                return []

            try:
                records = self._read()
            except (OSError, UnicodeDecodeError, RowParseError) as e:
                logger.error(f"Failed to load Q-Report CSV {self.csv_path}: {e}")
                return []

            self._cache = records
            logger.info(f"Loaded {len(records)} Q-Report courses from {self.csv_path.name}")
            return records

    def query(self, filters: Optional[EvaluationFilters] = None) -> list[EvaluationRecord]:
        """Load (if needed) and filter evaluation records."""
        return apply_evaluation_filters(self.load_all(), filters or EvaluationFilters())

    def _read(self) -> list[EvaluationRecord]:
        table = read_delimited(self.csv_path)
        if not table.headers:
            logger.warning(f"Q-Report CSV is empty: {self.csv_path}")
            return []

        resolver = ColumnResolver(table.headers, substring=True, source=self.csv_path.name)
        columns = resolver.resolve_all(REQUIRED_COLUMNS, OPTIONAL_COLUMNS)

        records: list[EvaluationRecord] = []
        for line_num, row in enumerate(table.rows, start=2):
            record = self._to_record(row, columns, line_num)
            if record is not None:
                records.append(record)
        return records

    def _to_record(
        self, row: dict[str, str], columns: dict[str, Optional[str]], line_num: int
    ) -> Optional[EvaluationRecord]:
        def text(name: str) -> Optional[str]:
            if columns.get(name) is None:
                return None
            return strip_wrapping_quotes(get_value(row, columns[name]))

        def number(name: str) -> Optional[float]:
            return parse_float(get_value(row, columns.get(name)))

        course_id = get_value(row, columns["course_code"]).strip()
        if not course_id:
            return None

        try:
            return EvaluationRecord(
                course_id=course_id,
                title=text("course_title") or "",
                rating=number("course_score_mean"),
                workload_hours=number("workload_score_mean"),
                rec_score=number("rec_score_mean"),
                sentiment_score=number("sentiment_score_mean"),
                gem_probability=number("gem_probability_mean"),
                best_comment=text("best_gem_comment"),
                response_count=parse_int(get_value(row, columns.get("num_responded"))),
                evaluation_link=text("link") or None,
                description=text("description"),
                distribution_tag=text("general_education") or None,
                weekdays=text("weekdays") or None,
                start_time=text("start_time") or None,
                end_time=text("end_time") or None,
            )
        except ValidationError as e:
            logger.warning(f"Failed to parse Q-Report line {line_num}: {e.errors()[0]['msg']}")
            return None


# ─────────────────────────────────────────────────────────────────────────────
# Filtering
# ─────────────────────────────────────────────────────────────────────────────


def apply_evaluation_filters(
    records: list[EvaluationRecord], filters: EvaluationFilters
) -> list[EvaluationRecord]:
    """
    Apply evaluation pre-filters conjunctively.

    Threshold filters exclude records whose value is missing; substring
    filters keep a record only when the substring is found.
    """
    filtered = list(records)

    if filters.department:
        dept = filters.department.upper()
        filtered = [
            r for r in filtered
            if dept in r.course_id.upper() or dept in r.title.upper()
        ]

    if filters.title_search:
        search = filters.title_search
        filtered = [
            r for r in filtered
            if contains_ci(r.title, search) or contains_ci(r.description, search)
        ]

    if filters.min_rating is not None:
        filtered = [
            r for r in filtered
            if r.rating is not None and r.rating >= filters.min_rating
        ]

    if filters.max_hrs_per_week is not None:
        filtered = [
            r for r in filtered
            if r.workload_hours is not None and r.workload_hours <= filters.max_hrs_per_week
        ]

    if filters.min_gem_prob is not None:
        filtered = [
            r for r in filtered
            if r.gem_probability is not None and r.gem_probability >= filters.min_gem_prob
        ]

    return filtered
