"""
Miner Module - Gem finding over the merged course sources.
==========================================================

``GemMiner`` owns the three load-once sources and answers the queries the
conversational layer asks:

- ``find_gems``: merged, filtered and ranked courses
- ``get_all_available_courses``: catalog listing used to validate that a
  course exists before it is mentioned
- ``course_exists`` / ``get_course_details`` / ``describe_course``

Sources are injected, so a process builds one miner at startup (see
``create_gem_miner``) and can ``warm()`` it before serving requests.
"""

from typing import Any, Optional, Union

from gem_miner.gems.merge import apply_filters, catalog_only_course, join_sources
from gem_miner.gems.ranking import rank_courses
from gem_miner.ingestion.catalog import CatalogLoader
from gem_miner.ingestion.qreport import QReportLoader
from gem_miner.ingestion.signals import AssessmentSignalProvider
from gem_miner.shared.config import Settings, get_settings
from gem_miner.shared.identifiers import matches_course_code
from gem_miner.shared.logging import get_logger, log_stage
from gem_miner.shared.schemas import (
    CatalogEntry,
    CatalogFilters,
    GemQuery,
    MergedCourse,
    RankedCourse,
)
from gem_miner.shared.utils import contains_ci

logger = get_logger(__name__)


class GemMiner:
    """
    Find hidden-gem courses by joining evaluations with the current catalog.

    Example:
        >>> miner = create_gem_miner()
        >>> gems = miner.find_gems({"department": "ECON", "maxHrsPerWeek": 5})
        >>> [g.course_id for g in gems[:3]]
        ['ECON 1010A', 'ECON 980', 'ECON 1123']
    """

    def __init__(
        self,
        qreport: QReportLoader,
        catalog: CatalogLoader,
        signals: AssessmentSignalProvider,
        settings: Optional[Settings] = None,
    ):
        self.qreport = qreport
        self.catalog = catalog
        self.signals = signals
        self.settings = settings or get_settings()

    def warm(self) -> dict[str, int]:
        """
        Load every source now instead of on the first request.

        Returns:
            Record count per source
        """
        counts = {
            "qreport": len(self.qreport.load_all()),
            "catalog": len(self.catalog.load_all()),
            "signals": len(self.signals.load_all()),
        }
        logger.info(
            f"Sources warmed: {counts['qreport']} evaluations, "
            f"{counts['catalog']} catalog entries, {counts['signals']} signals"
        )
        return counts

    # ─────────────────────────────────────────────────────────────────────────
    # Gem Search
    # ─────────────────────────────────────────────────────────────────────────

    def find_gems(self, query: Union[GemQuery, dict[str, Any], None] = None) -> list[RankedCourse]:
        """
        Merge, filter and rank courses.

        Args:
            query: Query options (model or camelCase/snake_case dict)

        Returns:
            Ranked courses, best first

        Raises:
            pydantic.ValidationError: If the query has an unknown option or a
                value of the wrong type
        """
        if query is None:
            query = GemQuery()
        elif not isinstance(query, GemQuery):
            query = GemQuery.model_validate(query)

        # Defaults stand in only when the export itself has no records
        use_defaults = not self.qreport.load_all()
        evaluations = self.qreport.query(query.filters)
        catalog_entries = self.catalog.load_all()
        log_stage(logger, "Q-Report query", len(evaluations))
        log_stage(logger, "AY catalog", len(catalog_entries), unit="entries")

        if use_defaults:
            signal_ids = [e.course_id for e in catalog_entries]
        else:
            signal_ids = [r.course_id for r in evaluations]
        signals = self.signals.signals_for(signal_ids)

        merged = join_sources(
            evaluations,
            catalog_entries,
            signals,
            self.settings.catalog,
            self.settings.defaults,
            use_defaults=use_defaults,
        )

        filtered = apply_filters(merged, query, gened_subject=self.settings.catalog.gened_subject)
        log_stage(logger, "Post-merge filters", len(merged), len(filtered))

        ranked = rank_courses(filtered, query.preferred_times)
        log_stage(logger, "Ranked", len(ranked))
        return ranked

    # ─────────────────────────────────────────────────────────────────────────
    # Catalog Queries
    # ─────────────────────────────────────────────────────────────────────────

    def get_all_available_courses(
        self, filters: Union[CatalogFilters, dict[str, Any], None] = None
    ) -> list[CatalogEntry]:
        """
        List catalog entries, optionally filtered.

        Weekdays match the catalog weekday column, so entries listing days
        without start or end times are kept.
        """
        if filters is None:
            filters = CatalogFilters()
        elif not isinstance(filters, CatalogFilters):
            filters = CatalogFilters.model_validate(filters)

        courses = list(self.catalog.load_all())

        if filters.term:
            courses = [c for c in courses if contains_ci(c.term, filters.term)]

        if filters.subject:
            courses = [c for c in courses if contains_ci(c.subject, filters.subject)]

        if filters.weekdays:
            courses = [
                c for c in courses
                if contains_ci(c.weekdays or c.meeting.weekdays, filters.weekdays)
            ]

        if filters.course_code:
            courses = [c for c in courses if matches_course_code(c.course_id, filters.course_code)]

        log_stage(logger, "Catalog listing", len(courses))
        return courses

    def course_exists(self, course_id: str) -> bool:
        return self.catalog.get_by_id(course_id) is not None

    def get_course_details(self, course_id: str) -> Optional[CatalogEntry]:
        return self.catalog.get_by_id(course_id)

    def describe_course(self, course_id: str) -> Optional[MergedCourse]:
        """
        A catalog entry as a merged record, for courses asked about by name.

        The result carries no rating or workload and is flagged
        ``catalog_only``.
        """
        entry = self.catalog.get_by_id(course_id)
        if entry is None:
            return None
        return catalog_only_course(
            entry,
            self.signals.get(entry.course_id),
            gened_subject=self.settings.catalog.gened_subject,
        )


def create_gem_miner(settings: Optional[Settings] = None) -> GemMiner:
    """
    Build a miner whose sources come from the configured paths.

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        GemMiner instance (sources not yet loaded)
    """
    settings = settings or get_settings()
    paths = settings.resolved_paths

    return GemMiner(
        qreport=QReportLoader(paths.qreport_file),
        catalog=CatalogLoader(paths.catalog_file, settings.catalog),
        signals=AssessmentSignalProvider(paths.signals_file),
        settings=settings,
    )
