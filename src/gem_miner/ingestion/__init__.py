"""
Ingestion Module - Load and parse the course data sources.
==========================================================

This module turns the flat source files into typed records:

- parser: Delimited-text parsing and header resolution
- cleaner: Meeting-time and instructor-name heuristics
- qreport: Q-Report evaluation loader with filtering
- catalog: AY catalog loader with identifier lookups
- signals: Assessment-signal cache

Pipeline flow:
    CSV/JSON files → Parser → Loaders (cached) → EvaluationRecord / CatalogEntry / AssessmentSignal
"""

from gem_miner.ingestion.parser import (
    ColumnResolver,
    DelimitedTable,
    RowParseError,
    parse_record,
    read_delimited,
    split_line,
)
from gem_miner.ingestion.cleaner import (
    InstructorCleaner,
    clean_instructors,
    meeting_from_fields,
    parse_meeting_time,
)
from gem_miner.ingestion.qreport import QReportLoader, apply_evaluation_filters
from gem_miner.ingestion.catalog import CatalogLoader, compose_course_id
from gem_miner.ingestion.signals import AssessmentSignalProvider

__all__ = [
    # Parser
    "ColumnResolver",
    "DelimitedTable",
    "RowParseError",
    "parse_record",
    "read_delimited",
    "split_line",
    # Cleaner
    "InstructorCleaner",
    "clean_instructors",
    "meeting_from_fields",
    "parse_meeting_time",
    # Loaders
    "QReportLoader",
    "apply_evaluation_filters",
    "CatalogLoader",
    "compose_course_id",
    "AssessmentSignalProvider",
]
