"""
Shared Module - Common utilities, configuration, schemas, and logging.
======================================================================

This module provides foundational components used across all other modules:

- config: Configuration loading and management
- logging: Structured logging setup
- schemas: Pydantic data models
- utils: Utility functions (file I/O, value parsing)
"""

from gem_miner.shared.config import get_settings, Settings
from gem_miner.shared.logging import get_logger, log_stage, setup_logging
from gem_miner.shared.schemas import (
    AssessmentSignal,
    CatalogEntry,
    CatalogFilters,
    EvaluationFilters,
    EvaluationRecord,
    GemQuery,
    MeetingTime,
    MergedCourse,
    Provenance,
    RankedCourse,
)
from gem_miner.shared.utils import (
    load_json,
    parse_float,
    parse_int,
    read_text_lines,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Logging
    "get_logger",
    "log_stage",
    "setup_logging",
    # Schemas
    "AssessmentSignal",
    "CatalogEntry",
    "CatalogFilters",
    "EvaluationFilters",
    "EvaluationRecord",
    "GemQuery",
    "MeetingTime",
    "MergedCourse",
    "Provenance",
    "RankedCourse",
    # Utils
    "load_json",
    "parse_float",
    "parse_int",
    "read_text_lines",
]
