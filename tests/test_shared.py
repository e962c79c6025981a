"""
Tests for Shared Module.
========================

Tests for:
- Packages: Every module imports
- Identifiers: Section stripping, course-code matching, alias swaps
- Config: YAML defaults and environment overrides
- Schemas: Exam-flag coercion, computed fields, query models
- Utils: Numeric parsing and text helpers
- Logging: Stage-count messages
"""

from pathlib import Path

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Package Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestPackages:
    """Every package and module imports cleanly."""

    @pytest.mark.parametrize(
        "module",
        [
            "gem_miner",
            "gem_miner.shared",
            "gem_miner.ingestion",
            "gem_miner.ingestion.parser",
            "gem_miner.ingestion.cleaner",
            "gem_miner.ingestion.qreport",
            "gem_miner.ingestion.catalog",
            "gem_miner.ingestion.signals",
            "gem_miner.gems",
            "gem_miner.gems.miner",
            "gem_miner.cli",
            "gem_miner.cli.main",
        ],
    )
    def test_import(self, module):
        import importlib

        assert importlib.import_module(module) is not None


# ─────────────────────────────────────────────────────────────────────────────
# Identifier Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestIdentifiers:
    """Tests for course identifier normalization."""

    @pytest.mark.parametrize(
        "course_id,expected",
        [
            ("ANTHRO 97Z 001", "ANTHRO 97Z"),
            ("ECON 1010A 002", "ECON 1010A"),
            ("HIST 10 099", "HIST 10"),
            ("APMTH 109", "APMTH 109"),
            ("HIST 10 100", "HIST 10 100"),
            ("COMPSCI 50", "COMPSCI 50"),
            ("  GENED 1038 001  ", "GENED 1038"),
        ],
    )
    def test_strip_section_number(self, course_id, expected):
        from gem_miner.shared.identifiers import strip_section_number

        assert strip_section_number(course_id) == expected

    @pytest.mark.parametrize("course_id", ["ANTHRO 97Z 001", "APMTH 109", "GENED 1038"])
    def test_strip_is_idempotent(self, course_id):
        from gem_miner.shared.identifiers import strip_section_number

        once = strip_section_number(course_id)

        assert strip_section_number(once) == once

    def test_matches_course_code(self):
        from gem_miner.shared.identifiers import matches_course_code

        assert matches_course_code("COMPSCI 50", "compsci 50")
        assert matches_course_code("COMPSCI 50 001", "COMPSCI 50")
        assert not matches_course_code("COMPSCI 500", "COMPSCI 50")
        assert not matches_course_code("COMPSCI 50", "")

    def test_alias_candidates_both_directions(self):
        from gem_miner.shared.identifiers import alias_candidates

        aliases = {"CS": "COMPSCI"}

        assert alias_candidates("CS 50", aliases) == ["COMPSCI 50"]
        assert alias_candidates("compsci 50", aliases) == ["CS 50"]
        assert alias_candidates("CSX 50", aliases) == []


# ─────────────────────────────────────────────────────────────────────────────
# Config Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestConfig:
    """Tests for settings loading."""

    def test_yaml_defaults(self, config_path: Path):
        from gem_miner.shared.config import _create_settings

        settings = _create_settings(config_path)

        assert settings.defaults.rating == 4.0
        assert settings.defaults.workload_hours == 6.0
        assert settings.catalog.gened_subject == "GENED"
        assert settings.catalog.department_aliases == {"CS": "COMPSCI"}
        assert settings.paths.qreport_file == "data/qreport-spring-2025.csv"

    def test_missing_yaml_uses_model_defaults(self, temp_dir: Path):
        from gem_miner.shared.config import _create_settings

        settings = _create_settings(temp_dir / "none.yaml")

        assert settings.defaults.sentiment_score == 0.5
        assert settings.logging.level == "INFO"

    def test_relative_paths_resolve_against_project_root(self):
        from gem_miner.shared.config import Settings

        settings = Settings()

        assert settings.resolved_paths.catalog_file == settings.project_root / "data/AY_2025_2026_courses.csv"

    def test_environment_overrides_paths(self, monkeypatch, temp_dir: Path):
        from gem_miner.shared.config import Settings

        monkeypatch.setenv("QREPORT_CSV_PATH", str(temp_dir / "q.csv"))
        monkeypatch.setenv("CATALOG_AY_CSV_PATH", str(temp_dir / "c.csv"))
        monkeypatch.setenv("CANVAS_CACHE_PATH", str(temp_dir / "s.json"))

        paths = Settings().resolved_paths

        assert paths.qreport_file == temp_dir / "q.csv"
        assert paths.catalog_file == temp_dir / "c.csv"
        assert paths.signals_file == temp_dir / "s.json"

    def test_nested_environment_beats_yaml(self, monkeypatch, config_path: Path):
        from gem_miner.shared.config import _create_settings

        monkeypatch.setenv("PATHS__QREPORT_FILE", "elsewhere/q.csv")
        monkeypatch.setenv("DEFAULTS__RATING", "3.5")

        settings = _create_settings(config_path)

        assert settings.paths.qreport_file == "elsewhere/q.csv"
        assert settings.paths.catalog_file == "data/AY_2025_2026_courses.csv"
        assert settings.defaults.rating == 3.5
        assert settings.defaults.workload_hours == 6.0

    def test_log_level_override(self, monkeypatch):
        from gem_miner.shared.config import Settings

        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings().get_effective_log_level() == "DEBUG"

    def test_alias_keys_are_uppercased(self):
        from gem_miner.shared.config import CatalogConfig

        config = CatalogConfig(department_aliases={"cs ": "compsci"}, gened_subject="gened")

        assert config.department_aliases == {"CS": "COMPSCI"}
        assert config.gened_subject == "GENED"

    def test_get_settings_is_cached(self):
        from gem_miner.shared.config import get_settings, reload_settings

        first = get_settings()

        assert get_settings() is first
        assert reload_settings() is not first


# ─────────────────────────────────────────────────────────────────────────────
# Schema Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestSchemas:
    """Tests for data models."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            (None, None),
            ("Yes", True),
            ("no", False),
            ("TRUE", True),
            ("0", False),
            ("maybe", None),
        ],
    )
    def test_coerce_exam_flag(self, value, expected):
        from gem_miner.shared.schemas import coerce_exam_flag

        assert coerce_exam_flag(value) is expected

    def test_evaluation_record_requires_id(self):
        from pydantic import ValidationError

        from gem_miner.shared.schemas import EvaluationRecord

        with pytest.raises(ValidationError):
            EvaluationRecord(course_id="")

    def test_signal_accepts_camel_case(self):
        from gem_miner.shared.schemas import AssessmentSignal

        signal = AssessmentSignal.model_validate({"assessmentLightness": 0.4, "finalExam": "yes", "other": 1})

        assert signal.assessment_lightness == 0.4
        assert signal.final_exam is True

    def test_meeting_time_falls_back_to_catalog_text(self):
        from gem_miner.shared.schemas import NO_MEETING_TIME, MergedCourse

        course = MergedCourse(course_id="HIST 10", weekdays="Mon", catalog_meeting=NO_MEETING_TIME)

        assert course.meeting_time == NO_MEETING_TIME

    def test_merged_course_dump_includes_flags(self):
        from gem_miner.shared.schemas import MergedCourse, Provenance

        data = MergedCourse(course_id="HIST 10", provenance=Provenance.DEFAULTS).model_dump()

        assert data["using_defaults"] is True
        assert data["has_evaluation_data"] is False

    def test_ranked_score_is_bounded(self):
        from pydantic import ValidationError

        from gem_miner.shared.schemas import RankedCourse

        with pytest.raises(ValidationError):
            RankedCourse(course_id="HIST 10", score=101)

    def test_query_accepts_both_key_styles(self):
        from gem_miner.shared.schemas import GemQuery

        camel = GemQuery.model_validate({"maxHrsPerWeek": 5, "filters": {"titleSearch": "data"}})
        snake = GemQuery.model_validate({"max_hrs_per_week": 5, "filters": {"title_search": "data"}})

        assert camel == snake
        assert camel.filters.title_search == "data"

    def test_catalog_filters_reject_unknown(self):
        from pydantic import ValidationError

        from gem_miner.shared.schemas import CatalogFilters

        with pytest.raises(ValidationError):
            CatalogFilters.model_validate({"semester": "Fall"})


# ─────────────────────────────────────────────────────────────────────────────
# Utils Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestUtils:
    """Tests for utility functions."""

    @pytest.mark.parametrize(
        "value,expected",
        [("4.25", 4.25), (" 3 ", 3.0), ("", None), ("n/a", None), ("nan", None), (None, None)],
    )
    def test_parse_float(self, value, expected):
        from gem_miner.shared.utils import parse_float

        assert parse_float(value) == expected

    def test_parse_int(self):
        from gem_miner.shared.utils import parse_int

        assert parse_int("12.0") == 12
        assert parse_int("") is None

    def test_extract_years(self):
        from gem_miner.shared.utils import extract_years

        assert extract_years("2025 Fall / 2026 Spring") == [2025, 2026]
        assert extract_years("") == []

    def test_contains_ci(self):
        from gem_miner.shared.utils import contains_ci

        assert contains_ci("General Astronomy", "astro")
        assert not contains_ci(None, "astro")

    def test_read_text_lines_drops_bom_and_blank_lines(self, temp_dir: Path):
        from gem_miner.shared.utils import read_text_lines

        path = temp_dir / "lines.csv"
        path.write_bytes(b"\xef\xbb\xbfa,b\r\n\r\n1,2\r\n")

        assert read_text_lines(path) == ["a,b", "1,2"]

    def test_truncate_text(self):
        from gem_miner.shared.utils import truncate_text

        assert truncate_text("Introduction", max_length=8) == "Intro..."
        assert truncate_text("Intro", max_length=8) == "Intro"


# ─────────────────────────────────────────────────────────────────────────────
# Logging Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestLogging:
    """Tests for stage-count logging."""

    def test_log_stage_with_output_count(self):
        from unittest.mock import MagicMock

        from gem_miner.shared.logging import log_stage

        logger = MagicMock()

        message = log_stage(logger, "Catalog dedup", 120, 97, unit="entries")

        assert message == "Catalog dedup: 120 → 97 entries"
        logger.info.assert_called_once_with(message)

    def test_log_stage_count_only(self):
        from unittest.mock import MagicMock

        from gem_miner.shared.logging import log_stage

        logger = MagicMock()

        assert log_stage(logger, "Ranked", 5) == "Ranked: 5 courses"
        logger.info.assert_called_once_with("Ranked: 5 courses")
