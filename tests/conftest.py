"""
Pytest Configuration and Fixtures.
===================================

Shared fixtures for all test modules:
- Temporary directories
- CSV / JSON writers for the three data sources
- Sample Q-Report, catalog and signal files
- Settings pointing at the temporary files
"""

import csv
import json
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

QREPORT_HEADERS = [
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
]

CATALOG_HEADERS = [
    "department",
    "subject",
    "course_number",
    "title",
    "course_id",
    "term",
    "credits",
    "weekdays",
    "start_time",
    "end_time",
    "instructors",
    "distribution",
    "requirements",
    "description",
]


# ─────────────────────────────────────────────────────────────────────────────
# Path Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return project_root / "config" / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Writers
# ─────────────────────────────────────────────────────────────────────────────


def _write_csv(path: Path, headers: list[str], rows: list[dict]) -> Path:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore", lineterminator="\n")
        writer.writeheader()
        for row in rows:
            writer.writerow({h: row.get(h, "") for h in headers})
    return path


@pytest.fixture
def catalog_headers() -> list[str]:
    return list(CATALOG_HEADERS)


@pytest.fixture
def write_qreport(temp_dir: Path) -> Callable[..., Path]:
    """Write Q-Report rows (dicts keyed by column name) to a CSV file."""

    def _write(rows: list[dict], headers: list[str] = QREPORT_HEADERS, name: str = "qreport.csv") -> Path:
        return _write_csv(temp_dir / name, headers, rows)

    return _write


@pytest.fixture
def write_catalog(temp_dir: Path) -> Callable[..., Path]:
    """Write catalog rows (dicts keyed by column name) to a CSV file."""

    def _write(rows: list[dict], headers: list[str] = CATALOG_HEADERS, name: str = "catalog.csv") -> Path:
        return _write_csv(temp_dir / name, headers, rows)

    return _write


@pytest.fixture
def write_signals(temp_dir: Path) -> Callable[..., Path]:
    """Write an assessment-signal cache as JSON."""

    def _write(data, name: str = "canvas-cache.json") -> Path:
        path = temp_dir / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


# ─────────────────────────────────────────────────────────────────────────────
# Sample Data Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_qreport_rows() -> list[dict]:
    """Sample Q-Report rows, including two sections of one course."""
    return [
        {
            "course_code": "ECON 1010A 001",
            "course_title": "Principles of Economics",
            "course_score_mean": "4.6",
            "workload_score_mean": "4.5",
            "rec_score_mean": "4.4",
            "sentiment_score_mean": "0.8",
            "gem_probability_mean": "0.7",
            "best_gem_comment": "An absolute gem of a class",
            "num_responded": "210",
            "link": "https://qreports.example.edu/econ1010a",
        },
        {
            "course_code": "ECON 1010A 002",
            "course_title": "Principles of Economics",
            "course_score_mean": "3.1",
            "workload_score_mean": "9",
            "num_responded": "40",
        },
        {
            "course_code": "ECON 980",
            "course_title": "Economics Seminar",
            "course_score_mean": "4.1",
            "workload_score_mean": "12",
            "gem_probability_mean": "0.2",
            "best_gem_comment": "Lots of reading",
            "num_responded": "12",
        },
        {
            "course_code": "GENED 1038",
            "course_title": "Sleep",
            "course_score_mean": "4.3",
            "workload_score_mean": "3",
            "gem_probability_mean": "0.9",
            "best_gem_comment": "Such an easy class",
            "num_responded": "150",
        },
        {
            "course_code": "ASTRON 16",
            "course_title": "General Astronomy",
            "course_score_mean": "4.8",
            "workload_score_mean": "2",
            "num_responded": "30",
        },
        {
            "course_code": "CS 50",
            "course_title": "Introduction to Computer Science",
            "course_score_mean": "4.2",
            "workload_score_mean": "14",
            "num_responded": "500",
        },
    ]


@pytest.fixture
def sample_catalog_rows() -> list[dict]:
    """Sample catalog rows matching the Q-Report sample."""
    return [
        {
            "department": "Economics",
            "subject": "ECON",
            "course_number": "1010A",
            "title": "Principles of Economics",
            "term": "2025 Fall",
            "weekdays": "Tue/Thu",
            "start_time": "9:00 AM",
            "end_time": "10:15 AM",
            "instructors": "Jason Furman",
            "description": "An introduction to economic thinking.",
        },
        {
            "department": "Economics",
            "subject": "ECON",
            "course_number": "980",
            "title": "Economics Seminar",
            "term": "2026 Spring",
            "weekdays": "W 0300 PM - 0545 PM",
            "instructors": "Ann Smith This",
        },
        {
            "department": "General Education",
            "subject": "GENED",
            "course_number": "1038",
            "title": "Sleep",
            "term": "2026 Spring",
            "weekdays": "Mon/Wed",
            "start_time": "1:30 PM",
            "end_time": "2:45 PM",
            "instructors": "Charles Czeisler",
        },
        {
            "department": "Astronomy",
            "subject": "ASTRON",
            "course_number": "16",
            "title": "General Astronomy",
            "term": "2025 Fall",
        },
        {
            "department": "Computer Science",
            "subject": "COMPSCI",
            "course_number": "50",
            "title": "Introduction to Computer Science",
            "term": "2025 Fall",
            "weekdays": "Mon/Wed",
            "start_time": "10:30 AM",
            "end_time": "11:45 AM",
            "instructors": "David Malan",
        },
    ]


@pytest.fixture
def qreport_file(write_qreport, sample_qreport_rows) -> Path:
    return write_qreport(sample_qreport_rows)


@pytest.fixture
def catalog_file(write_catalog, sample_catalog_rows) -> Path:
    return write_catalog(sample_catalog_rows)


@pytest.fixture
def signals_file(write_signals) -> Path:
    return write_signals(
        {
            "ECON 980": {"assessmentLightness": 0.2, "finalExam": True},
            "GENED 1038": {"assessmentLightness": 0.9, "finalExam": "no"},
        }
    )


# ─────────────────────────────────────────────────────────────────────────────
# Settings / Miner Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_settings() -> Callable[..., object]:
    """Build Settings whose source paths point at the given files."""
    from gem_miner.shared.config import PathsConfig, Settings

    def _make(qreport: Path, catalog: Path, signals: Path) -> Settings:
        return Settings(
            paths=PathsConfig(
                data_dir=str(qreport.parent),
                qreport_file=str(qreport),
                catalog_file=str(catalog),
                signals_file=str(signals),
            )
        )

    return _make


@pytest.fixture
def settings(make_settings, qreport_file: Path, catalog_file: Path, signals_file: Path):
    """Settings pointing at the sample files."""
    return make_settings(qreport_file, catalog_file, signals_file)


@pytest.fixture
def miner(settings):
    """GemMiner over the sample files."""
    from gem_miner.gems.miner import create_gem_miner

    return create_gem_miner(settings)


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that run the full load-merge-rank pipeline"
    )


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep path and log-level overrides in the environment out of tests."""
    for name in ("QREPORT_CSV_PATH", "CATALOG_AY_CSV_PATH", "CANVAS_CACHE_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    from gem_miner.shared.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
